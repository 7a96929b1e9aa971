"""Logging configuration helpers."""

import logging

# Supabase and OpenAI clients log every HTTP call through these at INFO.
_CHATTY_LOGGERS = ("httpx", "httpcore", "hpack")


def configure_logging(level: int = logging.INFO) -> None:
    """Configure application logging with a single stream handler."""
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    logger = logging.getLogger("mealmigo_site")
    logger.setLevel(level)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
