"""Chat proxy service forwarding a single user message to a completion model."""

import logging
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "Sorry, no response."


class ChatNotConfiguredError(RuntimeError):
    def __init__(self) -> None:
        super().__init__("Missing OpenAI API key.")


class ChatUpstreamError(RuntimeError):
    """Raised when the completion provider call fails."""


class ChatClient(Protocol):
    """Interface for chat completion providers."""

    async def complete(self, *, model: str, message: str, max_tokens: int) -> str | None:
        """Return the first completion text, or None when there is none."""


@dataclass
class ChatService:
    """Single-turn chat completions for the site chatbot."""

    client: ChatClient | None
    model: str
    max_tokens: int

    async def reply(self, message: str) -> str:
        if self.client is None:
            raise ChatNotConfiguredError()
        try:
            text = await self.client.complete(
                model=self.model, message=message, max_tokens=self.max_tokens
            )
        except Exception as exc:
            logger.exception("Chat completion failed")
            raise ChatUpstreamError("Failed to get a response from the chat service.") from exc
        return text or FALLBACK_REPLY
