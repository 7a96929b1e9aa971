"""Expiring storage for onboarding drafts that predate an account."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from threading import Lock
from typing import Protocol

from mealmigo_site.domain.health import QuizDraft


class DraftStore(Protocol):
    """Key-value store for quiz drafts."""

    def get(self, key: str) -> QuizDraft | None:
        """Return a draft if present and not expired."""

    def set(self, key: str, value: QuizDraft, ttl_seconds: int) -> None:
        """Store a draft with a TTL in seconds."""

    def delete(self, key: str) -> None:
        """Forget a draft."""


@dataclass
class _DraftEntry:
    value: QuizDraft
    expires_at: datetime


@dataclass
class InMemoryDraftStore(DraftStore):
    """Process-local draft store; drafts do not survive a restart."""

    _entries: dict[str, _DraftEntry]
    _lock: Lock

    def __init__(self) -> None:
        self._entries = {}
        self._lock = Lock()

    def get(self, key: str) -> QuizDraft | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if datetime.now(tz=UTC) >= entry.expires_at:
                self._entries.pop(key, None)
                return None
            return entry.value.model_copy(deep=True)

    def set(self, key: str, value: QuizDraft, ttl_seconds: int) -> None:
        expires_at = datetime.now(tz=UTC) + timedelta(seconds=ttl_seconds)
        with self._lock:
            self._purge_expired()
            self._entries[key] = _DraftEntry(
                value=value.model_copy(deep=True), expires_at=expires_at
            )

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def _purge_expired(self) -> None:
        now = datetime.now(tz=UTC)
        for key in [k for k, e in self._entries.items() if now >= e.expires_at]:
            del self._entries[key]
