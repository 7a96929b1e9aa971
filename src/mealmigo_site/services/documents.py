"""Document store, file storage and auth provider interfaces.

Every other service talks to the hosted backend through the protocols in this
module. Documents are addressed by slash-separated paths with an even number
of segments (``collection/id`` or ``collection/id/sub/id``).
"""

from collections.abc import Callable
from copy import deepcopy
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

USERS_COLLECTION = "users"
RATINGS_COLLECTION = "appRating"
DROPDOWNS_COLLECTION = "dropDownOptions"
RECIPES_COLLECTION = "recipes"
CONTENT_PATH = "landingPageContent/main"
SETTINGS_PATH = "settings/main"
MEDIA_PREFIX = "websiteImages/"

Unsubscribe = Callable[[], None]
DocumentListener = Callable[[dict[str, object] | None], None]
ErrorListener = Callable[[Exception], None]


class PermissionDeniedError(Exception):
    """Raised when the backend rejects a read or write."""

    def __init__(self, message: str = "Permission denied. Check security rules.") -> None:
        super().__init__(message)


class DocumentNotFoundError(Exception):
    """Raised when an in-place update targets a missing document."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Document not found: {path}")
        self.path = path


class ConflictError(Exception):
    """Raised when an atomic array replace finds the element already changed."""


class InvalidStoragePathError(ValueError):
    """Raised when a stored media path falls outside the managed prefix."""


@dataclass(frozen=True)
class StoredDocument:
    """A document snapshot with its id."""

    id: str
    data: dict[str, object]


CollectionListener = Callable[[list[StoredDocument]], None]


class DocumentStore(Protocol):
    """Path-addressed document database."""

    def get_document(self, path: str) -> dict[str, object] | None:
        """Return the document data, or None when it does not exist."""

    def set_document(
        self, path: str, data: dict[str, object], merge: bool = False
    ) -> None:
        """Write a document, deep-merging into the existing one when merge is set."""

    def update_document(self, path: str, data: dict[str, object]) -> None:
        """Replace top-level fields of an existing document."""

    def add_document(self, collection: str, data: dict[str, object]) -> str:
        """Create a document with a generated id and return the id."""

    def delete_document(self, path: str) -> None:
        """Delete a document if it exists."""

    def list_collection(self, collection: str) -> list[StoredDocument]:
        """Return every document in a collection."""

    def array_union(self, path: str, field: str, values: list[object]) -> None:
        """Atomically append values not already present in an array field."""

    def array_remove(self, path: str, field: str, values: list[object]) -> None:
        """Atomically remove every element equal to one of the values."""

    def array_replace(self, path: str, field: str, old: object, new: object) -> None:
        """Atomically replace one element in place, raising ConflictError if absent."""

    def watch_document(
        self,
        path: str,
        on_next: DocumentListener,
        on_error: ErrorListener | None = None,
    ) -> Unsubscribe:
        """Deliver the document now and after every change."""

    def watch_collection(
        self,
        collection: str,
        on_next: CollectionListener,
        on_error: ErrorListener | None = None,
    ) -> Unsubscribe:
        """Deliver the collection now and after every change."""


class FileStorage(Protocol):
    """Object storage for uploaded media."""

    def upload(self, path: str, data: bytes, content_type: str) -> str:
        """Store bytes at the path and return a public URL."""

    def delete(self, path: str) -> None:
        """Delete the object, tolerating one that is already gone."""


def split_path(path: str) -> tuple[str, str]:
    """Split a document path into its collection path and document id."""
    segments = [segment for segment in path.strip("/").split("/") if segment]
    if not segments or len(segments) % 2:
        raise ValueError(f"Invalid document path: {path!r}")
    return "/".join(segments[:-1]), segments[-1]


def user_path(uid: str) -> str:
    return f"{USERS_COLLECTION}/{uid}"


def health_profile_path(uid: str) -> str:
    return f"{USERS_COLLECTION}/{uid}/private/health_profile"


def merge_documents(
    base: dict[str, object] | None, patch: dict[str, object]
) -> dict[str, object]:
    """Deep-merge maps the way a merge write does; lists and scalars are replaced."""
    merged = deepcopy(base) if base else {}
    for key, value in patch.items():
        current = merged.get(key)
        if isinstance(value, dict) and isinstance(current, dict):
            merged[key] = merge_documents(current, value)
        else:
            merged[key] = deepcopy(value)
    return merged


def utc_now_iso() -> str:
    """Return the current UTC time as an ISO-8601 string."""
    return datetime.now(tz=UTC).isoformat()


def parse_timestamp(value: object) -> datetime | None:
    """Parse a stored timestamp (datetime or ISO string) into an aware datetime."""
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=UTC)
    if isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)
    return None
