"""Upload validation and storage path helpers shared by the CMS and recipes."""

import mimetypes
import time
from dataclasses import dataclass

from mealmigo_site.services.documents import MEDIA_PREFIX, InvalidStoragePathError

IMAGE_TYPES = frozenset({"image/png", "image/jpeg"})
VIDEO_TYPES = frozenset({"video/mp4"})
MAX_IMAGE_BYTES = 5 * 1024 * 1024
MAX_VIDEO_BYTES = 50 * 1024 * 1024


class UploadValidationError(ValueError):
    """Raised when an upload has the wrong type or size."""


@dataclass(frozen=True)
class UploadedFile:
    """Bytes received from a multipart upload."""

    filename: str
    content_type: str | None
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


def resolve_content_type(upload: UploadedFile) -> str:
    """Return the declared content type, falling back to the file extension."""
    declared = (upload.content_type or "").split(";")[0].strip().lower()
    if declared and declared != "application/octet-stream":
        return declared
    guessed, _ = mimetypes.guess_type(upload.filename)
    return guessed or ""


def validate_upload(upload: UploadedFile, *, video: bool = False) -> str:
    """Check type and size and return the effective content type."""
    content_type = resolve_content_type(upload)
    if video:
        if content_type not in VIDEO_TYPES:
            raise UploadValidationError("Only MP4 videos are allowed.")
        if upload.size > MAX_VIDEO_BYTES:
            raise UploadValidationError("File must be smaller than 50MB.")
        return content_type
    if content_type not in IMAGE_TYPES:
        raise UploadValidationError("Only PNG or JPEG files are allowed.")
    if upload.size > MAX_IMAGE_BYTES:
        raise UploadValidationError("File must be smaller than 5MB.")
    return content_type


def timestamp_ms() -> int:
    return int(time.time() * 1000)


def media_path(name: str) -> str:
    """Build a managed storage path with a millisecond suffix."""
    return f"{MEDIA_PREFIX}{name}_{timestamp_ms()}"


def ensure_managed_path(path: str) -> str:
    if not path.startswith(MEDIA_PREFIX):
        raise InvalidStoragePathError(
            f"Refusing to delete media outside {MEDIA_PREFIX}: {path!r}"
        )
    return path
