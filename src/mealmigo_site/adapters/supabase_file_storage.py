"""Supabase Storage implementation for uploaded media."""

import logging
from dataclasses import dataclass

from storage3.exceptions import StorageApiError
from supabase import Client

from mealmigo_site.services.documents import FileStorage, PermissionDeniedError

logger = logging.getLogger(__name__)


def _status(exc: StorageApiError) -> int | None:
    try:
        return int(exc.status)
    except (TypeError, ValueError):
        return None


@dataclass
class SupabaseFileStorage(FileStorage):
    """Stores media objects in one bucket and returns public URLs."""

    client: Client
    bucket: str

    def upload(self, path: str, data: bytes, content_type: str) -> str:
        bucket = self.client.storage.from_(self.bucket)
        try:
            bucket.upload(
                path,
                data,
                {"content-type": content_type, "upsert": "true"},
            )
        except StorageApiError as exc:
            if _status(exc) in {401, 403}:
                raise PermissionDeniedError() from exc
            raise
        return bucket.get_public_url(path).rstrip("?").strip()

    def delete(self, path: str) -> None:
        try:
            self.client.storage.from_(self.bucket).remove([path])
        except StorageApiError as exc:
            if _status(exc) == 404:
                logger.info("Media already removed", extra={"path": path})
                return
            if _status(exc) in {401, 403}:
                raise PermissionDeniedError() from exc
            raise
