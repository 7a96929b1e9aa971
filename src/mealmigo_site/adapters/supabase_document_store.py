"""Supabase-backed document store.

Documents live in a single ``documents`` table keyed by ``(collection, id)``
with a jsonb ``data`` column. Merge writes, field updates and array operations
run as Postgres functions so each is a single atomic statement.
"""

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from threading import Lock
from typing import NoReturn

from postgrest.exceptions import APIError
from supabase import Client

from mealmigo_site.services.documents import (
    CollectionListener,
    ConflictError,
    DocumentListener,
    DocumentNotFoundError,
    DocumentStore,
    ErrorListener,
    PermissionDeniedError,
    StoredDocument,
    Unsubscribe,
    split_path,
)

logger = logging.getLogger(__name__)

TABLE = "documents"
_PERMISSION_CODES = frozenset({"42501", "PGRST301", "PGRST302"})


@dataclass(eq=False)
class _Watcher:
    on_next: Callable[[object], None]
    on_error: ErrorListener | None


def _raise_mapped(exc: APIError) -> NoReturn:
    if exc.code in _PERMISSION_CODES:
        raise PermissionDeniedError() from exc
    raise exc


@dataclass
class SupabaseDocumentStore(DocumentStore):
    """Supabase implementation of the document store."""

    client: Client
    _document_watchers: dict[str, list[_Watcher]] = field(
        default_factory=dict, init=False
    )
    _collection_watchers: dict[str, list[_Watcher]] = field(
        default_factory=dict, init=False
    )
    _lock: Lock = field(default_factory=Lock, init=False)

    def get_document(self, path: str) -> dict[str, object] | None:
        collection, doc_id = split_path(path)
        try:
            response = (
                self.client.table(TABLE)
                .select("data")
                .eq("collection", collection)
                .eq("id", doc_id)
                .limit(1)
                .execute()
            )
        except APIError as exc:
            _raise_mapped(exc)
        if response.data:
            return response.data[0]["data"] or {}
        return None

    def set_document(
        self, path: str, data: dict[str, object], merge: bool = False
    ) -> None:
        collection, doc_id = split_path(path)
        try:
            if merge:
                self.client.rpc(
                    "document_merge",
                    {"p_collection": collection, "p_id": doc_id, "p_patch": data},
                ).execute()
            else:
                self.client.table(TABLE).upsert(
                    {"collection": collection, "id": doc_id, "data": data},
                    on_conflict="collection,id",
                ).execute()
        except APIError as exc:
            _raise_mapped(exc)
        self._notify(path)

    def update_document(self, path: str, data: dict[str, object]) -> None:
        collection, doc_id = split_path(path)
        try:
            response = self.client.rpc(
                "document_update",
                {"p_collection": collection, "p_id": doc_id, "p_fields": data},
            ).execute()
        except APIError as exc:
            _raise_mapped(exc)
        if response.data is not True:
            raise DocumentNotFoundError(path)
        self._notify(path)

    def add_document(self, collection: str, data: dict[str, object]) -> str:
        doc_id = uuid.uuid4().hex
        try:
            self.client.table(TABLE).insert(
                {"collection": collection, "id": doc_id, "data": data}
            ).execute()
        except APIError as exc:
            _raise_mapped(exc)
        self._notify(f"{collection}/{doc_id}")
        return doc_id

    def delete_document(self, path: str) -> None:
        collection, doc_id = split_path(path)
        try:
            self.client.table(TABLE).delete().eq("collection", collection).eq(
                "id", doc_id
            ).execute()
        except APIError as exc:
            _raise_mapped(exc)
        self._notify(path)

    def list_collection(self, collection: str) -> list[StoredDocument]:
        try:
            response = (
                self.client.table(TABLE)
                .select("id, data")
                .eq("collection", collection)
                .execute()
            )
        except APIError as exc:
            _raise_mapped(exc)
        return [
            StoredDocument(id=row["id"], data=row["data"] or {})
            for row in response.data or []
        ]

    def array_union(self, path: str, field: str, values: list[object]) -> None:
        self._array_call("document_array_union", path, field, {"p_values": values})

    def array_remove(self, path: str, field: str, values: list[object]) -> None:
        self._array_call("document_array_remove", path, field, {"p_values": values})

    def array_replace(self, path: str, field: str, old: object, new: object) -> None:
        replaced = self._array_call(
            "document_array_replace", path, field, {"p_old": old, "p_new": new}
        )
        if replaced is not True:
            raise ConflictError(
                "This option was changed by someone else. Reload and try again."
            )

    def watch_document(
        self,
        path: str,
        on_next: DocumentListener,
        on_error: ErrorListener | None = None,
    ) -> Unsubscribe:
        split_path(path)
        watcher = _Watcher(on_next=on_next, on_error=on_error)
        return self._register(self._document_watchers, path, watcher, path)

    def watch_collection(
        self,
        collection: str,
        on_next: CollectionListener,
        on_error: ErrorListener | None = None,
    ) -> Unsubscribe:
        watcher = _Watcher(on_next=on_next, on_error=on_error)
        return self._register(self._collection_watchers, collection, watcher, None)

    def _array_call(
        self, function: str, path: str, field: str, params: dict[str, object]
    ) -> object:
        collection, doc_id = split_path(path)
        try:
            response = self.client.rpc(
                function,
                {"p_collection": collection, "p_id": doc_id, "p_field": field, **params},
            ).execute()
        except APIError as exc:
            _raise_mapped(exc)
        self._notify(path)
        return response.data

    def _register(
        self,
        registry: dict[str, list[_Watcher]],
        key: str,
        watcher: _Watcher,
        document_path: str | None,
    ) -> Unsubscribe:
        with self._lock:
            registry.setdefault(key, []).append(watcher)
        self._deliver(watcher, key, document_path is not None)

        def unsubscribe() -> None:
            with self._lock:
                watchers = registry.get(key, [])
                if watcher in watchers:
                    watchers.remove(watcher)

        return unsubscribe

    def _deliver(self, watcher: _Watcher, key: str, is_document: bool) -> None:
        try:
            snapshot = (
                self.get_document(key) if is_document else self.list_collection(key)
            )
        except Exception as exc:
            logger.warning("Watch delivery failed", extra={"key": key})
            if watcher.on_error is not None:
                watcher.on_error(exc)
            return
        watcher.on_next(snapshot)

    def _notify(self, path: str) -> None:
        collection, _ = split_path(path)
        with self._lock:
            documents = list(self._document_watchers.get(path, []))
            collections = list(self._collection_watchers.get(collection, []))
        for watcher in documents:
            self._deliver(watcher, path, True)
        for watcher in collections:
            self._deliver(watcher, collection, False)
