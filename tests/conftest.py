from __future__ import annotations

import json
import threading
from typing import Any

import pytest
from appwrite.exception import AppwriteException

from cache_refresh.config import Settings


class FakeDatabases:
    """In-memory stand-in for `appwrite.services.databases.Databases`."""

    def __init__(self) -> None:
        self.collections: dict[str, list[dict[str, Any]]] = {}
        self.list_calls: list[tuple[str, list[str]]] = []
        self.writes: list[tuple[str, str, str]] = []
        self.list_errors: dict[str, Exception] = {}
        self.update_errors: dict[str, Exception] = {}
        self._lock = threading.Lock()

    def add(self, collection_id: str, docs: list[dict[str, Any]]) -> None:
        coll = self.collections.setdefault(collection_id, [])
        for doc in docs:
            d = dict(doc)
            d.setdefault("$id", f"{collection_id}-{len(coll):05d}")
            coll.append(d)

    def get(self, collection_id: str, document_id: str) -> dict[str, Any] | None:
        for doc in self.collections.get(collection_id, []):
            if doc["$id"] == document_id:
                return doc
        return None

    def cached(self, collection_id: str, document_id: str) -> Any:
        doc = self.get(collection_id, document_id)
        assert doc is not None
        return json.loads(doc["data"])

    # -- Databases API -------------------------------------------------
    def list_documents(
        self, database_id: str, collection_id: str, queries: list[str] | None = None
    ) -> dict[str, Any]:
        with self._lock:
            self.list_calls.append((collection_id, list(queries or [])))
        if collection_id in self.list_errors:
            raise self.list_errors[collection_id]

        select: list[str] | None = None
        limit = 25
        cursor: str | None = None
        for q in queries or []:
            parsed = json.loads(q)
            if parsed["method"] == "select":
                select = parsed["values"]
            elif parsed["method"] == "limit":
                limit = parsed["values"][0]
            elif parsed["method"] == "cursorAfter":
                cursor = parsed["values"][0]

        docs = self.collections.get(collection_id, [])
        start = 0
        if cursor is not None:
            ids = [d["$id"] for d in docs]
            start = ids.index(cursor) + 1

        page = docs[start : start + limit]
        if select is not None:
            page = [{"$id": d["$id"], **{k: d[k] for k in select if k in d}} for d in page]
        return {"total": len(docs), "documents": page}

    def update_document(
        self, database_id: str, collection_id: str, document_id: str, data: dict[str, Any]
    ) -> dict[str, Any]:
        if collection_id in self.update_errors:
            raise self.update_errors[collection_id]
        coll = self.collections.get(collection_id, [])
        for i, doc in enumerate(coll):
            if doc["$id"] == document_id:
                coll[i] = {"$id": document_id, **data}
                with self._lock:
                    self.writes.append(("update", collection_id, document_id))
                return coll[i]
        raise AppwriteException(
            "Document with the requested ID could not be found.", 404, "document_not_found"
        )

    def create_document(
        self, database_id: str, collection_id: str, document_id: str, data: dict[str, Any]
    ) -> dict[str, Any]:
        doc = {"$id": document_id, **data}
        with self._lock:
            self.collections.setdefault(collection_id, []).append(doc)
            self.writes.append(("create", collection_id, document_id))
        return doc


@pytest.fixture
def fake_db() -> FakeDatabases:
    return FakeDatabases()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        endpoint="https://cloud.appwrite.io/v1",
        project="proj",
        api_key="secret",
        database_id="db",
        youtube_collection_id="youtube",
        form_collection_id="forms",
        cache_collection_id="cache",
        links_uploaders_cache_document_id="links_uploaders",
        note_collection_id="notes",
        uploaders_cache_document_id="note_uploaders",
        stats_note_collection_id="stats_notes",
        stats_collection_id="stats",
        stats_document_id="teacher_stats",
    )
