from __future__ import annotations

import json

import pytest
from appwrite.exception import AppwriteException

from cache_refresh.aggregate.load_cache import load_cache
from cache_refresh.db import CacheWriteError, UpsertStatus, upsert_document


def test_upsert_creates_missing_document(fake_db) -> None:
    result = upsert_document(fake_db, "db", "cache", "doc1", {"data": "{}"})

    assert result.status is UpsertStatus.CREATED
    assert result.ok
    assert fake_db.get("cache", "doc1") == {"$id": "doc1", "data": "{}"}


def test_upsert_replaces_existing_payload(fake_db) -> None:
    load_cache(fake_db, "db", "cache", "doc1", {"uploaders": ["a"], "old": True})
    result = load_cache(fake_db, "db", "cache", "doc1", {"uploaders": ["b"]})

    assert result.status is UpsertStatus.UPDATED
    assert fake_db.cached("cache", "doc1") == {"uploaders": ["b"]}
    assert [w[0] for w in fake_db.writes] == ["create", "update"]


def test_upsert_other_errors_are_reported(fake_db) -> None:
    fake_db.update_errors["cache"] = AppwriteException("Unauthorized", 401)

    result = upsert_document(fake_db, "db", "cache", "doc1", {"data": "{}"})

    assert result.status is UpsertStatus.FAILED
    assert fake_db.writes == []
    with pytest.raises(CacheWriteError, match="Unauthorized"):
        result.raise_for_status()


def test_load_cache_raises_on_failure(fake_db) -> None:
    fake_db.update_errors["stats"] = AppwriteException("Unauthorized", 401)

    with pytest.raises(CacheWriteError):
        load_cache(fake_db, "db", "stats", "teacher_stats", [])


def test_load_cache_stores_compact_json(fake_db) -> None:
    load_cache(fake_db, "db", "cache", "doc1", {"all": ["Ünal"]})

    raw = fake_db.get("cache", "doc1")["data"]
    assert raw == '{"all":["Ünal"]}'
    assert json.loads(raw) == {"all": ["Ünal"]}
