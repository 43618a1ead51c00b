from __future__ import annotations

import json

import pytest
from appwrite.exception import AppwriteException

from cache_refresh.ingest.fetch_documents import PAGE_SIZE, fetch_all_documents, iter_pages


def test_fetch_250_documents_in_three_pages(fake_db) -> None:
    fake_db.add("forms", [{"createdBy": f"user{i}", "title": "t"} for i in range(250)])

    docs = fetch_all_documents(fake_db, "db", "forms", "createdBy")

    assert len(fake_db.list_calls) == 3
    assert len(docs) == 250
    assert len({d["$id"] for d in docs}) == 250
    assert all(set(d) == {"$id", "createdBy"} for d in docs)


def test_fetch_sends_select_limit_and_cursor(fake_db) -> None:
    fake_db.add("notes", [{"userName": "a", "abbreviation": "M"} for _ in range(PAGE_SIZE + 1)])

    fetch_all_documents(fake_db, "db", "notes", ["userName", "abbreviation"])

    first, second = [
        {q["method"]: q.get("values") for q in map(json.loads, queries)}
        for _, queries in fake_db.list_calls
    ]
    assert first["select"] == ["userName", "abbreviation"]
    assert first["limit"] == [PAGE_SIZE]
    assert "cursorAfter" not in first
    assert second["cursorAfter"] == ["notes-00099"]


def test_fetch_full_last_page_ends_on_empty_page(fake_db) -> None:
    fake_db.add("youtube", [{"createdBy": "x"} for _ in range(200)])

    pages = list(iter_pages(fake_db, "db", "youtube", "createdBy"))

    assert [len(p) for p in pages] == [100, 100]
    assert len(fake_db.list_calls) == 3


def test_fetch_empty_collection(fake_db) -> None:
    assert fetch_all_documents(fake_db, "db", "missing", "createdBy") == []
    assert len(fake_db.list_calls) == 1


def test_fetch_errors_propagate(fake_db) -> None:
    fake_db.list_errors["forms"] = AppwriteException("Server Error", 500)

    with pytest.raises(AppwriteException, match="Server Error"):
        fetch_all_documents(fake_db, "db", "forms", "createdBy")
