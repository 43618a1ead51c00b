"""Cursor-paginated reads of whole Appwrite collections.

`iter_pages` yields one page of documents at a time; `fetch_all_documents`
materializes the full scan. Pages only carry the selected attributes (plus
Appwrite's system attributes such as `$id`, used as the cursor).
"""

from __future__ import annotations

import logging
from typing import Any, Iterator, Sequence

from appwrite.query import Query

log = logging.getLogger(__name__)

PAGE_SIZE = 100


def _select_keys(select_keys: str | Sequence[str]) -> list[str]:
    if isinstance(select_keys, str):
        return [select_keys]
    return list(select_keys)


def iter_pages(
    databases: Any,
    database_id: str,
    collection_id: str,
    select_keys: str | Sequence[str],
    page_size: int = PAGE_SIZE,
) -> Iterator[list[dict[str, Any]]]:
    """Yield every page of `collection_id` restricted to `select_keys`.

    The `$id` of the last document of a page is the cursor for the next
    request. Iteration ends on an empty page or a page shorter than
    `page_size`. Request errors propagate unchanged.

    Args:
        databases: Appwrite `Databases` service (or a compatible object).
        database_id: Database id.
        collection_id: Source collection id.
        select_keys: One attribute name or a list of attribute names.
        page_size: Documents per request (default 100).

    Yields:
        Lists of raw document dictionaries.
    """
    keys = _select_keys(select_keys)
    cursor: str | None = None

    while True:
        queries = [Query.select(keys), Query.limit(page_size)]
        if cursor:
            queries.append(Query.cursor_after(cursor))

        response = databases.list_documents(database_id, collection_id, queries)
        documents = response["documents"]
        if not documents:
            return

        yield documents

        if len(documents) < page_size:
            return
        cursor = documents[-1]["$id"]


def fetch_all_documents(
    databases: Any,
    database_id: str,
    collection_id: str,
    select_keys: str | Sequence[str],
    page_size: int = PAGE_SIZE,
) -> list[dict[str, Any]]:
    """Return every document of a collection (unordered, unfiltered).

    The whole collection is held in memory; fine for the cache sources, which
    are small. Use `iter_pages` to fold page by page instead.
    """
    documents: list[dict[str, Any]] = []
    pages = 0
    for page in iter_pages(databases, database_id, collection_id, select_keys, page_size):
        documents.extend(page)
        pages += 1

    log.info(
        "Fetched %d documents from %s in %d pages",
        len(documents),
        collection_id,
        pages,
    )
    return documents
