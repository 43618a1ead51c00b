"""Utilities for writing cache payloads into Appwrite.

Every cache is stored as a single document whose `data` attribute holds the
JSON-encoded payload. This module centralizes the encoding, the upsert and
the logging around it.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from cache_refresh.db import UpsertResult, upsert_document

log = logging.getLogger(__name__)


def encode_payload(payload: Any) -> str:
    """Return the compact JSON text stored in a cache document."""
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def load_cache(
    databases: Any,
    database_id: str,
    collection_id: str,
    document_id: str,
    payload: Any,
) -> UpsertResult:
    """Write a cache payload to its document, replacing the previous one.

    Args:
        databases: Appwrite `Databases` service (or a compatible object).
        database_id: Database id.
        collection_id: Cache collection id.
        document_id: Fixed cache document id.
        payload: JSON-serializable cache payload.

    Returns:
        The successful UpsertResult.

    Raises:
        CacheWriteError: if the document could not be updated or created.
    """
    data = {"data": encode_payload(payload)}

    result = upsert_document(databases, database_id, collection_id, document_id, data)
    result.raise_for_status()

    log.info(
        "Cache write complete for %s/%s: %s (%d bytes)",
        collection_id,
        document_id,
        result.status.value,
        len(data["data"]),
    )
    return result
