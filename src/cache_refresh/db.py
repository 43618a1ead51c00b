"""Appwrite helpers and the cache document upsert.

Centralizes creation of the Appwrite client and `Databases` service and the
create-or-update used for every cache document.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any

from appwrite.client import Client
from appwrite.exception import AppwriteException
from appwrite.services.databases import Databases

from cache_refresh.config import Settings

log = logging.getLogger(__name__)

NOT_FOUND = 404


class CacheRefreshError(Exception):
    """Base class for errors raised by the cache refresh."""


class CacheWriteError(CacheRefreshError):
    """Writing a cache document failed for a reason other than not-found."""


def get_client(settings: Settings) -> Client:
    """Return an Appwrite Client configured from `settings`.

    Args:
        settings: Function settings with endpoint, project and API key.

    Returns:
        Configured Client instance.
    """
    return (
        Client()
        .set_endpoint(settings.endpoint)
        .set_project(settings.project)
        .set_key(settings.api_key)
    )


def get_databases(client: Client) -> Databases:
    """Return the Databases service bound to `client`."""
    return Databases(client)


class UpsertStatus(enum.Enum):
    UPDATED = "updated"
    CREATED = "created"
    FAILED = "failed"


@dataclass(frozen=True)
class UpsertResult:
    """Outcome of `upsert_document`.

    Attributes:
        status: Whether the document was updated, created or not written.
        document_id: Target document id.
        error: The exception behind a FAILED status, otherwise None.
    """
    status: UpsertStatus
    document_id: str
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.status is not UpsertStatus.FAILED

    def raise_for_status(self) -> None:
        """Raise `CacheWriteError` if the upsert failed."""
        if self.ok:
            return
        raise CacheWriteError(str(self.error)) from self.error


def upsert_document(
    databases: Any,
    database_id: str,
    collection_id: str,
    document_id: str,
    data: dict[str, Any],
) -> UpsertResult:
    """Update a document in place, creating it when it does not exist.

    The document's attributes are replaced by `data`. Only a not-found
    answer to the update falls back to create; any other error (or a failing
    create) is returned as a FAILED result.

    Args:
        databases: Appwrite `Databases` service (or a compatible object).
        database_id: Database id.
        collection_id: Target collection id.
        document_id: Fixed id of the document to write.
        data: Attribute mapping to store.

    Returns:
        UpsertResult describing what happened.
    """
    try:
        databases.update_document(database_id, collection_id, document_id, data)
        return UpsertResult(UpsertStatus.UPDATED, document_id)
    except AppwriteException as e:
        if e.code != NOT_FOUND:
            log.error("Update of %s/%s failed: %s", collection_id, document_id, e)
            return UpsertResult(UpsertStatus.FAILED, document_id, e)

    log.info("Document %s/%s not found, creating it", collection_id, document_id)
    try:
        databases.create_document(database_id, collection_id, document_id, data)
    except AppwriteException as e:
        log.error("Create of %s/%s failed: %s", collection_id, document_id, e)
        return UpsertResult(UpsertStatus.FAILED, document_id, e)
    return UpsertResult(UpsertStatus.CREATED, document_id)
