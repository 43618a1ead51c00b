"""Scheduled cache tasks and the orchestrator that runs them.

Each task fetches its source collections concurrently, validates and
aggregates them in memory, then writes one cache document. The Appwrite SDK
is synchronous, so every database call runs in a worker thread.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Sequence

from cache_refresh.aggregate.build_cache import (
    build_links_cache,
    build_teacher_stats,
    build_uploader_cache,
)
from cache_refresh.aggregate.load_cache import load_cache
from cache_refresh.clean.validate import validate_documents
from cache_refresh.config import Settings
from cache_refresh.ingest.fetch_documents import fetch_all_documents
from cache_refresh.models import LinkRecord, NoteRecord

log = logging.getLogger(__name__)


async def _fetch(
    databases: Any,
    settings: Settings,
    collection_id: str,
    select_keys: str | Sequence[str],
) -> list[dict[str, Any]]:
    return await asyncio.to_thread(
        fetch_all_documents, databases, settings.database_id, collection_id, select_keys
    )


async def _write(
    databases: Any,
    settings: Settings,
    collection_id: str,
    document_id: str,
    payload: Any,
) -> None:
    await asyncio.to_thread(
        load_cache, databases, settings.database_id, collection_id, document_id, payload
    )


# --------------------------------------------------
# Tasks
# --------------------------------------------------
async def update_links_cache(databases: Any, settings: Settings) -> None:
    """Rebuild the list of everyone who submitted a YouTube link or a form."""
    log.info("Starting: Update Links Cache...")

    youtube_docs, form_docs = await asyncio.gather(
        _fetch(databases, settings, settings.youtube_collection_id, "createdBy"),
        _fetch(databases, settings, settings.form_collection_id, "createdBy"),
    )
    youtube, _ = validate_documents(youtube_docs, LinkRecord)
    forms, _ = validate_documents(form_docs, LinkRecord)

    payload = build_links_cache(youtube, forms)
    await _write(
        databases,
        settings,
        settings.cache_collection_id,
        settings.links_uploaders_cache_document_id,
        payload,
    )
    log.info("Finished: Update Links Cache (%d uploaders).", len(payload["uploaders"]))


async def update_uploader_cache(databases: Any, settings: Settings) -> None:
    """Rebuild the note uploaders, globally and per subject."""
    log.info("Starting: Update Uploader Cache...")

    note_docs = await _fetch(
        databases, settings, settings.note_collection_id, ["userName", "abbreviation"]
    )
    notes, _ = validate_documents(note_docs, NoteRecord)

    payload = build_uploader_cache(notes)
    await _write(
        databases,
        settings,
        settings.cache_collection_id,
        settings.uploaders_cache_document_id,
        payload,
    )
    log.info("Finished: Update Uploader Cache (%d subjects).", len(payload) - 1)


async def update_teacher_stats(databases: Any, settings: Settings) -> None:
    """Rebuild the per-teacher contribution ranking."""
    log.info("Starting: Update Teacher Stats...")

    note_docs, form_docs, youtube_docs = await asyncio.gather(
        _fetch(databases, settings, settings.stats_note_collection_id, "userName"),
        _fetch(databases, settings, settings.form_collection_id, "createdBy"),
        _fetch(databases, settings, settings.youtube_collection_id, "createdBy"),
    )
    notes, _ = validate_documents(note_docs, NoteRecord)
    forms, _ = validate_documents(form_docs, LinkRecord)
    youtube, _ = validate_documents(youtube_docs, LinkRecord)

    contributions = build_teacher_stats(notes, forms, youtube)
    await _write(
        databases,
        settings,
        settings.stats_collection_id,
        settings.stats_document_id,
        contributions,
    )
    log.info("Finished: Update Teacher Stats (%d teachers).", len(contributions))


TASKS = {
    "links": update_links_cache,
    "uploaders": update_uploader_cache,
    "stats": update_teacher_stats,
}


# --------------------------------------------------
# Orchestrator
# --------------------------------------------------
async def run_scheduled_tasks(databases: Any, settings: Settings) -> None:
    """Run every cache task concurrently.

    All tasks run to completion or failure; a failing task does not cancel
    the others and writes already made are kept.

    Raises:
        The first exception (in task order) raised by any task.
    """
    names = list(TASKS)
    results = await asyncio.gather(
        *(TASKS[name](databases, settings) for name in names),
        return_exceptions=True,
    )

    errors = [(name, r) for name, r in zip(names, results) if isinstance(r, BaseException)]
    for name, err in errors:
        log.error("Task %s failed: %s", name, err, exc_info=err)

    if errors:
        raise errors[0][1]
