"""Configuration helpers and Settings container.

This module provides a frozen `Settings` dataclass and `get_settings` which
reads every required environment variable and fails fast when any of them is
missing.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping
import os

from dotenv import load_dotenv

# Explicitly load .env from project root
PROJECT_ROOT = Path(__file__).resolve().parents[2]
load_dotenv(PROJECT_ROOT / ".env")

# Settings field -> environment variable
ENV_VARS: dict[str, str] = {
    "endpoint": "APPWRITE_ENDPOINT",
    "project": "APPWRITE_PROJECT",
    "api_key": "APPWRITE_API_KEY",
    "database_id": "APPWRITE_DATABASE_ID",
    "youtube_collection_id": "APPWRITE_YOUTUBE_COLLECTION_ID",
    "form_collection_id": "APPWRITE_FORM_COLLECTION_ID",
    "cache_collection_id": "CACHE_COLLECTION_ID",
    "links_uploaders_cache_document_id": "LINKS_UPLOADERS_CACHE_DOCUMENT_ID",
    "note_collection_id": "NOTE_COLLECTION_ID",
    "uploaders_cache_document_id": "UPLOADERS_CACHE_DOCUMENT_ID",
    "stats_note_collection_id": "APPWRITE_NOTE_COLLECTION_ID",
    "stats_collection_id": "STATS_COLLECTION_ID",
    "stats_document_id": "STATS_DOCUMENT_ID",
}


@dataclass(frozen=True)
class Settings:
    """Container for function configuration read from the environment.

    Attributes:
        endpoint: Appwrite API endpoint URL.
        project: Appwrite project id.
        api_key: Appwrite API key with database read/write scopes.
        database_id: Database holding every source and cache collection.
        youtube_collection_id: YouTube submissions collection.
        form_collection_id: Form submissions collection.
        cache_collection_id: Collection holding the uploader cache documents.
        links_uploaders_cache_document_id: Document id of the links uploader cache.
        note_collection_id: Notes collection read by the uploader cache.
        uploaders_cache_document_id: Document id of the note uploader cache.
        stats_note_collection_id: Notes collection read by the teacher stats.
        stats_collection_id: Collection holding the teacher stats document.
        stats_document_id: Document id of the teacher stats.
    """
    endpoint: str
    project: str
    api_key: str
    database_id: str
    youtube_collection_id: str
    form_collection_id: str
    cache_collection_id: str
    links_uploaders_cache_document_id: str
    note_collection_id: str
    uploaders_cache_document_id: str
    stats_note_collection_id: str
    stats_collection_id: str
    stats_document_id: str


def get_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Read environment variables and return a frozen `Settings` object.

    Args:
        environ: Optional mapping to read instead of `os.environ`.

    Raises:
        RuntimeError: if any required variable is missing or blank.
    """
    env = os.environ if environ is None else environ

    values = {field: env.get(var, "").strip() for field, var in ENV_VARS.items()}
    missing = [ENV_VARS[field] for field, value in values.items() if not value]

    if missing:
        raise RuntimeError(
            "Missing required environment variables: "
            + ", ".join(missing)
            + ". Set them in the function settings or in .env."
        )

    return Settings(**values)
