"""Validation utilities for source documents.

This module validates raw Appwrite documents against a `SourceRecord` model
and reports how many were rejected.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, TypeVar

from pydantic import ValidationError

from cache_refresh.models import SourceRecord

log = logging.getLogger(__name__)

R = TypeVar("R", bound=SourceRecord)


def validate_documents(
    documents: Iterable[dict[str, Any]],
    model: type[R],
) -> tuple[list[R], int]:
    """Validate raw documents using Pydantic.

    Args:
        documents: Raw document dictionaries as returned by the fetcher.
        model: `SourceRecord` subclass to validate against.

    Returns:
        A tuple of (list_of_validated_records, bad_count).
    """
    good: list[R] = []
    bad = 0

    for doc in documents:
        try:
            good.append(model.model_validate(doc))
        except ValidationError as e:
            bad += 1
            log.debug("Rejected %s document %s: %s", model.__name__, doc.get("$id"), e)

    if bad:
        log.warning("Skipped %d invalid %s documents", bad, model.__name__)
    return good, bad
