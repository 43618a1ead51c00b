"""Cache aggregation functions.

Functions in this module build the three cache payloads from validated
source records. They are pure: no I/O, no logging side effects beyond
warnings, and deterministic for a given input order.

Expectations:
- Input: lists of `NoteRecord` / `LinkRecord` with empty names already
  normalized to ``None``
- Outputs: JSON-serializable payloads documented on each function docstring.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

import pandas as pd

from cache_refresh.models import LinkRecord, LinksCache, NoteRecord, TeacherContribution

log = logging.getLogger(__name__)

ALL_KEY = "all"
SOURCES = ("notes", "forms", "youtube")

# Largest array index a JS object key can be
MAX_ARRAY_INDEX = 2**32 - 2


# =========================================================
# ORDERING
# =========================================================

def code_unit_key(s: str) -> bytes:
    """Sort key comparing UTF-16 code units, like `Array.prototype.sort`."""
    return s.encode("utf-16-be", "surrogatepass")


def _array_index(key: str) -> int | None:
    if not (key.isascii() and key.isdigit()):
        return None
    if key != "0" and key.startswith("0"):
        return None
    value = int(key)
    return value if value <= MAX_ARRAY_INDEX else None


def js_key_order(mapping: Mapping[str, Any]) -> dict[str, Any]:
    """Reorder keys the way a JS object enumerates them.

    Integer-like keys come first in ascending numeric order, the rest keep
    insertion order, so the encoded caches match what `JSON.stringify`
    produces for the same data.
    """
    indexed = sorted((k for k in mapping if _array_index(k) is not None), key=int)
    named = [k for k in mapping if _array_index(k) is None]
    return {k: mapping[k] for k in indexed + named}


# =========================================================
# LINKS CACHE
# =========================================================

def build_links_cache(*sources: Iterable[LinkRecord]) -> dict[str, Any]:
    """Return the distinct creators of all link sources.

    Args:
        *sources: Any number of `LinkRecord` iterables (YouTube, forms).

    Returns:
        ``{"uploaders": [...]}`` with names deduplicated and sorted.
    """
    uploaders = {r.created_by for records in sources for r in records if r.created_by}
    return LinksCache(uploaders=sorted(uploaders, key=code_unit_key)).model_dump()


# =========================================================
# NOTE UPLOADER CACHE
# =========================================================

def build_uploader_cache(notes: Iterable[NoteRecord]) -> dict[str, list[str]]:
    """Return note uploaders globally and per subject.

    Records missing `userName` or `abbreviation` are skipped entirely.

    Args:
        notes: `NoteRecord` iterable.

    Returns:
        Dict with key `all` mapped to every uploader and one key per subject,
        each a sorted distinct name list. Keys follow JS object order.
    """
    rows = [
        {"user_name": n.user_name, "abbreviation": n.abbreviation}
        for n in notes
        if n.user_name and n.abbreviation
    ]
    pdf = pd.DataFrame(rows, columns=["user_name", "abbreviation"])

    payload: dict[str, list[str]] = {
        ALL_KEY: sorted(pdf["user_name"].unique(), key=code_unit_key)
    }
    for subject, names in pdf.groupby("abbreviation", sort=False)["user_name"]:
        if subject == ALL_KEY:
            log.warning("Subject %r replaces the global uploader list", subject)
        payload[subject] = sorted(names.unique(), key=code_unit_key)
    return js_key_order(payload)


# =========================================================
# TEACHER STATS
# =========================================================

def count_creators(names: Iterable[str | None]) -> dict[str, int]:
    """Count occurrences per name, ignoring empty names.

    Returns:
        Mapping name -> count in JS object key order (integer-like names
        first, then order of first appearance).
    """
    counts: dict[str, int] = {}
    for name in names:
        if name:
            counts[name] = counts.get(name, 0) + 1
    return js_key_order(counts)


def merge_contributions(
    note_counts: Mapping[str, int],
    form_counts: Mapping[str, int],
    youtube_counts: Mapping[str, int],
) -> list[dict[str, Any]]:
    """Merge per-source counts into ranked teacher contributions.

    Names are taken in order of first appearance across notes, forms, then
    youtube. The result is stably sorted by `total`, highest first, so ties
    keep that order.

    Returns:
        List of ``{"name", "notes", "forms", "youtube", "total"}`` dicts.
    """
    per_source = dict(zip(SOURCES, (note_counts, form_counts, youtube_counts)))
    names = pd.unique(pd.Series([n for counts in per_source.values() for n in counts], dtype=object))

    table = pd.DataFrame(index=pd.Index(names, name="name", dtype=object))
    for source, counts in per_source.items():
        table[source] = pd.Series(counts, dtype="int64").reindex(table.index, fill_value=0)
    table["total"] = table[list(SOURCES)].sum(axis=1)
    table = table.sort_values("total", ascending=False, kind="stable")

    return [
        TeacherContribution(
            name=str(name),
            notes=int(row["notes"]),
            forms=int(row["forms"]),
            youtube=int(row["youtube"]),
            total=int(row["total"]),
        ).model_dump()
        for name, row in table.iterrows()
    ]


def build_teacher_stats(
    notes: Iterable[NoteRecord],
    forms: Iterable[LinkRecord],
    youtube: Iterable[LinkRecord],
) -> list[dict[str, Any]]:
    """Return per-teacher contribution counts across the three sources."""
    return merge_contributions(
        count_creators(n.user_name for n in notes),
        count_creators(f.created_by for f in forms),
        count_creators(y.created_by for y in youtube),
    )
