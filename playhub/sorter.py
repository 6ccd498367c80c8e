"""
Deterministic ordering of library entries.

Python's sort is stable, and ties keep their incoming relative order. Views
rely on that for reproducible output, so every key here is a plain sort key
(never a comparator that reports ties as unequal).
"""

import unicodedata
from enum import StrEnum
from typing import Iterable

from .filter_pipeline import valid_entries
from .logger import setup_logger
from .models import LibraryEntry, to_epoch

logger = setup_logger()


class SortKey(StrEnum):
    NAME = 'name'
    PLAYTIME = 'playtime'
    LAST_PLAYED = 'last_played'


SORT_KEY_ALIASES = {
    "title": SortKey.NAME,
}


def resolve_sort_key(key) -> SortKey | None:
    if isinstance(key, SortKey):
        return key
    if not key:
        return None
    normalized = str(key).strip().lower()
    if normalized in SORT_KEY_ALIASES:
        return SORT_KEY_ALIASES[normalized]
    try:
        return SortKey(normalized)
    except ValueError:
        return None


def title_sort_key(title: str | None) -> tuple[str, str]:
    """
    Collation-style key: accents and case are ignored first, then case
    folding breaks ties so that 'apple' and 'Apple' stay adjacent.
    """
    text = title or ""
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(c for c in decomposed if not unicodedata.combining(c))
    return base.casefold(), text.casefold()


def sort_entries(entries: Iterable[LibraryEntry], key) -> list[LibraryEntry]:
    """
    Return a new list ordered by ``key``.

    name: ascending title; playtime: descending seconds (missing as 0);
    last_played: descending timestamp (missing as the epoch, i.e. last).
    Unknown keys keep the incoming order.
    """
    entries = valid_entries(entries)
    sort_key = resolve_sort_key(key)

    if sort_key is None:
        logger.warning(f"Unknown sort key '{key}', keeping current order")
        return entries

    if sort_key == SortKey.NAME:
        return sorted(entries, key=lambda e: title_sort_key(e.title))
    if sort_key == SortKey.PLAYTIME:
        return sorted(entries, key=lambda e: -(e.playtime_seconds or 0))
    return sorted(entries, key=lambda e: -to_epoch(e.last_played_at))
