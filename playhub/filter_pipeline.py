"""
Filter pipeline for library views.

Each stage is an independent predicate over a list of entries; ``apply``
AND-combines them in a fixed order so output is reproducible:

1. status directive        5. recency window
2. category separation     6. free text
3. platform directive      7. install state / genre / tags / utility category
4. HLTB time bucket

Unrecognised dimension values leave the collection unchanged.
"""

from datetime import datetime, timedelta, timezone
from enum import StrEnum
from typing import Iterable

from .classifier import classify, include_in_games_view
from .constants import INSTALL_FILTERS, RECENCY_WINDOWS_DAYS, TIME_FILTER_BOUNDS, UTILITY_CATEGORIES
from .logger import setup_logger
from .models import FilterDimensions, FilterQuery, LibraryEntry, to_epoch

logger = setup_logger()


class ViewKind(StrEnum):
    GAMES = 'games'
    PLATFORM = 'platform'
    UTILITIES = 'utilities'
    COUCH = 'couch'


def valid_entries(entries: Iterable[LibraryEntry]) -> list[LibraryEntry]:
    """Drop entries without an id or title; they cannot be classified, sorted or reordered."""
    result = []
    for entry in entries:
        if not entry.id or not entry.title:
            logger.warning(f"Skipping library entry without id/title: id={entry.id!r} title={entry.title!r}")
            continue
        result.append(entry)
    return result


# =============================================================================
# Stages
# =============================================================================

def filter_status(entries: list[LibraryEntry], status_filter: str | None) -> list[LibraryEntry]:
    if not status_filter:
        return list(entries)
    return [e for e in entries if e.status_tag and status_filter in e.status_tag.lower()]


def filter_category(entries: list[LibraryEntry], view_kind) -> list[LibraryEntry]:
    if view_kind == ViewKind.GAMES:
        return [e for e in entries if include_in_games_view(e)]
    if view_kind == ViewKind.UTILITIES:
        return [e for e in entries if classify(e).kind == "utility"]
    return list(entries)


def filter_platform(entries: list[LibraryEntry], platform_filter: str | None) -> list[LibraryEntry]:
    if not platform_filter:
        return list(entries)
    return [e for e in entries if e.platform and platform_filter in str(e.platform).lower()]


def filter_time(entries: list[LibraryEntry], time_filter: str) -> list[LibraryEntry]:
    """HLTB buckets: short (0,5], medium (5,20], long (20,inf), hltb (0,inf)."""
    if time_filter == "all":
        return list(entries)
    bounds = TIME_FILTER_BOUNDS.get(time_filter)
    if bounds is None:
        logger.warning(f"Unknown time filter '{time_filter}', ignoring")
        return list(entries)

    lower, upper = bounds

    def matches(entry):
        hours = entry.hltb_main_hours or 0
        if hours <= lower:
            return False
        return upper is None or hours <= upper

    return [e for e in entries if matches(e)]


def filter_recency(
    entries: list[LibraryEntry],
    recency_filter: str,
    now: datetime | None = None,
    windows: dict[str, int] | None = None,
) -> list[LibraryEntry]:
    if recency_filter == "all_time":
        return list(entries)
    days = (windows or RECENCY_WINDOWS_DAYS).get(recency_filter)
    if days is None:
        logger.warning(f"Unknown recency filter '{recency_filter}', ignoring")
        return list(entries)

    cutoff = to_epoch(now or datetime.now(timezone.utc)) - timedelta(days=days).total_seconds()
    return [
        e for e in entries
        if e.last_played_at is not None and to_epoch(e.last_played_at) >= cutoff
    ]


def filter_text(entries: list[LibraryEntry], text: str) -> list[LibraryEntry]:
    """Substring match on title, status tag or platform. No text means no filtering."""
    if not text:
        return list(entries)

    def matches(entry):
        for field in (entry.title, entry.status_tag, entry.platform):
            if field and text in str(field).lower():
                return True
        return False

    return [e for e in entries if matches(e)]


def filter_install(entries: list[LibraryEntry], install_filter: str) -> list[LibraryEntry]:
    if install_filter not in INSTALL_FILTERS:
        logger.warning(f"Unknown install filter '{install_filter}', ignoring")
        return list(entries)
    if install_filter == "installed":
        return [e for e in entries if e.is_installed]
    if install_filter == "not_installed":
        return [e for e in entries if not e.is_installed]
    return list(entries)


def filter_genre(entries: list[LibraryEntry], genre_filter: str) -> list[LibraryEntry]:
    needle = (genre_filter or "").strip().lower()
    if not needle:
        return list(entries)
    return [e for e in entries if any(needle in g.lower() for g in e.genres or [])]


def filter_tags(entries: list[LibraryEntry], tag_entry_ids) -> list[LibraryEntry]:
    if tag_entry_ids is None:
        return list(entries)
    wanted = set(tag_entry_ids)
    return [e for e in entries if e.id in wanted]


def filter_utility_category(entries: list[LibraryEntry], category: str) -> list[LibraryEntry]:
    if category == "all":
        return list(entries)
    if category not in UTILITY_CATEGORIES:
        logger.warning(f"Unknown utility category '{category}', ignoring")
        return list(entries)
    return [e for e in entries if classify(e).utility_kind == category]


# =============================================================================
# Pipeline
# =============================================================================

def apply(
    entries: Iterable[LibraryEntry],
    query: FilterQuery,
    dims: FilterDimensions | None = None,
    view_kind=ViewKind.GAMES,
    now: datetime | None = None,
    recency_windows: dict[str, int] | None = None,
) -> list[LibraryEntry]:
    """
    Run every stage over ``entries`` and return the surviving entries in
    their original relative order. The input is not modified.
    """
    dims = dims or FilterDimensions()
    result = list(entries)
    total = len(result)

    result = filter_status(result, query.status_filter)
    result = filter_category(result, view_kind)
    result = filter_platform(result, query.platform_filter)
    result = filter_time(result, dims.time_filter)
    result = filter_recency(result, dims.recency_filter, now=now, windows=recency_windows)
    result = filter_text(result, query.text)
    result = filter_install(result, dims.install_filter)
    result = filter_genre(result, dims.genre_filter)
    result = filter_tags(result, dims.tag_entry_ids)
    if view_kind == ViewKind.UTILITIES:
        result = filter_utility_category(result, dims.utility_category)

    logger.debug(f"Filter pipeline ({view_kind}): {total} -> {len(result)} entries")
    return result


def select_scope(
    entries: Iterable[LibraryEntry],
    scope: str,
    tag_entry_ids=None,
) -> list[LibraryEntry]:
    """
    Restrict a snapshot to a library scope.

    Scopes: all, favorites, installed, utilities, tag:<id> (needs
    ``tag_entry_ids``) or a platform name. The steam scope also claims
    entries whose id carries the ``steam_`` prefix.
    """
    entries = list(entries)
    scope = (scope or "all").strip()
    lowered = scope.lower()

    if lowered == "all":
        return entries
    if lowered == "favorites":
        return [e for e in entries if e.is_favorite]
    if lowered == "installed":
        return [e for e in entries if e.is_installed]
    if lowered == "utilities":
        return [e for e in entries if classify(e).kind == "utility"]
    if lowered.startswith("tag:"):
        if tag_entry_ids is None:
            logger.warning(f"Tag scope '{scope}' requested without tag membership, returning empty scope")
            return []
        return filter_tags(entries, tag_entry_ids)
    if lowered == "steam":
        return [
            e for e in entries
            if (e.id or "").startswith("steam_") or (e.platform or "").lower() == "steam"
        ]
    return [e for e in entries if (e.platform or "").lower() == lowered]
