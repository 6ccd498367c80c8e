"""
Dashboard aggregates.

Stats are computed from the full scoped collection (every entry, or one
platform's entries). They never see the search/time/recency-filtered subset,
so an unrelated search string cannot change the dashboard numbers.
"""

import math
from typing import Iterable

from .constants import DASHBOARD_LIMIT
from .filter_pipeline import valid_entries
from .logger import setup_logger
from .models import HomeStats, LibraryEntry, to_epoch

logger = setup_logger()


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_home_stats(scoped_entries: Iterable[LibraryEntry], limit: int = DASHBOARD_LIMIT) -> HomeStats:
    entries = valid_entries(scoped_entries)
    if not entries:
        return HomeStats()

    total_seconds = sum(e.playtime_seconds or 0 for e in entries)
    playable = [e for e in entries if e.is_installed]

    recently_played = sorted(
        (e for e in playable if e.last_played_at is not None),
        key=lambda e: -to_epoch(e.last_played_at),
    )[:limit]

    continue_playing = sorted(
        (e for e in playable if e.status_tag == "Playing"),
        key=lambda e: -to_epoch(e.last_played_at),
    )[:limit]

    stats = HomeStats(
        total=len(entries),
        installed=len(playable),
        backlog_count=sum(1 for e in entries if e.status_tag == "Backlog"),
        playing_count=sum(1 for e in entries if e.status_tag == "Playing"),
        completed_count=sum(1 for e in entries if e.status_tag == "Completed"),
        total_playtime_hours=_round_half_up(total_seconds / 3600),
        recently_played=recently_played,
        continue_playing=continue_playing,
    )
    logger.debug(
        f"Home stats: total={stats.total} installed={stats.installed} "
        f"playtime={stats.total_playtime_hours}h"
    )
    return stats


def format_playtime(seconds: int | None) -> str:
    """Whole hours, rounded down, e.g. ``'12h'``."""
    return f"{(seconds or 0) // 3600}h"
