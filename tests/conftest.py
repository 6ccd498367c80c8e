from datetime import datetime, timedelta, timezone

import pytest

from playhub.models import LibraryEntry
from playhub.store import MemoryStore


NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def make_entry(entry_id, title=None, **kwargs):
    """Build a LibraryEntry with a default title derived from the id."""
    return LibraryEntry(id=entry_id, title=title if title is not None else f"Game {entry_id}", **kwargs)


def days_ago(days):
    return NOW - timedelta(days=days)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def mixed_library():
    """A small snapshot spanning games, utilities and unset entries."""
    return [
        make_entry("steam_1", "Halo Infinite", platform="steam", app_type="game",
                   status_tag="Playing", is_installed=True, playtime_seconds=7200,
                   last_played_at=days_ago(1), hltb_main_hours=11.5, genres=["Shooter"]),
        make_entry("steam_2", "Wallpaper Engine", platform="steam", app_type="utility",
                   is_installed=True, playtime_seconds=360000, last_played_at=days_ago(3)),
        make_entry("gog_1", "The Witcher 3", platform="gog", status_tag="Backlog",
                   hltb_main_hours=51.5, genres=["RPG"]),
        make_entry("epic_1", "Celeste", platform="epic", status_tag="Completed",
                   is_installed=True, playtime_seconds=18000, last_played_at=days_ago(40),
                   hltb_main_hours=8, genres=["Platformer"]),
        make_entry("manual_1", "Rainmeter", platform="manual", is_favorite=True),
        make_entry("steam_3", "Portal", platform="steam", app_type="game",
                   status_tag="Completed", hltb_main_hours=3, last_played_at=days_ago(400)),
    ]
