"""
Tests for LibraryViewEngine, the facade used by the presentation layer.
"""

from unittest.mock import MagicMock

import pytest

from playhub.engine import LibraryViewEngine
from playhub.filter_pipeline import ViewKind
from playhub.models import FilterDimensions
from playhub.store import MemoryStore

from conftest import NOW, days_ago, make_entry


def ids(entries):
    return [e.id for e in entries]


@pytest.fixture
def engine(store):
    return LibraryViewEngine(store=store)


class TestPreferences:
    def test_defaults(self, engine):
        assert engine.time_filter == "all"
        assert engine.recency_filter == "all_time"
        assert engine.sort_key == "name"
        assert engine.utility_view_mode == "grid"
        assert engine.utility_category == "all"

    def test_values_persist_in_store(self, engine, store):
        engine.time_filter = "short"
        engine.utility_view_mode = "list"
        engine.utility_category = "system"
        engine.sort_key = "title"
        engine.recency_filter = "past_year"
        assert store.get("timeFilter") == "short"
        assert store.get("utilityViewMode") == "list"
        assert store.get("utilityCategory") == "system"
        assert store.get("sortKey") == "name"
        assert store.get("recencyFilter") == "past_year"

    def test_invalid_assignment_falls_back(self, engine, store):
        engine.time_filter = "epic"
        assert store.get("timeFilter") == "all"

    def test_invalid_stored_value_falls_back(self):
        engine = LibraryViewEngine(store=MemoryStore({"sortKey": "rating", "utilityCategory": "games"}))
        assert engine.sort_key == "name"
        assert engine.utility_category == "all"


class TestFilterAndSort:
    def test_games_view_sorted_by_name(self, engine, mixed_library):
        result = engine.filter_and_sort(mixed_library)
        assert ids(result) == ["epic_1", "steam_1", "steam_3", "gog_1"]

    def test_search_and_sort_key(self, engine, mixed_library):
        result = engine.filter_and_sort(mixed_library, search="status:completed", sort_key="playtime")
        assert ids(result) == ["epic_1", "steam_3"]

    def test_uses_persisted_preferences(self, engine, mixed_library):
        engine.time_filter = "long"
        assert ids(engine.filter_and_sort(mixed_library)) == ["gog_1"]
        engine.recency_filter = "past_2_weeks"
        assert engine.filter_and_sort(mixed_library, now=NOW) == []

    def test_explicit_dims_override_preferences(self, engine, mixed_library):
        engine.time_filter = "long"
        result = engine.filter_and_sort(mixed_library, dims=FilterDimensions(), view=ViewKind.PLATFORM,
                                        sort_key="last_played", now=NOW)
        assert ids(result) == ["steam_1", "steam_2", "epic_1", "steam_3", "gog_1", "manual_1"]

    @pytest.mark.parametrize("search,view,sort_key", [
        ("", ViewKind.GAMES, "name"),
        ("platform:steam", ViewKind.PLATFORM, "playtime"),
        ("status:play", ViewKind.COUCH, "last_played"),
        ("the", ViewKind.GAMES, "playtime"),
    ])
    def test_idempotent(self, engine, mixed_library, search, view, sort_key):
        once = engine.filter_and_sort(mixed_library, search=search, view=view, sort_key=sort_key, now=NOW)
        twice = engine.filter_and_sort(once, search=search, view=view, sort_key=sort_key, now=NOW)
        assert once == twice

    def test_unknown_sort_key_keeps_filter_order(self, engine, mixed_library):
        result = engine.filter_and_sort(mixed_library, sort_key="rating")
        assert ids(result) == ["steam_1", "gog_1", "epic_1", "steam_3"]


class TestUtilitiesView:
    @pytest.fixture
    def utilities(self):
        return [
            make_entry("u1", "Wallpaper Engine", app_type="utility"),
            make_entry("u2", "CPU-Z", app_type="utility"),
            make_entry("u3", "Rainmeter"),
            make_entry("g1", "Hades", app_type="game"),
        ]

    def test_seeds_from_name_order(self, engine, store, utilities):
        result = engine.utilities_view(utilities)
        assert ids(result) == ["u2", "u3", "u1"]
        assert store.get("utilityOrder") == '["u2","u3","u1"]'

    def test_seed_waits_for_non_empty_collection(self, engine, store, utilities):
        assert engine.utilities_view([]) == []
        assert store.get("utilityOrder") is None
        engine.utilities_view(utilities)
        assert store.get("utilityOrder") is not None

    def test_new_utilities_sort_last(self, engine, utilities):
        engine.utilities_view(utilities)
        arrived = utilities + [make_entry("u0", "Afterburner Theme", app_type="utility")]
        assert ids(engine.utilities_view(arrived)) == ["u2", "u3", "u1", "u0"]

    def test_category_filter_keeps_overlay(self, engine, utilities):
        engine.utilities_view(utilities)
        assert ids(engine.utilities_view(utilities, category="system")) == ["u2"]

    def test_persisted_category_is_default(self, engine, utilities):
        engine.utility_category = "wallpaper"
        assert ids(engine.utilities_view(utilities)) == ["u1"]

    def test_reorder_flow(self, engine, store, utilities):
        shown = engine.utilities_view(utilities)
        assert engine.can_reorder("all", "")
        moved = engine.move_utility(shown, 2, 0)
        assert ids(moved) == ["u1", "u2", "u3"]
        assert ids(engine.utilities_view(utilities)) == ["u1", "u2", "u3"]

    def test_reorder_blocked_while_filtered(self, engine, utilities):
        shown = engine.utilities_view(utilities, search="cpu")
        assert not engine.can_reorder("all", "cpu")
        assert not engine.save_utility_order(shown, "all", "cpu")
        assert ids(engine.utilities_view(utilities)) == ["u2", "u3", "u1"]

    def test_reorder_blocked_by_persisted_category(self, engine, store, utilities):
        engine.utilities_view(utilities)
        engine.utility_category = "system"
        shown = engine.utilities_view(utilities)
        assert ids(shown) == ["u2"]
        assert not engine.can_reorder()
        assert not engine.save_utility_order(shown)
        assert ids(engine.move_utility(shown, 0, 0)) == ["u2"]
        assert store.get("utilityOrder") == '["u2","u3","u1"]'

        engine.utility_category = "all"
        assert engine.can_reorder()
        assert ids(engine.utilities_view(utilities)) == ["u2", "u3", "u1"]

    def test_save_includes_new_entries(self, engine, utilities):
        engine.utilities_view(utilities)
        arrived = utilities + [make_entry("u0", "Lively", app_type="utility")]
        shown = engine.utilities_view(arrived)
        reordered = [shown[-1]] + shown[:-1]
        assert engine.save_utility_order(reordered)
        assert ids(engine.utilities_view(arrived)) == ["u0", "u2", "u3", "u1"]


class TestHomeStats:
    def test_all_scope(self, engine, mixed_library):
        stats = engine.home_stats(mixed_library)
        assert stats.total == 6
        assert stats.installed == 3
        assert stats.backlog_count == 1
        assert stats.playing_count == 1
        assert stats.completed_count == 2
        assert stats.total_playtime_hours == 107
        assert ids(stats.recently_played) == ["steam_1", "steam_2", "epic_1"]
        assert ids(stats.continue_playing) == ["steam_1"]

    def test_platform_scope(self, engine, mixed_library):
        stats = engine.home_stats(mixed_library, platform="steam")
        assert stats.total == 3
        assert stats.completed_count == 1

    def test_stats_ignore_active_filters(self, engine, mixed_library):
        engine.time_filter = "short"
        engine.recency_filter = "past_2_weeks"
        assert engine.home_stats(mixed_library).total == 6

    def test_dashboard_limit_from_config(self, mixed_library):
        config = MagicMock(dashboard_limit=1, page_size=2, recent_window_days=14, year_window_days=365)
        engine = LibraryViewEngine(store=MemoryStore(), config=config)
        assert ids(engine.home_stats(mixed_library).recently_played) == ["steam_1"]


class TestMisc:
    def test_category_of(self, engine):
        assert engine.category_of(make_entry("1", "Lively")).utility_kind == "wallpaper"

    def test_page(self, engine):
        entries = [make_entry(str(i)) for i in range(70)]
        visible, has_more = engine.page(entries)
        assert len(visible) == 60
        assert has_more
        visible, has_more = engine.page(entries, 120)
        assert len(visible) == 70
        assert not has_more
