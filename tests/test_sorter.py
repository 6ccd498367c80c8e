"""
Tests for deterministic, stable sorting.
"""

import pytest

from playhub.models import LibraryEntry
from playhub.sorter import SortKey, resolve_sort_key, sort_entries, title_sort_key

from conftest import days_ago, make_entry


def ids(entries):
    return [e.id for e in entries]


class TestSortByPlaytime:
    def test_descending_with_missing_as_zero(self):
        entries = [
            make_entry("1", playtime_seconds=100),
            make_entry("2", playtime_seconds=500),
            make_entry("3", playtime_seconds=None),
        ]
        assert ids(sort_entries(entries, "playtime")) == ["2", "1", "3"]

    def test_ties_keep_input_order(self):
        entries = [make_entry(str(i), playtime_seconds=60) for i in range(6)]
        assert ids(sort_entries(entries, SortKey.PLAYTIME)) == ["0", "1", "2", "3", "4", "5"]


class TestSortByName:
    def test_case_insensitive_ascending(self):
        entries = [make_entry("b", "banjo"), make_entry("a", "Abzu"), make_entry("c", "celeste")]
        assert ids(sort_entries(entries, "name")) == ["a", "b", "c"]

    def test_accents_collate_with_base_letter(self):
        entries = [make_entry("z", "Zelda"), make_entry("e", "Ékona"), make_entry("f", "Fez")]
        assert ids(sort_entries(entries, "name")) == ["e", "f", "z"]

    def test_title_alias(self):
        entries = [make_entry("b", "B"), make_entry("a", "A")]
        assert ids(sort_entries(entries, "title")) == ["a", "b"]

    def test_identical_titles_are_stable(self):
        entries = [make_entry("2", "Doom"), make_entry("1", "Doom"), make_entry("3", "doom")]
        assert ids(sort_entries(entries, "name")) == ["2", "1", "3"]

    def test_title_sort_key_groups_case_variants(self):
        assert title_sort_key("apple")[0] == title_sort_key("Apple")[0]


class TestSortByLastPlayed:
    def test_descending_missing_last(self):
        entries = [
            make_entry("never"),
            make_entry("old", last_played_at=days_ago(30)),
            make_entry("new", last_played_at=days_ago(1)),
        ]
        assert ids(sort_entries(entries, "last_played")) == ["new", "old", "never"]

    def test_unplayed_ties_keep_order(self):
        entries = [make_entry("x"), make_entry("y"), make_entry("z")]
        assert ids(sort_entries(entries, "last_played")) == ["x", "y", "z"]


class TestSortGeneral:
    def test_returns_new_list(self):
        entries = [make_entry("b", "B"), make_entry("a", "A")]
        result = sort_entries(entries, "name")
        assert result is not entries
        assert ids(entries) == ["b", "a"]

    def test_unknown_key_keeps_order(self):
        entries = [make_entry("b", "B"), make_entry("a", "A")]
        assert ids(sort_entries(entries, "rating")) == ["b", "a"]
        assert ids(sort_entries(entries, None)) == ["b", "a"]

    def test_invalid_entries_are_excluded(self):
        entries = [make_entry("a", "A"), LibraryEntry(id="no-title"), LibraryEntry(title="no-id")]
        assert ids(sort_entries(entries, "name")) == ["a"]

    def test_sorting_is_idempotent(self):
        entries = [make_entry(str(i), playtime_seconds=(i % 3) * 10) for i in range(9)]
        once = sort_entries(entries, "playtime")
        assert sort_entries(once, "playtime") == once

    @pytest.mark.parametrize("raw,expected", [
        ("NAME", SortKey.NAME),
        (" playtime ", SortKey.PLAYTIME),
        (SortKey.LAST_PLAYED, SortKey.LAST_PLAYED),
        ("title", SortKey.NAME),
        ("bogus", None),
        ("", None),
    ])
    def test_resolve_sort_key(self, raw, expected):
        assert resolve_sort_key(raw) == expected
