"""
Manual ordering layered over computed views (utilities panel).

The persisted overlay is a JSON array of entry ids. It is seeded once from
the first non-empty display order and afterwards changes only when the user
reorders. New entries are never appended automatically; until the user saves
an order that contains them they sort after every ordered entry.
"""

import threading
from typing import Iterable

import msgspec

from .config import PreferenceKey
from .logger import setup_logger
from .models import LibraryEntry, decode_json, encode_json

logger = setup_logger()


def load_order(raw) -> list[str]:
    """Parse a persisted order list. Anything but a JSON array of strings yields an empty overlay."""
    if raw is None or raw == "" or raw == b"":
        return []

    if isinstance(raw, (str, bytes, bytearray)):
        try:
            return decode_json(raw, type=list[str])
        except (msgspec.DecodeError, msgspec.ValidationError) as e:
            logger.warning(f"Ignoring malformed order list: {e}")
            return []

    if isinstance(raw, (list, tuple)) and all(isinstance(item, str) for item in raw):
        return list(raw)

    logger.warning(f"Ignoring malformed order list of type {type(raw).__name__}")
    return []


def apply_overlay(entries: Iterable[LibraryEntry], order_list: list[str]) -> list[LibraryEntry]:
    """
    Order entries by their position in ``order_list``.

    Entries missing from the list sort after all listed ones and keep their
    incoming relative order.
    """
    positions: dict[str, int] = {}
    for index, entry_id in enumerate(order_list):
        positions.setdefault(entry_id, index)

    unordered = len(order_list)
    return sorted(entries, key=lambda e: positions.get(e.id, unordered))


def is_editable(category: str | None, search: str | None) -> bool:
    """Reordering a partial subset would save a truncated order, so only the unfiltered view may edit."""
    return (category or "all") == "all" and not (search or "").strip()


class OrderOverlay:
    """
    Persisted manual order for one view.

    Read-modify-write cycles hold an instance lock; a single process is the
    only writer of the underlying store key.
    """

    def __init__(self, store, key: str = PreferenceKey.UTILITY_ORDER):
        self._store = store
        self._key = str(key)
        self._lock = threading.RLock()
        self._order: list[str] | None = None

    @property
    def order(self) -> list[str]:
        with self._lock:
            if self._order is None:
                self._order = load_order(self._store.get(self._key))
            return list(self._order)

    def reload(self):
        with self._lock:
            self._order = None

    def apply(self, entries: Iterable[LibraryEntry]) -> list[LibraryEntry]:
        return apply_overlay(entries, self.order)

    def seed(self, display_entries: Iterable[LibraryEntry]) -> bool:
        """Populate the overlay from the current display order if none exists yet."""
        with self._lock:
            if self.order:
                return False
            ids = [e.id for e in display_entries if e.id]
            if not ids:
                return False
            self._write(ids)
            logger.info(f"Seeded {self._key} with {len(ids)} entries")
            return True

    def save(self, display_entries: Iterable[LibraryEntry], category: str = "all", search: str = "") -> bool:
        """Persist the full id order of ``display_entries``."""
        if not is_editable(category, search):
            logger.warning(
                f"Refusing to save {self._key} while filtered (category={category!r}, search={search!r})"
            )
            return False
        with self._lock:
            self._write([e.id for e in display_entries if e.id])
        return True

    def move(
        self,
        display_entries: Iterable[LibraryEntry],
        from_index: int,
        to_index: int,
        category: str = "all",
        search: str = "",
    ) -> list[LibraryEntry]:
        """
        Move one entry within the displayed order and save the result.

        Returns the reordered list, or the input order unchanged when the view
        is not editable or an index is out of range.
        """
        entries = list(display_entries)
        if not is_editable(category, search):
            logger.warning(f"Ignoring reorder of {self._key} while filtered")
            return entries
        if not (0 <= from_index < len(entries)) or not (0 <= to_index < len(entries)):
            logger.warning(f"Ignoring reorder with out-of-range indices {from_index} -> {to_index}")
            return entries

        moved = entries.pop(from_index)
        entries.insert(to_index, moved)
        self.save(entries, category, search)
        return entries

    def _write(self, ids: list[str]):
        self._store.set(self._key, encode_json(ids).decode("utf-8"))
        self._order = list(ids)
        logger.debug(f"Saved {self._key} ({len(ids)} ids)")
