"""
LibraryViewEngine - the single entry point the presentation layer talks to.

Every call recomputes its view from the snapshot it is given; nothing is
cached between snapshots. The engine owns only the persisted view state:
the utility order overlay and a few scalar preferences.
"""

from datetime import datetime
from typing import Iterable

from . import filter_pipeline
from .classifier import classify
from .config import ConfigManager, PreferenceKey
from .constants import (
    DASHBOARD_LIMIT,
    PAGE_SIZE,
    RECENCY_FILTERS,
    RECENCY_WINDOWS_DAYS,
    TIME_FILTERS,
    UTILITY_CATEGORIES,
    UTILITY_VIEW_MODES,
)
from .filter_pipeline import ViewKind, select_scope, valid_entries
from .logger import setup_logger
from .models import Category, FilterDimensions, HomeStats, LibraryEntry
from .order_overlay import OrderOverlay, is_editable
from .query_parser import parse
from .sorter import SortKey, resolve_sort_key, sort_entries
from .stats import compute_home_stats
from .store import PersistenceStore, get_default_store

logger = setup_logger()

SORT_KEYS = tuple(k.value for k in SortKey)


class LibraryViewEngine:
    """
    Filter, sort, order and summarize library snapshots for each view.

    Args:
        store: PersistenceStore for view state (defaults to the SQLite store)
        config: Optional ConfigManager supplying limits and recency windows
    """

    def __init__(self, store: PersistenceStore | None = None, config: ConfigManager | None = None):
        self.store = store if store is not None else get_default_store()
        self.config = config
        self.utility_overlay = OrderOverlay(self.store, PreferenceKey.UTILITY_ORDER)

    # =========================================================================
    # Configuration
    # =========================================================================

    @property
    def dashboard_limit(self) -> int:
        return self.config.dashboard_limit if self.config else DASHBOARD_LIMIT

    @property
    def page_size(self) -> int:
        return self.config.page_size if self.config else PAGE_SIZE

    @property
    def recency_windows(self) -> dict[str, int]:
        if not self.config:
            return dict(RECENCY_WINDOWS_DAYS)
        return {
            "past_2_weeks": self.config.recent_window_days,
            "past_year": self.config.year_window_days,
        }

    # =========================================================================
    # Preferences
    # =========================================================================

    def _get_choice(self, key: PreferenceKey, allowed: tuple, default: str) -> str:
        value = self.store.get(key)
        if value is None:
            return default
        if value not in allowed:
            logger.warning(f"Stored {key} value {value!r} is not recognised, using {default!r}")
            return default
        return value

    def _set_choice(self, key: PreferenceKey, value, allowed: tuple, default: str):
        value = str(value)
        if value not in allowed:
            logger.warning(f"Ignoring invalid {key} value {value!r}, storing {default!r}")
            value = default
        self.store.set(key, value)

    @property
    def time_filter(self) -> str:
        return self._get_choice(PreferenceKey.TIME_FILTER, TIME_FILTERS, "all")

    @time_filter.setter
    def time_filter(self, value):
        self._set_choice(PreferenceKey.TIME_FILTER, value, TIME_FILTERS, "all")

    @property
    def recency_filter(self) -> str:
        return self._get_choice(PreferenceKey.RECENCY_FILTER, RECENCY_FILTERS, "all_time")

    @recency_filter.setter
    def recency_filter(self, value):
        self._set_choice(PreferenceKey.RECENCY_FILTER, value, RECENCY_FILTERS, "all_time")

    @property
    def sort_key(self) -> str:
        return self._get_choice(PreferenceKey.SORT_KEY, SORT_KEYS, SortKey.NAME.value)

    @sort_key.setter
    def sort_key(self, value):
        resolved = resolve_sort_key(value)
        self._set_choice(
            PreferenceKey.SORT_KEY,
            resolved.value if resolved else value,
            SORT_KEYS,
            SortKey.NAME.value,
        )

    @property
    def utility_view_mode(self) -> str:
        return self._get_choice(PreferenceKey.UTILITY_VIEW_MODE, UTILITY_VIEW_MODES, "grid")

    @utility_view_mode.setter
    def utility_view_mode(self, value):
        self._set_choice(PreferenceKey.UTILITY_VIEW_MODE, value, UTILITY_VIEW_MODES, "grid")

    @property
    def utility_category(self) -> str:
        return self._get_choice(PreferenceKey.UTILITY_CATEGORY, UTILITY_CATEGORIES, "all")

    @utility_category.setter
    def utility_category(self, value):
        self._set_choice(PreferenceKey.UTILITY_CATEGORY, value, UTILITY_CATEGORIES, "all")

    # =========================================================================
    # Views
    # =========================================================================

    def filter_and_sort(
        self,
        entries: Iterable[LibraryEntry],
        search: str = "",
        view=ViewKind.GAMES,
        sort_key=None,
        dims: FilterDimensions | None = None,
        now: datetime | None = None,
    ) -> list[LibraryEntry]:
        """
        Compute a games/platform/couch view.

        Applying the same arguments to the result returns it unchanged.
        """
        if dims is None:
            dims = FilterDimensions(time_filter=self.time_filter, recency_filter=self.recency_filter)

        filtered = filter_pipeline.apply(
            valid_entries(entries),
            parse(search),
            dims,
            view_kind=view,
            now=now,
            recency_windows=self.recency_windows,
        )
        return sort_entries(filtered, sort_key or self.sort_key)

    def utilities_view(
        self,
        entries: Iterable[LibraryEntry],
        search: str = "",
        category: str | None = None,
        now: datetime | None = None,
    ) -> list[LibraryEntry]:
        """
        Compute the utilities panel: utilities only, optional category and
        search, ordered by the user's manual order.

        The first time any utilities are present and no order is stored, the
        order is seeded from the full (unfiltered) name-sorted panel.
        """
        category = category or self.utility_category
        utilities = filter_pipeline.filter_category(valid_entries(entries), ViewKind.UTILITIES)
        base_order = sort_entries(utilities, SortKey.NAME)

        if base_order:
            self.utility_overlay.seed(base_order)

        filtered = filter_pipeline.apply(
            base_order,
            parse(search),
            FilterDimensions(utility_category=category),
            view_kind=ViewKind.UTILITIES,
            now=now,
            recency_windows=self.recency_windows,
        )
        return self.utility_overlay.apply(filtered)

    def can_reorder(self, category: str | None = None, search: str = "") -> bool:
        """Category defaults to the persisted utility category, as in ``utilities_view``."""
        return is_editable(category or self.utility_category, search)

    def save_utility_order(
        self,
        display_entries: Iterable[LibraryEntry],
        category: str | None = None,
        search: str = "",
    ) -> bool:
        return self.utility_overlay.save(display_entries, category or self.utility_category, search)

    def move_utility(
        self,
        display_entries: Iterable[LibraryEntry],
        from_index: int,
        to_index: int,
        category: str | None = None,
        search: str = "",
    ) -> list[LibraryEntry]:
        return self.utility_overlay.move(
            display_entries, from_index, to_index, category or self.utility_category, search
        )

    def category_of(self, entry: LibraryEntry) -> Category:
        return classify(entry)

    def home_stats(self, entries: Iterable[LibraryEntry], platform: str | None = None) -> HomeStats:
        """Dashboard stats over every entry, or over one platform's entries."""
        scoped = select_scope(entries, platform or "all")
        return compute_home_stats(scoped, limit=self.dashboard_limit)

    def page(self, entries: list[LibraryEntry], visible_count: int | None = None) -> tuple[list[LibraryEntry], bool]:
        """Visible prefix of a view plus whether more entries remain."""
        count = self.page_size if visible_count is None else max(0, visible_count)
        return entries[:count], count < len(entries)
