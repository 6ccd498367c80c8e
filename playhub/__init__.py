from .version import __version__
from .logger import setup_logger
from .models import (
    Category,
    FilterDimensions,
    FilterQuery,
    HomeStats,
    LibraryEntry,
    Tag,
    decode_entries,
)
from .classifier import classify, include_in_games_view, suggest_app_type
from .query_parser import parse
from .filter_pipeline import ViewKind, select_scope
from .sorter import SortKey, sort_entries
from .order_overlay import OrderOverlay, apply_overlay, load_order
from .stats import compute_home_stats
from .store import MemoryStore, PersistenceStore, SQLiteStore
from .engine import LibraryViewEngine

__all__ = [
    "__version__",
    "setup_logger",
    "Category",
    "FilterDimensions",
    "FilterQuery",
    "HomeStats",
    "LibraryEntry",
    "Tag",
    "decode_entries",
    "classify",
    "include_in_games_view",
    "suggest_app_type",
    "parse",
    "ViewKind",
    "select_scope",
    "SortKey",
    "sort_entries",
    "OrderOverlay",
    "apply_overlay",
    "load_order",
    "compute_home_stats",
    "MemoryStore",
    "PersistenceStore",
    "SQLiteStore",
    "LibraryViewEngine",
]
