"""
msgspec-based data models for the library view engine.

This module provides:
- The catalog record (LibraryEntry) and the derived view structures
- Parsed search directives (FilterQuery) and filter dimensions
- Dashboard aggregates (HomeStats)
- Classification rule/result structures
- Convenience functions for JSON encoding/decoding
"""

from datetime import datetime, timezone
from typing import Optional, List

import msgspec

from .constants import DEFAULT_CLASSIFICATION_RULES


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


# =============================================================================
# Global Encoders/Decoders
# =============================================================================

# datetimes are native to msgspec (RFC 3339 strings both ways)
json_encoder = msgspec.json.Encoder()
json_decoder = msgspec.json.Decoder()


def encode_json(obj) -> bytes:
    """
    Encode object to JSON bytes using msgspec.

    Args:
        obj: Any msgspec.Struct or serializable object

    Returns:
        JSON as bytes
    """
    return json_encoder.encode(obj)


def decode_json(data, type=None):
    """
    Decode JSON bytes to object using msgspec.

    Args:
        data: JSON as bytes or str
        type: Optional type for validation

    Returns:
        Decoded object (validated if type provided)

    Raises:
        msgspec.DecodeError: malformed JSON
        msgspec.ValidationError: JSON does not match ``type``
    """
    if type:
        return msgspec.json.decode(data, type=type)
    return json_decoder.decode(data)


def format_json(data: bytes, indent: int = 2) -> bytes:
    """Format JSON with indentation for pretty-printing."""
    return msgspec.json.format(data, indent=indent)


def to_epoch(value: Optional[datetime]) -> float:
    """Seconds since the epoch; missing timestamps sort as the epoch itself. Naive values are UTC."""
    if value is None:
        return 0.0
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.timestamp()


# =============================================================================
# Catalog Structures
# =============================================================================

class LibraryEntry(msgspec.Struct):
    """
    A single catalog record for a game or utility.

    Produced by the sync collaborators; the view engine never mutates it.
    ``id`` and ``title`` are optional so that partial snapshots decode;
    such entries are dropped before classification and sorting.
    """
    id: Optional[str] = None
    title: Optional[str] = None
    platform: Optional[str] = None
    app_type: Optional[str] = None  # 'game' | 'utility' | None
    status_tag: Optional[str] = None  # Backlog | Playing | Completed | Abandoned
    is_installed: bool = False
    is_favorite: bool = False
    playtime_seconds: Optional[int] = 0
    last_played_at: Optional[datetime] = None
    hltb_main_hours: Optional[float] = None
    genres: List[str] = msgspec.field(default_factory=list)

    # Signals for rule-based app type suggestion
    steam_type: Optional[str] = None
    executable_path: Optional[str] = None
    install_path: Optional[str] = None
    hltb_extra_hours: Optional[float] = None
    hltb_completionist_hours: Optional[float] = None
    user_override_app_type: Optional[str] = None


class Tag(msgspec.Struct):
    """User-defined tag usable as an extra filter dimension."""
    id: int
    name: str


class Category(msgspec.Struct, frozen=True):
    """
    Resolved category of an entry, used for badges and view separation.

    kind: 'game' | 'utility' | 'unknown'
    utility_kind: 'wallpaper' | 'system' | 'customization' | 'other' | None
    """
    kind: str
    utility_kind: Optional[str] = None

    @property
    def label(self) -> str:
        if self.kind == "utility":
            return f"Utility ({(self.utility_kind or 'other').capitalize()})"
        return self.kind.capitalize()


# =============================================================================
# Query Structures
# =============================================================================

class FilterQuery(msgspec.Struct):
    """
    Parsed free-text search.

    Directives (``status:``/``platform:``) are lowercased; the remaining
    tokens are lowercased and joined with single spaces for matching.
    """
    status_filter: Optional[str] = None
    platform_filter: Optional[str] = None
    text_tokens: List[str] = msgspec.field(default_factory=list)

    @property
    def text(self) -> str:
        return " ".join(self.text_tokens)

    def is_empty(self) -> bool:
        return not self.status_filter and not self.platform_filter and not self.text_tokens


class FilterDimensions(msgspec.Struct):
    """Filter selections that live outside the search box."""
    time_filter: str = "all"
    recency_filter: str = "all_time"
    install_filter: str = "all"
    genre_filter: str = ""
    tag_entry_ids: Optional[List[str]] = None
    utility_category: str = "all"


# =============================================================================
# Dashboard Structures
# =============================================================================

class HomeStats(msgspec.Struct):
    """
    Dashboard counters and highlighted subsets.

    Always computed from the full scoped collection, never a filtered view.
    """
    total: int = 0
    installed: int = 0
    backlog_count: int = 0
    playing_count: int = 0
    completed_count: int = 0
    total_playtime_hours: int = 0
    recently_played: List[LibraryEntry] = msgspec.field(default_factory=list)
    continue_playing: List[LibraryEntry] = msgspec.field(default_factory=list)


# =============================================================================
# Classification Rule Structures
# =============================================================================

class ClassificationThresholds(msgspec.Struct):
    utility: float = DEFAULT_CLASSIFICATION_RULES["thresholds"]["utility"]
    game: float = DEFAULT_CLASSIFICATION_RULES["thresholds"]["game"]


class ClassificationRules(msgspec.Struct):
    """
    Scoring rules for suggesting an app type to the sync collaborators.

    Loaded from a JSON rules file merged over the defaults.
    """
    keyword_game: List[str] = msgspec.field(
        default_factory=lambda: list(DEFAULT_CLASSIFICATION_RULES["keyword_game"])
    )
    keyword_utility: List[str] = msgspec.field(
        default_factory=lambda: list(DEFAULT_CLASSIFICATION_RULES["keyword_utility"])
    )
    steam_type_utility: List[str] = msgspec.field(
        default_factory=lambda: list(DEFAULT_CLASSIFICATION_RULES["steam_type_utility"])
    )
    exe_patterns_utility: List[str] = msgspec.field(
        default_factory=lambda: list(DEFAULT_CLASSIFICATION_RULES["exe_patterns_utility"])
    )
    thresholds: ClassificationThresholds = msgspec.field(default_factory=ClassificationThresholds)


class ClassificationResult(msgspec.Struct):
    app_type: str
    confidence: float
    reason: str


def decode_entries(data) -> List[LibraryEntry]:
    """Decode a JSON array of catalog records."""
    return decode_json(data, type=List[LibraryEntry])
