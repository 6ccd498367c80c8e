"""
Entry classification for PlayHub library views.

Two layers:
- classify(): the deterministic category used by every view (badges,
  Games/Utilities separation). Pure function of (app_type, title, genres).
- suggest_app_type(): weighted rule scoring that sync collaborators use to
  fill in ``app_type`` for freshly imported entries.
"""

from functools import lru_cache
from pathlib import Path

import msgspec

from .constants import UTILITY_KEYWORDS
from .logger import setup_logger
from .models import (
    Category,
    ClassificationResult,
    ClassificationRules,
    LibraryEntry,
    decode_json,
    encode_json,
    format_json,
)

logger = setup_logger()

GAME = Category(kind="game")


@lru_cache(maxsize=4096)
def _keyword_kind(text: str) -> str:
    for kind, keywords in UTILITY_KEYWORDS.items():
        if any(keyword in text for keyword in keywords):
            return kind
    return "other"


def utility_kind(entry: LibraryEntry) -> str:
    """Keyword heuristic over lowercase ``title + ' ' + genres``."""
    text = f"{entry.title or ''} {' '.join(entry.genres or [])}".lower()
    return _keyword_kind(text)


def classify(entry: LibraryEntry) -> Category:
    """
    Resolve the display category of an entry.

    An explicit app type wins. Without one, a utility keyword hit makes the
    entry a utility of that kind and anything else is unknown. Titles that
    merely contain a utility-like word (e.g. "System Shock") land in the
    utility bucket when the app type is unset.
    """
    if entry.app_type == "utility":
        return Category(kind="utility", utility_kind=utility_kind(entry))
    if entry.app_type == "game":
        return GAME

    kind = utility_kind(entry)
    if kind == "other":
        return Category(kind="unknown", utility_kind="other")
    return Category(kind="utility", utility_kind=kind)


def include_in_games_view(entry: LibraryEntry) -> bool:
    """Explicit games, plus unset entries whose heuristic found no utility keyword."""
    if entry.app_type == "game":
        return True
    return not entry.app_type and utility_kind(entry) == "other"


# =============================================================================
# Rule-based app type suggestion
# =============================================================================

def suggest_app_type(entry: LibraryEntry, rules: ClassificationRules | None = None) -> ClassificationResult:
    """
    Score an entry against the classification rules.

    Returns the suggested app type with its confidence (0-1) and a
    comma-separated list of the signals that fired.
    """
    if entry.user_override_app_type in ("game", "utility"):
        return ClassificationResult(
            app_type=entry.user_override_app_type,
            confidence=1.0,
            reason=f"Manual override to {entry.user_override_app_type}",
        )

    rules = rules or ClassificationRules()
    title = (entry.title or "").lower()
    steam_type = (entry.steam_type or "").lower()
    exe = (entry.executable_path or "").lower()
    install_path = (entry.install_path or "").lower().replace("\\", "/")

    utility_score = 0.0
    game_score = 0.0
    reasons = []

    if steam_type and steam_type in rules.steam_type_utility:
        utility_score += 0.7
        reasons.append(f"steam_type:{steam_type}")

    for genre in (g.lower() for g in entry.genres or []):
        if any(k in genre for k in rules.keyword_utility):
            utility_score += 0.4
            reasons.append(f"genre:{genre}")

    if any(k in title for k in rules.keyword_utility):
        utility_score += 0.6
        reasons.append("title_keyword")
    if any(k in title for k in rules.keyword_game):
        game_score += 0.2
        reasons.append("title_game_keyword")

    if exe and any(p in exe for p in rules.exe_patterns_utility):
        utility_score += 0.6
        reasons.append("exe_pattern")

    if entry.hltb_main_hours or entry.hltb_extra_hours or entry.hltb_completionist_hours:
        game_score += 0.4
        reasons.append("hltb_present")

    if install_path and "steamapps/common" in install_path:
        game_score += 0.1

    utility_confidence = min(1.0, utility_score)
    game_confidence = min(1.0, game_score)
    decided_utility = (
        utility_confidence >= rules.thresholds.utility
        and utility_confidence >= game_confidence
    )

    return ClassificationResult(
        app_type="utility" if decided_utility else "game",
        confidence=utility_confidence if decided_utility else game_confidence,
        reason=",".join(reasons),
    )


def load_rules(path) -> ClassificationRules:
    """Load rules from a JSON file merged over the defaults. Bad files fall back to defaults."""
    rules_path = Path(path)
    if not rules_path.exists():
        return ClassificationRules()

    try:
        data = decode_json(rules_path.read_bytes(), type=dict)
        merged = msgspec.to_builtins(ClassificationRules())
        merged.update(data)
        rules = msgspec.convert(merged, ClassificationRules)
        logger.info(f"Loaded classification rules from {rules_path}")
        return rules
    except (OSError, msgspec.DecodeError, msgspec.ValidationError) as e:
        logger.error(f"Failed to load classification rules: {e}")
        return ClassificationRules()


def save_rules(rules: ClassificationRules, path) -> bool:
    rules_path = Path(path)
    try:
        rules_path.parent.mkdir(parents=True, exist_ok=True)
        rules_path.write_bytes(format_json(encode_json(rules), indent=2))
        logger.info("Classification rules saved")
        return True
    except OSError as e:
        logger.error(f"Failed to save classification rules: {e}")
        return False
