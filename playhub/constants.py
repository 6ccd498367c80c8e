# Keyword heuristic for entries without an explicit app type.
# Checked in order; the first group with a hit decides the utility kind.
UTILITY_KEYWORDS = {
    "wallpaper": ("wallpaper", "background", "lively"),
    "system": ("system", "cpu", "gpu", "monitor", "cleaner"),
    "customization": ("customiz", "theme", "skin", "rainmeter", "translucent"),
}

UTILITY_CATEGORIES = ("all", "wallpaper", "system", "customization", "other")

UTILITY_VIEW_MODES = ("grid", "list")

# HLTB buckets in hours: (exclusive lower bound, inclusive upper bound)
TIME_FILTER_BOUNDS = {
    "short": (0, 5),
    "medium": (5, 20),
    "long": (20, None),
    "hltb": (0, None),
}
TIME_FILTERS = ("all",) + tuple(TIME_FILTER_BOUNDS)

RECENCY_WINDOWS_DAYS = {
    "past_2_weeks": 14,
    "past_year": 365,
}
RECENCY_FILTERS = ("all_time",) + tuple(RECENCY_WINDOWS_DAYS)

INSTALL_FILTERS = ("all", "installed", "not_installed")

DASHBOARD_LIMIT = 6
PAGE_SIZE = 60

DEFAULT_CLASSIFICATION_RULES = {
    "keyword_game": ["edition", "remastered", "dlc", "season", "chapter", "episode", "definitive"],
    "keyword_utility": [
        "utility",
        "utilities",
        "software",
        "tool",
        "overlay",
        "benchmark",
        "monitor",
        "optimizer",
        "rainmeter",
        "wallpaper",
        "background",
        "translucent",
        "theme",
        "skin",
        "afterburner",
        "soundpad",
        "lively",
    ],
    "steam_type_utility": ["software", "tool", "application", "video", "demo"],
    "exe_patterns_utility": [
        "rainmeter.exe",
        "wallpaper64.exe",
        "wallpaper32.exe",
        "wallpaperengine.exe",
        "lively.exe",
        "msi afterburner.exe",
        "msiafterburner.exe",
        "soundpad.exe",
        "processhacker.exe",
        "translucenttb.exe",
        "cpu-z.exe",
        "gpu-z.exe",
        "ccleaner.exe",
    ],
    "thresholds": {"utility": 0.6, "game": 0.4},
}
