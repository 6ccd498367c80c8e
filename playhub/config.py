import os
import threading
import configparser
from enum import StrEnum
from pathlib import Path

import appdirs

from .logger import setup_logger

logger = setup_logger()

APP_NAME = "PlayHub"
APP_AUTHOR = "PlayHub"

DEFAULT_LIBRARY_SETTINGS = {
    "dashboard_limit": "6",
    "page_size": "60",
    "recent_window_days": "14",
    "year_window_days": "365",
}


def get_config_path():
    """Location of playhub.ini in the per-user config directory."""
    config_dir = appdirs.user_config_dir(APP_NAME, APP_AUTHOR)
    return os.path.join(config_dir, "playhub.ini")


class PreferenceKey(StrEnum):
    UTILITY_ORDER = 'utilityOrder'
    TIME_FILTER = 'timeFilter'
    UTILITY_VIEW_MODE = 'utilityViewMode'
    UTILITY_CATEGORY = 'utilityCategory'
    SORT_KEY = 'sortKey'
    RECENCY_FILTER = 'recencyFilter'


class ConfigManager(configparser.ConfigParser):
    _instance = None
    _instance_lock = threading.Lock()

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            with cls._instance_lock:
                if cls._instance is None:
                    cls._instance = super(ConfigManager, cls).__new__(cls)
        return cls._instance

    def __init__(self):
        if hasattr(self, 'initialized'):
            return
        with self._instance_lock:
            if hasattr(self, 'initialized'):
                return
            super().__init__()
            self.logger = setup_logger()
            self._write_lock = threading.Lock()
            self.config_path = get_config_path()
            self.read_dict({"Library": DEFAULT_LIBRARY_SETTINGS})
            self.read(self.config_path, encoding="utf-8")
            self.initialized = True

    def get_int(self, section: str, key: str, fallback: int) -> int:
        raw = self.get(section, key, fallback=None)
        if raw is None:
            return fallback
        try:
            return int(raw)
        except ValueError:
            self.logger.warning(f'Invalid integer for [{section}] {key}: {raw!r}, using {fallback}')
            return fallback

    def update_value(self, section: str, key: str, value):
        self.logger.debug(f'Attempting to update [{section}] {key}.')
        with self._write_lock:
            if not self.has_section(section):
                self.add_section(section)
            self[section][key] = str(value)
            Path(self.config_path).parent.mkdir(parents=True, exist_ok=True)
            # Write changes back to the INI file
            with open(self.config_path, 'w', encoding="utf-8") as configfile:
                self.write(configfile)
        self.logger.debug(f'Updated [{section}] {key}.')

    @property
    def dashboard_limit(self) -> int:
        return self.get_int("Library", "dashboard_limit", 6)

    @property
    def page_size(self) -> int:
        return self.get_int("Library", "page_size", 60)

    @property
    def recent_window_days(self) -> int:
        return self.get_int("Library", "recent_window_days", 14)

    @property
    def year_window_days(self) -> int:
        return self.get_int("Library", "year_window_days", 365)


def config_manager() -> ConfigManager:
    return ConfigManager()
