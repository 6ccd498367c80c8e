import logging
import sys
from pathlib import Path

import appdirs


def get_log_path(log_file_name):
    """Resolve where the log file lives (next to a frozen build, else the user log dir)."""
    if getattr(sys, "frozen", False):
        return Path(sys.executable).parent / log_file_name

    log_dir = Path(appdirs.user_log_dir("PlayHub", "PlayHub"))
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / log_file_name


def setup_logger(log_file_name="playhub.log"):
    """
    Setups the initial logger.
    param: log_file_name: filename to be used for the logfile.
    return: logger instance created.
    """
    logger = logging.getLogger("PlayHub")

    # Check if the logger has already been configured
    if not logger.handlers:
        logger.setLevel(logging.DEBUG)

        # Create handlers
        console_handler = logging.StreamHandler(sys.stdout)
        file_handler = logging.FileHandler(get_log_path(log_file_name), encoding="utf-8")

        # Create formatter and add it to handlers
        log_format = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
        console_handler.setFormatter(log_format)
        file_handler.setFormatter(log_format)

        # Add handlers to the logger
        logger.addHandler(console_handler)
        logger.addHandler(file_handler)

        # Prevent propagation to avoid duplicate logs
        logger.propagate = False

    return logger
