"""
Logging setup for reptree.

- Level from the ``REPTREE_LOG_LEVEL`` environment variable (default WARNING)
- Console handler, plus an optional file handler
- The library only creates module loggers; handlers are installed here, on request
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

LOG_LEVEL = os.getenv("REPTREE_LOG_LEVEL", "WARNING").upper()
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(
    level: str = LOG_LEVEL,
    log_file: Optional[Path] = None,
    log_to_console: bool = True,
) -> logging.Logger:
    """Configure the ``reptree`` logger. Call once from application code."""
    level_value = getattr(logging, str(level).upper(), logging.WARNING)
    package_logger = logging.getLogger("reptree")
    package_logger.setLevel(level_value)
    # Avoid duplicate handlers when called again
    for h in list(package_logger.handlers):
        package_logger.removeHandler(h)
        h.close()

    formatter = logging.Formatter(LOG_FORMAT)
    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level_value)
        file_handler.setFormatter(formatter)
        package_logger.addHandler(file_handler)
    if log_to_console:
        console = logging.StreamHandler(sys.stderr)
        console.setLevel(level_value)
        console.setFormatter(formatter)
        package_logger.addHandler(console)
    return package_logger
