"""
Logger Configuration Module

Handles logging setup for search operations.
"""

import logging
from pathlib import Path

LOGGER_NAME = "site_search"


def create_logger(log_dir: str = "logs") -> logging.Logger:
    # Create logs directory if it doesn't exist
    Path(log_dir).mkdir(parents=True, exist_ok=True)

    search_logger = logging.getLogger(LOGGER_NAME)
    search_logger.setLevel(logging.DEBUG)

    # Create file handler for search logs
    file_handler = logging.FileHandler(
        Path(log_dir) / "site_search.log", encoding="utf-8"
    )
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
    )
    search_logger.addHandler(file_handler)

    return search_logger


search_logger: logging.Logger | None = None


def setup_logging(log_dir: str = "logs") -> logging.Logger:
    global search_logger
    if search_logger is None:
        search_logger = create_logger(log_dir)
    return search_logger


def get_logger(component: str) -> logging.Logger:
    """Get a child logger of the package logger for one component."""
    return logging.getLogger(f"{LOGGER_NAME}.{component}")
