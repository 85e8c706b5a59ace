#!/usr/bin/env python3
"""
Logging configuration for the application.
Provides file + console logging with configurable levels.
"""

import logging
import sys
from ..config import LOG_FILE, LOG_FORMAT, LOG_DATE_FORMAT, LOG_LEVEL, LOGGER_NAME


def setup_logging(debug: bool = False, log_file=LOG_FILE) -> logging.Logger:
    """
    Configure logging for the application.

    Args:
        debug: If True, sets console level to DEBUG.
        log_file: Where to append the debug log (None disables it).

    Returns:
        The application logger.
    """
    level = logging.DEBUG if debug else LOG_LEVEL
    app_logger = logging.getLogger(LOGGER_NAME)
    app_logger.setLevel(logging.DEBUG)  # Capture everything; handlers filter

    # Remove existing handlers to avoid duplicates on re-init
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    # Console goes to stderr so formatted output on stdout stays clean
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(formatter)
    app_logger.addHandler(console)

    if log_file:
        try:
            file_handler = logging.FileHandler(str(log_file), mode='a', encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(formatter)
            app_logger.addHandler(file_handler)
        except OSError:
            app_logger.warning("Could not create log file at %s", log_file)

    return app_logger
