"""
Unified Logging Module
======================

Single place to obtain configured loggers for the roster merge project.

Usage:
    from core.logger import get_logger

    logger = get_logger(__name__)
    logger.info("Merging workbook: %s", label)
    logger.debug("Header row at index %d", idx)
    logger.warning("Sheet skipped: %s", sheet_name)
"""

import logging
import sys
from typing import Optional, Union

# Default log format with timestamp, level, and module name
DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_LEVEL = logging.INFO

PROJECT_LOGGER_NAME = "core"

# Global flag to track if root logger has been configured
_root_configured = False


def _configure_root_logger() -> None:
    """
    Attach a stdout handler to the project logger.

    Runs once; guarded by ``_root_configured``.
    """
    global _root_configured
    if _root_configured:
        return

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG)
    console_handler.setFormatter(logging.Formatter(DEFAULT_FORMAT, datefmt=DEFAULT_DATE_FORMAT))

    root_logger = logging.getLogger(PROJECT_LOGGER_NAME)
    root_logger.setLevel(DEFAULT_LEVEL)
    root_logger.addHandler(console_handler)
    root_logger.propagate = False

    _root_configured = True


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Return a logger for *name*, configuring the project logger on first use.

    Args:
        name: logger name, usually the calling module's ``__name__``
        level: optional level override for this logger only
    """
    _configure_root_logger()

    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level)
    return logger


def set_level(level: Union[int, str], logger_name: Optional[str] = None) -> None:
    """
    Set the level of *logger_name*, or of the project logger when omitted.

    Accepts numeric levels or names such as ``"DEBUG"``.

    Examples:
        set_level(logging.DEBUG)                        # all core modules
        set_level("DEBUG", "core.roster.orchestrator")  # merge loop only
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        level = resolved if isinstance(resolved, int) else DEFAULT_LEVEL
    logger = logging.getLogger(logger_name or PROJECT_LOGGER_NAME)
    logger.setLevel(level)
