"""
Logging configuration for the stress test.

Console output is coloured by level; a rotating file under ``logs/`` keeps
the full run, including the page HTML dumped when a client cannot join.
"""

import copy
import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from datetime import datetime
from typing import Optional

from .settings import settings

ROOT_LOGGER_NAME = "bbb_stress"

CONSOLE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Libraries that log every HTTP request at INFO
QUIET_LOGGERS = ("httpx", "httpcore")


class ColoredFormatter(logging.Formatter):
    """Colours the level name of console records."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[41m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname)
        if color is None:
            return super().format(record)

        # Colour a copy so the file handler still sees the plain level name
        record = copy.copy(record)
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(ColoredFormatter(fmt=CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def _file_handler(log_file: Path, level: int) -> logging.Handler:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,  # 10 MB, page dumps are large
        backupCount=5,
        encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=FILE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
    enable_file_logging: Optional[bool] = None
) -> logging.Logger:
    """
    Attach console (and optionally file) handlers to the package logger.

    Called once at startup; importing the package configures nothing.

    Args:
        log_level: Override ``settings.log_level``
        log_file: Override the dated file under ``logs/``
        enable_file_logging: Override ``settings.log_to_file``

    Returns:
        The ``bbb_stress`` logger
    """
    level = getattr(logging, (log_level or settings.log_level).upper())
    if enable_file_logging is None:
        enable_file_logging = settings.log_to_file

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()
    logger.addHandler(_console_handler(level))

    if enable_file_logging:
        path = Path(log_file or f"logs/stress_test_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log")
        logger.addHandler(_file_handler(path, level))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return logger


def get_logger(name: str) -> logging.Logger:
    """Child logger of ``bbb_stress``, e.g. ``get_logger("browser")``."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


# Package logger; handlers are attached by setup_logging() at startup
logger = logging.getLogger(ROOT_LOGGER_NAME)
