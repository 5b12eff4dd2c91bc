"""
Configuration module for the stress test.
"""

from .settings import (
    Settings,
    settings,
    ChecksumAlgorithm,
    BBBSettings,
    BrowserSettings,
    JoinSettings,
)
from .logger import logger, get_logger, setup_logging

__all__ = [
    "Settings",
    "settings",
    "ChecksumAlgorithm",
    "BBBSettings",
    "BrowserSettings",
    "JoinSettings",
    "logger",
    "get_logger",
    "setup_logging",
]
