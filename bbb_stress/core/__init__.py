"""
Core module exports.
"""

from .exceptions import (
    StressTestException,
    ClientJoinError,
    MeetingServerError,
    ConfigurationError,
)

__all__ = [
    "StressTestException",
    "ClientJoinError",
    "MeetingServerError",
    "ConfigurationError",
]
