"""
Custom exceptions for the stress test.
"""

from typing import Any, Dict, Optional


class StressTestException(Exception):
    """Base exception for stress test errors."""
    
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ClientJoinError(StressTestException):
    """Raised when a simulated client fails to join the conference."""
    
    def __init__(
        self,
        message: str,
        stage: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.stage = stage
        super().__init__(message, details)


class MeetingServerError(StressTestException):
    """Raised when the BigBlueButton API call fails."""
    pass


class ConfigurationError(StressTestException):
    """Raised when configuration is invalid."""
    pass
