"""
BigBlueButton API access.
"""

from .client import BBBClient

__all__ = ["BBBClient"]
