"""
Utility functions for the stress test.
"""

from .username import get_random

__all__ = ["get_random"]
