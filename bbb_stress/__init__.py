"""
BigBlueButton stress test.
Joins simulated browser participants to a meeting and holds them there.
"""

__version__ = "1.0.0"
