"""
Meeting handler module.

Browser automation that joins simulated participants to a BigBlueButton
conference.
"""

from .browser import BrowserSession
from .client_joiner import ClientJoiner, init_client
from .stress_launcher import StressTestLauncher, start

__all__ = [
    "BrowserSession",
    "ClientJoiner",
    "init_client",
    "StressTestLauncher",
    "start",
]
