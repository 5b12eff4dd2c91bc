"""
Domain models module.
"""

from .client import (
    ClientConfig,
    JoinStage,
    JoinReport,
    StagePolicy,
    build_join_plan,
)

__all__ = [
    "ClientConfig",
    "JoinStage",
    "JoinReport",
    "StagePolicy",
    "build_join_plan",
]
