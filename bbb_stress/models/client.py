"""
Data models describing the simulated clients of a stress run.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List

from bbb_stress.core.exceptions import ConfigurationError


class StagePolicy(str, Enum):
    """What a failing join stage does to the client."""
    FATAL = "fatal"
    BEST_EFFORT = "best_effort"


@dataclass(frozen=True)
class ClientConfig:
    """
    One simulated conference participant.
    """
    username: str
    webcam: bool = False
    microphone: bool = False

    @property
    def mode(self) -> str:
        """Short label used in log lines."""
        if self.webcam:
            return "camera"
        if self.microphone:
            return "microphone"
        return "listen-only"


@dataclass(frozen=True)
class JoinStage:
    """A single step of the per-client join sequence."""
    name: str
    policy: StagePolicy
    failure_message: str = ""


@dataclass
class JoinReport:
    """Tally of the join phase of a run."""
    attempted: int = 0
    joined: int = 0
    failed: List[str] = field(default_factory=list)

    def record_success(self) -> None:
        self.attempted += 1
        self.joined += 1

    def record_failure(self, username: str) -> None:
        self.attempted += 1
        self.failed.append(username)

    def summary(self) -> str:
        text = f"{self.joined}/{self.attempted} clients joined"
        if self.failed:
            text += f" ({len(self.failed)} failed: {', '.join(self.failed)})"
        return text


def _check_count(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigurationError(
            f"{name} must be a non-negative integer, got {value!r}",
            details={name: value},
        )
    return value


def build_join_plan(
    clients_with_camera: int,
    clients_with_microphone: int,
    clients_listening: int,
    username_generator: Callable[[], str],
) -> List[ClientConfig]:
    """
    Build the ordered list of clients to join.

    Camera clients come first (webcam and microphone), then microphone-only
    clients, then listen-only clients. One username is generated per slot.
    """
    _check_count("clients_with_camera", clients_with_camera)
    _check_count("clients_with_microphone", clients_with_microphone)
    _check_count("clients_listening", clients_listening)

    plan: List[ClientConfig] = []
    plan.extend(
        ClientConfig(username_generator(), webcam=True, microphone=True)
        for _ in range(clients_with_camera)
    )
    plan.extend(
        ClientConfig(username_generator(), webcam=False, microphone=True)
        for _ in range(clients_with_microphone)
    )
    plan.extend(
        ClientConfig(username_generator(), webcam=False, microphone=False)
        for _ in range(clients_listening)
    )
    return plan
