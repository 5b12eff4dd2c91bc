"""
Shared fixtures: an in-memory stand-in for a Playwright page.
"""

import logging
from typing import Dict, Iterable, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from bbb_stress.config import JoinSettings


class FakeElement:
    """Element handle that records clicks on its page."""

    def __init__(self, page: "FakePage", selector: str):
        self.selector = selector
        self.click = AsyncMock(side_effect=lambda **kwargs: page.clicked.append(selector))


class FakePage:
    """
    Minimal async page.

    ``present`` holds selectors that exist in the DOM. ``appear_on`` maps a
    selector to the wait number (1-based) on which it shows up.
    """

    def __init__(
        self,
        present: Iterable[str] = (),
        appear_on: Optional[Dict[str, int]] = None,
        overlay_hides: bool = True,
        html: str = "<html><body>meeting</body></html>",
    ):
        self.present = set(present)
        self.appear_on = dict(appear_on or {})
        self.overlay_hides = overlay_hides
        self.waits = []
        self.clicked = []
        self.evaluated = []
        self._wait_counts: Dict[str, int] = {}
        self.goto = AsyncMock()
        self.screenshot = AsyncMock()
        self.content = AsyncMock(return_value=html)

    def _parts(self, selector: str):
        return [part for part in selector.split(",") if part]

    async def wait_for_selector(self, selector, timeout=None, state="visible"):
        self.waits.append((selector, state))

        if state == "hidden":
            if self.overlay_hides:
                return None
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded waiting for {selector} to hide")

        for part in self._parts(selector):
            if part in self.appear_on:
                self._wait_counts[part] = self._wait_counts.get(part, 0) + 1
                if self._wait_counts[part] >= self.appear_on[part]:
                    self.present.add(part)

        for part in self._parts(selector):
            if part in self.present:
                return FakeElement(self, part)
        raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded waiting for {selector}")

    async def query_selector(self, selector):
        if selector in self.present:
            return FakeElement(self, selector)
        return None

    async def click(self, selector, timeout=None):
        if selector not in self.present:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded clicking {selector}")
        self.clicked.append(selector)

    async def evaluate(self, expression):
        self.evaluated.append(expression)
        return 1

    def waited_for(self, selector: str) -> bool:
        return any(selector in waited for waited, _ in self.waits)


def make_session(page: FakePage) -> MagicMock:
    session = MagicMock()
    session.new_page = AsyncMock(return_value=page)
    return session


@pytest.fixture
def join_settings():
    """Fast join settings: no real waiting."""
    return JoinSettings(
        default_timeout_ms=10,
        audio_retries=3,
        unmute_retries=3,
        webcam_settle_seconds=0,
        max_concurrent_joins=1,
    )


@pytest.fixture
def test_logger(caplog):
    caplog.set_level(logging.DEBUG, logger="bbb_stress")
    return logging.getLogger("bbb_stress.tests")
