"""
Retry helpers for locating and clicking UI elements.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from playwright.async_api import (
    ElementHandle,
    Page,
    Error as PlaywrightError,
)

from bbb_stress.config import get_logger
from .bbb_selectors import ElementMatcher, any_of


default_logger = get_logger("polling")


async def first_match(page: Page, matchers: Sequence[ElementMatcher]) -> Optional[ElementHandle]:
    """Return the element found by the first matcher that finds one."""
    for matcher in matchers:
        element = await page.query_selector(matcher.selector)
        if element is not None:
            return element
    return None


async def poll_and_click(
    page: Page,
    matchers: Sequence[ElementMatcher],
    *,
    attempts: int,
    timeout_ms: int,
    description: str,
    logger: Optional[logging.Logger] = None,
) -> bool:
    """
    Wait for any of ``matchers`` to appear and click it.

    Each attempt waits up to ``timeout_ms`` for the combined selector, then
    clicks the element of the first matcher that finds one.

    Args:
        page: Page to search.
        matchers: Ordered alternatives describing the element.
        attempts: Maximum number of attempts.
        timeout_ms: Wait per attempt in milliseconds.
        description: Human readable element name for log lines.
        logger: Logger to use (defaults to this module's logger).

    Returns:
        True once an element was clicked, False if every attempt failed.
    """
    log = logger or default_logger
    selector = any_of(matchers)

    for attempt in range(1, attempts + 1):
        try:
            log.debug(f"Attempt {attempt}: waiting for {description}")
            await page.wait_for_selector(selector, timeout=timeout_ms)

            element = await first_match(page, matchers)
            if element is not None:
                log.debug(f"Clicking on {description}")
                await element.click(timeout=timeout_ms)
                log.debug(f"Clicked on {description} successfully")
                return True
        except PlaywrightError as e:
            log.debug(f"{description} not found after attempt {attempt}: {e}")

    return False
