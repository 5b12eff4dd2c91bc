"""
Shared Chromium instance for all simulated clients.
"""

from __future__ import annotations

from typing import List, Optional

from playwright.async_api import (
    async_playwright,
    Browser,
    Page,
)

from bbb_stress.config import settings, get_logger, BrowserSettings


logger = get_logger("browser")

# Fake camera/microphone and no sound output, so runs are reproducible
MEDIA_ARGS = [
    "--use-fake-device-for-media-stream",
    "--use-fake-ui-for-media-stream",
    "--mute-audio",
]


class BrowserSession:
    """
    One Chromium process shared by every client page of a run.

    Usage pattern:
        session = BrowserSession()
        await session.start()
        page = await session.new_page()
        await session.close()
    """

    def __init__(self, browser_settings: Optional[BrowserSettings] = None) -> None:
        self._settings = browser_settings or settings.browser
        self._playwright = None
        self._browser: Optional[Browser] = None

    @property
    def is_running(self) -> bool:
        """Return True if the browser is currently available."""
        return self._browser is not None

    @property
    def launch_args(self) -> List[str]:
        return MEDIA_ARGS + list(self._settings.extra_args)

    async def __aenter__(self) -> "BrowserSession":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def start(self) -> None:
        """
        Start Playwright and launch Chromium with fake media devices.
        """
        if self._browser is not None:
            return

        logger.info("Launching browser...")

        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(
                headless=self._settings.headless,
                executable_path=self._settings.executable_path,
                channel=self._settings.channel,
                args=self.launch_args,
            )
        except Exception:
            await self._playwright.stop()
            self._playwright = None
            raise

        logger.info(f"Browser launched (version {self._browser.version})")

    async def new_page(self) -> Page:
        """Open a new page in the shared browser."""
        if self._browser is None:
            await self.start()
        return await self._browser.new_page()

    async def close(self) -> None:
        """
        Close the browser and stop Playwright.
        """
        if self._browser is None and self._playwright is None:
            return

        logger.info("Closing browser...")

        try:
            if self._browser is not None:
                await self._browser.close()
        finally:
            self._browser = None

        try:
            if self._playwright is not None:
                await self._playwright.stop()
        finally:
            self._playwright = None
