"""
Join a single simulated participant to a BigBlueButton conference.

Flow:
1. Open a page in the shared browser and load the join URL
2. Pick "Listen only" in the audio modal; the join is aborted if it never
   shows up
3. Get rid of the echo-test overlay
4. Click the mute/unmute toggle
5. Share the fake webcam (camera clients only)

Stages are declared with a ``StagePolicy``: FATAL stages raise
``ClientJoinError``, BEST_EFFORT stages only log.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import Awaitable, Callable, Optional

from playwright.async_api import (
    Page,
    Error as PlaywrightError,
    TimeoutError as PlaywrightTimeoutError,
)

from bbb_stress.config import settings, get_logger, JoinSettings
from bbb_stress.core.exceptions import ClientJoinError
from bbb_stress.models import JoinStage, StagePolicy
from .bbb_selectors import (
    AUDIO_MODAL_OVERLAY,
    CAMERA_OPTION,
    CLOSE_MODALS_JS,
    LISTEN_ONLY,
    MUTE_TOGGLE,
    SHARE_WEBCAM,
    START_SHARING,
    any_of,
)
from .browser import BrowserSession
from .polling import poll_and_click


default_logger = get_logger("client_joiner")

NAVIGATE = JoinStage("navigate", StagePolicy.FATAL, "Failed to open join URL")
SELECT_AUDIO = JoinStage("select_audio", StagePolicy.FATAL, "Failed to select audio option")
DISMISS_OVERLAY = JoinStage("dismiss_overlay", StagePolicy.BEST_EFFORT)
UNMUTE = JoinStage("unmute", StagePolicy.BEST_EFFORT)
SHARE_WEBCAM_STAGE = JoinStage("share_webcam", StagePolicy.FATAL, "Failed to share webcam")


class ClientJoiner:
    """
    Drives one page through the BBB join sequence.

    Usage pattern:
        joiner = ClientJoiner(session, join_url, webcam=True)
        page = await joiner.join()
    """

    def __init__(
        self,
        session: BrowserSession,
        join_url: str,
        webcam: bool = False,
        join_settings: Optional[JoinSettings] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.session = session
        self.join_url = join_url
        self.webcam = webcam
        self._settings = join_settings or settings.join
        self.logger = logger or default_logger
        self.page: Optional[Page] = None

    @property
    def timeout_ms(self) -> int:
        return self._settings.default_timeout_ms

    async def join(self) -> Page:
        """
        Run every stage of the join sequence.

        Returns:
            The joined page. It is left open so the participant stays in the
            conference until the browser is closed.

        Raises:
            ClientJoinError: if a FATAL stage fails.
        """
        await self._run_stage(NAVIGATE, self._navigate)
        await self._run_stage(SELECT_AUDIO, self._select_audio)
        await self._run_stage(DISMISS_OVERLAY, self._dismiss_overlay)
        await self._run_stage(UNMUTE, self._unmute)

        if self.webcam:
            await self._run_stage(SHARE_WEBCAM_STAGE, self._share_webcam)

        return self.page

    async def _run_stage(self, stage: JoinStage, action: Callable[[], Awaitable[bool]]) -> bool:
        """Run one stage and apply its failure policy."""
        try:
            succeeded = await action()
        except PlaywrightError as e:
            if stage.policy is StagePolicy.FATAL:
                self.logger.error(f"{stage.failure_message}: {e}")
                await self._save_diagnostics(stage.name)
                raise ClientJoinError(
                    f"{stage.failure_message}: {e}",
                    stage=stage.name,
                    details={"join_url": self.join_url},
                ) from e
            self.logger.error(f"Stage '{stage.name}' failed, continuing: {e}")
            return False

        if not succeeded and stage.policy is StagePolicy.FATAL:
            await self._save_diagnostics(stage.name)
            raise ClientJoinError(
                stage.failure_message,
                stage=stage.name,
                details={"join_url": self.join_url},
            )
        return succeeded

    # -------------------------------------------------------------------------
    # Stages
    # -------------------------------------------------------------------------

    async def _navigate(self) -> bool:
        self.page = await self.session.new_page()
        self.logger.debug("Opening join URL")
        await self.page.goto(self.join_url)
        return True

    async def _select_audio(self) -> bool:
        selected = await poll_and_click(
            self.page,
            LISTEN_ONLY,
            attempts=self._settings.audio_retries,
            timeout_ms=self.timeout_ms,
            description="audio prompt (Listen only)",
            logger=self.logger,
        )
        if not selected:
            self.logger.error(
                "Listen only button did not appear after multiple attempts. "
                "Logging page HTML for troubleshooting."
            )
            await self._log_page_markup()
            self.logger.error("Failed to select audio option.")
        return selected

    async def _dismiss_overlay(self) -> bool:
        self.logger.debug("Bypassing microphone test.")
        self.logger.debug("Waiting for overlay to be hidden")
        try:
            await self.page.wait_for_selector(
                AUDIO_MODAL_OVERLAY, state="hidden", timeout=self.timeout_ms
            )
            self.logger.debug("Overlay is hidden")
        except PlaywrightTimeoutError:
            self.logger.error("Overlay did not hide. Trying to close any visible modals manually.")
            clicked = await self.page.evaluate(CLOSE_MODALS_JS)
            self.logger.debug(f"Clicked {clicked} modal close button(s)")
        return True

    async def _unmute(self) -> bool:
        self.logger.debug("Ensure that we are not muted...")
        found = await poll_and_click(
            self.page,
            MUTE_TOGGLE,
            attempts=self._settings.unmute_retries,
            timeout_ms=self.timeout_ms,
            description="Mute/Unmute button",
            logger=self.logger,
        )
        if not found:
            self.logger.error(
                "Mute/Unmute button did not appear after multiple attempts. "
                "Logging page HTML for troubleshooting."
            )
            await self._log_page_markup()
            self.logger.debug("Skipping Mute/Unmute step since button was not found.")
        return found

    async def _share_webcam(self) -> bool:
        share_webcam = any_of(SHARE_WEBCAM)
        start_sharing = any_of(START_SHARING)

        await self.page.wait_for_selector(share_webcam, timeout=self.timeout_ms)
        await self.page.click(share_webcam, timeout=self.timeout_ms)
        self.logger.debug("Clicked on sharing webcam")

        # Camera list is filled in asynchronously once the modal opens
        await asyncio.sleep(self._settings.webcam_settle_seconds)
        await self.page.wait_for_selector(
            any_of(CAMERA_OPTION), state="attached", timeout=self.timeout_ms
        )
        await self.page.wait_for_selector(start_sharing, timeout=self.timeout_ms)

        self.logger.debug("Clicking on start sharing")
        await self.page.click(start_sharing, timeout=self.timeout_ms)
        return True

    # -------------------------------------------------------------------------
    # Diagnostics
    # -------------------------------------------------------------------------

    async def _log_page_markup(self) -> None:
        try:
            html = await self.page.content()
        except PlaywrightError as e:
            self.logger.debug(f"Could not read page HTML: {e}")
            return
        self.logger.debug(f"Page HTML: {html}")

    async def _save_diagnostics(self, stage_name: str) -> None:
        """
        Save a screenshot and HTML snapshot of the page for a failed stage.
        """
        if not self._settings.diagnostics_dir or self.page is None:
            return

        try:
            diagnostics_dir = Path(self._settings.diagnostics_dir)
            diagnostics_dir.mkdir(parents=True, exist_ok=True)

            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
            base_filename = f"{timestamp}_{stage_name}"
            png_path = diagnostics_dir / f"{base_filename}.png"
            html_path = diagnostics_dir / f"{base_filename}.html"

            await self.page.screenshot(path=str(png_path), full_page=True)
            html_path.write_text(await self.page.content(), encoding="utf-8")
            self.logger.info(f"Saved diagnostics for failed stage '{stage_name}': {png_path.name}")
        except (PlaywrightError, OSError) as e:
            self.logger.warning(f"Failed to save diagnostics for {stage_name}: {e}")


async def init_client(
    session: BrowserSession,
    logger: Optional[logging.Logger],
    join_url: str,
    webcam: bool = False,
    join_settings: Optional[JoinSettings] = None,
) -> Page:
    """
    Join one participant through ``join_url``.

    Returns:
        The page of the joined participant.

    Raises:
        ClientJoinError: when the audio option cannot be selected, the page
            cannot be loaded, or webcam sharing fails.
    """
    joiner = ClientJoiner(
        session,
        join_url,
        webcam=webcam,
        join_settings=join_settings,
        logger=logger,
    )
    return await joiner.join()
