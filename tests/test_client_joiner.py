"""Tests for the per-client join sequence."""

from unittest.mock import AsyncMock

import pytest
from playwright.async_api import (
    Error as PlaywrightError,
    TimeoutError as PlaywrightTimeoutError,
)

from bbb_stress.core.exceptions import ClientJoinError
from bbb_stress.meeting_handler.bbb_selectors import CLOSE_MODALS_JS
from bbb_stress.meeting_handler.client_joiner import init_client
from tests.conftest import FakePage, make_session

JOIN_URL = "https://bbb.test/bigbluebutton/api/join?fullName=Tester"

LISTEN_ONLY = '[aria-label="Listen only"]'
UNMUTE = '[aria-label="Unmute"]'
SHARE_WEBCAM = '[aria-label="Share webcam"]'
CAMERA_OPTION = "#setCam > option"
START_SHARING = '[aria-label="Start sharing"]'


def page_markup_logged(caplog) -> bool:
    return any("Page HTML:" in record.getMessage() for record in caplog.records)


class TestSuccessfulJoin:
    """Happy paths."""

    @pytest.mark.asyncio
    async def test_listen_only_client_joins(self, join_settings, test_logger, caplog):
        page = FakePage(present=[LISTEN_ONLY, UNMUTE])
        session = make_session(page)

        result = await init_client(session, test_logger, JOIN_URL, False, join_settings=join_settings)

        assert result is page
        session.new_page.assert_awaited_once()
        page.goto.assert_awaited_once_with(JOIN_URL)
        assert page.clicked == [LISTEN_ONLY, UNMUTE]
        assert not page_markup_logged(caplog)

    @pytest.mark.asyncio
    async def test_camera_client_shares_webcam(self, join_settings, test_logger):
        page = FakePage(present=[LISTEN_ONLY, UNMUTE, SHARE_WEBCAM, CAMERA_OPTION, START_SHARING])

        await init_client(make_session(page), test_logger, JOIN_URL, True, join_settings=join_settings)

        assert page.clicked == [LISTEN_ONLY, UNMUTE, SHARE_WEBCAM, START_SHARING]
        assert (CAMERA_OPTION, "attached") in page.waits

    @pytest.mark.asyncio
    async def test_no_webcam_steps_without_webcam(self, join_settings, test_logger):
        page = FakePage(present=[LISTEN_ONLY, UNMUTE, SHARE_WEBCAM, CAMERA_OPTION, START_SHARING])

        await init_client(make_session(page), test_logger, JOIN_URL, False, join_settings=join_settings)

        assert not page.waited_for(SHARE_WEBCAM)
        assert not page.waited_for(START_SHARING)
        assert SHARE_WEBCAM not in page.clicked
        assert START_SHARING not in page.clicked

    @pytest.mark.asyncio
    async def test_class_fragment_fallback_for_audio(self, join_settings, test_logger):
        page = FakePage(present=['[class*="audio"]', UNMUTE])

        await init_client(make_session(page), test_logger, JOIN_URL, join_settings=join_settings)

        assert page.clicked[0] == '[class*="audio"]'


class TestSelectAudio:
    """The audio stage is the only one that fails a join without a page error."""

    @pytest.mark.asyncio
    async def test_audio_never_found_fails_join(self, join_settings, test_logger, caplog):
        page = FakePage(present=[UNMUTE])

        with pytest.raises(ClientJoinError) as exc_info:
            await init_client(make_session(page), test_logger, JOIN_URL, join_settings=join_settings)

        assert str(exc_info.value) == "Failed to select audio option"
        assert exc_info.value.stage == "select_audio"
        assert sum(1 for selector, _ in page.waits if LISTEN_ONLY in selector) == 3
        assert page_markup_logged(caplog)
        assert UNMUTE not in page.clicked

    @pytest.mark.asyncio
    async def test_audio_found_on_second_attempt(self, join_settings, test_logger, caplog):
        page = FakePage(present=[UNMUTE], appear_on={LISTEN_ONLY: 2})

        result = await init_client(make_session(page), test_logger, JOIN_URL, join_settings=join_settings)

        assert result is page
        assert page.clicked == [LISTEN_ONLY, UNMUTE]
        assert sum(1 for selector, _ in page.waits if LISTEN_ONLY in selector) == 2
        # overlay stage still ran
        assert (".ReactModal__Overlay", "hidden") in page.waits
        assert not page_markup_logged(caplog)

    @pytest.mark.asyncio
    async def test_retry_count_is_configurable(self, join_settings, test_logger):
        join_settings.audio_retries = 5
        page = FakePage()

        with pytest.raises(ClientJoinError):
            await init_client(make_session(page), test_logger, JOIN_URL, join_settings=join_settings)

        assert sum(1 for selector, _ in page.waits if LISTEN_ONLY in selector) == 5


class TestBestEffortStages:
    """Overlay and unmute failures never abort the join."""

    @pytest.mark.asyncio
    async def test_overlay_timeout_clicks_close_buttons(self, join_settings, test_logger):
        page = FakePage(present=[LISTEN_ONLY, UNMUTE], overlay_hides=False)

        result = await init_client(make_session(page), test_logger, JOIN_URL, join_settings=join_settings)

        assert result is page
        assert page.evaluated == [CLOSE_MODALS_JS]
        assert UNMUTE in page.clicked

    @pytest.mark.asyncio
    async def test_overlay_script_error_does_not_abort_join(self, join_settings, test_logger, caplog):
        page = FakePage(present=[LISTEN_ONLY, UNMUTE], overlay_hides=False)
        page.evaluate = AsyncMock(side_effect=PlaywrightError("Target closed"))

        result = await init_client(make_session(page), test_logger, JOIN_URL, join_settings=join_settings)

        assert result is page
        page.evaluate.assert_awaited_once_with(CLOSE_MODALS_JS)
        assert page.clicked == [LISTEN_ONLY, UNMUTE]
        assert any(
            "dismiss_overlay" in record.getMessage() and "Target closed" in record.getMessage()
            for record in caplog.records
        )

    @pytest.mark.asyncio
    async def test_overlay_hidden_skips_fallback(self, join_settings, test_logger):
        page = FakePage(present=[LISTEN_ONLY, UNMUTE])

        await init_client(make_session(page), test_logger, JOIN_URL, join_settings=join_settings)

        assert page.evaluated == []

    @pytest.mark.asyncio
    async def test_missing_mute_button_still_joins(self, join_settings, test_logger, caplog):
        page = FakePage(present=[LISTEN_ONLY, SHARE_WEBCAM, CAMERA_OPTION, START_SHARING])

        result = await init_client(make_session(page), test_logger, JOIN_URL, True, join_settings=join_settings)

        assert result is page
        assert page.clicked == [LISTEN_ONLY, SHARE_WEBCAM, START_SHARING]
        assert page_markup_logged(caplog)
        assert any("Skipping Mute/Unmute" in record.getMessage() for record in caplog.records)


class TestFatalStages:
    """Page errors in fatal stages surface as ClientJoinError."""

    @pytest.mark.asyncio
    async def test_navigation_failure(self, join_settings, test_logger):
        page = FakePage(present=[LISTEN_ONLY, UNMUTE])
        page.goto.side_effect = PlaywrightError("net::ERR_NAME_NOT_RESOLVED")

        with pytest.raises(ClientJoinError) as exc_info:
            await init_client(make_session(page), test_logger, JOIN_URL, join_settings=join_settings)

        assert exc_info.value.stage == "navigate"
        assert isinstance(exc_info.value.__cause__, PlaywrightError)
        assert page.clicked == []

    @pytest.mark.asyncio
    async def test_webcam_failure_fails_join(self, join_settings, test_logger):
        page = FakePage(present=[LISTEN_ONLY, UNMUTE, SHARE_WEBCAM, CAMERA_OPTION])

        with pytest.raises(ClientJoinError) as exc_info:
            await init_client(make_session(page), test_logger, JOIN_URL, True, join_settings=join_settings)

        assert exc_info.value.stage == "share_webcam"
        assert isinstance(exc_info.value.__cause__, PlaywrightTimeoutError)
        assert "Failed to share webcam" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_diagnostics_saved_on_fatal_failure(self, join_settings, test_logger, tmp_path):
        join_settings.diagnostics_dir = str(tmp_path / "diagnostics")
        page = FakePage(html="<html>broken</html>")

        with pytest.raises(ClientJoinError):
            await init_client(make_session(page), test_logger, JOIN_URL, join_settings=join_settings)

        page.screenshot.assert_awaited_once()
        snapshots = list((tmp_path / "diagnostics").glob("*_select_audio.html"))
        assert len(snapshots) == 1
        assert snapshots[0].read_text(encoding="utf-8") == "<html>broken</html>"

    @pytest.mark.asyncio
    async def test_no_diagnostics_by_default(self, join_settings, test_logger):
        page = FakePage()

        with pytest.raises(ClientJoinError):
            await init_client(make_session(page), test_logger, JOIN_URL, join_settings=join_settings)

        page.screenshot.assert_not_awaited()
