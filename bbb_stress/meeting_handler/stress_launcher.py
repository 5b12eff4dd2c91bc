"""
Stress test orchestration.

Launches one browser, joins every planned client to the meeting, keeps the
participants in the conference for the test duration and closes the browser.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Protocol

from playwright.async_api import Page

from bbb_stress.config import settings, get_logger, Settings
from bbb_stress.models import ClientConfig, JoinReport, build_join_plan
from bbb_stress.utils import get_random
from .browser import BrowserSession
from .client_joiner import init_client


default_logger = get_logger("stress_launcher")


class MeetingClient(Protocol):
    """What the launcher needs from the meeting server client."""

    async def get_moderator_password(self, meeting_id: str) -> str: ...

    def get_join_url(self, username: str, meeting_id: str, password: str) -> str: ...


JoinRoutine = Callable[..., Awaitable[Page]]


class StressTestLauncher:
    """
    Runs one stress test against a meeting.

    Usage pattern:
        launcher = StressTestLauncher(bbb_client)
        await launcher.start("my-meeting", test_duration=60, clients_listening=10)
    """

    def __init__(
        self,
        meeting_client: MeetingClient,
        logger: Optional[logging.Logger] = None,
        app_settings: Optional[Settings] = None,
        session_factory: Optional[Callable[[], BrowserSession]] = None,
        join_client: JoinRoutine = init_client,
        username_generator: Callable[[], str] = get_random,
    ) -> None:
        self.meeting_client = meeting_client
        self.logger = logger or default_logger
        self._settings = app_settings or settings
        self._session_factory = session_factory or (lambda: BrowserSession(self._settings.browser))
        self._join_client = join_client
        self._username_generator = username_generator

        self.session: Optional[BrowserSession] = None
        # Pages of joined clients, held open until the browser closes
        self.pages: List[Page] = []
        self.report = JoinReport()

    async def start(
        self,
        meeting_id: str,
        test_duration: float,
        clients_with_camera: int = 0,
        clients_with_microphone: int = 0,
        clients_listening: int = 0,
    ) -> None:
        """
        Join all clients, hold the conference for ``test_duration`` seconds,
        then close the browser.

        Raises:
            MeetingServerError: if the moderator password cannot be fetched.
            ConfigurationError: if a client count is invalid.
        """
        self.pages = []
        self.report = JoinReport()

        plan = build_join_plan(
            clients_with_camera,
            clients_with_microphone,
            clients_listening,
            self._username_generator,
        )

        session = self._session_factory()
        self.session = session
        launched, password = await asyncio.gather(
            session.start(),
            self.meeting_client.get_moderator_password(meeting_id),
            return_exceptions=True,
        )
        if isinstance(launched, BaseException) or isinstance(password, BaseException):
            await session.close()
            raise launched if isinstance(launched, BaseException) else password

        try:
            await self._join_all(plan, meeting_id, password)

            self.logger.info(f"Join phase finished: {self.report.summary()}")
            self.logger.info("All user joined the conference")
            self.logger.info(f"Sleeping {test_duration}s")
            await asyncio.sleep(test_duration)
            self.logger.info("Test finished")
        finally:
            await session.close()

    async def _join_all(self, plan: List[ClientConfig], meeting_id: str, password: str) -> None:
        max_concurrent = self._settings.join.max_concurrent_joins

        if max_concurrent <= 1:
            for client in plan:
                await self._join_one(client, meeting_id, password)
            return

        semaphore = asyncio.Semaphore(max_concurrent)

        async def join_with_slot(client: ClientConfig) -> None:
            async with semaphore:
                await self._join_one(client, meeting_id, password)

        tasks = [
            asyncio.create_task(join_with_slot(client), name=f"join:{client.username}")
            for client in plan
        ]
        try:
            await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def _join_one(self, client: ClientConfig, meeting_id: str, password: str) -> None:
        """Join one client; join failures are logged and never raised."""
        self.logger.info(f"{client.username} join the conference ({client.mode})")
        join_url = self.meeting_client.get_join_url(client.username, meeting_id, password)
        try:
            page = await self._join_client(
                self.session,
                self.logger,
                join_url,
                client.webcam,
                join_settings=self._settings.join,
            )
        except Exception as e:
            self.logger.error(f"Unable to initialize client {client.username} : {e}")
            self.report.record_failure(client.username)
            return

        self.pages.append(page)
        self.report.record_success()


async def start(
    meeting_client: MeetingClient,
    logger: Optional[logging.Logger],
    meeting_id: str,
    test_duration: float,
    clients_with_camera: int = 0,
    clients_with_microphone: int = 0,
    clients_listening: int = 0,
) -> None:
    """Run a stress test with the default browser session and join routine."""
    launcher = StressTestLauncher(meeting_client, logger=logger)
    await launcher.start(
        meeting_id,
        test_duration,
        clients_with_camera=clients_with_camera,
        clients_with_microphone=clients_with_microphone,
        clients_listening=clients_listening,
    )
