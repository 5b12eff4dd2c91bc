"""
Minimal BigBlueButton API client.

Only the calls the stress test needs are implemented:

- ``getMeetingInfo`` to look up the moderator password of a running meeting
- signed ``join`` URLs for every simulated participant

Every API call is signed with ``checksum = hash(call + query + secret)``.
"""

from __future__ import annotations

import hashlib
from typing import Any, Dict, Optional
from urllib.parse import urlencode
from xml.etree import ElementTree

import httpx

from bbb_stress.config import settings, get_logger, BBBSettings
from bbb_stress.core.exceptions import MeetingServerError


logger = get_logger("bbb_client")


class BBBClient:
    """
    Async client for a BigBlueButton server.

    Usage pattern:
        async with BBBClient() as client:
            password = await client.get_moderator_password("my-meeting")
            url = client.get_join_url("Brave Otter 1", "my-meeting", password)
    """

    def __init__(
        self,
        bbb_settings: Optional[BBBSettings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._settings = bbb_settings or settings.bbb
        self._base_url = self._settings.url.rstrip("/")
        if self._base_url.endswith("/api"):
            self._base_url = self._base_url[: -len("/api")]
        self._owns_client = http_client is None
        self.client = http_client or httpx.AsyncClient(timeout=self._settings.request_timeout)

    async def __aenter__(self) -> "BBBClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self.client.aclose()

    def checksum(self, call: str, query: str) -> str:
        """Sign an API call."""
        algorithm = getattr(hashlib, self._settings.checksum_algorithm.value)
        return algorithm(f"{call}{query}{self._settings.secret}".encode("utf-8")).hexdigest()

    def build_url(self, call: str, params: Optional[Dict[str, Any]] = None) -> str:
        """
        Build a signed API URL.

        Args:
            call: API call name, e.g. ``"join"``.
            params: Query parameters in the order they should be encoded.

        Returns:
            Fully signed URL.
        """
        query = urlencode(params or {})
        checksum = self.checksum(call, query)
        separator = "&" if query else ""
        return f"{self._base_url}/api/{call}?{query}{separator}checksum={checksum}"

    async def _call(self, call: str, params: Dict[str, Any]) -> Dict[str, str]:
        url = self.build_url(call, params)
        logger.debug(f"BBB API call: {call} {params}")

        try:
            response = await self.client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise MeetingServerError(
                f"BBB API call '{call}' failed: {e}",
                details={"call": call},
            ) from e

        try:
            root = ElementTree.fromstring(response.text)
        except ElementTree.ParseError as e:
            raise MeetingServerError(
                f"BBB API call '{call}' returned invalid XML",
                details={"call": call},
            ) from e

        payload = {child.tag: (child.text or "").strip() for child in root}
        if payload.get("returncode") != "SUCCESS":
            message_key = payload.get("messageKey", "unknown")
            message = payload.get("message", "no message")
            raise MeetingServerError(
                f"BBB API call '{call}' failed: {message_key} - {message}",
                details={"call": call, "messageKey": message_key},
            )
        return payload

    async def get_meeting_info(self, meeting_id: str) -> Dict[str, str]:
        """
        Fetch ``getMeetingInfo`` for a meeting.

        Returns:
            The top-level response fields as strings (nested elements such as
            ``attendees`` are returned as empty strings).
        """
        return await self._call("getMeetingInfo", {"meetingID": meeting_id})

    async def get_moderator_password(self, meeting_id: str) -> str:
        """Return the moderator password of a running meeting."""
        info = await self.get_meeting_info(meeting_id)
        password = info.get("moderatorPW")
        if not password:
            raise MeetingServerError(
                f"Meeting {meeting_id} did not report a moderator password",
                details={"meetingID": meeting_id},
            )
        logger.debug(f"Fetched moderator password for meeting {meeting_id}")
        return password

    def get_join_url(self, username: str, meeting_id: str, password: str) -> str:
        """Return a signed URL that joins ``username`` to the meeting."""
        return self.build_url(
            "join",
            {
                "fullName": username,
                "meetingID": meeting_id,
                "password": password,
                "redirect": "true",
            },
        )
