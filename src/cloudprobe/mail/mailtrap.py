"""
Client for the Mailtrap testing API.

Used to confirm that asynchronous notifications (SNS email subscriptions,
application events) actually reached a capture inbox. Lookups list the whole
inbox and filter client-side, retrying under a ``PollPolicy`` because mail
delivery is eventually consistent.
"""
from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

import aiohttp

from ..config import PollPolicy, ProbeConfig
from ..errors import MessageNotFound
from ..polling import RetryPoller, Sleeper
from ..types import NotReady, Ready
from .models import BodyFormat, MailMessage

logger = logging.getLogger(__name__)

DEFAULT_POLICY = PollPolicy(attempts=10, delay_ms=10_000)


class MailtrapClient:
    """
    Read-only access to one Mailtrap inbox.

    Pass an existing ``aiohttp.ClientSession`` to share connections; otherwise
    the client opens its own on first use and closes it in ``close()`` or on
    leaving ``async with``.
    """

    def __init__(
        self,
        api_url: str,
        token: str,
        account_id: str,
        inbox_id: str,
        policy: Optional[PollPolicy] = None,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: float = 10.0,
        sleep: Sleeper = asyncio.sleep,
    ):
        self.base_url = f"{api_url.rstrip('/')}/accounts/{account_id}"
        self.inbox_id = inbox_id
        self.policy = policy or DEFAULT_POLICY
        self._headers = {"Api-Token": token, "Accept": "application/json"}
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session = session
        self._owns_session = session is None
        self._sleep = sleep

    @classmethod
    def from_config(cls, config: ProbeConfig, session: Optional[aiohttp.ClientSession] = None) -> "MailtrapClient":
        config.require("mailtrap_token", "mailtrap_account_id", "mailtrap_inbox_id")
        return cls(
            api_url=config.mailtrap_url,
            token=config.mailtrap_token,
            account_id=config.mailtrap_account_id,
            inbox_id=config.mailtrap_inbox_id,
            policy=config.mail_policy,
            session=session,
            timeout=config.http_timeout,
        )

    async def __aenter__(self) -> "MailtrapClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session

    def _inbox_url(self, path: str = "") -> str:
        return f"{self.base_url}/inboxes/{self.inbox_id}{path}"

    async def list_messages(self) -> List[MailMessage]:
        """All messages currently in the inbox, newest first."""
        async with self._get_session().get(self._inbox_url("/messages"), headers=self._headers) as response:
            response.raise_for_status()
            payload = await response.json()
        return [MailMessage.model_validate(item) for item in payload]

    async def get_message_body(self, message_id: str, fmt: BodyFormat = BodyFormat.html) -> str:
        fmt = BodyFormat(fmt)
        url = self._inbox_url(f"/messages/{message_id}/body.{fmt.value}")
        async with self._get_session().get(url, headers=self._headers) as response:
            response.raise_for_status()
            return await response.text()

    async def find_message(self, recipient: str, subject: str) -> MailMessage:
        """Poll until a message to ``recipient`` with exactly ``subject`` shows up."""

        async def lookup():
            for message in await self.list_messages():
                if message.matches(recipient, subject):
                    return Ready(message)
            return NotReady(f'Email sent to "{recipient}" with subject "{subject}" was not found in Mailtrap')

        poller = RetryPoller.from_policy(self.policy, sleep=self._sleep)
        result = await poller.poll(lookup)
        if not result.succeeded:
            raise MessageNotFound(
                recipient,
                subject,
                attempts=result.attempts,
                last_error=result.last_error,
                operation=result.operation,
            )
        logger.info(f"Found message {result.value.id} for {recipient} after {result.attempts} attempt(s)")
        return result.value

    async def find_message_id(self, recipient: str, subject: str) -> str:
        message = await self.find_message(recipient, subject)
        return message.id

    async def find_message_body(self, recipient: str, subject: str, fmt: BodyFormat = BodyFormat.html) -> str:
        message_id = await self.find_message_id(recipient, subject)
        return await self.get_message_body(message_id, fmt)

    async def find_message_html(self, recipient: str, subject: str) -> str:
        return await self.find_message_body(recipient, subject, BodyFormat.html)

    async def find_message_text(self, recipient: str, subject: str) -> str:
        return await self.find_message_body(recipient, subject, BodyFormat.txt)
