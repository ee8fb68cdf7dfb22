"""
Waiting for application log lines to reach CloudWatch Logs.

Log delivery lags the request that produced it, so checks poll
``filter_log_events`` under a ``PollPolicy`` until every expected fragment
has appeared at least once.
"""
import asyncio
import logging
import time
from typing import Any, Dict, List, Optional, Sequence

from ..config import DEFAULT_LOG_POLL_ATTEMPTS, DEFAULT_LOG_POLL_DELAY_MS, PollPolicy
from ..polling import RetryPoller, Sleeper
from ..types import NotReady, Ready

logger = logging.getLogger(__name__)

DEFAULT_LOG_POLICY = PollPolicy(attempts=DEFAULT_LOG_POLL_ATTEMPTS, delay_ms=DEFAULT_LOG_POLL_DELAY_MS)


def millis_ago(seconds: float) -> int:
    return int((time.time() - seconds) * 1000)


def fetch_log_events(logs, group: str, since_ms: int) -> List[Dict[str, Any]]:
    paginator = logs.get_paginator("filter_log_events")
    events: List[Dict[str, Any]] = []
    for page in paginator.paginate(logGroupName=group, startTime=since_ms):
        events.extend(page.get("events", []))
    return events


async def wait_for_log_messages(
    logs,
    group: str,
    fragments: Sequence[str],
    since_ms: int,
    policy: Optional[PollPolicy] = None,
    sleep: Sleeper = asyncio.sleep,
) -> List[str]:
    """Return the group's messages once each of ``fragments`` appears in one of them.

    Raises ``RetryExhausted`` if any fragment is still missing after the
    policy's last attempt.
    """

    async def check():
        events = await asyncio.to_thread(fetch_log_events, logs, group, since_ms)
        messages = [event.get("message", "") for event in events]
        missing = [f for f in fragments if not any(f in m for m in messages)]
        if missing:
            return NotReady(f"{group} is missing {missing} in {len(messages)} event(s)")
        return Ready(messages)

    poller = RetryPoller.from_policy(policy or DEFAULT_LOG_POLICY, sleep=sleep)
    messages = await poller.run(check)
    logger.info(f"Found {len(fragments)} expected fragment(s) in {group}")
    return messages
