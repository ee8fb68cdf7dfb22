"""
Bounded retry-until-success polling for eventually consistent state.

An operation is a zero-argument coroutine function. Each attempt either
succeeds (``Ready(value)`` or a truthy bare value) or misses (``NotReady``,
a falsy bare value, or a raised exception). Attempts run one after another
with a fixed delay between them; there is no sleep after the final miss.
"""
from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, List, Optional, TypeVar

from .config import PollPolicy
from .types import NotReady, PollOperation, PollResult, Ready, RetryAttempt

logger = logging.getLogger(__name__)

T = TypeVar("T")

Sleeper = Callable[[float], Awaitable[Any]]


def describe_operation(operation: Callable[..., Any]) -> str:
    """Best-effort source (or repr) of an operation for failure messages."""
    try:
        return inspect.getsource(operation).strip()
    except (OSError, TypeError):
        return getattr(operation, "__qualname__", None) or repr(operation)


class RetryPoller:
    """Run an operation until it succeeds or the attempt budget is spent."""

    def __init__(self, times_to_repeat: int = 3, timeout_ms: int = 0, sleep: Sleeper = asyncio.sleep):
        if times_to_repeat < 1:
            raise ValueError("times_to_repeat must be >= 1")
        if timeout_ms < 0:
            raise ValueError("timeout_ms must be >= 0")
        self.times_to_repeat = times_to_repeat
        self.timeout_ms = timeout_ms
        self._sleep = sleep

    @classmethod
    def from_policy(cls, policy: PollPolicy, sleep: Sleeper = asyncio.sleep) -> "RetryPoller":
        return cls(times_to_repeat=policy.attempts, timeout_ms=policy.delay_ms, sleep=sleep)

    async def _attempt(self, index: int, operation: PollOperation[Any]) -> RetryAttempt:
        try:
            outcome = await operation()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            return RetryAttempt(index=index, error=e)

        if isinstance(outcome, Ready):
            return RetryAttempt(index=index, value=outcome.value, succeeded=True)
        if isinstance(outcome, NotReady):
            return RetryAttempt(index=index, reason=outcome.reason)
        if outcome:
            return RetryAttempt(index=index, value=outcome, succeeded=True)
        return RetryAttempt(index=index, reason=f"resolved to {outcome!r}")

    async def poll(self, operation: PollOperation[Any]) -> PollResult[Any]:
        """Poll ``operation``; never raises for an exhausted budget."""
        history: List[RetryAttempt] = []
        last_error: Optional[BaseException] = None
        last_reason = ""

        for index in range(1, self.times_to_repeat + 1):
            attempt = await self._attempt(index, operation)
            history.append(attempt)

            if attempt.succeeded:
                return PollResult(
                    succeeded=True,
                    attempts=index,
                    value=attempt.value,
                    last_error=last_error,
                    history=tuple(history),
                )

            if attempt.error is not None:
                last_error = attempt.error
                last_reason = ""
            else:
                last_reason = attempt.reason

            logger.info("retryUntil iteration number %d", index)

            if index < self.times_to_repeat and self.timeout_ms:
                await self._sleep(self.timeout_ms / 1000)

        return PollResult(
            succeeded=False,
            attempts=self.times_to_repeat,
            last_error=last_error,
            last_reason=last_reason,
            operation=describe_operation(operation),
            history=tuple(history),
        )

    async def run(self, operation: PollOperation[T]) -> T:
        """Poll ``operation`` and return its success value; raises ``RetryExhausted``."""
        result = await self.poll(operation)
        return result.unwrap()


async def retry_until(operation: PollOperation[T], times_to_repeat: int = 3, timeout_ms: int = 0) -> T:
    """Functional shorthand for ``RetryPoller(times_to_repeat, timeout_ms).run(operation)``."""
    return await RetryPoller(times_to_repeat=times_to_repeat, timeout_ms=timeout_ms).run(operation)
