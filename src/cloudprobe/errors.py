"""
Exception hierarchy for cloudprobe.

Every error here is terminal: callers (test cases) treat them as assertion
failures rather than recovering.
"""
from __future__ import annotations

from typing import Iterable, Optional


class ProbeError(Exception):
    """Base class for all cloudprobe errors."""


class RetryExhausted(ProbeError):
    """Raised when a poll spends its attempt budget without a success."""

    def __init__(
        self,
        attempts: int,
        last_error: Optional[BaseException] = None,
        operation: str = "",
        reason: str = "",
    ):
        self.attempts = attempts
        self.last_error = last_error
        self.operation = operation
        self.reason = reason
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        with_error = f"with error: {self.last_error}\n" if self.last_error else ""
        with_reason = f"last reason: {self.reason}\n" if self.reason else ""
        return (
            f"RetryUntil failed after {self.attempts} attempt(s) {with_error}{with_reason}"
            f"Condition wasn't successful:\n{self.operation}"
        )


class MessageNotFound(RetryExhausted):
    """No captured email matched the recipient and subject within the poll window."""

    def __init__(
        self,
        recipient: str,
        subject: str,
        attempts: int,
        last_error: Optional[BaseException] = None,
        operation: str = "",
    ):
        self.recipient = recipient
        self.subject = subject
        super().__init__(attempts, last_error=last_error, operation=operation)

    def _build_message(self) -> str:
        with_error = f" with error: {self.last_error}" if self.last_error else ""
        message = (
            f'Email sent to "{self.recipient}" with subject "{self.subject}" '
            f"was not found after {self.attempts} attempt(s){with_error}"
        )
        if self.operation:
            message += f"\nCondition wasn't successful:\n{self.operation}"
        return message


class ResourceNotFound(ProbeError):
    """A discovery lookup found no resource matching the prefix."""

    def __init__(self, kind: str, prefix: str):
        self.kind = kind
        self.prefix = prefix
        super().__init__(f"No {kind} found with prefix: {prefix}")


class ConfigurationError(ProbeError):
    """One or more required settings are missing."""

    def __init__(self, missing: Iterable[str]):
        self.missing = sorted(missing)
        super().__init__(f"Missing required settings: {', '.join(self.missing)}")
