from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Generic, Optional, Protocol, Tuple, TypeVar

from .errors import RetryExhausted

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


@dataclass(frozen=True)
class Ready(Generic[T]):
    """Explicit success; ``value`` is returned even when it is falsy."""
    value: T


@dataclass(frozen=True)
class NotReady:
    """Explicit request for another attempt."""
    reason: str = ""


class PollOperation(Protocol[T_co]):
    """Zero-argument callable awaiting to Ready, NotReady or a bare value judged by truthiness; may raise."""
    def __call__(self) -> Awaitable[T_co]: ...


@dataclass(frozen=True)
class RetryAttempt:
    index: int                                # 1-based
    value: Any = None
    error: Optional[BaseException] = None
    reason: str = ""
    succeeded: bool = False


@dataclass(frozen=True)
class PollResult(Generic[T]):
    succeeded: bool
    attempts: int
    value: Optional[T] = None
    last_error: Optional[BaseException] = None
    last_reason: str = ""
    operation: str = ""
    history: Tuple[RetryAttempt, ...] = field(default_factory=tuple)

    def unwrap(self) -> T:
        """Return the success value or raise ``RetryExhausted``."""
        if self.succeeded:
            return self.value  # type: ignore[return-value]
        raise RetryExhausted(
            self.attempts,
            last_error=self.last_error,
            operation=self.operation,
            reason=self.last_reason,
        )
