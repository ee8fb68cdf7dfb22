"""Polling helpers and acceptance checks for deployed AWS stacks."""
from .config import PollPolicy, ProbeConfig
from .errors import ConfigurationError, MessageNotFound, ProbeError, ResourceNotFound, RetryExhausted
from .polling import RetryPoller, retry_until
from .types import NotReady, PollResult, Ready, RetryAttempt

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "MessageNotFound",
    "NotReady",
    "PollPolicy",
    "PollResult",
    "ProbeConfig",
    "ProbeError",
    "Ready",
    "ResourceNotFound",
    "RetryAttempt",
    "RetryExhausted",
    "RetryPoller",
    "retry_until",
]
