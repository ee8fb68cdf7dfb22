"""
Configuration for cloudprobe.

Settings come from environment variables, optionally seeded from a ``.env``
file. Nothing is cached at module level; build a ``ProbeConfig`` once per
test session and pass it to the components that need it.
"""
from __future__ import annotations

import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .errors import ConfigurationError

DEFAULT_REGION = "us-east-1"
DEFAULT_MAILTRAP_URL = "https://mailtrap.io/api"

# Email delivery routinely takes tens of seconds.
DEFAULT_MAIL_POLL_ATTEMPTS = 10
DEFAULT_MAIL_POLL_DELAY_MS = 10_000

DEFAULT_LOG_POLL_ATTEMPTS = 6
DEFAULT_LOG_POLL_DELAY_MS = 10_000


class PollPolicy(BaseModel):
    """Attempt budget and fixed delay for a retry poll."""

    model_config = {"frozen": True}

    attempts: int = Field(3, ge=1, description="Maximum number of attempts.")
    delay_ms: int = Field(0, ge=0, description="Delay between attempts in milliseconds.")


class ProbeConfig(BaseModel):
    """Settings shared by the library and the acceptance suite."""

    region: str = DEFAULT_REGION
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_account_id: Optional[str] = None

    mailtrap_url: str = DEFAULT_MAILTRAP_URL
    mailtrap_token: Optional[str] = None
    mailtrap_account_id: Optional[str] = None
    mailtrap_inbox_id: Optional[str] = None
    mailtrap_email: Optional[str] = Field(
        None, description="Capture address template; '%s' is replaced by a UUID."
    )

    mail_poll_attempts: int = Field(DEFAULT_MAIL_POLL_ATTEMPTS, ge=1)
    mail_poll_delay_ms: int = Field(DEFAULT_MAIL_POLL_DELAY_MS, ge=0)
    log_poll_attempts: int = Field(DEFAULT_LOG_POLL_ATTEMPTS, ge=1)
    log_poll_delay_ms: int = Field(DEFAULT_LOG_POLL_DELAY_MS, ge=0)

    image_stack_prefix: str = "cloudximage"
    serverless_stack_prefix: str = "cloudxserverless"
    required_tag_key: str = "cloudx"
    required_tag_value: str = "qa"

    http_timeout: float = Field(10.0, gt=0)
    live: bool = False

    log_level: str = "INFO"
    log_file: Optional[str] = None
    cloudwatch_log_group: Optional[str] = None

    @classmethod
    def from_env(cls, env_file: Optional[str] = None, environ: Optional[Dict[str, str]] = None) -> "ProbeConfig":
        """Load config from environment variables (and a .env file if present)."""
        if environ is None:
            load_dotenv(env_file, override=False)
            environ = dict(os.environ)

        def get(name: str, default: Any = None) -> Any:
            value = environ.get(name)
            return value if value not in (None, "") else default

        return cls(
            region=get("AWS_REGION", DEFAULT_REGION),
            aws_access_key_id=get("AWS_ACCESS_KEY_ID"),
            aws_secret_access_key=get("AWS_SECRET_ACCESS_KEY"),
            aws_account_id=get("AWS_ACCOUNT_ID"),
            mailtrap_url=get("MAILTRAP_URL", DEFAULT_MAILTRAP_URL),
            mailtrap_token=get("MAILTRAP_TOKEN"),
            mailtrap_account_id=get("MAILTRAP_ACCOUNT_ID"),
            mailtrap_inbox_id=get("MAILTRAP_INBOX_ID"),
            mailtrap_email=get("MAILTRAP_EMAIL"),
            mail_poll_attempts=get("MAIL_POLL_ATTEMPTS", DEFAULT_MAIL_POLL_ATTEMPTS),
            mail_poll_delay_ms=get("MAIL_POLL_DELAY_MS", DEFAULT_MAIL_POLL_DELAY_MS),
            log_poll_attempts=get("LOG_POLL_ATTEMPTS", DEFAULT_LOG_POLL_ATTEMPTS),
            log_poll_delay_ms=get("LOG_POLL_DELAY_MS", DEFAULT_LOG_POLL_DELAY_MS),
            image_stack_prefix=get("IMAGE_STACK_PREFIX", "cloudximage"),
            serverless_stack_prefix=get("SERVERLESS_STACK_PREFIX", "cloudxserverless"),
            required_tag_key=get("REQUIRED_TAG_KEY", "cloudx"),
            required_tag_value=get("REQUIRED_TAG_VALUE", "qa"),
            http_timeout=get("HTTP_TIMEOUT", 10.0),
            live=get("CLOUDPROBE_LIVE", "0") == "1",
            log_level=get("LOG_LEVEL", "INFO").upper(),
            log_file=get("LOG_FILE"),
            cloudwatch_log_group=get("CLOUDWATCH_LOG_GROUP"),
        )

    @property
    def mail_policy(self) -> PollPolicy:
        return PollPolicy(attempts=self.mail_poll_attempts, delay_ms=self.mail_poll_delay_ms)

    @property
    def log_policy(self) -> PollPolicy:
        return PollPolicy(attempts=self.log_poll_attempts, delay_ms=self.log_poll_delay_ms)

    def require(self, *names: str) -> None:
        """Raise ``ConfigurationError`` naming every listed setting that is unset."""
        missing = [name for name in names if getattr(self, name) in (None, "")]
        if missing:
            raise ConfigurationError(missing)
