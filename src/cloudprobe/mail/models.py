from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class BodyFormat(str, Enum):
    """Body variants served by the mail-capture API."""
    html = "html"
    txt = "txt"
    raw = "raw"


class MailMessage(BaseModel):
    """A captured message as listed by the inbox endpoint."""
    model_config = {"extra": "ignore"}

    id: str = Field(..., description="Message identifier within the inbox.")
    to_email: str = Field("", description="Recipient field; may hold several addresses.")
    subject: str = ""
    sent_at: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_to_str(cls, value: Any) -> Any:
        # the API serves numeric ids
        return str(value) if isinstance(value, int) else value

    @field_validator("to_email", "subject", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    def matches(self, recipient: str, subject: str) -> bool:
        """Recipient is a substring match (plus-addressing); subject must be exact."""
        return recipient in self.to_email and self.subject == subject
