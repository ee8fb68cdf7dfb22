from .addresses import generate_capture_address
from .mailtrap import MailtrapClient
from .models import BodyFormat, MailMessage
from .sns import (
    CONFIRMATION_SUBJECT,
    NOTIFICATION_SUBJECT,
    extract_confirmation_token,
    extract_confirmation_url,
)

__all__ = [
    "BodyFormat",
    "CONFIRMATION_SUBJECT",
    "MailMessage",
    "MailtrapClient",
    "NOTIFICATION_SUBJECT",
    "extract_confirmation_token",
    "extract_confirmation_url",
    "generate_capture_address",
]
