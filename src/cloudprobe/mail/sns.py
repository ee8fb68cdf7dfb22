"""Parsing of SNS subscription-confirmation emails."""
import re
from typing import Optional
from urllib.parse import parse_qs, urlparse

CONFIRMATION_SUBJECT = "AWS Notification - Subscription Confirmation"
NOTIFICATION_SUBJECT = "AWS Notification Message"


def extract_confirmation_url(body: str, region: str) -> Optional[str]:
    """The first ``https://sns.<region>.amazonaws.com`` link in an email body."""
    pattern = re.compile(rf"(https://sns\.{re.escape(region)}\.amazonaws\.com[^\"'\s<]*)")
    match = pattern.search(body)
    if not match:
        return None
    return match.group(1).replace("&amp;", "&")


def extract_confirmation_token(body: str, region: str) -> str:
    """Token to pass to ``ConfirmSubscription``; raises ValueError if absent."""
    url = extract_confirmation_url(body, region)
    if url is None:
        raise ValueError(f"No SNS confirmation link for region {region} in email body")
    token = parse_qs(urlparse(url).query).get("Token")
    if not token:
        raise ValueError(f"No Token parameter in confirmation link: {url}")
    return token[0]
