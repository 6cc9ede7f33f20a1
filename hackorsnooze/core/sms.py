"""
Outbound SMS transport.

Sending is best effort: transport failures are logged and never reach the
caller.
"""
from typing import Protocol

from twilio.base.exceptions import TwilioException
from twilio.rest import Client

from hackorsnooze.core import config
from hackorsnooze.core.logger import get_logger

logger = get_logger(__name__)


class SmsSender(Protocol):
    def send(self, to: str, body: str) -> None:
        ...


class TwilioSmsSender:
    """Send messages through the Twilio REST API."""

    def __init__(self, account_sid: str, auth_token: str, from_number: str):
        self.client = Client(account_sid, auth_token)
        self.from_number = from_number

    def send(self, to: str, body: str) -> None:
        try:
            self.client.messages.create(body=body, from_=self.from_number, to=to)
        except (TwilioException, OSError) as e:
            logger.error(f"SMS delivery failed: {e}")
            return
        logger.info("SMS recovery message sent")


_SENDER: TwilioSmsSender | None = None


def get_sms_sender() -> SmsSender | None:
    """
    Dependency returning the configured SMS sender, or None when Twilio
    settings are missing. Recovery operations report "not configured" when
    they receive None.
    """
    global _SENDER
    if not config.twilio_configured():
        return None
    if _SENDER is None:
        number = config.TWILIO_NUMBER
        if not number.startswith("+"):
            number = f"+{number}"
        _SENDER = TwilioSmsSender(
            config.TWILIO_ACCOUNT_SID, config.TWILIO_AUTH_TOKEN, number
        )
    return _SENDER
