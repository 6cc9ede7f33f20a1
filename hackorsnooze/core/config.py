"""
Environment driven settings for the Hack-or-Snooze API.

All values are read once at import time. Tests set the environment before
importing the application.
"""
import os
from datetime import timedelta


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


DB_URL = os.getenv("HACKORSNOOZE_DB_URL") or "sqlite:///.data/hackorsnooze.db"
DEBUG = _env_flag("HACKORSNOOZE_DEBUG")
LOG_TO_FILE = _env_flag("HACKORSNOOZE_LOG_TO_FILE", "true")

# bcrypt refuses fewer than 4 rounds
BCRYPT_ROUNDS = max(4, int(os.getenv("HACKORSNOOZE_BCRYPT_ROUNDS", "12")))

RECOVERY_CODE_LENGTH = 6
RECOVERY_CODE_TTL = timedelta(
    minutes=int(os.getenv("HACKORSNOOZE_RECOVERY_CODE_TTL_MINUTES", "10"))
)

TWILIO_ACCOUNT_SID = os.getenv("HACKORSNOOZE_TWILIO_ACCOUNT_SID", "")
TWILIO_AUTH_TOKEN = os.getenv("HACKORSNOOZE_TWILIO_AUTH_TOKEN", "")
TWILIO_NUMBER = os.getenv("HACKORSNOOZE_TWILIO_NUMBER", "")


def twilio_configured() -> bool:
    """True when every Twilio setting needed to send SMS is present."""
    return bool(TWILIO_ACCOUNT_SID and TWILIO_AUTH_TOKEN and TWILIO_NUMBER)
