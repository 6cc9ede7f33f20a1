"""
SMS recovery codes: issuing, checking and claiming.

An account has at most one live code (the recovery table is keyed by
username). Expiry is enforced when a code is checked: an expired entry is
deleted on the spot, whatever code was presented.
"""
from datetime import datetime, timedelta, timezone

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from hackorsnooze.core.db.tables.recovery import Recovery
from hackorsnooze.core.errors import RecoveryInvalid
from hackorsnooze.core.logger import get_logger
from hackorsnooze.core.security import dummy_verify, hash_password, verify_password

logger = get_logger(__name__)


def _as_utc(moment: datetime) -> datetime:
    # SQLite hands back naive datetimes; they were written as UTC
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def get_recovery_entry(session: Session, username: str) -> Recovery | None:
    return session.execute(
        select(Recovery).where(Recovery.username == username)
    ).scalar()


def store_recovery_code(session: Session, username: str, code: str) -> Recovery:
    """
    Persist the hash of ``code`` as the account's only recovery entry.

    A previous entry is overwritten in place (new hash, new start of the
    expiry window), so older codes stop working. Does not commit.
    """
    entry = get_recovery_entry(session, username)
    if entry is None:
        entry = Recovery(username=username)
        session.add(entry)

    entry.code = hash_password(code)
    entry.created_at = datetime.now(timezone.utc)
    session.flush()
    return entry


def is_expired(entry: Recovery, ttl: timedelta, now: datetime | None = None) -> bool:
    now = now or datetime.now(timezone.utc)
    return now - _as_utc(entry.created_at) > ttl


def check_recovery_code(
    session: Session,
    username: str,
    code: str,
    ttl: timedelta,
    now: datetime | None = None,
) -> Recovery:
    """
    Validate a presented code against the account's recovery entry.

    Checks run in order: the entry exists, it is inside the expiry window,
    and the code matches its hash. An expired entry is deleted and the
    deletion committed before failing. A wrong code leaves the entry so the
    user can retry until it expires.

    Returns:
        The live entry

    Raises:
        RecoveryInvalid: for a missing entry, an expired entry or a wrong code
    """
    entry = get_recovery_entry(session, username)

    if entry is None:
        dummy_verify(code)
        logger.warning(f"Recovery failed - no live code for user: {username}")
        raise RecoveryInvalid()

    if is_expired(entry, ttl, now):
        session.delete(entry)
        session.commit()
        logger.warning(f"Recovery failed - expired code removed for user: {username}")
        raise RecoveryInvalid()

    if not verify_password(code, entry.code):
        logger.warning(f"Recovery failed - wrong code for user: {username}")
        raise RecoveryInvalid()

    return entry


def claim_recovery_code(session: Session, entry: Recovery) -> None:
    """
    Delete a checked entry, but only if it is still the same entry.

    Two redemptions racing on one code both pass the checks; only the one
    whose conditional delete removes the row may go on. Does not commit.

    Raises:
        RecoveryInvalid: if the entry was already claimed or replaced
    """
    username = entry.username
    result = session.execute(
        delete(Recovery).where(Recovery.username == username, Recovery.code == entry.code)
    )
    if result.rowcount != 1:
        session.rollback()
        logger.warning(f"Recovery failed - code already claimed for user: {username}")
        raise RecoveryInvalid()
