"""
Account model: registration, profile updates and SMS recovery.

Writes go through the partial-update builder and every operation that
returns an account re-reads it from the database afterwards.
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hackorsnooze.core.config import RECOVERY_CODE_TTL
from hackorsnooze.core.db.partial_update import apply_partial_update
from hackorsnooze.core.db.tables.favorite import Favorite
from hackorsnooze.core.db.tables.story import Story
from hackorsnooze.core.db.tables.user import User
from hackorsnooze.core.errors import (
    AccountExists,
    AccountNotFound,
    InvalidCredentials,
    RecoveryNotConfigured,
)
from hackorsnooze.core.logger import get_logger
from hackorsnooze.core.phone import format_phone_number
from hackorsnooze.core.recovery import (
    check_recovery_code,
    claim_recovery_code,
    store_recovery_code,
)
from hackorsnooze.core.security import (
    dummy_verify,
    hash_password,
    new_recovery_code,
    verify_password,
)
from hackorsnooze.core.sms import SmsSender

logger = get_logger(__name__)

# Columns a caller may change through patch_account
PATCHABLE_FIELDS = ("name", "password", "phone")
# Only phone may be cleared with None
NOT_NULL_FIELDS = ("name", "password")

RECOVERY_MESSAGE = "Your Hack-or-Snooze recovery code is {code}. It expires in {minutes} minutes."


@dataclass
class AccountDetail:
    """An account together with its own stories and favorited stories."""

    user: User
    stories: list[Story] = field(default_factory=list)
    favorites: list[Story] = field(default_factory=list)


class Accounts:
    """
    Account operations bound to one database session.

    The SMS sender is optional; without it the recovery operations raise
    RecoveryNotConfigured instead of silently doing nothing.
    """

    def __init__(
        self,
        session: Session,
        sms_sender: SmsSender | None = None,
        recovery_ttl: timedelta = RECOVERY_CODE_TTL,
    ):
        self.session = session
        self.sms_sender = sms_sender
        self.recovery_ttl = recovery_ttl

    def _find(self, username: str) -> User | None:
        return self.session.execute(
            select(User).where(User.username == username)
        ).scalar()

    def get_account(self, username: str) -> User:
        user = self._find(username)
        if user is None:
            raise AccountNotFound(username)
        return user

    def get_account_detail(self, username: str) -> AccountDetail:
        user = self.get_account(username)

        stories = self.session.execute(
            select(Story)
            .where(Story.username == username)
            .order_by(Story.created_at.desc(), Story.story_id.desc())
        ).scalars().all()

        # stories.author is read through the join, so favorites always show
        # the author's current name
        favorites = self.session.execute(
            select(Story)
            .join(Favorite, Favorite.story_id == Story.story_id)
            .where(Favorite.username == username)
            .order_by(Story.story_id)
        ).scalars().all()

        return AccountDetail(user=user, stories=list(stories), favorites=list(favorites))

    def create_account(
        self,
        username: str,
        name: str,
        password: str,
        phone: str | None = None,
    ) -> User:
        """
        Register a new account.

        Raises:
            AccountExists: if the username is taken
            InvalidPhoneFormat: if a phone number was given and cannot be normalized
        """
        logger.info(f"New user registration attempt: {username}")

        if self._find(username) is not None:
            logger.warning(f"Registration failed - username already exists: {username}")
            raise AccountExists(username)

        user = User(
            username=username,
            name=name,
            password=hash_password(password),
            phone=format_phone_number(phone) if phone else None,
        )

        try:
            self.session.add(user)
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            logger.error(f"Database integrity error during user creation: {username}")
            raise AccountExists(username)

        logger.info(f"User created successfully: {username}")
        return self.get_account(username)

    def authenticate(self, username: str, password: str) -> User:
        """
        Check a username/password pair.

        Unknown users and wrong passwords fail the same way, after the same
        amount of bcrypt work.
        """
        user = self._find(username)
        if user is None:
            dummy_verify(password)
            raise InvalidCredentials()
        if not verify_password(password, user.password):
            raise InvalidCredentials()
        return user

    def _write_fields(self, username: str, fields: dict[str, Any]) -> None:
        items = dict(fields)
        items["updated_at"] = datetime.now(timezone.utc)
        apply_partial_update(self.session, "users", items, "username", username)

        if "name" in fields:
            apply_partial_update(
                self.session, "stories", {"author": fields["name"]}, "username", username
            )

    def patch_account(self, username: str, fields: dict[str, Any]) -> User:
        """
        Update any of name, password and phone.

        A new password is hashed and a new phone normalized (None clears it).
        A name change is copied into the author of every story the account
        posted, in the same transaction as the account row.

        Raises:
            AccountNotFound: if the account does not exist
            InvalidPhoneFormat: if the new phone number cannot be normalized
            ValueError: if ``fields`` holds a column outside PATCHABLE_FIELDS
                or sets name or password to None
        """
        unknown = set(fields) - set(PATCHABLE_FIELDS)
        if unknown:
            raise ValueError(f"Fields cannot be patched: {sorted(unknown)}")
        required = [name for name in NOT_NULL_FIELDS if name in fields and fields[name] is None]
        if required:
            raise ValueError(f"Fields cannot be null: {required}")

        self.get_account(username)

        updates = {}
        for name, value in fields.items():
            if name == "password":
                value = hash_password(value)
            elif name == "phone" and value is not None:
                value = format_phone_number(value)
            updates[name] = value

        self._write_fields(username, updates)
        self.session.commit()
        logger.info(f"User updated: {username} ({', '.join(updates) or 'timestamp'})")

        return self.get_account(username)

    def delete_account(self, username: str) -> AccountDetail:
        """Delete an account; its stories, favorites and recovery entry cascade."""
        detail = self.get_account_detail(username)
        # keep the returned rows loaded after the delete commits
        self.session.expunge_all()
        self.session.execute(delete(User).where(User.username == username))
        self.session.commit()
        logger.info(f"User deleted: {username}")
        return detail

    def _require_sms(self) -> SmsSender:
        if self.sms_sender is None:
            raise RecoveryNotConfigured()
        return self.sms_sender

    def initiate_recovery(self, username: str) -> bool:
        """
        Issue a fresh recovery code and text it to the account's phone.

        Returns False, without storing anything, when the account does not
        exist or has no phone on file. Callers must answer the same way in
        every case so usernames cannot be probed.

        Raises:
            RecoveryNotConfigured: if no SMS sender was provided
        """
        sms_sender = self._require_sms()

        user = self._find(username)
        if user is None or not user.phone:
            logger.info(f"Recovery not started - no phone on file for user: {username}")
            return False

        code = new_recovery_code()
        store_recovery_code(self.session, username, code)
        self.session.commit()

        minutes = int(self.recovery_ttl.total_seconds() // 60)
        sms_sender.send(user.phone, RECOVERY_MESSAGE.format(code=code, minutes=minutes))
        logger.info(f"Recovery code issued for user: {username}")
        return True

    def redeem_recovery(self, username: str, code: str, new_password: str) -> bool:
        """
        Reset the password with a recovery code.

        The code is claimed and the new password written in one transaction,
        so a code works at most once and a failed write leaves it usable.

        Raises:
            RecoveryNotConfigured: if no SMS sender was provided
            RecoveryInvalid: if there is no live code, it expired, or it does not match
        """
        self._require_sms()

        entry = check_recovery_code(self.session, username, code, self.recovery_ttl)
        claim_recovery_code(self.session, entry)

        try:
            self._write_fields(username, {"password": hash_password(new_password)})
            self.session.commit()
        except Exception:
            self.session.rollback()
            logger.error(f"Password reset failed after code check for user: {username}")
            raise

        logger.info(f"Password reset through recovery for user: {username}")
        return True
