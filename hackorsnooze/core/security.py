import hashlib
import secrets
import string
import bcrypt

from hackorsnooze.core.config import BCRYPT_ROUNDS, RECOVERY_CODE_LENGTH


def new_recovery_code(length: int = RECOVERY_CODE_LENGTH) -> str:
    """
    Generate a numeric recovery code.

    Each digit is drawn independently, so leading zeros are kept
    (e.g. "045213").
    """
    return "".join(secrets.choice(string.digits) for _ in range(length))


def _prepare_secret_for_bcrypt(secret: str) -> bytes:
    """
    Prepare a secret for bcrypt hashing.
    Bcrypt has a 72 byte limit, so we hash longer secrets with SHA256 first.
    """
    secret_bytes = secret.encode('utf-8')
    if len(secret_bytes) > 72:
        return hashlib.sha256(secret_bytes).hexdigest().encode('utf-8')
    return secret_bytes


def hash_password(secret: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """
    Hash a password or recovery code using bcrypt.

    Args:
        secret: The plain text value to hash
        rounds: bcrypt work factor

    Returns:
        The bcrypt hash as a string
    """
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(_prepare_secret_for_bcrypt(secret), salt)
    return hashed.decode('utf-8')


def verify_password(plain: str, hashed: str) -> bool:
    """
    Verify a value against its bcrypt hash using constant-time comparison.

    Args:
        plain: The plain text value to verify
        hashed: The bcrypt hash to compare against

    Returns:
        True if the value matches, False otherwise
    """
    try:
        return bcrypt.checkpw(_prepare_secret_for_bcrypt(plain), hashed.encode('utf-8'))
    except (ValueError, TypeError):
        return False


_DUMMY_HASH: str | None = None


def dummy_verify(plain: str) -> None:
    """
    Burn the same bcrypt work as a real check when there is nothing to check.

    Keeps "no such row" indistinguishable from "wrong secret" by timing.
    """
    global _DUMMY_HASH
    if _DUMMY_HASH is None:
        _DUMMY_HASH = hash_password("dummy_value_for_timing")
    verify_password(plain, _DUMMY_HASH)
