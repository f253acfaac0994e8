"""
Password hashing utilities.

Each account stores a random salt next to a bcrypt hash. The salted
password is digested with SHA-256 first so the bcrypt input is always
64 bytes, under bcrypt's 72-byte limit.
"""

import hashlib
import logging
import secrets

import bcrypt

from safetrade.core.settings import settings

logger = logging.getLogger(__name__)


def generate_salt() -> str:
    """Random 32-byte salt rendered as 64 hex characters."""
    return secrets.token_hex(32)


def _prehash(password: str, salt: str) -> bytes:
    return hashlib.sha256(f"{password}{salt}".encode("utf-8")).hexdigest().encode("ascii")


def hash_password(password: str, salt: str) -> str:
    """
    Hash a password with its salt.

    Args:
        password: Plain text password
        salt: Per-account salt from generate_salt()

    Returns:
        bcrypt hash string
    """
    hashed = bcrypt.hashpw(_prehash(password, salt), bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS))
    return hashed.decode("utf-8")


def verify_password(password: str, salt: str, password_hash: str) -> bool:
    """
    Check a password against a stored salt and hash.

    Returns False for a malformed stored hash instead of raising.
    """
    if not password or not salt or not password_hash:
        return False

    try:
        return bcrypt.checkpw(_prehash(password, salt), password_hash.encode("utf-8"))
    except ValueError as e:
        logger.warning(f"Stored password hash is malformed: {e}")
        return False
