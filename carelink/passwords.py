"""
Name: Password Hashing

Responsibilities:
  - Hash passwords using Argon2 (salted, memory/time costed)
  - Verify a plaintext against a stored hash

Constraints:
  - Plaintext is never persisted; a hashing failure aborts the write
  - Shared by all roles (donor, volunteer, operator, administrator)
"""

from argon2 import PasswordHasher
from argon2.exceptions import (
    HashingError,
    InvalidHashError,
    VerificationError,
    VerifyMismatchError,
)

from .exceptions import PasswordHashingError
from .logger import logger

_password_hasher = PasswordHasher()


def hash_password(password: str) -> str:
    """R: Hash a password using Argon2."""
    try:
        return _password_hasher.hash(password)
    except HashingError as exc:
        logger.error("Password hashing failed", extra={"error": str(exc)})
        raise PasswordHashingError("Password hashing failed") from exc


def verify_password(password: str, password_hash: str | None) -> bool:
    """R: Verify password against stored hash."""
    if not password or not password_hash:
        return False
    try:
        return _password_hasher.verify(password_hash, password)
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False
