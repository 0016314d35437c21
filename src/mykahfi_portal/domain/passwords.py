"""Password hashing helpers with legacy plaintext compatibility."""

from __future__ import annotations

import hmac

import bcrypt

BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")
BCRYPT_ROUNDS = 12


def is_bcrypt_hash(value: str) -> bool:
    return value.startswith(BCRYPT_PREFIXES)


def hash_password(plain_password: str, *, rounds: int = BCRYPT_ROUNDS) -> str:
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(plain_password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, stored_password: str) -> bool:
    """Check a password against a bcrypt hash or a not-yet-migrated value.

    Accounts that have not gone through ``migrate-passwords`` still store
    plaintext; those are compared in constant time.
    """

    if not stored_password:
        return False
    if is_bcrypt_hash(stored_password):
        try:
            return bcrypt.checkpw(
                plain_password.encode("utf-8"),
                stored_password.encode("utf-8"),
            )
        except ValueError:
            return False
    return hmac.compare_digest(
        plain_password.encode("utf-8"),
        stored_password.encode("utf-8"),
    )
