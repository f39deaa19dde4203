"""Password hashing for native accounts."""

from __future__ import annotations

import bcrypt

from tools.observability import instrument_tool

SALT_ROUNDS = 10
MIN_PASSWORD_LENGTH = 6


class WeakPasswordError(ValueError):
    """Raised when a password is missing or shorter than the minimum length."""


def check_password_strength(password: object) -> str:
    if not isinstance(password, str) or len(password.strip()) < MIN_PASSWORD_LENGTH:
        raise WeakPasswordError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")
    return password


@instrument_tool("hash_password")
def hash_password(password: str, rounds: int = SALT_ROUNDS) -> str:
    check_password_strength(password)
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


@instrument_tool("verify_password")
def verify_password(password: str, password_hash: str | None) -> bool:
    """Compare ``password`` with a stored hash; a missing or corrupt hash never matches."""

    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


__all__ = [
    "MIN_PASSWORD_LENGTH",
    "SALT_ROUNDS",
    "WeakPasswordError",
    "check_password_strength",
    "hash_password",
    "verify_password",
]
