"""Password hashing with bcrypt."""

import bcrypt

from todolist.errors import HashingError


def hash_password(password: str, rounds: int) -> str:
    """Return a salted bcrypt hash of `password`.

    Raises:
        HashingError: If bcrypt rejects the input or the cost factor
    """
    try:
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")
    except ValueError as e:
        raise HashingError(f"Password hashing failed: {e}") from e


def verify_password(password_hash: str, password: str) -> bool:
    """Check `password` against a stored hash. A malformed hash never matches."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False
