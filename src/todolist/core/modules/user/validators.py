import re

from todolist.errors import ValidationError

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def validate_name(name: str) -> None:
    """Validate display name: 2 to 100 characters after trimming."""
    if not 2 <= len(name.strip()) <= 100:
        raise ValidationError("Name must be between 2 and 100 characters long")


def validate_email(email: str) -> None:
    if len(email) > 254 or not EMAIL_RE.fullmatch(email):
        raise ValidationError(f"Invalid email address: '{email}'")


def validate_password(password: str) -> None:
    """Validate password meets requirements.

    Requirements:
    - No whitespace characters
    - Minimum length of 6 characters
    - At most 72 bytes in UTF-8 (bcrypt input limit)

    Raises:
        ValidationError: If password doesn't meet requirements
    """
    if len(password) < 6:
        raise ValidationError("Password must be at least 6 characters long")

    if len(password.encode("utf-8")) > 72:
        raise ValidationError("Password must be at most 72 bytes long")

    if any(char.isspace() for char in password):
        raise ValidationError("Password cannot contain whitespace characters")
