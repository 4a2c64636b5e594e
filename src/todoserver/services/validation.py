"""Input rules shared by the auth and task services.

Each check returns an error message or None so callers can collect every
violated field before raising a single ValidationError.
"""

import re
from typing import Optional

NAME_MIN, NAME_MAX = 2, 50
PASSWORD_MIN = 6
PASSWORD_MAX_BYTES = 72
TITLE_MAX = 200

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class ValidationError(Exception):
    """Raised when caller input breaks one or more field rules.

    errors maps field name → human-readable message.
    """

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))

    @property
    def fields(self) -> list[str]:
        return list(self.errors)


def check_name(name: Optional[str]) -> Optional[str]:
    value = (name or "").strip()
    if not value:
        return "Name is required"
    if not NAME_MIN <= len(value) <= NAME_MAX:
        return f"Name must be between {NAME_MIN} and {NAME_MAX} characters"
    return None


def check_email(email: Optional[str]) -> Optional[str]:
    value = (email or "").strip()
    if not value:
        return "Email is required"
    if len(value) > 255 or not _EMAIL_RE.match(value):
        return "Please provide a valid email"
    return None


def check_password(password: Optional[str]) -> Optional[str]:
    if not password:
        return "Password is required"
    if len(password) < PASSWORD_MIN:
        return f"Password must be at least {PASSWORD_MIN} characters long"
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        return f"Password must be at most {PASSWORD_MAX_BYTES} bytes"
    return None


def check_title(title: Optional[str]) -> Optional[str]:
    value = (title or "").strip()
    if not value:
        return "Task title cannot be empty"
    if len(value) > TITLE_MAX:
        return f"Task title cannot exceed {TITLE_MAX} characters"
    return None


def raise_for(**results: Optional[str]) -> None:
    """Raise ValidationError if any of the named checks failed."""
    errors = {field: msg for field, msg in results.items() if msg}
    if errors:
        raise ValidationError(errors)
