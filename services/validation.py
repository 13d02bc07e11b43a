"""
Field rules for every entity, shared by the create and update paths.

Each validator raises ``ValidationError`` with the first rule that fails.
Lengths are checked on the raw value; blank values are rejected first.
"""

import re

from core.exceptions import ValidationError

EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')


def _require_text(value: str | None, label: str, min_length: int, max_length: int) -> None:
    if value is None or not value.strip():
        raise ValidationError(f"{label} cannot be null or empty")
    if len(value) < min_length:
        raise ValidationError(f"{label} must be at least {min_length} characters long")
    if len(value) > max_length:
        raise ValidationError(f"{label} cannot exceed {max_length} characters")


def validate_username(username: str | None) -> None:
    _require_text(username, "Username", 2, 50)
    if not username.isalnum():
        raise ValidationError("Username can only contain letters and digits")


def validate_password(password: str | None) -> None:
    _require_text(password, "Password", 3, 100)
    if not any(ch.isupper() for ch in password):
        raise ValidationError("Password must contain at least one uppercase letter")
    if not any(ch.islower() for ch in password):
        raise ValidationError("Password must contain at least one lowercase letter")
    if not any(ch.isdigit() for ch in password):
        raise ValidationError("Password must contain at least one digit")
    if all(ch.isalnum() for ch in password):
        raise ValidationError("Password must contain at least one special character")


def validate_email(email: str) -> None:
    if not EMAIL_PATTERN.match(email):
        raise ValidationError("Invalid email format")


def validate_registration(username: str | None, password: str | None, email: str | None = None) -> None:
    validate_username(username)
    validate_password(password)
    if email is not None:
        validate_email(email)


def validate_post(title: str | None, content: str | None) -> None:
    _require_text(title, "Title", 3, 100)
    _require_text(content, "Content", 10, 5000)


def validate_category(name: str | None, description: str | None) -> None:
    _require_text(name, "Category name", 2, 50)
    if description is not None and len(description) > 200:
        raise ValidationError("Category description cannot exceed 200 characters")
