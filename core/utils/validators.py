import re
import uuid
from typing import Optional

from django.contrib.auth.models import User
from rest_framework.exceptions import ValidationError

EMAIL_REGEX = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
SPECIAL_CHARACTER_REGEX = r"[!@#$%^&*(),.?\":{}|<>]"


def validate_email_format(email: str):
    """Checks the email format"""
    if not re.match(EMAIL_REGEX, email):
        raise ValidationError({"email": "Invalid email address."})


def validate_email_unique(email: str):
    """Checks if email already exists"""
    if User.objects.filter(email__iexact=email).exists():
        raise ValidationError({"email": "Email address is already in use."})


def validate_password_strength(password: str):
    """Checks the password strength"""
    if len(password) < 8:
        raise ValidationError(
            {"password": "Password must be at least 8 characters long."})
    if not re.search(r"[A-Z]", password):
        raise ValidationError(
            {"password": "At least one uppercase letter is required."})
    if not re.search(r"[a-z]", password):
        raise ValidationError(
            {"password": "At least one lowercase letter is required."})
    if not re.search(r"\d", password):
        raise ValidationError(
            {"password": "At least one digit is required."})
    if not re.search(SPECIAL_CHARACTER_REGEX, password):
        raise ValidationError(
            {"password": "At least one special character is required."})


def parse_identifier(value) -> Optional[str]:
    """Returns the canonical form of a well-formed identifier (UUID), or None"""
    if value is None or isinstance(value, bool):
        return None
    try:
        return str(uuid.UUID(str(value).strip()))
    except (ValueError, AttributeError, TypeError):
        return None


def canonical_id(value) -> str:
    """String form used to compare identifiers; falls back to str() for malformed ids"""
    parsed = parse_identifier(value)
    if parsed is not None:
        return parsed
    return '' if value is None else str(value)
