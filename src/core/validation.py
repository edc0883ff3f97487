"""
Client-side validation for event and signup forms.

Problems are collected and raised as a single CLIENT_VALIDATION_ERROR before
anything is sent to the backend.
"""

import re
from datetime import datetime

from core.errors import create_app_error

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")
MIN_PASSWORD_LENGTH = 8


def _raise_if_errors(errors: list[str]) -> None:
    if errors:
        raise create_app_error("CLIENT_VALIDATION_ERROR", "; ".join(errors))


def validate_event_fields(title: str, start_at: datetime, end_at: datetime) -> None:
    """
    Check an event draft.

    Raises:
        AppError: CLIENT_VALIDATION_ERROR listing every problem found
    """
    errors = []
    if not title or not title.strip():
        errors.append("Title is required")
    if start_at.tzinfo is None or end_at.tzinfo is None:
        errors.append("Start and end must include a timezone")
    elif end_at < start_at:
        errors.append("End must not be before start")
    _raise_if_errors(errors)


def validate_category_fields(name: str, color: str) -> None:
    errors = []
    if not name or not name.strip():
        errors.append("Category name is required")
    if not COLOR_PATTERN.match(color or ""):
        errors.append(f"Invalid color '{color}', expected #RRGGBB")
    _raise_if_errors(errors)


def validate_signup_fields(
    email: str, password: str, confirm_password: str, agreed_to_terms: bool = True
) -> None:
    errors = []
    if not EMAIL_PATTERN.match(email or ""):
        errors.append("Please enter a valid email address.")
    if len(password or "") < MIN_PASSWORD_LENGTH:
        errors.append(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")
    if password != confirm_password:
        errors.append("Password and confirm password do not match.")
    if not agreed_to_terms:
        errors.append("Please agree to the terms and conditions.")
    _raise_if_errors(errors)
