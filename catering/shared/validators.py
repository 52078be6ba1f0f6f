"""Shared validation utilities"""

import re
from datetime import date
from typing import Optional

TIME_24H_PATTERN = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)$")
TIME_12H_PATTERN = re.compile(r"^(1[0-2]|0?[1-9]):([0-5]\d)\s*([AaPp][Mm])$")


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    # Basic email validation pattern
    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def validate_iso_date(value: str) -> date:
    """
    Parse a YYYY-MM-DD string.

    Raises:
        ValueError: If the string is not a calendar date
    """
    try:
        return date.fromisoformat(value.strip())
    except (ValueError, AttributeError) as e:
        raise ValueError("Date must be in YYYY-MM-DD format") from e


def parse_time_to_minutes(value: str) -> Optional[int]:
    """
    Convert "HH:MM" (24h) or "H:MM AM/PM" to minutes since midnight.

    Returns None for anything else.
    """
    if not isinstance(value, str):
        return None
    text = value.strip()

    match = TIME_24H_PATTERN.match(text)
    if match:
        return int(match.group(1)) * 60 + int(match.group(2))

    match = TIME_12H_PATTERN.match(text)
    if match:
        hour = int(match.group(1)) % 12
        if match.group(3).lower() == "pm":
            hour += 12
        return hour * 60 + int(match.group(2))

    return None


def validate_time_of_day(value: str) -> str:
    """
    Validate a time of day and normalize it to zero-padded 24h "HH:MM".

    Raises:
        ValueError: If the time cannot be parsed
    """
    minutes = parse_time_to_minutes(value)
    if minutes is None:
        raise ValueError("Time must be HH:MM (24h) or H:MM AM/PM")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"
