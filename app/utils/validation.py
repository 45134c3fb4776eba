"""
Input validation utilities for the DUPulse API.

The helpers here back the pydantic validators in app.schemas and the query
parameter checks in the endpoints, so every resource applies the same rules.
"""

import logging
import re
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Optional, Tuple

from fastapi import HTTPException, status

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

MAX_PAGE_SIZE = 100


def is_non_empty_string(value: Any) -> bool:
    """True for strings that still contain something after trimming."""
    return isinstance(value, str) and len(value.strip()) > 0


def is_valid_email(value: Any) -> bool:
    """
    Check an email address against the platform's email rule.

    The rule is deliberately loose: something@something.something with no
    whitespace and a single @ on each side.
    """
    return isinstance(value, str) and EMAIL_PATTERN.fullmatch(value) is not None


def parse_utc_datetime(value: Any) -> Optional[datetime]:
    """
    Parse an ISO 8601 timestamp and normalize it to UTC.

    Naive timestamps are taken to be UTC already.

    Args:
        value: ISO 8601 string or datetime

    Returns:
        Timezone-aware UTC datetime, or None if the value cannot be parsed
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to datetimes read back from backends that drop the offset (SQLite)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def clean_optional_string(value: Any) -> Optional[str]:
    """Trim optional free-text fields; blank strings are stored as NULL."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError("must be a string.")
    return value.strip() or None


def day_bounds(day: str) -> Tuple[datetime, datetime]:
    """
    UTC start (inclusive) and end (exclusive) of a YYYY-MM-DD day.

    Raises:
        HTTPException 400: If the day is not a valid calendar date
    """
    try:
        parsed = date.fromisoformat(day.strip())
    except (AttributeError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Valid date parameter is required (YYYY-MM-DD)."
        )
    start = datetime.combine(parsed, time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)


def validate_id(value: str, label: str) -> str:
    """
    Validate a path or query identifier.

    Raises:
        HTTPException 400: If the identifier is blank or absurdly long
    """
    if not is_non_empty_string(value) or len(value) > 64:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Valid {label} is required."
        )
    return value.strip()


def validate_pagination(page: int, limit: int) -> Tuple[int, int]:
    """
    Validate page/limit query parameters.

    Returns:
        (offset, limit)

    Raises:
        HTTPException 400: If page < 1 or limit is outside 1..MAX_PAGE_SIZE
    """
    if page < 1:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Page must be 1 or greater"
        )
    if not 1 <= limit <= MAX_PAGE_SIZE:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Limit must be between 1 and {MAX_PAGE_SIZE}"
        )
    return (page - 1) * limit, limit
