"""
Date and time utilities for CGGTTS processing.

Provides conversions between:
- Modified Julian Date (MJD), as days since 1858-11-17 00:00 UTC
- timezone-aware UTC datetimes
- the HHMMSS start-time token of track lines

CGGTTS is strictly UTC: naive datetimes are taken to be UTC already.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone


# Constants
MJD_EPOCH = datetime(1858, 11, 17, tzinfo=timezone.utc)
SECONDS_PER_DAY = 86400

_HHMMSS_PATTERN = re.compile(r"^(\d{2})(\d{2})(\d{2})$")


def ensure_utc(dt: datetime) -> datetime:
    """Return dt expressed in UTC.

    Naive datetimes are assumed to already be UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def datetime_from_mjd(mjd: int | float) -> datetime:
    """Convert MJD to datetime.

    Args:
        mjd: Modified Julian Date (integer days are exact)

    Returns:
        datetime object (UTC)
    """
    if isinstance(mjd, int):
        return MJD_EPOCH + timedelta(days=mjd)
    return MJD_EPOCH + timedelta(seconds=mjd * SECONDS_PER_DAY)


def mjd_from_datetime(dt: datetime) -> float:
    """Calculate the (fractional) MJD of a datetime."""
    return (ensure_utc(dt) - MJD_EPOCH) / timedelta(days=1)


def mjd_day(dt: datetime) -> int:
    """Integer MJD of the day containing dt."""
    return (ensure_utc(dt) - MJD_EPOCH).days


def parse_hhmmss(text: str) -> timedelta:
    """Parse a track start time (HHMMSS) into an offset within the day.

    Raises:
        ValueError: If text is not six digits or out of range
    """
    match = _HHMMSS_PATTERN.match(text)
    if not match:
        raise ValueError(f"invalid HHMMSS: {text!r}")
    hours, minutes, seconds = (int(g) for g in match.groups())
    if hours > 23 or minutes > 59 or seconds > 59:
        raise ValueError(f"invalid HHMMSS: {text!r}")
    return timedelta(hours=hours, minutes=minutes, seconds=seconds)


def format_hhmmss(dt: datetime) -> str:
    """Format the UTC time of day of dt as HHMMSS."""
    dt = ensure_utc(dt)
    return f"{dt.hour:02d}{dt.minute:02d}{dt.second:02d}"
