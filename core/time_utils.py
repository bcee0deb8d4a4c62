"""
Time utilities for OohPay.
Contains time zone resolution, instant parsing, and the local-calendar
day walk shared by the period classifier and the analytics transforms.
"""
from __future__ import annotations

import logging
import re
from datetime import datetime, date, timedelta, timezone
from typing import Iterator
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from core.constants import SECONDS_PER_HOUR, WEEKDAY_DAYS, WEEKEND_DAYS
from utils.error_handler import InvalidPeriodError, InvalidTimezoneError

logger = logging.getLogger(__name__)

UTC = timezone.utc

_FRACTION_RE = re.compile(r"(:\d{2})[.,](\d+)")


# =============================================================================
# Time Zones
# =============================================================================

def resolve_timezone(name: str) -> ZoneInfo:
    """
    Resolve an IANA time zone identifier.

    Raises:
        InvalidTimezoneError: if the identifier is empty or unknown. There is
        no fallback to UTC.
    """
    if not isinstance(name, str) or not name.strip():
        raise InvalidTimezoneError(
            "Time zone is required",
            details={'timezone': name},
        )
    try:
        return ZoneInfo(name.strip())
    except (ZoneInfoNotFoundError, ValueError, OSError) as e:
        raise InvalidTimezoneError(
            f"Unknown time zone: {name}",
            details={'timezone': name},
            user_message=f"'{name}' is not a recognised time zone",
        ) from e


# =============================================================================
# Instants
# =============================================================================

def ensure_aware(value: datetime) -> datetime:
    """Return an aware datetime; naive values are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def parse_iso_instant(value: str | datetime) -> datetime:
    """
    Parse an ISO-8601 instant ('2024-01-15T09:00:00Z', '+01:00' offsets, ...).

    Raises:
        InvalidPeriodError: if the value cannot be parsed.
    """
    if isinstance(value, datetime):
        return ensure_aware(value)
    if not isinstance(value, str) or not value.strip():
        raise InvalidPeriodError(
            "Shift instant is missing",
            details={'value': value},
        )

    text = value.strip()
    # fromisoformat() only learned the 'Z' suffix in Python 3.11
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    # Before 3.11 fromisoformat() accepts only 3 or 6 fractional digits
    text = _FRACTION_RE.sub(lambda m: m.group(1) + "." + (m.group(2) + "000000")[:6], text, count=1)
    try:
        return ensure_aware(datetime.fromisoformat(text))
    except ValueError as e:
        raise InvalidPeriodError(
            f"Invalid ISO-8601 instant: {value}",
            details={'value': value},
            user_message=f"'{value}' is not a valid date/time",
        ) from e


def to_utc_iso(value: datetime) -> str:
    """Format an instant as '2024-01-15T09:00:00.000Z'."""
    utc_value = ensure_aware(value).astimezone(UTC)
    return utc_value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc_value.microsecond // 1000:03d}Z"


def hours_between(start: datetime, end: datetime) -> float:
    """Elapsed hours between two instants (zone independent)."""
    return (ensure_aware(end) - ensure_aware(start)).total_seconds() / SECONDS_PER_HOUR


# =============================================================================
# Local Calendar
# =============================================================================

def to_local(value: datetime, tz: ZoneInfo) -> datetime:
    """Convert an instant to wall-clock time in tz."""
    return ensure_aware(value).astimezone(tz)


def decimal_hour(value: datetime) -> float:
    """Wall-clock hour as a decimal, e.g. 17:30 -> 17.5 (seconds ignored)."""
    return value.hour + value.minute / 60


def iter_local_days(start: datetime, end: datetime, tz: ZoneInfo) -> Iterator[date]:
    """
    Yield every local calendar day from start's day through end's day inclusive.

    Steps one calendar date at a time rather than adding 24 hours to an
    instant, so DST transitions (23h / 25h days) never skip or repeat a day.
    """
    current = to_local(start, tz).date()
    last = to_local(end, tz).date()
    while current <= last:
        yield current
        current += timedelta(days=1)


def is_weekday_bucket(day: date) -> bool:
    """Mon-Thu."""
    return day.weekday() in WEEKDAY_DAYS


def is_weekend_bucket(day: date) -> bool:
    """Fri-Sun."""
    return day.weekday() in WEEKEND_DAYS


def sunday_based_weekday(value: date) -> int:
    """Day of week with Sunday = 0 ... Saturday = 6."""
    return (value.weekday() + 1) % 7
