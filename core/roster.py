"""
Roster input boundary for OohPay.
Parses raw shift records handed over by the roster source and groups them
into OnCallUser objects for the payment path.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional

from core.constants import UNKNOWN_USER_NAME
from core.period import OnCallPeriod
from core.time_utils import ensure_aware, parse_iso_instant, resolve_timezone
from core.user import OnCallUser
from utils.error_handler import InvalidPeriodError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShiftRecord:
    """One raw roster row: who was on call, and when."""

    user_id: str
    user_name: str
    start: datetime
    end: datetime
    user_email: Optional[str] = None
    timezone: Optional[str] = None

    def __post_init__(self):
        start = ensure_aware(self.start)
        end = ensure_aware(self.end)
        if end <= start:
            raise InvalidPeriodError(
                "Shift end must be after its start",
                details={'user_id': self.user_id, 'start': start.isoformat(), 'end': end.isoformat()},
                user_message="Shift end time must be later than its start time",
            )
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)


def parse_shift_record(raw: Mapping[str, Any]) -> ShiftRecord:
    """
    Parse a shift from either shape the roster source produces:

        {"user_id", "user_name", "user_email", "start", "end", "timezone"}
        {"user": {"id", "summary" | "name", "email"}, "start", "end"}

    The user name falls back from summary to name to "Unknown". Instants are
    ISO-8601 strings or datetimes.
    """
    if not isinstance(raw, Mapping):
        raise InvalidPeriodError(
            "Shift record must be an object",
            details={'got': type(raw).__name__},
        )

    user = raw.get("user")
    if isinstance(user, Mapping):
        user_id = user.get("id")
        user_name = user.get("summary") or user.get("name")
        user_email = user.get("email")
    else:
        user_id = raw.get("user_id")
        user_name = raw.get("user_name")
        user_email = raw.get("user_email")

    if user_id is None or str(user_id).strip() == "":
        raise InvalidPeriodError(
            "Shift record has no user id",
            details={'record': str(dict(raw))},
            user_message="Every shift must identify its user",
        )

    timezone = raw.get("timezone")
    if timezone is not None:
        resolve_timezone(timezone)

    return ShiftRecord(
        user_id=str(user_id),
        user_name=user_name or UNKNOWN_USER_NAME,
        start=parse_iso_instant(raw.get("start")),
        end=parse_iso_instant(raw.get("end")),
        user_email=user_email,
        timezone=timezone,
    )


def parse_shift_records(raw_records: Iterable[Any]) -> List[ShiftRecord]:
    """Parse every record, passing ShiftRecord instances through."""
    return [r if isinstance(r, ShiftRecord) else parse_shift_record(r) for r in raw_records]


def build_users(
    records: Iterable[ShiftRecord],
    default_timezone: str,
    user_timezones: Optional[Mapping[str, str]] = None,
) -> List[OnCallUser]:
    """
    Group shift records into users, in first-seen order.

    Each period's zone is the record's own zone, else the user's preferred
    zone from user_timezones, else default_timezone. Name and email come from
    the first record seen for a user.
    """
    user_timezones = user_timezones or {}
    grouped: Dict[str, Dict[str, Any]] = {}

    for record in records:
        zone = record.timezone or user_timezones.get(record.user_id) or default_timezone
        entry = grouped.get(record.user_id)
        if entry is None:
            entry = {"name": record.user_name, "email": record.user_email, "periods": []}
            grouped[record.user_id] = entry
        entry["periods"].append(OnCallPeriod(record.start, record.end, zone))

    logger.debug(f"Grouped shifts into {len(grouped)} users")

    return [
        OnCallUser(id=user_id, name=entry["name"], periods=entry["periods"], email=entry["email"])
        for user_id, entry in grouped.items()
    ]
