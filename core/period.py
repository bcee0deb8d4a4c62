"""
On-call period classification for OohPay.
Decides whether a single shift is out-of-hours (OOH) and how many weekday
and weekend days it contributes.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict
from zoneinfo import ZoneInfo

from core.constants import MINIMUM_OOH_DURATION_HOURS, WORKING_HOURS_END
from core.time_utils import (
    ensure_aware,
    decimal_hour,
    hours_between,
    is_weekday_bucket,
    is_weekend_bucket,
    iter_local_days,
    parse_iso_instant,
    resolve_timezone,
    to_local,
    to_utc_iso,
)
from utils.error_handler import InvalidPeriodError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OnCallPeriod:
    """
    A single on-call shift.

    start/end are absolute instants (naive values are read as UTC). timezone
    is only used for local-calendar decisions: which day a moment falls on and
    what the wall clock reads at the end of the shift.
    """

    start: datetime
    end: datetime
    timezone: str

    def __post_init__(self):
        tz = resolve_timezone(self.timezone)
        if not isinstance(self.start, datetime) or not isinstance(self.end, datetime):
            raise InvalidPeriodError(
                "Period start and end must be datetimes",
                details={'start': self.start, 'end': self.end},
            )
        start = ensure_aware(self.start)
        end = ensure_aware(self.end)
        if end <= start:
            raise InvalidPeriodError(
                "Period end must be after its start",
                details={'start': start.isoformat(), 'end': end.isoformat()},
                user_message="Shift end time must be later than its start time",
            )
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)
        object.__setattr__(self, "timezone", self.timezone.strip())
        object.__setattr__(self, "_tz", tz)

    @classmethod
    def from_iso(cls, start: str, end: str, timezone: str) -> OnCallPeriod:
        """Build a period from ISO-8601 strings such as '2024-01-15T00:00:00Z'."""
        return cls(parse_iso_instant(start), parse_iso_instant(end), timezone)

    # -------------------------------------------------------------------------
    # Local views
    # -------------------------------------------------------------------------

    @property
    def tz(self) -> ZoneInfo:
        return self._tz

    @property
    def local_start(self) -> datetime:
        return to_local(self.start, self._tz)

    @property
    def local_end(self) -> datetime:
        return to_local(self.end, self._tz)

    # -------------------------------------------------------------------------
    # Classification
    # -------------------------------------------------------------------------

    def spans_multiple_days(self) -> bool:
        return self.local_start.date() != self.local_end.date()

    def ends_after_working_hours(self) -> bool:
        return decimal_hour(self.local_end) > WORKING_HOURS_END

    def exceeds_minimum_duration(self) -> bool:
        return self.get_duration_hours() > MINIMUM_OOH_DURATION_HOURS

    def is_out_of_hours(self) -> bool:
        """
        A period is OOH if it crosses a local day boundary, ends after 17:30
        local time, or lasts longer than 6 hours.
        """
        return (
            self.spans_multiple_days()
            or self.ends_after_working_hours()
            or self.exceeds_minimum_duration()
        )

    def get_ooh_weekday_count(self) -> int:
        """Number of Mon-Thu local days covered, 0 if the period is not OOH."""
        if not self.is_out_of_hours():
            return 0
        return sum(1 for day in iter_local_days(self.start, self.end, self._tz) if is_weekday_bucket(day))

    def get_ooh_weekend_count(self) -> int:
        """Number of Fri-Sun local days covered, 0 if the period is not OOH."""
        if not self.is_out_of_hours():
            return 0
        return sum(1 for day in iter_local_days(self.start, self.end, self._tz) if is_weekend_bucket(day))

    def get_duration_hours(self) -> float:
        return hours_between(self.start, self.end)

    # -------------------------------------------------------------------------
    # Reporting
    # -------------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start": to_utc_iso(self.start),
            "end": to_utc_iso(self.end),
            "timezone": self.timezone,
            "is_ooh": self.is_out_of_hours(),
            "weekday_count": self.get_ooh_weekday_count(),
            "weekend_count": self.get_ooh_weekend_count(),
        }

    def __str__(self) -> str:
        fmt = "%b %d %H:%M"
        return f"{self.local_start.strftime(fmt)} - {self.local_end.strftime(fmt)} ({self.timezone})"
