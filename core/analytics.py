"""
Analytics transforms for OohPay.
Builds reporting views straight from raw shift records: the weekly
on-call frequency matrix, the burden distribution and the
interruption/pay correlation. None of this feeds payroll.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from datetime import timedelta
from typing import Any, Dict, Iterable, List, Optional

from core.constants import DAYS_PER_WEEK, DAY_NAMES, HOURS_PER_DAY, WEEKEND_DAYS
from core.roster import ShiftRecord, parse_shift_records
from core.time_utils import (
    UTC,
    hours_between,
    resolve_timezone,
    sunday_based_weekday,
    to_local,
)
from core.payment_calculator import validate_rate

logger = logging.getLogger(__name__)

ONE_HOUR = timedelta(hours=1)


# =============================================================================
# Frequency Matrix
# =============================================================================

def build_frequency_matrix(
    records: Iterable[ShiftRecord | dict],
    user_id: Optional[str] = None,
) -> List[Dict[str, int]]:
    """
    Count on-call hours per (day of week, hour of day) slot in UTC.

    Each shift is walked hour by hour from its start while the cursor is
    before its end, so a 09:30-11:00 shift counts the 9 and 10 slots.

    Args:
        records: Shift records (or raw dicts)
        user_id: Only count this user's shifts

    Returns:
        168 cells {"day_of_week", "hour", "count"}, day_of_week 0 = Sunday,
        ordered by day then hour
    """
    shifts = parse_shift_records(records)
    if user_id is not None:
        shifts = [s for s in shifts if s.user_id == user_id]

    counts: Dict[tuple, int] = defaultdict(int)
    for shift in shifts:
        current = shift.start.astimezone(UTC)
        end = shift.end.astimezone(UTC)
        while current < end:
            counts[(sunday_based_weekday(current.date()), current.hour)] += 1
            current += ONE_HOUR

    return [
        {"day_of_week": day, "hour": hour, "count": counts.get((day, hour), 0)}
        for day in range(DAYS_PER_WEEK)
        for hour in range(HOURS_PER_DAY)
    ]


# =============================================================================
# Burden Distribution
# =============================================================================

def calculate_burden_distribution(records: Iterable[ShiftRecord | dict]) -> List[Dict[str, Any]]:
    """
    Share of total on-call time carried by each user, heaviest first.

    Hours and percentages are rounded to 2 decimals; every percentage is 0
    when no time was rostered at all.
    """
    totals: Dict[str, Dict[str, Any]] = {}
    total_hours = 0.0

    for shift in parse_shift_records(records):
        hours = hours_between(shift.start, shift.end)
        entry = totals.setdefault(shift.user_id, {"name": shift.user_name, "hours": 0.0})
        entry["hours"] += hours
        total_hours += hours

    distribution = [
        {
            "user_id": uid,
            "user_name": entry["name"],
            "total_on_call_hours": round(entry["hours"], 2),
            "percentage": round(entry["hours"] / total_hours * 100, 2) if total_hours > 0 else 0,
        }
        for uid, entry in totals.items()
    ]
    distribution.sort(key=lambda row: row["total_on_call_hours"], reverse=True)
    return distribution


# =============================================================================
# Interruption Correlation
# =============================================================================

def is_weekend_start(shift: ShiftRecord) -> bool:
    """
    Whether the shift starts on a Fri/Sat/Sun in its own zone (UTC if none).

    Rough weekend test for correlation reporting only: it looks at the start
    day alone and ignores the OOH rules used for payroll.
    """
    tz = resolve_timezone(shift.timezone) if shift.timezone else UTC
    return to_local(shift.start, tz).weekday() in WEEKEND_DAYS


def calculate_interruption_correlation(
    records: Iterable[ShiftRecord | dict],
    weekday_rate: float,
    weekend_rate: float,
) -> List[Dict[str, Any]]:
    """
    Per-user interruptions against pay.

    total_interruptions is the rounded on-call hours, standing in until real
    incident counts are available. Each shift pays hours * rate, with the
    weekend rate chosen by is_weekend_start().
    """
    weekday_rate = validate_rate(weekday_rate, "weekday_rate")
    weekend_rate = validate_rate(weekend_rate, "weekend_rate")

    totals: Dict[str, Dict[str, Any]] = {}
    for shift in parse_shift_records(records):
        hours = hours_between(shift.start, shift.end)
        pay = hours * (weekend_rate if is_weekend_start(shift) else weekday_rate)

        entry = totals.setdefault(shift.user_id, {"name": shift.user_name, "hours": 0.0, "pay": 0.0})
        entry["hours"] += hours
        entry["pay"] += pay

    return [
        {
            "user_id": uid,
            "user_name": entry["name"],
            "total_interruptions": round(entry["hours"]),
            "total_pay": round(entry["pay"], 2),
        }
        for uid, entry in totals.items()
    ]


# =============================================================================
# Labels
# =============================================================================

def get_day_name(day_of_week: int) -> str:
    """'Sun' for 0 through 'Sat' for 6."""
    if isinstance(day_of_week, int) and 0 <= day_of_week < DAYS_PER_WEEK:
        return DAY_NAMES[day_of_week]
    return "Unknown"


def format_hour(hour: int) -> str:
    """24h hour to 12h label: 0 -> '12 AM', 13 -> '1 PM'."""
    if hour == 0:
        return "12 AM"
    if hour == 12:
        return "12 PM"
    if hour < 12:
        return f"{hour} AM"
    return f"{hour - 12} PM"
