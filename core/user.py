"""
On-call user aggregation for OohPay.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence, Tuple

from core.period import OnCallPeriod


@dataclass(frozen=True)
class OnCallUser:
    """
    A rostered user and the on-call periods they own.

    Every total is a plain sum over independently classified periods, so the
    order of periods never changes a result; it is kept for reporting.
    """

    id: str
    name: str
    periods: Tuple[OnCallPeriod, ...] = field(default_factory=tuple)
    email: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "periods", tuple(self.periods))

    def get_total_ooh_weekdays(self) -> int:
        return sum(period.get_ooh_weekday_count() for period in self.periods)

    def get_total_ooh_weekends(self) -> int:
        return sum(period.get_ooh_weekend_count() for period in self.periods)

    def get_on_call_periods(self) -> Sequence[OnCallPeriod]:
        return self.periods

    def get_ooh_periods(self) -> Sequence[OnCallPeriod]:
        """Only the OOH periods, in their original order."""
        return tuple(period for period in self.periods if period.is_out_of_hours())

    def get_total_duration_hours(self) -> float:
        """Duration of every period, OOH or not."""
        return sum((period.get_duration_hours() for period in self.periods), 0.0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "total_ooh_weekdays": self.get_total_ooh_weekdays(),
            "total_ooh_weekends": self.get_total_ooh_weekends(),
            "periods": [period.to_dict() for period in self.periods],
        }
