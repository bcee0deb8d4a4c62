"""
Payment calculation engine for OohPay.
Turns OOH day counts into compensation using per-day weekday/weekend rates.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from numbers import Real
from typing import Any, Dict, Iterable, List, Optional, Tuple

from core.constants import (
    DEFAULT_CURRENCY,
    DEFAULT_CURRENCY_SYMBOL,
    DEFAULT_WEEKDAY_RATE,
    DEFAULT_WEEKEND_RATE,
)
from core.time_utils import to_utc_iso
from core.user import OnCallUser
from utils.error_handler import InvalidRateError

logger = logging.getLogger(__name__)


# =============================================================================
# Results
# =============================================================================

@dataclass(frozen=True)
class CompensatedPeriod:
    start: datetime
    end: datetime
    timezone: str


@dataclass(frozen=True)
class OnCallCompensation:
    """Breakdown of one user's compensation for reporting."""

    user_id: str
    user_name: str
    user_email: Optional[str]
    periods: Tuple[CompensatedPeriod, ...]
    weekday_days: int
    weekend_days: int
    total_compensation: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user": {
                "id": self.user_id,
                "name": self.user_name,
                "email": self.user_email,
                "periods": [
                    {"start": to_utc_iso(p.start), "end": to_utc_iso(p.end), "timezone": p.timezone}
                    for p in self.periods
                ],
                "total_ooh_weekdays": self.weekday_days,
                "total_ooh_weekends": self.weekend_days,
            },
            "total_compensation": self.total_compensation,
            "weekday_days": self.weekday_days,
            "weekend_days": self.weekend_days,
        }


# =============================================================================
# Rate Validation
# =============================================================================

def validate_rate(value: Any, field_name: str) -> float:
    """
    Check a per-day rate is a positive, finite number.

    Raises:
        InvalidRateError: for non-numeric (bools included), NaN, infinite,
        zero or negative values.
    """
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidRateError(
            f"{field_name} must be a number",
            details={'field': field_name, 'got': value},
        )
    if not math.isfinite(value) or value <= 0:
        raise InvalidRateError(
            f"{field_name} must be positive",
            details={'field': field_name, 'got': value},
            user_message=f"{field_name.replace('_', ' ').capitalize()} must be greater than 0",
        )
    return value


# =============================================================================
# Calculator
# =============================================================================

class PaymentCalculator:
    """
    Applies weekday and weekend day rates to on-call users.

    Every method is a pure reduction over the user's periods and the rates
    fixed at construction.
    """

    def __init__(
        self,
        weekday_rate: float = DEFAULT_WEEKDAY_RATE,
        weekend_rate: float = DEFAULT_WEEKEND_RATE,
        currency: str = DEFAULT_CURRENCY,
        currency_symbol: str = DEFAULT_CURRENCY_SYMBOL,
    ):
        self._weekday_rate = validate_rate(weekday_rate, "weekday_rate")
        self._weekend_rate = validate_rate(weekend_rate, "weekend_rate")
        self._currency = currency
        self._currency_symbol = currency_symbol

    @classmethod
    def from_config(cls, cfg) -> PaymentCalculator:
        """Create a calculator from the application Config."""
        return cls(
            weekday_rate=cfg.DEFAULT_WEEKDAY_RATE,
            weekend_rate=cfg.DEFAULT_WEEKEND_RATE,
            currency=cfg.CURRENCY,
            currency_symbol=cfg.CURRENCY_SYMBOL,
        )

    @property
    def weekday_rate(self) -> float:
        return self._weekday_rate

    @property
    def weekend_rate(self) -> float:
        return self._weekend_rate

    def _amount(self, weekday_days: int, weekend_days: int) -> float:
        return weekday_days * self._weekday_rate + weekend_days * self._weekend_rate

    def calculate_compensation(self, user: OnCallUser) -> float:
        """weekday days * weekday rate + weekend days * weekend rate."""
        return self._amount(user.get_total_ooh_weekdays(), user.get_total_ooh_weekends())

    def calculate_compensation_details(self, user: OnCallUser) -> OnCallCompensation:
        weekday_days = user.get_total_ooh_weekdays()
        weekend_days = user.get_total_ooh_weekends()

        return OnCallCompensation(
            user_id=user.id,
            user_name=user.name,
            user_email=user.email,
            periods=tuple(
                CompensatedPeriod(start=p.start, end=p.end, timezone=p.timezone)
                for p in user.get_on_call_periods()
            ),
            weekday_days=weekday_days,
            weekend_days=weekend_days,
            total_compensation=self._amount(weekday_days, weekend_days),
        )

    def calculate_batch_compensation(self, users: Iterable[OnCallUser]) -> Dict[str, float]:
        """
        Compensation per user id.

        Users sharing an id are not merged: the later user replaces the
        earlier one. Callers that need accumulation must merge beforehand.
        """
        results: Dict[str, float] = {}
        for user in users:
            if user.id in results:
                logger.warning(
                    f"Duplicate user id {user.id!r} in batch; "
                    f"replacing {results[user.id]} with the later entry"
                )
            results[user.id] = self.calculate_compensation(user)
        return results

    def calculate_batch_compensation_details(self, users: Iterable[OnCallUser]) -> List[OnCallCompensation]:
        return [self.calculate_compensation_details(user) for user in users]

    def calculate_total_compensation(self, users: Iterable[OnCallUser]) -> float:
        return sum((self.calculate_compensation(user) for user in users), 0)

    def get_rates(self) -> Dict[str, Any]:
        return {
            "weekday": self._weekday_rate,
            "weekend": self._weekend_rate,
            "currency": self._currency,
            "currency_symbol": self._currency_symbol,
        }
