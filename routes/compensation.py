"""
Compensation routes for OohPay.
JSON endpoints that run roster shifts through the payment calculator.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Mapping

from fastapi import Request

from config import config
from core.payment_calculator import PaymentCalculator
from core.roster import build_users, parse_shift_records
from core.time_utils import resolve_timezone
from utils.error_handler import ValidationError
from utils.utils import format_currency, format_hours

logger = logging.getLogger(__name__)


async def read_json_object(request: Request) -> Dict[str, Any]:
    """Read the request body, which must be a JSON object."""
    try:
        payload = await request.json()
    except ValueError as e:
        raise ValidationError("Request body is not valid JSON", user_message="Request body must be JSON") from e
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object", details={'got': type(payload).__name__})
    return payload


def shifts_from_payload(payload: Mapping[str, Any]) -> List[Any]:
    shifts = payload.get("shifts")
    if not isinstance(shifts, list):
        raise ValidationError("'shifts' must be a list", user_message="Request must contain a list of shifts")
    return shifts


def rate_from_payload(payload: Mapping[str, Any], key: str, default: float) -> Any:
    """Read a rate from the request; a missing or null rate means the configured default."""
    value = payload.get(key)
    return default if value is None else value


def calculator_from_payload(payload: Mapping[str, Any]) -> PaymentCalculator:
    """Build a calculator from the request's rates, falling back to configured defaults."""
    return PaymentCalculator(
        weekday_rate=rate_from_payload(payload, "weekday_rate", config.DEFAULT_WEEKDAY_RATE),
        weekend_rate=rate_from_payload(payload, "weekend_rate", config.DEFAULT_WEEKEND_RATE),
        currency=config.CURRENCY,
        currency_symbol=config.CURRENCY_SYMBOL,
    )


def get_rates() -> Dict[str, Any]:
    """Default rates from configuration."""
    return PaymentCalculator.from_config(config).get_rates()


async def calculate_compensation(request: Request) -> Dict[str, Any]:
    """
    Calculate per-user and total compensation.

    Body:
        shifts: list of shift records
        timezone: default zone for shifts without one (config default otherwise)
        user_timezones: {user_id: zone} preferred zones
        weekday_rate / weekend_rate: optional rate overrides
    """
    start_time = time.time()
    payload = await read_json_object(request)

    default_timezone = payload.get("timezone") or config.DEFAULT_TIMEZONE
    resolve_timezone(default_timezone)
    user_timezones = payload.get("user_timezones") or {}
    if not isinstance(user_timezones, dict):
        raise ValidationError("'user_timezones' must be an object")

    calculator = calculator_from_payload(payload)
    records = parse_shift_records(shifts_from_payload(payload))
    users = build_users(records, default_timezone, user_timezones)

    results = []
    for user, details in zip(users, calculator.calculate_batch_compensation_details(users)):
        row = details.to_dict()
        row["total_duration"] = format_hours(user.get_total_duration_hours())
        row["total_compensation_display"] = format_currency(details.total_compensation, config.CURRENCY_SYMBOL)
        results.append(row)

    total = calculator.calculate_total_compensation(users)
    logger.info(
        f"Calculated compensation for {len(users)} users from {len(records)} shifts "
        f"in {time.time() - start_time:.4f}s"
    )

    return {
        "rates": calculator.get_rates(),
        "results": results,
        "total_compensation": total,
        "total_compensation_display": format_currency(total, config.CURRENCY_SYMBOL),
    }
