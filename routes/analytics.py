"""
Analytics routes for OohPay.
JSON endpoints feeding the on-call reporting views.
"""
from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import Request

from config import config
from core.analytics import (
    build_frequency_matrix,
    calculate_burden_distribution,
    calculate_interruption_correlation,
    format_hour,
    get_day_name,
)
from core.roster import parse_shift_records
from routes.compensation import rate_from_payload, read_json_object, shifts_from_payload

logger = logging.getLogger(__name__)


async def frequency_matrix(request: Request) -> Dict[str, Any]:
    """Weekly 7x24 on-call frequency grid, optionally for a single user."""
    payload = await read_json_object(request)
    records = parse_shift_records(shifts_from_payload(payload))
    user_id = payload.get("user_id")

    cells = build_frequency_matrix(records, user_id=str(user_id) if user_id is not None else None)
    for cell in cells:
        cell["label"] = f"{get_day_name(cell['day_of_week'])} {format_hour(cell['hour'])}"

    logger.info(f"Built frequency matrix from {len(records)} shifts (user filter: {user_id})")
    return {"cells": cells, "max_count": max(cell["count"] for cell in cells)}


async def burden_distribution(request: Request) -> Dict[str, Any]:
    """Share of on-call hours per user."""
    payload = await read_json_object(request)
    records = parse_shift_records(shifts_from_payload(payload))
    return {"distribution": calculate_burden_distribution(records)}


async def interruption_correlation(request: Request) -> Dict[str, Any]:
    """Interruptions against pay per user."""
    payload = await read_json_object(request)
    records = parse_shift_records(shifts_from_payload(payload))
    correlation = calculate_interruption_correlation(
        records,
        weekday_rate=rate_from_payload(payload, "weekday_rate", config.DEFAULT_WEEKDAY_RATE),
        weekend_rate=rate_from_payload(payload, "weekend_rate", config.DEFAULT_WEEKEND_RATE),
    )
    return {"correlation": correlation}
