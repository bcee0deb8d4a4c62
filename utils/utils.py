"""
Utility functions for OohPay.
Formatting helpers for amounts and durations handed to result consumers.
"""
from __future__ import annotations


def format_currency(value: float | int | None, symbol: str = "") -> str:
    """Format number as currency with thousand separators (e.g., 11403 -> £11,403.00)."""
    if value is None:
        value = 0
    return f"{symbol}{float(value):,.2f}"


def format_hours(hours: float | int | None) -> str:
    """Format decimal hours as HH:MM (e.g., 4.5 -> 04:30)."""
    if hours is None:
        hours = 0
    total_minutes = int(round(float(hours) * 60))
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"
