"""
Central constants for OohPay.
Day buckets, working-hours thresholds and default payment rates.

This module serves as the single source of truth for constants used across:
- core/time_utils.py
- core/period.py
- core/payment_calculator.py
- core/analytics.py
"""
from typing import FrozenSet

# =============================================================================
# Weekday indices (Python's weekday(): Monday = 0)
# =============================================================================

MONDAY = 0
TUESDAY = 1
WEDNESDAY = 2
THURSDAY = 3
FRIDAY = 4
SATURDAY = 5
SUNDAY = 6

# =============================================================================
# Day Buckets
# =============================================================================

# Mon-Thu are paid at the weekday rate
WEEKDAY_DAYS: FrozenSet[int] = frozenset({MONDAY, TUESDAY, WEDNESDAY, THURSDAY})

# Fri-Sun are paid at the weekend rate
WEEKEND_DAYS: FrozenSet[int] = frozenset({FRIDAY, SATURDAY, SUNDAY})

# =============================================================================
# Working Hours (local wall clock, decimal hours)
# =============================================================================

WORKING_HOURS_END = 17.5                # 17:30 - ending later than this is OOH
MINIMUM_OOH_DURATION_HOURS = 6.0        # longer than this is OOH

SECONDS_PER_HOUR = 3600
HOURS_PER_DAY = 24
DAYS_PER_WEEK = 7

# =============================================================================
# Payment Defaults
# =============================================================================

DEFAULT_WEEKDAY_RATE = 50.0
DEFAULT_WEEKEND_RATE = 75.0
DEFAULT_CURRENCY = "GBP"
DEFAULT_CURRENCY_SYMBOL = "£"

# =============================================================================
# Analytics Labels (day_of_week 0 = Sunday)
# =============================================================================

DAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")
UNKNOWN_USER_NAME = "Unknown"
