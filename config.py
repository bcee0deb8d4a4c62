"""
Configuration management for OohPay.
Centralizes all configuration settings and environment variables.
"""
from __future__ import annotations

import math
import os
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Config:
    """Central configuration class for the application."""

    # Application version
    VERSION: str = "1.0.0"

    # Application configuration
    DEBUG: bool = os.getenv("DEBUG", "False").lower() in ("true", "1", "yes")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Server configuration
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))

    # Payment rates (currency units per OOH day)
    DEFAULT_WEEKDAY_RATE: float = float(os.getenv("DEFAULT_WEEKDAY_RATE", "50"))
    DEFAULT_WEEKEND_RATE: float = float(os.getenv("DEFAULT_WEEKEND_RATE", "75"))
    CURRENCY: str = os.getenv("CURRENCY", "GBP")
    CURRENCY_SYMBOL: str = os.getenv("CURRENCY_SYMBOL", "£")

    # Zone applied to shifts that arrive without one
    DEFAULT_TIMEZONE: str = os.getenv("DEFAULT_TIMEZONE", "UTC")

    def __init__(self):
        """Validate configuration on initialization."""
        for name in ("DEFAULT_WEEKDAY_RATE", "DEFAULT_WEEKEND_RATE"):
            value = getattr(self, name)
            if not math.isfinite(value) or value <= 0:
                raise RuntimeError(
                    f"{name} must be a positive number, got {value!r}. "
                    "Please fix it in the .env file."
                )

        try:
            ZoneInfo(self.DEFAULT_TIMEZONE)
        except (ZoneInfoNotFoundError, ValueError, OSError) as e:
            raise RuntimeError(
                f"DEFAULT_TIMEZONE {self.DEFAULT_TIMEZONE!r} is not a known IANA time zone."
            ) from e

    @classmethod
    def from_env(cls) -> Config:
        """Create Config instance from environment variables."""
        return cls()

    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.DEBUG


# Global config instance
config = Config.from_env()
