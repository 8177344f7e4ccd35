"""Runtime settings read from the environment.

All variables are optional:

- STAYCAL_HOST_BLOCK_LABEL: feed summary that marks a host block
- STAYCAL_TIMEZONE: property timezone, used for "today"
- STAYCAL_DEFAULT_CHECKIN_TIME / STAYCAL_DEFAULT_CHECKOUT_TIME: shown when
  neither the reservation nor the pre-registration has a time
- STAYCAL_TURNOVER_WINDOW_DAYS: look-ahead for the arrivals/departures list
- STAYCAL_LOG_LEVEL: read by observability.logging
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from staycal.domain.records import HOST_BLOCK_LABEL

DEFAULT_TIMEZONE = "America/Sao_Paulo"
DEFAULT_CHECKIN_TIME = "15:00"
DEFAULT_CHECKOUT_TIME = "11:00"
DEFAULT_TURNOVER_WINDOW_DAYS = 3


class ConfigError(Exception):
    """Raised when an environment variable holds an unusable value."""


@dataclass(frozen=True)
class Settings:
    host_block_label: str = HOST_BLOCK_LABEL
    timezone: str = DEFAULT_TIMEZONE
    default_checkin_time: str = DEFAULT_CHECKIN_TIME
    default_checkout_time: str = DEFAULT_CHECKOUT_TIME
    turnover_window_days: int = DEFAULT_TURNOVER_WINDOW_DAYS


def load_settings() -> Settings:
    """Build Settings from the environment.

    Raises:
        ConfigError: unknown timezone or non-integer window.
    """
    tz_name = os.environ.get("STAYCAL_TIMEZONE", DEFAULT_TIMEZONE)
    try:
        ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigError(f"STAYCAL_TIMEZONE: unknown timezone {tz_name!r}") from exc

    raw_window = os.environ.get("STAYCAL_TURNOVER_WINDOW_DAYS", str(DEFAULT_TURNOVER_WINDOW_DAYS))
    try:
        window = int(raw_window)
    except ValueError as exc:
        raise ConfigError(f"STAYCAL_TURNOVER_WINDOW_DAYS: not an integer: {raw_window!r}") from exc
    if window < 0:
        raise ConfigError("STAYCAL_TURNOVER_WINDOW_DAYS must be >= 0")

    return Settings(
        host_block_label=os.environ.get("STAYCAL_HOST_BLOCK_LABEL", HOST_BLOCK_LABEL),
        timezone=tz_name,
        default_checkin_time=os.environ.get("STAYCAL_DEFAULT_CHECKIN_TIME", DEFAULT_CHECKIN_TIME),
        default_checkout_time=os.environ.get("STAYCAL_DEFAULT_CHECKOUT_TIME", DEFAULT_CHECKOUT_TIME),
        turnover_window_days=window,
    )
