"""Caller timezone resolution and date formatting.

A bad timezone never fails a request: it falls back to UTC, and the fallback
is returned as an explicit result so callers and tests can see it happened.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


DEFAULT_TIMEZONE = "UTC"
MAX_TIMEZONE_LENGTH = 64


@dataclass(frozen=True)
class ValidTimezone:
    name: str

    @property
    def zone_name(self) -> str:
        return self.name


@dataclass(frozen=True)
class FellBackToDefault:
    reason: str

    @property
    def zone_name(self) -> str:
        return DEFAULT_TIMEZONE


TimezoneResolution = Union[ValidTimezone, FellBackToDefault]


def resolve_timezone(name: Optional[str], *, max_length: int = MAX_TIMEZONE_LENGTH) -> TimezoneResolution:
    if not isinstance(name, str) or not name:
        return FellBackToDefault("missing")
    if len(name) > max_length:
        return FellBackToDefault("too_long")
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return FellBackToDefault("unknown_zone")
    return ValidTimezone(name)


def format_long_date(moment: datetime) -> str:
    """``October 17, 2026`` style, independent of the process locale."""
    months = (
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    )
    return f"{months[moment.month - 1]} {moment.day}, {moment.year}"


def today_in(resolution: TimezoneResolution, now: Optional[datetime] = None) -> str:
    current = now or datetime.now(timezone.utc)
    if current.tzinfo is None:
        current = current.replace(tzinfo=timezone.utc)
    return format_long_date(current.astimezone(ZoneInfo(resolution.zone_name)))
