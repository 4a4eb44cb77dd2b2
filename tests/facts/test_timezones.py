from __future__ import annotations

from datetime import datetime, timezone

import pytest

from facts.timezones import (
    FellBackToDefault,
    ValidTimezone,
    format_long_date,
    resolve_timezone,
    today_in,
)


def test_valid_timezone():
    res = resolve_timezone("Asia/Shanghai")
    assert res == ValidTimezone("Asia/Shanghai")
    assert res.zone_name == "Asia/Shanghai"


@pytest.mark.parametrize(
    "name, reason",
    [
        (None, "missing"),
        ("", "missing"),
        ("Not/AZone", "unknown_zone"),
        ("../../etc/passwd", "unknown_zone"),
        ("A" * 65, "too_long"),
    ],
)
def test_fallback_to_utc(name, reason):
    res = resolve_timezone(name)
    assert isinstance(res, FellBackToDefault)
    assert res.reason == reason
    assert res.zone_name == "UTC"


def test_max_length_is_configurable():
    assert isinstance(resolve_timezone("Europe/London", max_length=5), FellBackToDefault)


def test_format_long_date():
    assert format_long_date(datetime(2026, 10, 17)) == "October 17, 2026"
    assert format_long_date(datetime(2024, 1, 5)) == "January 5, 2024"


def test_today_in_uses_resolved_zone():
    # 2026-10-17 20:30 UTC is already the 18th in Shanghai (UTC+8)
    moment = datetime(2026, 10, 17, 20, 30, tzinfo=timezone.utc)
    assert today_in(ValidTimezone("Asia/Shanghai"), moment) == "October 18, 2026"
    assert today_in(FellBackToDefault("missing"), moment) == "October 17, 2026"


def test_today_in_treats_naive_as_utc():
    assert today_in(ValidTimezone("UTC"), datetime(2026, 3, 1, 12, 0)) == "March 1, 2026"
