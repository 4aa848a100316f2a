"""Tests for date parsing and day bucketing."""
from datetime import date, datetime, timezone

import pytest

from signal_audit.shared.time_utils import (
    day_start_epoch,
    epoch_to_day_label,
    local_day,
    localize,
    parse_date,
    try_parse_date,
)


def test_parse_iso_utc():
    dt = parse_date("2025-01-10T12:00:00Z")
    assert dt == datetime(2025, 1, 10, 12, tzinfo=timezone.utc)


def test_parse_invalid_raises():
    with pytest.raises(ValueError):
        parse_date("not a date")
    with pytest.raises(ValueError):
        parse_date("")


def test_try_parse_date_returns_none():
    assert try_parse_date("garbage") is None
    assert try_parse_date(None) is None


def test_local_day_in_named_zone():
    dt = datetime(2025, 1, 11, 3, 0, tzinfo=timezone.utc)
    day = local_day(dt, "America/New_York")
    assert day.date() == date(2025, 1, 10)
    assert (day.hour, day.minute) == (0, 0)


def test_day_label_and_start_round_trip():
    start = day_start_epoch(date(2025, 1, 10), "UTC")
    assert start == datetime(2025, 1, 10, tzinfo=timezone.utc).timestamp()
    assert epoch_to_day_label(start + 3600, "UTC") == "2025-01-10"


def test_localize_naive_only():
    naive = datetime(2025, 1, 10, 9, 30)
    assert localize(naive, "UTC").tzinfo is not None
    assert localize(naive, "") is naive
    aware = datetime(2025, 1, 10, tzinfo=timezone.utc)
    assert localize(aware, "Asia/Tokyo") is aware
