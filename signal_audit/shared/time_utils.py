"""Timestamp parsing and calendar-day bucketing."""
from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo

import pandas as pd


def parse_date(value: str) -> datetime:
    """Parse a chat/portfolio date string.

    Accepts ISO 8601 and the other layouts pandas understands. Naive
    values are kept naive and read as machine-local time.

    Raises:
        ValueError: if the value is blank or cannot be parsed.
    """
    if value is None or not str(value).strip():
        raise ValueError("empty date")
    try:
        ts = pd.Timestamp(str(value).strip())
    except (ValueError, TypeError) as e:
        raise ValueError(f"unparseable date {value!r}: {e}") from e
    if pd.isna(ts):
        raise ValueError(f"unparseable date {value!r}")
    return ts.to_pydatetime()


def try_parse_date(value: Optional[str]) -> Optional[datetime]:
    """Like parse_date but returns None instead of raising."""
    try:
        return parse_date(value)
    except ValueError:
        return None


def to_epoch(dt: datetime) -> float:
    """Unix seconds. Naive datetimes are read as local time."""
    return dt.timestamp()


def local_day(dt: datetime, tz_name: str = "") -> datetime:
    """Midnight of the calendar day containing ``dt``.

    Args:
        dt: Aware or naive (local) datetime.
        tz_name: IANA zone for the day boundary; "" uses the machine zone.
    """
    local = dt.astimezone(_zone(tz_name))
    return local.replace(hour=0, minute=0, second=0, microsecond=0)


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _zone(tz_name: str) -> Optional[ZoneInfo]:
    return ZoneInfo(tz_name) if tz_name else None


def epoch_to_day_label(ts: float, tz_name: str = "") -> str:
    """Calendar date (YYYY-MM-DD) of a unix timestamp in the report zone."""
    return datetime.fromtimestamp(ts, _zone(tz_name)).date().isoformat()


def day_start_epoch(day: date, tz_name: str = "") -> float:
    """Unix timestamp of local midnight at the start of ``day``."""
    return datetime(day.year, day.month, day.day, tzinfo=_zone(tz_name)).timestamp()


def localize(dt: datetime, tz_name: str = "") -> datetime:
    """Attach the report zone to a naive datetime; aware values pass through."""
    if dt.tzinfo is not None or not tz_name:
        return dt
    return dt.replace(tzinfo=_zone(tz_name))
