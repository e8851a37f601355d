# weatherscore/utils/dates.py
"""
Calendar-day helpers shared by every component that compares days.

Two kinds of timestamps meet in this service:

- our own timestamps (forecast target dates, resolution dates, "now"), which are
  keyed by their calendar day in UTC;
- provider sample timestamps, which are keyed by the wall-clock date the provider
  wrote, because that is the local day the sample belongs to.
"""
from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import List, Optional

from dateutil import parser as dtparse

NOON = time(12, 0)


def to_utc(dt: datetime) -> datetime:
    """Return ``dt`` as an aware UTC datetime. Naive values are taken to be UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def utc_day(value: datetime | date) -> date:
    if isinstance(value, datetime):
        return to_utc(value).date()
    return value


def utc_midnight(value: datetime | date) -> datetime:
    return datetime.combine(utc_day(value), time.min, tzinfo=timezone.utc)


def noon_anchor(value: datetime | date) -> datetime:
    return datetime.combine(utc_day(value), NOON, tzinfo=timezone.utc)


def target_dates(base: Optional[datetime | date] = None, days: int = 3) -> List[datetime]:
    """Noon-UTC anchors for ``base`` and the following ``days - 1`` calendar days."""
    start = utc_day(base if base is not None else datetime.now(timezone.utc))
    return [noon_anchor(start + timedelta(days=i)) for i in range(max(0, int(days)))]


def sample_day(raw: str) -> date:
    """
    Calendar day of a provider timestamp as the provider wrote it.

    Accepts "2025-11-19T06:00:00-05:00", "2025-11-19T06:00" and "2025-11-19 06:00:00".
    The offset is never applied: the wall-clock date is the day the sample belongs to.
    """
    if not isinstance(raw, str) or not raw.strip():
        raise ValueError(f"invalid sample timestamp: {raw!r}")
    return dtparse.isoparse(raw.strip()).date()


def iso_day(value: datetime | date) -> str:
    return utc_day(value).isoformat()
