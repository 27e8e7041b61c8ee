# app/core/clock.py
from __future__ import annotations

import datetime as dt
from functools import lru_cache
from zoneinfo import ZoneInfo

from app.core.config import settings


@lru_cache(maxsize=8)
def resolve_timezone(name: str) -> dt.tzinfo:
    if name.upper() in {"UTC", "Z"}:
        return dt.timezone.utc
    return ZoneInfo(name)


def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def get_now() -> dt.datetime:
    """FastAPI dependency; tests override it to pin the clock."""
    return utcnow()


def checkin_date_for(moment: dt.datetime, tz_name: str | None = None) -> dt.date:
    """Calendar day of ``moment`` in the configured check-in time zone."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=dt.timezone.utc)
    tz = resolve_timezone(tz_name or settings.CHECKIN_TIMEZONE)
    return moment.astimezone(tz).date()

