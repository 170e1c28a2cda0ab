"""Time utilities with the business-local (Asia/Manila) clock."""

import os
from datetime import date, datetime
from zoneinfo import ZoneInfo
from typing import Optional

try:
    LOCAL_TZ = ZoneInfo(os.getenv("CATERING_TIMEZONE", "Asia/Manila"))
except Exception:
    # Fallback to system local timezone when tzdata is unavailable (Windows)
    LOCAL_TZ = datetime.now().astimezone().tzinfo


def now_local() -> datetime:
    """Return timezone-aware datetime in business-local time."""
    return datetime.now(LOCAL_TZ)


def now_local_naive() -> datetime:
    """Return naive datetime representing business-local time."""
    return now_local().replace(tzinfo=None)


def today_local() -> date:
    """Return today's calendar date in business-local time."""
    return now_local().date()


def iso_local() -> str:
    """Return ISO timestamp with the business-local offset."""
    return now_local().isoformat()


def isoformat_or_none(value) -> Optional[str]:
    """Serialize a date/datetime for JSON responses."""
    return value.isoformat() if value is not None else None
