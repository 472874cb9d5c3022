"""
utils/time_utils.py

Purpose: Time and expiry helpers

- Epoch-millisecond clock used by onboarding tokens
- Window arithmetic for stored datetimes
"""

import math
import time
from datetime import datetime, timedelta
from typing import Optional


def now_ms() -> int:
    """
    Current time as integer epoch milliseconds.
    """
    return int(time.time() * 1000)


def ms_to_seconds_ceil(value_ms: int) -> int:
    """
    Converts epoch milliseconds to whole epoch seconds, rounding up.
    """
    return math.ceil(value_ms / 1000)


def minutes_ago(minutes: int, now: Optional[datetime] = None) -> datetime:
    """
    Naive UTC datetime `minutes` before now (matches stored created_at values).
    """
    now = now or datetime.utcnow()
    return now - timedelta(minutes=minutes)
