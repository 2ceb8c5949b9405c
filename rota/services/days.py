"""Calendar day ranges for the rota view."""

from __future__ import annotations

from datetime import date
from typing import Callable, List, Optional

import pandas as pd

from rota.domain.models import ScheduleDay
from rota.domain.templates import SHIFT_IDS

DEFAULT_DAYS = 21
PAGE_DAYS = 14


def local_today(timezone: Optional[str] = None) -> date:
    """Today's calendar date in the given timezone (system local when None)."""
    return pd.Timestamp.now(tz=timezone).normalize().date()


def generate_days(
    count: int,
    visible_shifts: Optional[Callable[[str], List[str]]] = None,
    today: Optional[date] = None,
    timezone: Optional[str] = None,
) -> List[ScheduleDay]:
    """
    Build `count` consecutive days starting at local midnight today.

    Args:
        count: Number of days to produce (<= 0 gives an empty list)
        visible_shifts: Maps a dateKey to the shift ids shown that day;
            both shifts are shown when omitted
        today: Date treated as today (tests, fixed exports)
        timezone: Timezone used to decide what "today" is

    Returns:
        List of ScheduleDay in date order
    """
    if count <= 0:
        return []

    current = today or local_today(timezone)

    days: List[ScheduleDay] = []
    for ts in pd.date_range(start=pd.Timestamp(current), periods=count, freq="D"):
        day = ts.date()
        key = day.isoformat()
        days.append(ScheduleDay(
            date=day,
            is_today=day == current,
            is_weekend=ts.day_name() in ["Saturday", "Sunday"],
            shifts=list(visible_shifts(key)) if visible_shifts else list(SHIFT_IDS),
        ))
    return days


def next_range(current: int, page_days: int = PAGE_DAYS) -> int:
    """Day count after one more "load more" step. The range only grows."""
    return current + page_days
