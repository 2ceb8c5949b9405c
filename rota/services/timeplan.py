"""Minute-based time arithmetic and display formatting for shift times."""

from __future__ import annotations

import re
from datetime import time
from typing import Optional

MINUTES_PER_DAY = 24 * 60
DEFAULT_STEP_MINUTES = 30

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def parse_time_string(time_str: str) -> time:
    """
    Parse time string like '07:00' into time object.

    Raises:
        ValueError: If the string is not H:MM / HH:MM within a single day
    """
    match = _TIME_RE.match(str(time_str).strip()) if time_str is not None else None
    if not match:
        raise ValueError(f"Invalid time '{time_str}', expected HH:MM")
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise ValueError(f"Invalid time '{time_str}', expected HH:MM")
    return time(hour, minute)


def time_to_minutes(time_str: str) -> int:
    """Convert 'HH:MM' into minutes since midnight."""
    parsed = parse_time_string(time_str)
    return parsed.hour * 60 + parsed.minute


def minutes_to_time(minutes: int) -> str:
    """
    Convert minutes since midnight into 'HH:MM'.

    Wraps only once: a negative value gets one day added, a value past the end
    of the day gets one day removed. Values more than a day out of range are
    not normalized.
    """
    mins = minutes
    if mins < 0:
        mins = MINUTES_PER_DAY + mins
    if mins >= MINUTES_PER_DAY:
        mins = mins - MINUTES_PER_DAY
    hour, minute = divmod(mins, 60)
    return f"{hour:02d}:{minute:02d}"


def adjust(time_str: str, delta_steps: int, step_minutes: int = DEFAULT_STEP_MINUTES) -> str:
    """Move a time by a number of fixed-size steps, e.g. adjust('08:00', 1) == '08:30'."""
    return minutes_to_time(time_to_minutes(time_str) + delta_steps * step_minutes)


def format_display(time_str: Optional[str]) -> str:
    """Compact 12-hour form: '08:00' -> '8am', '17:30' -> '5:30pm'. Empty input gives ''."""
    if not time_str:
        return ""
    parsed = parse_time_string(time_str)
    ampm = "pm" if parsed.hour >= 12 else "am"
    hour12 = parsed.hour % 12 or 12
    if parsed.minute == 0:
        return f"{hour12}{ampm}"
    return f"{hour12}:{parsed.minute:02d}{ampm}"


def shift_duration_minutes(start_hm: str, end_hm: str) -> int:
    """Length of a shift in minutes. An end before the start runs past midnight."""
    duration = time_to_minutes(end_hm) - time_to_minutes(start_hm)
    if duration < 0:
        duration += MINUTES_PER_DAY
    return duration


def calculate_shift_hours(start_hm: str, end_hm: str) -> float:
    """Calculate shift duration in hours from time strings."""
    return shift_duration_minutes(start_hm, end_hm) / 60.0
