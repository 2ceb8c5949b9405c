"""Override map keys: one flat key per (dateKey, shiftId) pair."""

from __future__ import annotations

from datetime import date, datetime
from typing import Tuple, Union

from .templates import SHIFT_IDS


def date_key(day: Union[date, datetime, str]) -> str:
    """Canonical YYYY-MM-DD key for a calendar date."""
    if isinstance(day, datetime):
        return day.date().isoformat()
    if isinstance(day, date):
        return day.isoformat()
    return datetime.strptime(str(day), "%Y-%m-%d").date().isoformat()


def override_key(day_key: str, shift_id: str) -> str:
    """Build the '{dateKey}-{shiftId}' key used in the stored document."""
    if shift_id not in SHIFT_IDS:
        raise ValueError(f"Unknown shift '{shift_id}', expected one of {list(SHIFT_IDS)}")
    return f"{date_key(day_key)}-{shift_id}"


def split_key(key: str) -> Tuple[str, str]:
    """
    Parse an override key into (dateKey, shiftId).

    Raises:
        ValueError: If the key is not '{YYYY-MM-DD}-{shiftId}'
    """
    day_part, sep, shift_id = str(key).rpartition("-")
    if not sep or shift_id not in SHIFT_IDS:
        raise ValueError(f"Invalid override key '{key}'")
    try:
        parsed = datetime.strptime(day_part, "%Y-%m-%d").date()
    except ValueError:
        raise ValueError(f"Invalid override key '{key}'") from None
    if parsed.isoformat() != day_part:
        raise ValueError(f"Invalid override key '{key}'")
    return day_part, shift_id


def is_valid_key(key: str) -> bool:
    try:
        split_key(key)
    except ValueError:
        return False
    return True
