"""Static default shift definitions."""

from __future__ import annotations

from typing import Dict, Tuple

from .models import ShiftTemplate

MORNING = "morning"
EVENING = "evening"

# A morning shift ending at or after 21:00 absorbs the evening shift.
EVENING_CUTOFF = 21 * 60

DEFAULT_SHIFTS: Tuple[ShiftTemplate, ...] = (
    ShiftTemplate(id=MORNING, time_start="08:00", time_end="17:00", icon="☀️", label="Day"),
    ShiftTemplate(id=EVENING, time_start="17:00", time_end="21:00", icon="🌙", label="Night"),
)

SHIFT_IDS: Tuple[str, ...] = tuple(t.id for t in DEFAULT_SHIFTS)

_BY_ID: Dict[str, ShiftTemplate] = {t.id: t for t in DEFAULT_SHIFTS}


def get_template(shift_id: str) -> ShiftTemplate:
    """Look up a default shift by id."""
    try:
        return _BY_ID[shift_id]
    except KeyError:
        raise ValueError(f"Unknown shift '{shift_id}', expected one of {list(SHIFT_IDS)}") from None
