"""Domain models, shift templates and override keys."""

from .keys import date_key, is_valid_key, override_key, split_key
from .models import EffectiveShift, ScheduleDay, ShiftOverride, ShiftTemplate
from .templates import DEFAULT_SHIFTS, EVENING, EVENING_CUTOFF, MORNING, SHIFT_IDS, get_template

__all__ = [
    "ShiftTemplate",
    "ShiftOverride",
    "EffectiveShift",
    "ScheduleDay",
    "DEFAULT_SHIFTS",
    "SHIFT_IDS",
    "MORNING",
    "EVENING",
    "EVENING_CUTOFF",
    "get_template",
    "date_key",
    "override_key",
    "split_key",
    "is_valid_key",
]
