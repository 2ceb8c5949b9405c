"""Shift resolution and schedule edits."""

from .editor import (
    build_editor,
    ScheduleEditor,
    cascade_on_morning_save,
    with_cleared_field,
    with_field,
    with_fields,
)
from .schedule import ScheduleEngine

__all__ = [
    "ScheduleEngine",
    "ScheduleEditor",
    "with_field",
    "with_fields",
    "with_cleared_field",
    "cascade_on_morning_save",
    "build_editor",
]
