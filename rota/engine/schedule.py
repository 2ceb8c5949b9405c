"""Resolve effective shifts from default templates and stored overrides."""

from __future__ import annotations

from datetime import date
from typing import Callable, Dict, List, Mapping, Optional

from rota.domain.keys import override_key
from rota.domain.models import EffectiveShift, ScheduleDay, ShiftOverride, ShiftTemplate
from rota.domain.templates import DEFAULT_SHIFTS, EVENING, EVENING_CUTOFF, MORNING, get_template
from rota.services.colors import color_for
from rota.services.days import generate_days
from rota.services.timeplan import calculate_shift_hours, format_display, time_to_minutes

OverrideMap = Mapping[str, ShiftOverride]

_EMPTY = ShiftOverride()


class ScheduleEngine:
    """
    Read-only view of the rota over an override map.

    The map is fetched from `source` on every call, so an engine built over a
    store always sees the latest mirror.

    Evening start is derived, not stored: unless the evening record carries its
    own start time, it begins when the morning shift (as resolved) ends.
    """

    def __init__(self, source: Callable[[], OverrideMap], timezone: Optional[str] = None):
        self._source = source
        self.timezone = timezone

    @classmethod
    def from_overrides(cls, overrides: OverrideMap, timezone: Optional[str] = None) -> ScheduleEngine:
        return cls(lambda: overrides, timezone=timezone)

    @property
    def overrides(self) -> OverrideMap:
        return self._source()

    def shift_data(self, date_key: str, shift_id: str) -> ShiftOverride:
        """Stored override for a shift, or an empty record."""
        return self.overrides.get(override_key(date_key, shift_id)) or _EMPTY

    def effective_shift(
        self,
        date_key: str,
        shift_id: str,
        template: Optional[ShiftTemplate] = None,
    ) -> EffectiveShift:
        template = template or get_template(shift_id)
        data = self.shift_data(date_key, shift_id)

        if shift_id == EVENING:
            fallback_start = self.effective_shift(date_key, MORNING).end
            return EffectiveShift(
                start=data.time_start or fallback_start,
                end=data.time_end or template.time_end,
            )

        return EffectiveShift(
            start=data.time_start or template.time_start,
            end=data.time_end or template.time_end,
        )

    def is_evening_suppressed(self, date_key: str) -> bool:
        """True when the morning shift runs to the cutoff, leaving no evening shift to show."""
        morning_end = self.effective_shift(date_key, MORNING).end
        return time_to_minutes(morning_end) >= EVENING_CUTOFF

    def visible_shifts(self, date_key: str) -> List[str]:
        """Shift ids shown for a date, morning first. Hidden evening records stay stored."""
        if self.is_evening_suppressed(date_key):
            return [MORNING]
        return [t.id for t in DEFAULT_SHIFTS]

    def schedule(self, count: int, today: Optional[date] = None) -> List[ScheduleDay]:
        """Days from today with their visible shifts attached."""
        return generate_days(count, visible_shifts=self.visible_shifts, today=today, timezone=self.timezone)

    def rows(self, days: List[ScheduleDay]) -> List[Dict[str, object]]:
        """Flatten days into one display row per visible shift."""
        out: List[Dict[str, object]] = []
        for day in days:
            suppressed = len(day.shifts) == 1 and day.shifts[0] == MORNING
            for shift_id in day.shifts:
                template = get_template(shift_id)
                data = self.shift_data(day.date_key, shift_id)
                times = self.effective_shift(day.date_key, shift_id, template)
                colors = color_for(data.name)
                out.append({
                    "date": day.date_key,
                    "weekday": day.date.strftime("%a"),
                    "isToday": day.is_today,
                    "isWeekend": day.is_weekend,
                    "shiftId": shift_id,
                    "label": template.label,
                    # A full-day morning shift shows a calendar icon instead of the sun.
                    "icon": "📅" if suppressed else template.icon,
                    "start": times.start,
                    "end": times.end,
                    "display": f"{format_display(times.start)}-{format_display(times.end)}",
                    "hours": calculate_shift_hours(times.start, times.end),
                    "name": data.name or "",
                    "comment": data.comment or "",
                    "bg": colors.bg,
                    "text": colors.text,
                })
        return out
