"""Shift schedule models and their stored document shape."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Dict, List, Optional


@dataclass(frozen=True)
class ShiftTemplate:
    """Default definition of one of the two daily shifts."""

    id: str  # morning, evening
    time_start: str
    time_end: str
    icon: str = ""
    label: str = ""


# Stored field name -> dataclass attribute
OVERRIDE_FIELDS: Dict[str, str] = {
    "timeStart": "time_start",
    "timeEnd": "time_end",
    "name": "name",
    "comment": "comment",
}

TIME_FIELDS = ("timeStart", "timeEnd")


@dataclass(frozen=True)
class ShiftOverride:
    """
    Partial edit of one shift on one date.

    ``None`` means the field was never set and is left out of the stored
    document. ``""`` means the field was cleared; it is stored, but reads the
    same as an unset field wherever a value is displayed or defaulted.
    """

    time_start: Optional[str] = None
    time_end: Optional[str] = None
    name: Optional[str] = None
    comment: Optional[str] = None

    def __repr__(self) -> str:
        return (f"<ShiftOverride(start={self.time_start!r}, end={self.time_end!r}, "
                f"name={self.name!r}, comment={self.comment!r})>")

    def get(self, stored_field: str) -> Optional[str]:
        """Read a field by its stored name (timeStart, timeEnd, name, comment)."""
        return getattr(self, _attr_for(stored_field))

    def merge(self, updates: Dict[str, Optional[str]]) -> ShiftOverride:
        """Return a copy with the given stored fields replaced."""
        return replace(self, **{_attr_for(k): v for k, v in updates.items()})

    def to_dict(self) -> dict:
        """Convert to the stored document shape, leaving out unset fields."""
        out = {}
        for stored, attr in OVERRIDE_FIELDS.items():
            value = getattr(self, attr)
            if value is not None:
                out[stored] = value
        return out

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> ShiftOverride:
        """Create ShiftOverride from a stored record."""
        data = data or {}

        def _str(key: str) -> Optional[str]:
            value = data.get(key)
            return None if value is None else str(value)

        return cls(
            time_start=_str("timeStart"),
            time_end=_str("timeEnd"),
            name=_str("name"),
            comment=_str("comment"),
        )


def _attr_for(stored_field: str) -> str:
    try:
        return OVERRIDE_FIELDS[stored_field]
    except KeyError:
        raise ValueError(
            f"Unknown shift field '{stored_field}', expected one of {list(OVERRIDE_FIELDS)}"
        ) from None


@dataclass(frozen=True)
class EffectiveShift:
    """Shift times after defaults, overrides and the evening cascade are applied."""

    start: str
    end: str


@dataclass
class ScheduleDay:
    """One calendar day of the rota with the shifts shown for it."""

    date: date
    is_today: bool = False
    is_weekend: bool = False
    shifts: List[str] = field(default_factory=list)

    @property
    def date_key(self) -> str:
        return self.date.isoformat()

    def __repr__(self) -> str:
        return f"<ScheduleDay(date={self.date_key}, today={self.is_today}, shifts={self.shifts})>"
