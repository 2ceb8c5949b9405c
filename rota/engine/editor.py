"""Edits to the rota: new full override maps written through the store."""

from __future__ import annotations

from concurrent.futures import Future
from datetime import date
from typing import Dict, List, Mapping, Optional

from rota.domain.keys import override_key
from rota.domain.models import OVERRIDE_FIELDS, TIME_FIELDS, EffectiveShift, ScheduleDay, ShiftOverride
from rota.domain.templates import EVENING, MORNING
from rota.services.colors import ColorPair, color_for
from rota.services.timeplan import DEFAULT_STEP_MINUTES, adjust, format_display, parse_time_string
from rota.sync.store import ScheduleStore

from .schedule import ScheduleEngine


def _clean_value(field: str, value: str) -> str:
    if field not in OVERRIDE_FIELDS:
        raise ValueError(f"Unknown shift field '{field}', expected one of {list(OVERRIDE_FIELDS)}")
    if value is None:
        raise ValueError(f"Missing value for '{field}'")
    value = str(value).strip()
    if field in TIME_FIELDS and value:
        parse_time_string(value)
    return value


def with_fields(
    overrides: Mapping[str, ShiftOverride],
    date_key: str,
    shift_id: str,
    updates: Dict[str, str],
) -> Dict[str, ShiftOverride]:
    """Copy of `overrides` with fields merged into one shift's record (created if missing)."""
    key = override_key(date_key, shift_id)
    cleaned = {k: _clean_value(k, v) for k, v in updates.items()}
    current = overrides.get(key) or ShiftOverride()
    new_map = dict(overrides)
    new_map[key] = current.merge(cleaned)
    return new_map


def with_field(
    overrides: Mapping[str, ShiftOverride],
    date_key: str,
    shift_id: str,
    field: str,
    value: str,
) -> Dict[str, ShiftOverride]:
    return with_fields(overrides, date_key, shift_id, {field: value})


def with_cleared_field(
    overrides: Mapping[str, ShiftOverride],
    date_key: str,
    shift_id: str,
    field: str,
) -> Dict[str, ShiftOverride]:
    """Clearing stores an empty string; the record and key are kept."""
    return with_fields(overrides, date_key, shift_id, {field: ""})


def cascade_on_morning_save(
    overrides: Mapping[str, ShiftOverride],
    date_key: str,
    new_start: str,
    new_end: str,
) -> Dict[str, ShiftOverride]:
    """
    Save morning times and push the new morning end into the evening start.

    The evening start is overwritten even if it was set on its own before.
    Evening end, carer and note are left alone. Both records change in the
    same map so they reach the store in a single write.
    """
    new_map = with_fields(overrides, date_key, MORNING, {"timeStart": new_start, "timeEnd": new_end})
    return with_fields(new_map, date_key, EVENING, {"timeStart": new_end})


class ScheduleEditor:
    """
    Operations offered to the presentation layer.

    Reads go through a ScheduleEngine over the store mirror; every edit builds
    a new full map from the current mirror and hands it to the store.
    """

    def __init__(self, store: ScheduleStore, timezone: Optional[str] = None,
                 step_minutes: int = DEFAULT_STEP_MINUTES):
        self.store = store
        self.engine = ScheduleEngine(lambda: store.overrides, timezone=timezone)
        self.step_minutes = step_minutes

    def effective_shift(self, date_key: str, shift_id: str) -> EffectiveShift:
        return self.engine.effective_shift(date_key, shift_id)

    def visible_shifts(self, date_key: str) -> List[str]:
        return self.engine.visible_shifts(date_key)

    def is_evening_suppressed(self, date_key: str) -> bool:
        return self.engine.is_evening_suppressed(date_key)

    def shift_data(self, date_key: str, shift_id: str) -> ShiftOverride:
        return self.engine.shift_data(date_key, shift_id)

    @staticmethod
    def color_for(name: Optional[str]) -> ColorPair:
        return color_for(name)

    @staticmethod
    def format_display(time_str: Optional[str]) -> str:
        return format_display(time_str)

    def adjust(self, time_str: str, delta_steps: int) -> str:
        return adjust(time_str, delta_steps, self.step_minutes)

    def generate_days(self, count: int, today: Optional[date] = None) -> List[ScheduleDay]:
        return self.engine.schedule(count, today=today)

    def update_shift_field(self, date_key: str, shift_id: str, field: str, value: str) -> Future:
        new_map = with_field(self.store.snapshot(), date_key, shift_id, field, value)
        return self.store.write(new_map)

    def clear_field(self, date_key: str, shift_id: str, field: str) -> Future:
        new_map = with_cleared_field(self.store.snapshot(), date_key, shift_id, field)
        return self.store.write(new_map)

    def save_morning_cascade(self, date_key: str, new_start: str, new_end: str) -> Future:
        new_map = cascade_on_morning_save(self.store.snapshot(), date_key, new_start, new_end)
        print(f"[INFO] {date_key}: morning {new_start}-{new_end}, evening start set to {new_end}")
        return self.store.write(new_map)

    def save_times(self, date_key: str, shift_id: str, start: str, end: str) -> Future:
        """Save both times of a shift; morning saves cascade into the evening."""
        if shift_id == MORNING:
            return self.save_morning_cascade(date_key, start, end)
        new_map = with_fields(self.store.snapshot(), date_key, shift_id, {"timeStart": start, "timeEnd": end})
        return self.store.write(new_map)


def build_editor(cfg, transport=None, subscribe: bool = True) -> ScheduleEditor:
    """
    Convenience function to wire store, transport and editor from a RotaConfig.

    Args:
        cfg: RotaConfig
        transport: Transport to use; Firestore at cfg.collection/cfg.document when None
        subscribe: If True, open the live read channel straight away

    Returns:
        ScheduleEditor over a fresh ScheduleStore
    """
    if transport is None:
        from rota.sync.transport import FirestoreTransport

        transport = FirestoreTransport(cfg.collection, cfg.document)

    store = ScheduleStore(
        transport,
        serialize_writes=cfg.serialize_writes,
        max_write_workers=cfg.max_write_workers,
    )
    if subscribe:
        store.subscribe()
        print(f"[INFO] Subscribed to schedule via {transport!r}")
    return ScheduleEditor(store, timezone=cfg.timezone, step_minutes=cfg.step_minutes)
