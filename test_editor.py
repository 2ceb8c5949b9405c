"""Override map edits: field updates, clearing and the morning cascade."""

import pytest

from rota.domain.models import ShiftOverride
from rota.engine.editor import (
    ScheduleEditor,
    cascade_on_morning_save,
    with_cleared_field,
    with_field,
)
from rota.sync.store import ScheduleStore
from rota.sync.transport import MemoryTransport

DAY = "2024-01-01"


def test_with_field_creates_record_lazily():
    new_map = with_field({}, DAY, "morning", "name", "  Alice ")
    assert new_map == {f"{DAY}-morning": ShiftOverride(name="Alice")}


def test_with_field_merges_and_does_not_mutate_input():
    original = {f"{DAY}-evening": ShiftOverride(name="Sam")}
    new_map = with_field(original, DAY, "evening", "comment", "pending")

    assert new_map[f"{DAY}-evening"] == ShiftOverride(name="Sam", comment="pending")
    assert original == {f"{DAY}-evening": ShiftOverride(name="Sam")}


def test_clearing_keeps_key_with_empty_value():
    original = {f"{DAY}-morning": ShiftOverride(name="Alice", comment="x")}
    new_map = with_cleared_field(original, DAY, "morning", "name")

    record = new_map[f"{DAY}-morning"]
    assert record.name == ""
    assert record.to_dict() == {"name": "", "comment": "x"}


def test_cascade_overwrites_evening_start_only():
    original = {
        f"{DAY}-morning": ShiftOverride(name="Alice"),
        f"{DAY}-evening": ShiftOverride(time_start="19:00", time_end="22:00", name="Sam"),
    }
    new_map = cascade_on_morning_save(original, DAY, "09:00", "18:00")

    assert new_map[f"{DAY}-morning"] == ShiftOverride(time_start="09:00", time_end="18:00", name="Alice")
    assert new_map[f"{DAY}-evening"] == ShiftOverride(time_start="18:00", time_end="22:00", name="Sam")
    assert original[f"{DAY}-evening"].time_start == "19:00"


def test_cascade_creates_evening_record():
    new_map = cascade_on_morning_save({}, DAY, "09:00", "18:00")
    assert new_map[f"{DAY}-morning"].to_dict() == {"timeStart": "09:00", "timeEnd": "18:00"}
    assert new_map[f"{DAY}-evening"].to_dict() == {"timeStart": "18:00"}


@pytest.mark.parametrize("field,value", [
    ("colour", "red"),
    ("timeStart", "9am"),
    ("timeEnd", "24:00"),
])
def test_invalid_edits_are_rejected(field, value):
    with pytest.raises(ValueError):
        with_field({}, DAY, "morning", field, value)


def test_invalid_keys_are_rejected():
    with pytest.raises(ValueError):
        with_field({}, DAY, "night", "name", "Alice")
    with pytest.raises(ValueError):
        with_field({}, "01/01/2024", "morning", "name", "Alice")


@pytest.fixture
def editor():
    transport = MemoryTransport()
    store = ScheduleStore(transport)
    store.subscribe()
    ed = ScheduleEditor(store)
    yield ed
    store.close()


def test_editor_save_morning_cascade(editor):
    editor.update_shift_field(DAY, "evening", "timeEnd", "23:00").result(timeout=5)
    editor.save_morning_cascade(DAY, "09:00", "18:00").result(timeout=5)

    assert editor.effective_shift(DAY, "morning").start == "09:00"
    assert editor.effective_shift(DAY, "evening").start == "18:00"
    assert editor.effective_shift(DAY, "evening").end == "23:00"
    assert editor.store.transport.document[f"{DAY}-evening"] == {"timeStart": "18:00", "timeEnd": "23:00"}


def test_editor_cascade_then_clear_restores_fallback(editor):
    editor.save_morning_cascade(DAY, "09:00", "18:00").result(timeout=5)
    editor.update_shift_field(DAY, "morning", "timeEnd", "19:30").result(timeout=5)
    # Evening start was written explicitly, so it does not follow the morning any more.
    assert editor.effective_shift(DAY, "evening").start == "18:00"

    editor.clear_field(DAY, "evening", "timeStart").result(timeout=5)
    assert editor.effective_shift(DAY, "evening").start == "19:30"
    assert editor.shift_data(DAY, "evening").time_start == ""


def test_editor_save_times_routes_morning_to_cascade(editor):
    editor.save_times(DAY, "morning", "07:00", "21:30").result(timeout=5)
    assert editor.is_evening_suppressed(DAY)
    assert editor.visible_shifts(DAY) == ["morning"]
    assert editor.shift_data(DAY, "evening").time_start == "21:30"

    editor.save_times("2024-01-02", "evening", "18:00", "22:00").result(timeout=5)
    assert editor.shift_data("2024-01-02", "morning") == ShiftOverride()


def test_editor_helpers(editor):
    assert editor.adjust("08:00", 1) == "08:30"
    assert editor.format_display("17:30") == "5:30pm"
    assert editor.color_for("") == ("", "")
    assert len(editor.generate_days(21)) == 21
