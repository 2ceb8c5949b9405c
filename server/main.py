from __future__ import annotations

import os
import threading
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from rota.config import RotaConfig, load_config
from rota.domain.keys import date_key as to_date_key
from rota.domain.templates import SHIFT_IDS
from rota.engine.editor import ScheduleEditor, build_editor
from rota.services.days import next_range
from rota.sync.transport import MemoryTransport

CONFIG_PATH = Path(os.environ.get("ROTA_CONFIG", "rota_config.yaml"))

ALLOWED_ORIGINS = ["*"]

_editor: Optional[ScheduleEditor] = None
_config: Optional[RotaConfig] = None
_editor_lock = threading.Lock()


def close_editor() -> None:
    """Stop the shared editor's subscription and wait for its writes."""
    global _editor
    with _editor_lock:
        editor, _editor = _editor, None
    if editor is not None:
        editor.store.close()
        print("[INFO] Schedule store closed")


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    close_editor()


app = FastAPI(title="Carer Rota API", redirect_slashes=False, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["*"],
    max_age=86400,
)


def get_config() -> RotaConfig:
    global _config
    if _config is None:
        _config = load_config(CONFIG_PATH) if CONFIG_PATH.exists() else RotaConfig()
    return _config


def get_editor() -> ScheduleEditor:
    """Process-wide editor, subscribed on first use."""
    global _editor
    with _editor_lock:
        if _editor is None:
            cfg = get_config()
            transport = MemoryTransport() if os.environ.get("ROTA_BACKEND") == "memory" else None
            _editor = build_editor(cfg, transport=transport)
        return _editor


class FieldUpdate(BaseModel):
    field: str
    value: str


class TimesUpdate(BaseModel):
    start: str
    end: str


class AdjustRequest(BaseModel):
    time: str
    delta: int


def _date_key(value: str) -> str:
    try:
        return to_date_key(value)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid date format, expected YYYY-MM-DD")


def _check_shift(shift_id: str) -> None:
    if shift_id not in SHIFT_IDS:
        raise HTTPException(status_code=404, detail=f"Unknown shift '{shift_id}'")


def _status(editor: ScheduleEditor) -> dict:
    store = editor.store
    return {
        "loading": store.loading,
        "syncing": store.syncing,
        "lastError": str(store.last_error) if store.last_error else None,
    }


def _shift_payload(editor: ScheduleEditor, date_key: str, shift_id: str) -> dict:
    data = editor.shift_data(date_key, shift_id)
    times = editor.effective_shift(date_key, shift_id)
    colors = editor.color_for(data.name)
    return {
        "date": date_key,
        "shiftId": shift_id,
        "start": times.start,
        "end": times.end,
        "display": f"{editor.format_display(times.start)}-{editor.format_display(times.end)}",
        "name": data.name or "",
        "comment": data.comment or "",
        "bg": colors.bg,
        "text": colors.text,
        "visible": shift_id in editor.visible_shifts(date_key),
        "stored": data.to_dict(),
    }


@app.get("/health")
def health(): return {"ok": True}

@app.get("/status")
def status(editor: ScheduleEditor = Depends(get_editor)):
    return _status(editor)

@app.get("/schedule")
def get_schedule(days: Optional[int] = None, editor: ScheduleEditor = Depends(get_editor)):
    """
    Rota from today, one row per visible shift.

    `nextDays` is the day count to ask for on "load more".
    """
    cfg = get_config()
    count = cfg.initial_days if days is None else days
    if count < 0:
        raise HTTPException(status_code=400, detail="'days' must be >= 0")
    try:
        rows = editor.engine.rows(editor.generate_days(count))
    except ValueError as e:
        raise HTTPException(status_code=500, detail=f"Schedule error: {e}")
    return {
        **_status(editor),
        "days": count,
        "nextDays": next_range(count, cfg.page_days),
        "shifts": rows,
    }

@app.get("/shifts/{date}/{shift_id}")
def get_shift(date: str, shift_id: str, editor: ScheduleEditor = Depends(get_editor)):
    _check_shift(shift_id)
    return _shift_payload(editor, _date_key(date), shift_id)

@app.put("/shifts/{date}/{shift_id}")
def update_shift(date: str, shift_id: str, payload: FieldUpdate, editor: ScheduleEditor = Depends(get_editor)):
    """
    Set one field of a shift.
    Expected payload: {"field": "name", "value": "Alice"}
    """
    _check_shift(shift_id)
    key = _date_key(date)
    try:
        editor.update_shift_field(key, shift_id, payload.field, payload.value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {**_shift_payload(editor, key, shift_id), **_status(editor)}

@app.post("/shifts/{date}/{shift_id}/times")
def save_times(date: str, shift_id: str, payload: TimesUpdate, editor: ScheduleEditor = Depends(get_editor)):
    """
    Save both times of a shift.

    Saving the morning shift also sets the evening start to the new morning end.
    """
    _check_shift(shift_id)
    key = _date_key(date)
    try:
        editor.save_times(key, shift_id, payload.start, payload.end)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {
        "date": key,
        "visibleShifts": editor.visible_shifts(key),
        "shifts": [_shift_payload(editor, key, s) for s in SHIFT_IDS],
        **_status(editor),
    }

@app.delete("/shifts/{date}/{shift_id}/{field}")
def clear_field(date: str, shift_id: str, field: str, editor: ScheduleEditor = Depends(get_editor)):
    """Clear a field. The stored record keeps the field with an empty value."""
    _check_shift(shift_id)
    key = _date_key(date)
    try:
        editor.clear_field(key, shift_id, field)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {**_shift_payload(editor, key, shift_id), **_status(editor)}

@app.post("/time/adjust")
def adjust_time(payload: AdjustRequest, editor: ScheduleEditor = Depends(get_editor)):
    """Step a time by `delta` steps of the configured size (30 minutes by default)."""
    try:
        value = editor.adjust(payload.time, payload.delta)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"time": value, "display": editor.format_display(value)}
