"""HTTP API over the schedule editor."""

import threading
import time

import pytest
from fastapi.testclient import TestClient

import server.main as server_main
from rota.config import RotaConfig
from rota.engine.editor import ScheduleEditor
from rota.sync.store import ScheduleStore
from rota.sync.transport import MemoryTransport

DAY = "2024-01-01"


@pytest.fixture
def client():
    transport = MemoryTransport()
    store = ScheduleStore(transport)
    store.subscribe()
    editor = ScheduleEditor(store)

    server_main._config = RotaConfig()
    server_main.app.dependency_overrides[server_main.get_editor] = lambda: editor
    yield TestClient(server_main.app), editor
    server_main.app.dependency_overrides.clear()
    server_main._config = None
    store.close()


def test_health(client):
    http, _ = client
    assert http.get("/health").json() == {"ok": True}


def test_schedule_default_range(client):
    http, _ = client
    body = http.get("/schedule").json()
    assert body["days"] == 21
    assert body["nextDays"] == 35
    assert body["loading"] is False
    assert len(body["shifts"]) == 42
    assert body["shifts"][0]["isToday"] is True


def test_update_name(client):
    http, editor = client
    resp = http.put(f"/shifts/{DAY}/evening", json={"field": "name", "value": "Alice"})
    assert resp.status_code == 200
    assert resp.json()["name"] == "Alice"
    assert resp.json()["bg"] == "bg-amber-200"
    assert editor.shift_data(DAY, "evening").name == "Alice"


def test_morning_times_cascade_and_suppress(client):
    http, _ = client
    resp = http.post(f"/shifts/{DAY}/morning/times", json={"start": "08:00", "end": "21:00"})
    body = resp.json()
    assert resp.status_code == 200
    assert body["visibleShifts"] == ["morning"]
    evening = body["shifts"][1]
    assert evening["visible"] is False
    assert evening["stored"] == {"timeStart": "21:00"}


def test_clear_field(client):
    http, _ = client
    http.put(f"/shifts/{DAY}/morning", json={"field": "comment", "value": "confirmed"})
    resp = http.delete(f"/shifts/{DAY}/morning/comment")
    assert resp.status_code == 200
    assert resp.json()["comment"] == ""
    assert resp.json()["stored"] == {"comment": ""}


def test_bad_requests(client):
    http, _ = client
    assert http.put(f"/shifts/{DAY}/morning", json={"field": "colour", "value": "x"}).status_code == 400
    assert http.post(f"/shifts/{DAY}/evening/times", json={"start": "7pm", "end": "22:00"}).status_code == 400
    assert http.get("/shifts/01-01-2024/morning").status_code == 400
    assert http.get(f"/shifts/{DAY}/night").status_code == 404
    assert http.get("/schedule?days=-1").status_code == 400


def test_adjust_time(client):
    http, _ = client
    assert http.post("/time/adjust", json={"time": "23:30", "delta": 1}).json() == {
        "time": "00:00",
        "display": "12am",
    }


def test_cors_header_on_success_and_errors(client):
    http, _ = client
    origin = {"Origin": "http://localhost:5173"}
    for resp in (
        http.get("/health", headers=origin),
        http.get("/shifts/bad/morning", headers=origin),
        http.get(f"/shifts/{DAY}/night", headers=origin),
    ):
        assert resp.headers["access-control-allow-origin"] == "*"


def _memory_editor():
    store = ScheduleStore(MemoryTransport())
    store.subscribe()
    return ScheduleEditor(store)


def test_concurrent_first_requests_share_one_editor(monkeypatch):
    built = []

    def _build(cfg, transport=None):
        time.sleep(0.05)
        editor = _memory_editor()
        built.append(editor)
        return editor

    monkeypatch.setattr(server_main, "build_editor", _build)
    monkeypatch.setattr(server_main, "_config", RotaConfig())
    monkeypatch.setattr(server_main, "_editor", None)

    barrier = threading.Barrier(4)
    seen = []

    def _request():
        barrier.wait(timeout=5)
        seen.append(server_main.get_editor())

    threads = [threading.Thread(target=_request) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5)

    assert len(built) == 1
    assert len(seen) == 4 and all(e is built[0] for e in seen)
    server_main.close_editor()


def test_shutdown_closes_shared_editor(monkeypatch):
    editor = _memory_editor()
    monkeypatch.setattr(server_main, "_config", RotaConfig())
    monkeypatch.setattr(server_main, "_editor", editor)

    with TestClient(server_main.app) as http:
        assert http.get("/status").json()["loading"] is False
        assert server_main._editor is editor

    assert server_main._editor is None
    assert editor.store._unsubscribe is None
