from __future__ import annotations

import os

import pytest
from fastapi.testclient import TestClient

# Start every test run from the demo data set.
os.environ["SEED_DEMO_DATA"] = "true"

from signage import main  # noqa: E402
from signage.main import app  # noqa: E402

HOUR_MS = 60 * 60 * 1000
# 2100-01-01 00:00:00 UTC, well clear of the demo bookings
FUTURE = 4_102_444_800_000

client = TestClient(app)


@pytest.fixture(autouse=True)
def reset_offset():
    main.clock.set_offset(0)
    yield
    main.clock.set_offset(0)


def _demo_booking() -> dict:
    items = client.get("/api/schedules").json()["items"]
    return next(item for item in items if item["id"] == 101)


def test_list_rooms():
    response = client.get("/api/rooms")
    assert response.status_code == 200
    data = response.json()
    assert data["count"] >= 4
    assert {room["id"] for room in data["items"]} >= {1, 2, 3, 4}


def test_get_unknown_room():
    assert client.get("/api/rooms/999").status_code == 404


def test_display_follows_demo_booking():
    booking = _demo_booking()
    response = client.get("/api/rooms/2/display", params={"at": booking["startTime"]})
    assert response.status_code == 200
    view = response.json()
    assert view["display"]["title"] == booking["title"]
    assert view["display"]["status"] == "busy"
    assert view["display"]["isSchedule"] is True
    assert view["display"]["endTime"] == booking["endTime"]
    assert view["display"]["background"] == booking["bgImage"]
    assert view["theme"]["label"] == "使用中 · IN USE"

    after = client.get("/api/rooms/2/display", params={"at": booking["endTime"] + 1}).json()
    assert after["display"]["isSchedule"] is False
    assert after["display"]["status"] == "free"
    assert after["display"]["title"] == after["room"]["name"]
    assert after["display"]["endTime"] is None


def test_display_defaults_to_simulated_now():
    booking = _demo_booking()
    now = client.get("/api/clock").json()["now"]
    client.put("/api/clock/offset", json={"offset": booking["endTime"] + HOUR_MS - now})
    view = client.get("/api/rooms/2/display").json()
    assert view["display"]["isSchedule"] is False
    assert view["instant"] > booking["endTime"]


def test_display_unknown_room():
    assert client.get("/api/rooms/999/display").status_code == 404


def test_device_display():
    booking = _demo_booking()
    response = client.get("/api/devices/SN-2024-8802/display", params={"at": booking["startTime"]})
    assert response.status_code == 200
    assert response.json()["room"]["id"] == 2
    assert response.json()["display"]["isSchedule"] is True
    assert client.get("/api/devices/SN-NOPE/display").status_code == 404


def test_update_room_keeps_identity():
    payload = {
        "name": "研发部实验室 B",
        "location": "18层 1805室",
        "deviceSn": "SN-2024-6601",
        "defaultBg": "https://example.com/lab.jpg",
    }
    response = client.put("/api/rooms/3", json=payload)
    assert response.status_code == 200
    assert response.json()["id"] == 3
    assert client.get("/api/rooms/3").json()["name"] == "研发部实验室 B"
    view = client.get("/api/rooms/3/display", params={"at": FUTURE}).json()
    assert view["display"]["background"] == "https://example.com/lab.jpg"

    assert client.put("/api/rooms/999", json=payload).status_code == 404


def test_add_schedule_and_validation():
    payload = {
        "roomId": 3,
        "title": "部门周会",
        "owner": "技术部",
        "status": "dnd",
        "startTime": FUTURE,
        "endTime": FUTURE + HOUR_MS,
    }
    created = client.post("/api/schedules", json=payload)
    assert created.status_code == 201
    schedule = created.json()
    assert schedule["id"] > 102
    assert schedule["status"] == "dnd"
    assert schedule["bgImage"] is None

    view = client.get("/api/rooms/3/display", params={"at": FUTURE + HOUR_MS}).json()
    assert view["display"]["title"] == "部门周会"
    assert view["theme"]["badge"] == "不开放"

    overlap = client.post("/api/schedules", json={**payload, "startTime": FUTURE + HOUR_MS // 2})
    assert overlap.status_code == 409

    backwards = client.post(
        "/api/schedules", json={**payload, "startTime": FUTURE + 5 * HOUR_MS, "endTime": FUTURE + 4 * HOUR_MS}
    )
    assert backwards.status_code == 422

    orphan = client.post("/api/schedules", json={**payload, "roomId": 999})
    assert orphan.status_code == 404

    bad_status = client.post("/api/schedules", json={**payload, "status": "closed"})
    assert bad_status.status_code == 422


def test_quick_schedule():
    response = client.post(
        "/api/schedules/quick",
        json={"roomId": 4, "title": "Stand-up", "owner": "Team", "status": "busy", "startHour": 3, "duration": 2},
    )
    assert response.status_code == 201
    schedule = response.json()
    assert schedule["endTime"] - schedule["startTime"] == 2 * HOUR_MS

    clash = client.post(
        "/api/schedules/quick",
        json={"roomId": 4, "title": "Clash", "startHour": 4, "duration": 1},
    )
    assert clash.status_code == 409

    too_long = client.post("/api/schedules/quick", json={"roomId": 4, "title": "x", "startHour": 9, "duration": 9})
    assert too_long.status_code == 422
    bad_hour = client.post("/api/schedules/quick", json={"roomId": 4, "title": "x", "startHour": 24})
    assert bad_hour.status_code == 422


def test_room_schedules_timeline():
    booking = _demo_booking()
    now = client.get("/api/clock").json()["now"]
    client.put("/api/clock/offset", json={"offset": booking["endTime"] + 1 - now})
    entries = client.get("/api/rooms/2/schedules").json()
    entry = next(e for e in entries if e["schedule"]["id"] == 101)
    assert entry["isPast"] is True
    assert entry["isCurrent"] is False
    starts = [e["schedule"]["startTime"] for e in entries]
    assert starts == sorted(starts)


def test_room_schedules_at_explicit_instant():
    booking = _demo_booking()
    entries = client.get("/api/rooms/2/schedules", params={"at": booking["endTime"]}).json()
    entry = next(e for e in entries if e["schedule"]["id"] == 101)
    assert entry["isCurrent"] is True
    assert entry["isPast"] is False

    later = client.get("/api/rooms/2/schedules", params={"at": booking["endTime"] + 1}).json()
    entry = next(e for e in later if e["schedule"]["id"] == 101)
    assert entry["isCurrent"] is False
    assert entry["isPast"] is True


def test_floors_dashboard():
    booking = _demo_booking()
    floors = client.get("/api/floors", params={"at": booking["startTime"]}).json()
    labels = [floor["floor"] for floor in floors]
    assert labels.index("20层") < labels.index("18层")
    top = next(floor for floor in floors if floor["floor"] == "20层")
    meeting = next(view for view in top["rooms"] if view["room"]["id"] == 2)
    assert meeting["display"]["status"] == "busy"


def test_clock_offset_and_clamping():
    response = client.put("/api/clock/offset", json={"offset": 3_600_000})
    assert response.status_code == 200
    data = response.json()
    assert data["offset"] == 3_600_000
    assert data["now"] == data["baseReading"] + 3_600_000
    assert data["maxOffset"] == 24 * HOUR_MS
    assert data["offsetStep"] == HOUR_MS

    clamped = client.put("/api/clock/offset", json={"offset": -10 * 24 * HOUR_MS}).json()
    assert clamped["offset"] == -24 * HOUR_MS


def test_backgrounds_and_health():
    assert len(client.get("/api/backgrounds").json()["items"]) == 6
    assert client.get("/healthz").json()["ok"] is True


def test_lifespan_runs_clock_ticker():
    with TestClient(app) as live:
        assert live.get("/healthz").json()["clockRunning"] is True
    assert main.clock.running is False
