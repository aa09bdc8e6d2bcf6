"""Main application entry point for the room signage service.

This module defines the FastAPI application, configures logging and holds
the in-memory room registry, schedule store and simulated clock. Every
request that shows a room resolves it afresh against a snapshot of the
schedules and the clock's current instant; nothing derived is cached.

Endpoints:
  - ``/api/rooms``: list, read and edit rooms.
  - ``/api/rooms/{id}/display``: the terminal view of one room.
  - ``/api/devices/{sn}/display``: the terminal view looked up by device.
  - ``/api/rooms/{id}/schedules``: a room's agenda with current/past flags.
  - ``/api/schedules``: list and add bookings.
  - ``/api/floors``: the dashboard, rooms grouped by floor.
  - ``/api/clock``: read the simulated clock and shift it.
  - ``/healthz``: simple health check endpoint.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from . import demo
from .clock import SimulatedClock
from .config import settings
from .display import group_by_floor, theme_for, timeline
from .engine import resolve
from .models import (
    FloorView,
    OffsetRequest,
    QuickScheduleRequest,
    Room,
    RoomUpdate,
    Schedule,
    ScheduleDraft,
    TerminalView,
    TimelineEntry,
)
from .store import (
    InvalidScheduleError,
    RoomNotFoundError,
    RoomRegistry,
    ScheduleOverlapError,
    ScheduleStore,
)

logger = logging.getLogger("room_signage")
logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")

clock = SimulatedClock(tick_seconds=settings.tick_seconds)
rooms = RoomRegistry()
schedules = ScheduleStore(rooms, reject_overlaps=settings.reject_overlapping_schedules)

if settings.seed_demo_data:
    demo.seed(rooms, schedules, clock.now())


@asynccontextmanager
async def lifespan(_: FastAPI):
    clock.start()
    try:
        yield
    finally:
        clock.stop()


app = FastAPI(title="Room Signage Service", lifespan=lifespan)

# CORS is off by default because the terminals and the API share an origin.
if settings.enable_cors:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )


def _iso(instant: int) -> str:
    return datetime.fromtimestamp(instant / 1000, timezone.utc).isoformat().replace("+00:00", "Z")


def _get_room(room_id: int) -> Room:
    try:
        return rooms.get(room_id)
    except RoomNotFoundError as exc:
        logger.warning("%s", exc)
        raise HTTPException(status_code=404, detail=str(exc))


def _terminal_view(room: Room, snapshot: Sequence[Schedule], instant: int) -> TerminalView:
    state = resolve(room, snapshot, instant)
    return TerminalView(room=room, instant=instant, display=state, theme=theme_for(state.status).view())


def _append(draft: ScheduleDraft) -> Schedule:
    try:
        return schedules.append(draft)
    except RoomNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except ScheduleOverlapError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except InvalidScheduleError as exc:
        raise HTTPException(status_code=422, detail=str(exc))


def _clock_payload() -> Dict[str, Any]:
    base = clock.base_reading
    offset = clock.offset
    return {
        "baseReading": base,
        "offset": offset,
        "now": base + offset,
        "nowIso": _iso(base + offset),
        "maxOffset": settings.max_offset_ms,
        "offsetStep": settings.offset_step_ms,
    }


def quick_window(base_reading: int, start_hour: int, duration: int) -> Tuple[int, int]:
    """Return (start, end) for a whole-hour booking on the local day of ``base_reading``."""
    day = datetime.fromtimestamp(base_reading / 1000).replace(hour=0, minute=0, second=0, microsecond=0)
    start = day + timedelta(hours=start_hour)
    end = start + timedelta(hours=duration)
    return int(start.timestamp() * 1000), int(end.timestamp() * 1000)


@app.get("/api/rooms")
def api_rooms() -> Dict[str, Any]:
    """Return all rooms in registry order."""
    items = rooms.list()
    return {"count": len(items), "items": [room.model_dump() for room in items]}


@app.get("/api/rooms/{room_id}", response_model=Room)
def api_room(room_id: int) -> Room:
    return _get_room(room_id)


@app.put("/api/rooms/{room_id}", response_model=Room)
def api_update_room(room_id: int, update: RoomUpdate) -> Room:
    """Replace a room's editable fields; its id stays the same."""
    try:
        return rooms.upsert(Room(id=room_id, **update.model_dump()))
    except RoomNotFoundError as exc:
        logger.warning("%s", exc)
        raise HTTPException(status_code=404, detail=str(exc))


@app.get("/api/rooms/{room_id}/display", response_model=TerminalView)
def api_room_display(room_id: int, at: Optional[int] = None) -> TerminalView:
    """Resolve what a room's terminal shows, at ``at`` or the simulated now."""
    room = _get_room(room_id)
    instant = clock.now() if at is None else at
    return _terminal_view(room, schedules.list(), instant)


@app.get("/api/devices/{device_sn}/display", response_model=TerminalView)
def api_device_display(device_sn: str, at: Optional[int] = None) -> TerminalView:
    """Resolve the terminal view for the room a device is bound to."""
    room = rooms.find_by_device(device_sn)
    if room is None:
        logger.warning("No room bound to device %s", device_sn)
        raise HTTPException(status_code=404, detail=f"No room bound to device {device_sn}")
    instant = clock.now() if at is None else at
    return _terminal_view(room, schedules.list(), instant)


@app.get("/api/rooms/{room_id}/schedules", response_model=List[TimelineEntry])
def api_room_schedules(room_id: int, at: Optional[int] = None) -> List[TimelineEntry]:
    """Return a room's agenda ordered by start time, classified at ``at`` or the simulated now."""
    room = _get_room(room_id)
    instant = clock.now() if at is None else at
    return timeline(schedules.for_room(room.id), instant)


@app.get("/api/schedules")
def api_schedules() -> Dict[str, Any]:
    items = schedules.list()
    return {"count": len(items), "items": [s.model_dump(mode="json") for s in items]}


@app.post("/api/schedules", response_model=Schedule, status_code=201)
def api_add_schedule(draft: ScheduleDraft) -> Schedule:
    return _append(draft)


@app.post("/api/schedules/quick", response_model=Schedule, status_code=201)
def api_quick_schedule(request: QuickScheduleRequest) -> Schedule:
    """Book whole hours on today's date, the way the admin form does."""
    if request.duration > settings.quick_max_duration_hours:
        raise HTTPException(
            status_code=422,
            detail=f"Duration must be at most {settings.quick_max_duration_hours} hours",
        )
    start, end = quick_window(clock.base_reading, request.startHour, request.duration)
    draft = ScheduleDraft(
        roomId=request.roomId,
        title=request.title,
        owner=request.owner,
        status=request.status,
        startTime=start,
        endTime=end,
        bgImage=None,
    )
    return _append(draft)


@app.get("/api/floors", response_model=List[FloorView])
def api_floors(at: Optional[int] = None) -> List[FloorView]:
    """Return the dashboard: every room with its display state, grouped by floor."""
    instant = clock.now() if at is None else at
    snapshot = schedules.list()
    return [
        FloorView(floor=floor, rooms=[_terminal_view(room, snapshot, instant) for room in members])
        for floor, members in group_by_floor(rooms.list()).items()
    ]


@app.get("/api/clock")
def api_clock() -> Dict[str, Any]:
    return _clock_payload()


@app.put("/api/clock/offset")
def api_set_offset(request: OffsetRequest) -> Dict[str, Any]:
    """Shift the simulated clock. The offset is clamped to the configured range."""
    limit = settings.max_offset_ms
    offset = max(-limit, min(limit, request.offset))
    if offset != request.offset:
        logger.info("Clamped requested offset %+d ms to %+d ms", request.offset, offset)
    clock.set_offset(offset)
    return _clock_payload()


@app.get("/api/backgrounds")
def api_backgrounds() -> Dict[str, Any]:
    return {"items": demo.PRESET_BACKGROUNDS}


@app.get("/healthz")
def healthz() -> Dict[str, Any]:
    """Health check endpoint for monitoring."""
    return {"ok": True, "time": _iso(clock.base_reading), "clockRunning": clock.running}
