"""In-memory room registry and schedule store.

Both collections are guarded by a lock and hand out tuples of frozen
models, so a caller resolving a room always works on one consistent
snapshot even while an administrator edits rooms or adds bookings.
"""

from __future__ import annotations

import logging
import threading
from typing import Iterable, List, Optional, Tuple

from .models import Room, Schedule, ScheduleDraft

logger = logging.getLogger(__name__)


class SignageError(Exception):
    """Base class for registry and store errors."""


class RoomNotFoundError(SignageError, KeyError):
    """Raised when a room id does not exist in the registry."""

    def __init__(self, room_id: int) -> None:
        super().__init__(room_id)
        self.room_id = room_id

    def __str__(self) -> str:
        return f"Room {self.room_id} not found"


class InvalidScheduleError(SignageError, ValueError):
    """Raised when a schedule draft cannot be stored."""


class ScheduleOverlapError(InvalidScheduleError):
    """Raised when a draft overlaps an existing booking of the same room."""

    def __init__(self, draft: ScheduleDraft, existing: Schedule) -> None:
        super().__init__(
            f"Schedule '{draft.title}' overlaps schedule {existing.id} "
            f"('{existing.title}') in room {draft.roomId}"
        )
        self.existing = existing


def intervals_overlap(a: ScheduleDraft, b: ScheduleDraft) -> bool:
    """Return True if two closed intervals share at least one instant."""
    return a.startTime <= b.endTime and b.startTime <= a.endTime


class RoomRegistry:
    """Ordered collection of rooms keyed by id."""

    def __init__(self, rooms: Iterable[Room] = ()) -> None:
        self._lock = threading.Lock()
        self._rooms: List[Room] = []
        for room in rooms:
            self.add(room)

    def list(self) -> Tuple[Room, ...]:
        with self._lock:
            return tuple(self._rooms)

    def get(self, room_id: int) -> Room:
        with self._lock:
            for room in self._rooms:
                if room.id == room_id:
                    return room
        raise RoomNotFoundError(room_id)

    def exists(self, room_id: int) -> bool:
        with self._lock:
            return any(room.id == room_id for room in self._rooms)

    def find_by_device(self, device_sn: str) -> Optional[Room]:
        """Return the room bound to ``device_sn``, or None."""
        with self._lock:
            for room in self._rooms:
                if room.deviceSn and room.deviceSn == device_sn:
                    return room
        return None

    def add(self, room: Room) -> Room:
        with self._lock:
            if any(existing.id == room.id for existing in self._rooms):
                raise ValueError(f"Room {room.id} already exists")
            self._rooms.append(room)
        logger.info("Added room %s (%s)", room.id, room.name)
        return room

    def upsert(self, room: Room) -> Room:
        """Replace the room with the same id, keeping its position."""
        with self._lock:
            for index, existing in enumerate(self._rooms):
                if existing.id == room.id:
                    self._rooms[index] = room
                    break
            else:
                raise RoomNotFoundError(room.id)
            duplicate = room.deviceSn and any(
                other.deviceSn == room.deviceSn for other in self._rooms if other.id != room.id
            )
        if duplicate:
            logger.warning("Device %s is bound to more than one room", room.deviceSn)
        logger.info("Updated room %s (%s)", room.id, room.name)
        return room


class ScheduleStore:
    """Append-only collection of schedules.

    Drafts are validated at this boundary: the room must exist, the interval
    must not end before it starts and, unless ``reject_overlaps`` is False,
    it must not overlap another booking of the same room.
    """

    def __init__(self, registry: RoomRegistry, reject_overlaps: bool = True) -> None:
        self.registry = registry
        self.reject_overlaps = reject_overlaps
        self._lock = threading.Lock()
        self._schedules: List[Schedule] = []
        self._last_id = 0

    def list(self) -> Tuple[Schedule, ...]:
        with self._lock:
            return tuple(self._schedules)

    def for_room(self, room_id: int) -> List[Schedule]:
        """Return a room's schedules ordered by start time."""
        return sorted(
            (s for s in self.list() if s.roomId == room_id),
            key=lambda s: s.startTime,
        )

    def _validate(self, draft: ScheduleDraft) -> None:
        if not self.registry.exists(draft.roomId):
            logger.warning("Rejected schedule '%s': unknown room %s", draft.title, draft.roomId)
            raise RoomNotFoundError(draft.roomId)
        if draft.endTime < draft.startTime:
            logger.warning("Rejected schedule '%s': ends before it starts", draft.title)
            raise InvalidScheduleError(
                f"Schedule '{draft.title}' ends ({draft.endTime}) before it starts ({draft.startTime})"
            )

    def seed(self, schedule: Schedule) -> Schedule:
        """Insert a schedule that already carries an id.

        Seeded schedules are checked like appended ones, except for overlap.
        """
        self._validate(schedule)
        with self._lock:
            if any(existing.id == schedule.id for existing in self._schedules):
                raise ValueError(f"Schedule {schedule.id} already exists")
            self._schedules.append(schedule)
            self._last_id = max(self._last_id, schedule.id)
        return schedule

    def append(self, draft: ScheduleDraft) -> Schedule:
        """Validate ``draft`` and store it under a fresh id."""
        self._validate(draft)
        with self._lock:
            if self.reject_overlaps:
                for existing in self._schedules:
                    if existing.roomId == draft.roomId and intervals_overlap(existing, draft):
                        logger.warning(
                            "Rejected schedule '%s': overlaps schedule %s", draft.title, existing.id
                        )
                        raise ScheduleOverlapError(draft, existing)
            self._last_id += 1
            schedule = Schedule(id=self._last_id, **draft.model_dump())
            self._schedules.append(schedule)
        logger.info("Added schedule %s '%s' to room %s", schedule.id, schedule.title, schedule.roomId)
        return schedule
