"""Status resolution for room signage.

Given a room, a collection of schedules and an instant, work out which
schedule (if any) governs the room and what its terminal should show.
Everything here is a pure function of its arguments: nothing is cached and
nothing is mutated, so callers simply re-resolve whenever the clock moves.
"""

from __future__ import annotations

from typing import Iterable, Optional

from .models import DisplayState, Room, Schedule, Status


def is_current(schedule: Schedule, instant: int) -> bool:
    """Return True if ``instant`` falls within the schedule, both ends inclusive."""
    return schedule.startTime <= instant <= schedule.endTime


def is_past(schedule: Schedule, instant: int) -> bool:
    """Return True if the schedule has finished before ``instant``.

    Strictly after ``endTime``, so a schedule is never both current and past.
    """
    return schedule.endTime < instant


def active_schedule(room: Room, schedules: Iterable[Schedule], instant: int) -> Optional[Schedule]:
    """Return the schedule governing ``room`` at ``instant``, or None.

    When several schedules of the room contain the instant, the first one in
    iteration order wins.
    """
    for schedule in schedules:
        if schedule.roomId == room.id and is_current(schedule, instant):
            return schedule
    return None


def resolve(room: Room, schedules: Iterable[Schedule], instant: int) -> DisplayState:
    """Compute the display state of ``room`` at ``instant``.

    Schedules belonging to other rooms are ignored. Without an active
    schedule the room falls back to its own name, location and background
    with a ``free`` status.
    """
    schedule = active_schedule(room, schedules, instant)
    if schedule is not None:
        return DisplayState(
            title=schedule.title,
            subtitle=schedule.owner,
            status=schedule.status,
            background=schedule.bgImage or room.defaultBg,
            isSchedule=True,
            endTime=schedule.endTime,
        )
    return DisplayState(
        title=room.name,
        subtitle=room.location,
        status=Status.FREE,
        background=room.defaultBg,
        isSchedule=False,
        endTime=None,
    )
