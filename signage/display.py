"""Helpers for the presentation side of the signage service.

These sit next to the resolution engine but carry no resolution logic of
their own: status colours and labels, floor labels derived from free-text
locations, and a room's agenda classified against the current instant.
"""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, NamedTuple, Optional, Union

from .engine import is_current, is_past
from .models import Room, Schedule, Status, ThemeView, TimelineEntry

OTHER_FLOOR = "其他区域"

_FLOOR_RE = re.compile(r"(\d+)层")


class StatusTheme(NamedTuple):
    label: str
    badge: str
    color: str

    def view(self) -> ThemeView:
        return ThemeView(label=self.label, badge=self.badge, color=self.color)


STATUS_THEMES: Dict[Status, StatusTheme] = {
    Status.FREE: StatusTheme(label="空闲中 · IDLE", badge="空闲", color="emerald"),
    Status.BUSY: StatusTheme(label="使用中 · IN USE", badge="使用中", color="rose"),
    Status.DND: StatusTheme(label="不开放 · CLOSED", badge="不开放", color="slate"),
}


def theme_for(status: Union[Status, str, None]) -> StatusTheme:
    """Look up the theme for a status tag; anything unrecognised shows as free."""
    try:
        return STATUS_THEMES[Status(status)]
    except ValueError:
        return STATUS_THEMES[Status.FREE]


def floor_label(location: Optional[str]) -> str:
    """Derive a floor label such as ``20层`` from a location string."""
    match = _FLOOR_RE.search(location or "")
    return f"{match.group(1)}层" if match else OTHER_FLOOR


def group_by_floor(rooms: Iterable[Room]) -> Dict[str, List[Room]]:
    """Group rooms by floor label.

    Rooms keep their registry order within a floor; floors are ordered by
    label, descending.
    """
    floors: Dict[str, List[Room]] = {}
    for room in rooms:
        floors.setdefault(floor_label(room.location), []).append(room)
    return {floor: floors[floor] for floor in sorted(floors, reverse=True)}


def timeline(schedules: Iterable[Schedule], instant: int) -> List[TimelineEntry]:
    """Classify an agenda, as returned by ``ScheduleStore.for_room``, at ``instant``."""
    return [
        TimelineEntry(schedule=s, isCurrent=is_current(s, instant), isPast=is_past(s, instant))
        for s in schedules
    ]
