"""Pydantic data models for rooms, schedules and resolved display state.

Instants are plain integers: milliseconds since the Unix epoch. Room and
schedule records are frozen so that a snapshot handed to the resolution
engine cannot change underneath it.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Status(str, Enum):
    """Closed set of signage status tags."""

    FREE = "free"
    BUSY = "busy"
    DND = "dnd"


class Room(BaseModel):
    """A physical space bound to a signage terminal."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    location: str = ""
    deviceSn: Optional[str] = None
    defaultBg: str = ""


class RoomUpdate(BaseModel):
    """Editable room fields. The id comes from the URL and never changes."""

    name: str
    location: str = ""
    deviceSn: Optional[str] = None
    defaultBg: str = ""


class ScheduleDraft(BaseModel):
    """A booking as submitted, before the store assigns it an id."""

    roomId: int
    title: str
    owner: str = ""
    status: Status = Status.BUSY
    startTime: int
    endTime: int
    bgImage: Optional[str] = None


class Schedule(ScheduleDraft):
    """A stored booking of a room."""

    model_config = ConfigDict(frozen=True)

    id: int


class QuickScheduleRequest(BaseModel):
    """Whole-hour booking on the current day, as offered by the admin form."""

    roomId: int
    title: str
    owner: str = ""
    status: Status = Status.BUSY
    startHour: int = Field(ge=0, le=23)
    duration: int = Field(default=1, ge=1)


class DisplayState(BaseModel):
    """What a room's signage shows at one instant."""

    model_config = ConfigDict(frozen=True)

    title: str
    subtitle: str
    status: Status
    background: str
    isSchedule: bool
    endTime: Optional[int] = None


class TimelineEntry(BaseModel):
    """A schedule row in a room's agenda, classified against an instant."""

    schedule: Schedule
    isCurrent: bool
    isPast: bool


class ThemeView(BaseModel):
    label: str
    badge: str
    color: str


class TerminalView(BaseModel):
    """Everything a terminal needs to paint one frame."""

    room: Room
    instant: int
    display: DisplayState
    theme: ThemeView


class FloorView(BaseModel):
    floor: str
    rooms: List[TerminalView] = []


class OffsetRequest(BaseModel):
    offset: int
