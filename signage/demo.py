"""Demo rooms, bookings and background presets.

The bookings are placed relative to a reference instant so the dashboard
always has something happening when the service starts.
"""

from typing import List

from .models import Room, Schedule, Status
from .store import RoomRegistry, ScheduleStore

HOUR_MS = 60 * 60 * 1000

PRESET_BACKGROUNDS: List[str] = [
    "https://images.unsplash.com/photo-1497366216548-37526070297c?auto=format&fit=crop&q=80&w=1000",
    "https://images.unsplash.com/photo-1497366811353-6870744d04b2?auto=format&fit=crop&q=80&w=1000",
    "https://images.unsplash.com/photo-1581093458791-9f3c3900df4b?auto=format&fit=crop&q=80&w=1000",
    "https://images.unsplash.com/photo-1557804506-669a67965ba0?auto=format&fit=crop&q=80&w=1000",
    "https://images.unsplash.com/photo-1556761175-5973dc0f32e7?auto=format&fit=crop&q=80&w=1000",
    "https://images.unsplash.com/photo-1497215728101-856f4ea42174?auto=format&fit=crop&q=80&w=1000",
]


def demo_rooms() -> List[Room]:
    return [
        Room(id=1, name="总经理办公室", location="20层 2001室", deviceSn="SN-2024-8801", defaultBg=PRESET_BACKGROUNDS[0]),
        Room(id=2, name="第一会议室", location="20层 2008室", deviceSn="SN-2024-8802", defaultBg=PRESET_BACKGROUNDS[1]),
        Room(id=3, name="研发部实验室", location="18层 1805室", deviceSn="SN-2024-6601", defaultBg=PRESET_BACKGROUNDS[2]),
        Room(id=4, name="开放办公区 A", location="18层 1801室", deviceSn="SN-2024-6602", defaultBg=PRESET_BACKGROUNDS[5]),
    ]


def demo_schedules(reference: int) -> List[Schedule]:
    """Return the demo bookings around the ``reference`` instant."""
    return [
        Schedule(
            id=101,
            roomId=2,
            title="Q4 季度预算评审会",
            owner="财务部 - 李总",
            status=Status.BUSY,
            startTime=reference - HOUR_MS,
            endTime=reference + 2 * HOUR_MS,
            bgImage=PRESET_BACKGROUNDS[4],
        ),
        Schedule(
            id=102,
            roomId=1,
            title="商务洽谈 - 不便打扰",
            owner="张总",
            status=Status.DND,
            startTime=reference + 3 * HOUR_MS,
            endTime=reference + 5 * HOUR_MS,
            bgImage=PRESET_BACKGROUNDS[3],
        ),
    ]


def seed(registry: RoomRegistry, store: ScheduleStore, reference: int) -> None:
    """Load the demo rooms and bookings into empty collections."""
    for room in demo_rooms():
        registry.add(room)
    for schedule in demo_schedules(reference):
        store.seed(schedule)
