from __future__ import annotations

import pytest

from signage.models import Room, Schedule, Status

HOUR_MS = 60 * 60 * 1000
# 2025-03-14 10:00:00 UTC
T = 1_741_946_400_000


@pytest.fixture
def room() -> Room:
    return Room(id=2, name="会议室", location="20层 2008室", deviceSn="SN-1", defaultBg="B0")


@pytest.fixture
def schedule() -> Schedule:
    return Schedule(
        id=101,
        roomId=2,
        title="预算评审",
        owner="财务部",
        status=Status.BUSY,
        startTime=T - HOUR_MS,
        endTime=T + 2 * HOUR_MS,
    )
