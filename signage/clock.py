"""Simulated clock used to preview signage at arbitrary times.

The clock samples wall-clock time on a fixed cadence and adds an operator
controlled offset. Any offset is accepted, including ones that land before
the epoch; range limits belong to whoever exposes the control.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)


def wall_clock_ms() -> int:
    """Return the current wall-clock time in milliseconds since the epoch."""
    return int(time.time() * 1000)


class SimulatedClock:
    """Wall-clock reading plus a signed offset, both in milliseconds.

    ``now()`` is recomputed on every call from the last sampled base reading
    and the current offset. The base is resampled by ``tick()``, which the
    background ticker started with ``start()`` calls every ``tick_seconds``.
    """

    def __init__(
        self,
        time_source: Optional[Callable[[], int]] = None,
        tick_seconds: float = 1.0,
    ) -> None:
        self._time_source = time_source or wall_clock_ms
        self.tick_seconds = tick_seconds
        self._lock = threading.Lock()
        self._base = int(self._time_source())
        self._offset = 0
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def base_reading(self) -> int:
        with self._lock:
            return self._base

    @property
    def offset(self) -> int:
        with self._lock:
            return self._offset

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def now(self) -> int:
        """Return the effective instant: base reading plus offset."""
        with self._lock:
            return self._base + self._offset

    def set_offset(self, delta: int) -> None:
        """Replace the current offset with ``delta`` milliseconds."""
        with self._lock:
            self._offset = int(delta)
        logger.info("Clock offset set to %+d ms", delta)

    def tick(self) -> int:
        """Resample the base reading and return it."""
        reading = int(self._time_source())
        with self._lock:
            self._base = reading
        return reading

    def start(self) -> None:
        """Start the background ticker. Calling it twice is a no-op."""
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="signage-clock", daemon=True)
        self._thread.start()
        logger.info("Clock ticker started (every %.1fs)", self.tick_seconds)

    def stop(self) -> None:
        """Stop the background ticker and wait for it to exit."""
        thread = self._thread
        if thread is None:
            return
        self._stop_event.set()
        thread.join(timeout=max(self.tick_seconds * 2, 1.0))
        self._thread = None
        logger.info("Clock ticker stopped")

    def _run(self) -> None:
        while not self._stop_event.wait(self.tick_seconds):
            try:
                self.tick()
            except Exception as exc:
                logger.exception("Clock tick failed: %s", exc)
