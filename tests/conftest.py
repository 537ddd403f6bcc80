"""Shared test fixtures and configuration.

Pins the delay settings before any timegrid import, and provides a
deterministic timer, a two-day static grid and gesture builders.
"""

import os

# Patch env vars BEFORE any timegrid imports
os.environ.setdefault("HOVER_DELAY_MS", "2000")
os.environ.setdefault("CLICK_DELAY_MS", "300")
os.environ.setdefault("GUIDE_RESTORE_DELAY_MS", "100")
os.environ.setdefault("MIN_CREATION_MINUTES", "30")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

from datetime import date, datetime

import pytest

from timegrid.adapters.memory_store import InMemoryScheduleStore
from timegrid.adapters.pointer_dispatcher import PointerDispatcher
from timegrid.adapters.static_grid import StaticTimeGrid
from timegrid.core.events import EventType
from timegrid.data.models import Gesture, PointerEvent, Schedule

FIRST_DAY = date(2026, 10, 19)


class _ManualHandle:
    def __init__(self, due: int, seq: int, callback):
        self.due = due
        self.seq = seq
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualTimer:
    """TimerPort whose clock only moves when the test says so."""

    def __init__(self):
        self.now = 0
        self._seq = 0
        self._handles: list[_ManualHandle] = []

    def call_later(self, delay_ms, callback):
        self._seq += 1
        handle = _ManualHandle(self.now + delay_ms, self._seq, callback)
        self._handles.append(handle)
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for h in self._handles if not h.cancelled and not h.fired)

    def advance(self, ms: int) -> None:
        target = self.now + ms
        while True:
            due = [h for h in self._handles if not h.cancelled and not h.fired and h.due <= target]
            if not due:
                break
            handle = min(due, key=lambda h: (h.due, h.seq))
            self.now = handle.due
            handle.fired = True
            handle.callback()
        self.now = target


class GestureFactory:
    """Builds gestures against the static grid, y in px from the column top."""

    def __init__(self, grid: StaticTimeGrid):
        self.grid = grid

    def _gesture(self, target, y, kind):
        return Gesture(target=target, origin_event=PointerEvent(client_y=y, type=kind, target=target))

    def grid_at(self, y, view_id=0, kind="mousemove"):
        return self._gesture(self.grid.get_view(view_id).column, y, kind)

    def wrap_at(self, y, view_id=0, kind="mousemove"):
        return self._gesture(self.grid.get_view(view_id).block_wrap(), y, kind)

    def handle_at(self, schedule_id, y, top, view_id=0, kind="mousemove"):
        return self._gesture(self.grid.get_view(view_id).handle(schedule_id, top=top), y, kind)

    def outside(self, y, kind="mousemove"):
        return self._gesture(None, y, kind)


@pytest.fixture
def timer():
    return ManualTimer()


@pytest.fixture
def pointer():
    return PointerDispatcher()


@pytest.fixture
def grid():
    """Two day columns, 2400px tall: 100px per hour."""
    return StaticTimeGrid.for_days(FIRST_DAY, 2, height=2400)


@pytest.fixture
def gestures(grid):
    return GestureFactory(grid)


@pytest.fixture
def store():
    return InMemoryScheduleStore([
        Schedule(
            id="s1",
            start=datetime(2026, 10, 19, 9, 0),
            end=datetime(2026, 10, 19, 10, 0),
            title="Standup",
        ),
        Schedule(
            id="locked",
            start=datetime(2026, 10, 19, 13, 0),
            end=datetime(2026, 10, 19, 14, 0),
            resizable=True,
        ),
    ])


@pytest.fixture
def record_events():
    """Subscribe to every event type of a channel; returns the (type, payload) log."""

    def _record(channel):
        log = []
        for event_type in EventType:
            channel.on(event_type, lambda payload, et=event_type: log.append((et, payload)))
        return log

    return _record
