"""
TimeGrid — Data Models.

Schedules are read-mostly here: the controllers only look at start/end and
the resizable flag, and emit change requests for the store to apply.
Pointer targets stand in for hit-tested DOM nodes supplied by the view layer.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime

# ---------------------------------------------------------------------------
# Class names carried by hit-test targets
# ---------------------------------------------------------------------------

CSS_PREFIX = "tgrid-"

TIME_DATE = f"{CSS_PREFIX}time-date"
SCHEDULE_BLOCK = f"{CSS_PREFIX}time-date-schedule-block"
SCHEDULE_BLOCK_WRAP = f"{CSS_PREFIX}time-date-schedule-block-wrap"
TOP_RESIZE_HANDLE = f"{CSS_PREFIX}time-top-resize-handle"
BOTTOM_RESIZE_HANDLE = f"{CSS_PREFIX}time-bottom-resize-handle"

VIEW_ID_RE = re.compile(rf"^{CSS_PREFIX}view-(\d+)$")


def view_class(view_id: int) -> str:
    """Class name that tags a day column with its view id."""
    return f"{CSS_PREFIX}view-{view_id}"


@dataclass
class Schedule:
    """A schedule entity owned by the store.

    ``resizable`` is honoured inverted: ``True`` blocks resizing.
    """

    id: str
    start: datetime
    end: datetime
    resizable: bool = False
    title: str = ""


@dataclass
class ScheduleTimeRange:
    """A start/end pair, always start <= end."""

    start: datetime
    end: datetime


@dataclass
class PointerTarget:
    """A hit-tested node: class names, data attributes and its parent."""

    classes: frozenset[str] = field(default_factory=frozenset)
    data: dict[str, str] = field(default_factory=dict)
    parent: PointerTarget | None = None

    def has_class(self, name: str) -> bool:
        return name in self.classes

    def closest(self, name: str) -> PointerTarget | None:
        """Return self or the nearest ancestor carrying ``name``."""
        node: PointerTarget | None = self
        while node is not None:
            if node.has_class(name):
                return node
            node = node.parent
        return None


@dataclass
class PointerEvent:
    """Raw pointer event in page coordinates."""

    client_y: float
    client_x: float = 0.0
    type: str = "mousemove"
    target: PointerTarget | None = None


@dataclass
class Gesture:
    """A gesture as delivered by the pointer input source."""

    target: PointerTarget | None
    origin_event: PointerEvent


@dataclass
class ViewBound:
    """Position and size of a day column, in px."""

    top: float
    height: float
