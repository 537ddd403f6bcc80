"""Domain events emitted by the controllers.

Each controller owns one EventChannel. Guides and application code
subscribe per event type; the set of event types is closed.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from timegrid.core.grid_mapper import GridRange
    from timegrid.data.models import PointerEvent, PointerTarget, Schedule, ScheduleTimeRange
    from timegrid.ports.view_port import TimeViewPort

logger = logging.getLogger(__name__)


class EventType(Enum):
    CREATION_DRAG_START = "creationDragStart"
    CREATION_DRAG = "creationDrag"
    CREATION_DRAG_END = "creationDragend"
    CREATION_HOVER = "creationHover"
    CREATION_CLICK = "creationClick"
    CLEAR_CREATION_GUIDE = "clearCreationGuide"
    BEFORE_CREATE_SCHEDULE = "beforeCreateSchedule"
    RESIZE_DRAG_START = "resizeDragstart"
    RESIZE_DRAG = "resizeDrag"
    RESIZE_DRAG_END = "resizeDragend"
    RESIZE_CLICK = "resizeClick"
    BEFORE_UPDATE_SCHEDULE = "beforeUpdateSchedule"


@dataclass
class GridPoint:
    """Pointer position resolved against a day column.

    ``grid_y``/``time_y`` are the raw position, ``nearest_grid_y`` and
    ``nearest_grid_time_y`` the snapped one. The optional fields are filled
    in by whichever controller emits the point.
    """

    related_view: TimeViewPort
    origin_event: PointerEvent | None
    mouse_y: float
    grid_y: float
    time_y: datetime
    nearest_grid_y: float
    nearest_grid_time_y: datetime
    target: PointerTarget | None = None
    trigger_event: str = ""

    nearest_grid_end_y: float | None = None
    nearest_grid_end_time_y: datetime | None = None
    create_range: tuple[datetime, datetime] | None = None

    # hover/click predicates
    end_time: Any = None
    delta: float | None = None

    # resize
    target_model_id: str | None = None
    schedule: Schedule | None = None
    range_time: GridRange | None = None
    grid_start_y: float | None = None
    grid_end_y: float | None = None
    new_time: ScheduleTimeRange | None = None


@dataclass
class CreateScheduleRequest:
    """Payload of beforeCreateSchedule."""

    start: datetime
    end: datetime
    is_all_day: bool = False
    trigger_event_name: str = ""


@dataclass
class UpdateScheduleRequest:
    """Payload of beforeUpdateSchedule; ``changes`` only holds fields that differ."""

    schedule: Schedule
    changes: dict[str, datetime] = field(default_factory=dict)
    type: str = "resize"


Handler = Callable[[Any], None]


class EventChannel:
    """Per-controller publish/subscribe channel over EventType."""

    def __init__(self) -> None:
        self._handlers: dict[EventType, list[Handler]] = defaultdict(list)

    def on(self, event_type: EventType, handler: Handler) -> None:
        self._handlers[event_type].append(handler)

    def off(self, event_type: EventType | None = None, handler: Handler | None = None) -> None:
        """Remove handlers: one handler, all handlers of a type, or everything."""
        if event_type is None:
            self._handlers.clear()
            return
        if handler is None:
            self._handlers.pop(event_type, None)
            return
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event_type: EventType, payload: Any = None) -> None:
        logger.debug("emit %s", event_type.value)
        for handler in list(self._handlers.get(event_type, [])):
            handler(payload)
