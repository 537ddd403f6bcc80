"""
TimeGrid — Schedule creation controller.

Turns pointer gestures on empty grid space into the time range of a new
schedule: drag-to-create, hover preview and click/double-click creation.

Click and double-click are told apart by waiting CLICK_DELAY after the
first click; hover fires only after the pointer rested for HOVER_DELAY.
Both delays run on cancellable timers owned by this controller.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime, time, timedelta
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Protocol, runtime_checkable

from timegrid.config import settings
from timegrid.core.events import CreateScheduleRequest, EventChannel, EventType
from timegrid.core.grid_mapper import SnapMode, drag_grid_range, limit_datetime
from timegrid.core.options import InteractionOptions
from timegrid.core.session import (
    DragSession,
    grid_view_for_target,
    make_point_reader,
    point_from_dates,
)
from timegrid.ports.pointer_port import (
    CLICK,
    DBL_CLICK,
    DRAG,
    DRAG_END,
    DRAG_START,
    MOUSE_ENTER,
    MOUSE_LEAVE,
    MOUSE_MOVE,
)

if TYPE_CHECKING:
    from timegrid.core.events import GridPoint
    from timegrid.data.models import Gesture, Schedule
    from timegrid.ports.pointer_port import PointerInputPort
    from timegrid.ports.timer_port import TimerHandle, TimerPort
    from timegrid.ports.view_port import TimeGridPort

logger = logging.getLogger(__name__)


class CreationState(Enum):
    IDLE = "idle"
    HOVERING = "hovering"
    DRAGGING = "dragging"
    PENDING_CLICK = "pending_click"


@runtime_checkable
class GuideSuppressor(Protocol):
    """Lets another controller switch the creation guide off for a while."""

    def suspend(self) -> None: ...

    def resume(self) -> None: ...


def _condition_fields(result: Any) -> tuple[Any, Any]:
    """Pull (end_time, delta) out of whatever a predicate returned."""
    if isinstance(result, Mapping):
        return result.get("end_time"), result.get("delta")
    return getattr(result, "end_time", None), getattr(result, "delta", None)


class CreationController:
    """State machine for creating schedules on the time grid."""

    def __init__(
        self,
        pointer: PointerInputPort,
        grid: TimeGridPort,
        timer: TimerPort,
        options: InteractionOptions | None = None,
    ) -> None:
        options = options or InteractionOptions()
        self.pointer = pointer
        self.grid = grid
        self.timer = timer
        self.options = options
        self.events = EventChannel()
        self.state = CreationState.IDLE

        self.hover_delay_ms = options.hover_delay_ms
        self.click_delay_ms = options.click_delay_ms

        self._session: DragSession | None = None
        self._request_on_click = False
        self._focus_in_calendar = True
        self._show_guide_on_hover = options.show_creation_guide_on_hover
        self._show_guide_on_click = options.show_creation_guide_on_click
        self._suspended: tuple[bool, bool] | None = None
        self._hover_timer: TimerHandle | None = None
        self._click_timer: TimerHandle | None = None

        pointer.on(DRAG_START, self.on_drag_start, self)
        pointer.on(CLICK, self.on_click, self)
        pointer.on(MOUSE_MOVE, self.on_pointer_move, self)
        pointer.on(MOUSE_LEAVE, self.on_mouse_leave, self)
        pointer.on(MOUSE_ENTER, self.on_mouse_enter, self)
        if not options.disable_dbl_click:
            pointer.on(DBL_CLICK, self.on_dbl_click, self)

    @property
    def show_guide_on_hover(self) -> bool:
        return self._show_guide_on_hover

    @property
    def show_guide_on_click(self) -> bool:
        return self._show_guide_on_click

    @property
    def focus_in_calendar(self) -> bool:
        return self._focus_in_calendar

    @property
    def session(self) -> DragSession | None:
        return self._session

    def destroy(self) -> None:
        self._cancel_hover()
        self._cancel_click()
        self.pointer.off(self)
        self.events.off()
        self._session = None
        self.state = CreationState.IDLE

    # ------------------------------------------------------------------
    # Guide suppression
    # ------------------------------------------------------------------

    def suspend(self) -> None:
        """Hide the guide and stop hover/click previews until resume()."""
        if self._suspended is not None:
            return
        self.events.emit(EventType.CLEAR_CREATION_GUIDE, None)
        self._suspended = (self._show_guide_on_hover, self._show_guide_on_click)
        self._show_guide_on_hover = False
        self._show_guide_on_click = False
        self._cancel_hover()
        logger.debug("Creation guide suspended")

    def resume(self) -> None:
        if self._suspended is None:
            return
        self._show_guide_on_hover, self._show_guide_on_click = self._suspended
        self._suspended = None
        logger.debug("Creation guide resumed")

    @property
    def suspended(self) -> bool:
        return self._suspended is not None

    # ------------------------------------------------------------------
    # Drag to create
    # ------------------------------------------------------------------

    def on_drag_start(self, gesture: Gesture) -> None:
        view = grid_view_for_target(self.grid, gesture.target)
        if view is None:
            logger.debug("Creation drag ignored: target is not empty grid space")
            return

        read_point = make_point_reader(view)
        start_point = read_point(gesture.origin_event)
        self._session = DragSession(view=view, read_point=read_point, start_point=start_point)
        self.state = CreationState.DRAGGING

        self.pointer.on(DRAG, self.on_drag, self)
        self.pointer.on(DRAG_END, self.on_drag_end, self)

        self.events.emit(EventType.CREATION_DRAG_START, start_point)

    def on_drag(self, gesture: Gesture) -> None:
        if self._session is None:
            return
        point = self._session.read_point(gesture.origin_event)
        self.events.emit(EventType.CREATION_DRAG, point)

    def on_drag_end(self, gesture: Gesture) -> None:
        self.pointer.off(self, DRAG, DRAG_END)

        session = self._session
        if session is None:
            return

        try:
            point = session.read_point(gesture.origin_event)
            start, end = sorted([session.start_point.nearest_grid_time_y, point.nearest_grid_time_y])
            if start == end:
                end = end + timedelta(minutes=settings.MIN_CREATION_MINUTES)

            end_range = drag_grid_range(start, end, session.view.options)
            point.create_range = (start, end)
            point.nearest_grid_end_y = end_range.end_row
            point.nearest_grid_end_time_y = end

            self._create_schedule(point)
            self.events.emit(EventType.CREATION_DRAG_END, point)
        finally:
            self._session = None
            self.state = CreationState.IDLE

    def _create_schedule(self, point: GridPoint) -> None:
        if point.create_range is not None:
            start, end = point.create_range
        else:
            start = point.nearest_grid_time_y
            end = point.nearest_grid_end_time_y or start + timedelta(
                minutes=settings.MIN_CREATION_MINUTES
            )

        day_start = datetime.combine(point.related_view.get_date(), time())
        day_end = day_start + timedelta(days=1)

        request = CreateScheduleRequest(
            start=limit_datetime(start, day_start, day_end),
            end=limit_datetime(end, day_start, day_end),
            is_all_day=False,
            trigger_event_name=point.trigger_event,
        )
        self.events.emit(EventType.BEFORE_CREATE_SCHEDULE, request)

    # ------------------------------------------------------------------
    # Hover
    # ------------------------------------------------------------------

    def on_pointer_move(self, gesture: Gesture) -> None:
        """Restart the hover debounce; only the last move in a burst counts."""
        self._cancel_hover()
        if self.state is CreationState.HOVERING:
            self.state = CreationState.IDLE
        if not self._show_guide_on_hover:
            return
        self._hover_timer = self.timer.call_later(
            self.hover_delay_ms, lambda: self.on_hover_tick(gesture)
        )

    def on_hover_tick(self, gesture: Gesture) -> None:
        self._hover_timer = None
        if not (self._show_guide_on_hover and self._focus_in_calendar):
            return
        if self._session is not None:
            return

        point = self._read_forward(gesture, self.options.check_expected_condition_hover)
        if point is None:
            return

        self.state = CreationState.HOVERING
        self.events.emit(EventType.CREATION_HOVER, point)

    def on_mouse_enter(self, gesture: Gesture | None = None) -> None:
        self._focus_in_calendar = True

    def on_mouse_leave(self, gesture: Gesture | None = None) -> None:
        self._focus_in_calendar = False
        self._cancel_hover()
        self.events.emit(EventType.CLEAR_CREATION_GUIDE, None)
        self._session = None
        self.state = CreationState.IDLE

    # ------------------------------------------------------------------
    # Click / double click
    # ------------------------------------------------------------------

    def on_click(self, gesture: Gesture) -> None:
        if self.options.disable_click or not self._show_guide_on_click:
            return

        if self._click_timer is not None and not self.options.disable_dbl_click:
            # second click inside the delay: this is a double click
            logger.debug("Pending creation click cancelled by a second click")
            self._cancel_click()
            return

        point = self._read_forward(gesture, self.options.check_expected_condition_click)
        if point is None:
            return
        if isinstance(point.end_time, datetime):
            point.nearest_grid_end_time_y = point.end_time

        self._request_on_click = True
        self.state = CreationState.PENDING_CLICK
        self._click_timer = self.timer.call_later(
            self.click_delay_ms, lambda: self._fire_click(point)
        )

    def _fire_click(self, point: GridPoint) -> None:
        self._click_timer = None
        if self._request_on_click:
            self.events.emit(EventType.CREATION_CLICK, point)
            self._create_schedule(point)
        self._request_on_click = False
        self.state = CreationState.IDLE

    def on_dbl_click(self, gesture: Gesture) -> None:
        if self.options.disable_dbl_click:
            return
        self._cancel_click()

        view = grid_view_for_target(self.grid, gesture.target)
        if view is None:
            return

        point = make_point_reader(view)(gesture.origin_event)
        self.events.emit(EventType.CREATION_CLICK, point)
        self._create_schedule(point)

    def invoke_creation_click(self, schedule: Schedule) -> None:
        """Preview and request creation for an existing start/end pair."""
        views = self.grid.views()
        if not views:
            return

        view = next(
            (v for v in views if v.get_date() == schedule.start.date()),
            views[0],
        )
        point = point_from_dates(view, schedule.start, schedule.end)
        self.events.emit(EventType.CREATION_CLICK, point)
        self._create_schedule(point)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _read_forward(
        self,
        gesture: Gesture,
        predicate: Callable[[GridPoint], Any] | None,
    ) -> GridPoint | None:
        """Forward-snapped point for hover/click, or None if rejected."""
        view = grid_view_for_target(self.grid, gesture.target)
        if view is None:
            return None

        point = make_point_reader(view, SnapMode.BOTTOM)(gesture.origin_event)
        if predicate is not None:
            result = predicate(point)
            if not result:
                logger.debug("Creation preview rejected by predicate at row %s", point.nearest_grid_y)
                return None
            point.end_time, point.delta = _condition_fields(result)
        return point

    def _cancel_hover(self) -> None:
        if self._hover_timer is not None:
            self._hover_timer.cancel()
            self._hover_timer = None

    def _cancel_click(self) -> None:
        if self._click_timer is not None:
            self._click_timer.cancel()
            self._click_timer = None
        self._request_on_click = False
        if self.state is CreationState.PENDING_CLICK:
            self.state = CreationState.IDLE
