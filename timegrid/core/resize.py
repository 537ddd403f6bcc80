"""
TimeGrid — Schedule resize controller.

Drags on a schedule's top or bottom handle move its start or end along the
grid. One clamp function, parameterised by direction, keeps the edge inside
the day and at least one snap unit away from the opposite edge.

While a resize is running the creation guide is suspended through the
GuideSuppressor registered on the same pointer source; it is resumed
GUIDE_RESTORE_DELAY_MS after the gesture ends so the release click isn't
picked up as a creation click.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from timegrid.config import settings
from timegrid.core.creation import GuideSuppressor
from timegrid.core.events import EventChannel, EventType, UpdateScheduleRequest
from timegrid.core.grid_mapper import (
    drag_grid_range,
    grid_row_to_time,
    range_for_day,
    time_to_grid_row,
)
from timegrid.core.options import InteractionOptions
from timegrid.core.session import (
    DragSession,
    ResizeDirection,
    handle_direction,
    handle_view_for_target,
    make_point_reader,
    view_grid_range,
)
from timegrid.data.models import SCHEDULE_BLOCK, ScheduleTimeRange
from timegrid.ports.pointer_port import CLICK, DRAG, DRAG_END, DRAG_START

if TYPE_CHECKING:
    from timegrid.core.events import GridPoint
    from timegrid.core.grid_mapper import GridRange
    from timegrid.data.models import Gesture, PointerTarget, Schedule
    from timegrid.ports.pointer_port import PointerInputPort
    from timegrid.ports.schedule_store_port import ScheduleStorePort
    from timegrid.ports.timer_port import TimerHandle, TimerPort
    from timegrid.ports.view_port import TimeGridPort, TimeViewPort

logger = logging.getLogger(__name__)

_TIME_FIELDS = ("start", "end")


class ResizeController:
    """State machine for resizing schedules by their edge handles."""

    def __init__(
        self,
        pointer: PointerInputPort,
        grid: TimeGridPort,
        store: ScheduleStorePort,
        timer: TimerPort,
        options: InteractionOptions | None = None,
    ) -> None:
        self.pointer = pointer
        self.grid = grid
        self.store = store
        self.timer = timer
        self.options = options or InteractionOptions()
        self.events = EventChannel()
        self.restore_delay_ms = settings.GUIDE_RESTORE_DELAY_MS

        self._session: DragSession | None = None
        self._suppressed: GuideSuppressor | None = None
        self._restore_timer: TimerHandle | None = None

        pointer.on(DRAG_START, self.on_drag_start, self)

    @property
    def session(self) -> DragSession | None:
        return self._session

    @property
    def direction(self) -> ResizeDirection | None:
        return self._session.direction if self._session else None

    def destroy(self) -> None:
        if self._restore_timer is not None:
            self._restore_timer.cancel()
            self._restore_timer = None
        self._restore_creation()
        self.pointer.off(self)
        self.events.off()
        self._session = None

    def check_handle(self, target: PointerTarget | None) -> TimeViewPort | bool:
        """Day column owning the handle under the pointer, or False."""
        view = handle_view_for_target(self.grid, target)
        return view if view is not None else False

    # ------------------------------------------------------------------
    # Drag
    # ------------------------------------------------------------------

    def on_drag_start(self, gesture: Gesture) -> None:
        if self._session is not None:
            return

        target = gesture.target
        view = self.check_handle(target)
        block = target.closest(SCHEDULE_BLOCK) if target is not None else None
        if not view or block is None:
            return

        model_id = block.data.get("id")
        schedule = self.store.get(model_id) if model_id else None
        if schedule is None:
            logger.debug("Resize ignored: no schedule for block id %r", model_id)
            return

        # The flag reads inverted; kept as observed until the product side decides.
        if schedule.resizable:
            logger.debug("Resize ignored: schedule %s has resizable=True", model_id)
            return

        direction = handle_direction(target)
        read_point = make_point_reader(view, direction.snap_mode)
        range_time = range_for_day(view.get_date(), view.options)

        self._suppress_creation()

        start_point = read_point(
            gesture.origin_event,
            target_model_id=model_id,
            schedule=schedule,
            range_time=range_time,
        )
        self._session = DragSession(
            view=view,
            read_point=read_point,
            start_point=start_point,
            direction=direction,
            target_model_id=model_id,
            schedule=schedule,
            range_time=range_time,
        )

        self.pointer.on(DRAG, self.on_drag, self)
        self.pointer.on(DRAG_END, self.on_drag_end, self)
        self.pointer.on(CLICK, self.on_click, self)

        self.events.emit(EventType.RESIZE_DRAG_START, start_point)

    def on_drag(self, gesture: Gesture) -> None:
        session = self._session
        if session is None:
            return

        drag_range = drag_grid_range(session.schedule.start, session.schedule.end, session.view.options)
        point = session.read_point(
            gesture.origin_event,
            target_model_id=session.target_model_id,
            schedule=session.schedule,
            grid_start_y=drag_range.start_row,
            grid_end_y=drag_range.end_row,
            range_time=session.range_time,
        )

        if point.nearest_grid_y == session.current_row:
            return
        session.current_row = point.nearest_grid_y

        self._apply_bounds(session, point, drag_range)
        self.events.emit(EventType.RESIZE_DRAG, point)

    def on_drag_end(self, gesture: Gesture) -> None:
        self.pointer.off(self, DRAG, DRAG_END, CLICK)
        self._schedule_restore()

        session = self._session
        if session is None:
            return

        try:
            schedule = self.store.get(session.target_model_id)
            if schedule is None:
                logger.debug("Resize dropped: schedule %s vanished mid-drag", session.target_model_id)
                return

            point = session.read_point(gesture.origin_event, target_model_id=session.target_model_id)

            if session.frozen:
                point.new_time = None
            else:
                if session.stop_time is not None:
                    self._pin(point, session.stop_time, session)
                else:
                    row, crossed = self._clamp(point.nearest_grid_y, session)
                    if crossed:
                        self._pin(point, self._row_time(session, row), session)

                if session.direction is ResizeDirection.TOP:
                    point.new_time = ScheduleTimeRange(start=point.nearest_grid_time_y, end=schedule.end)
                else:
                    point.new_time = ScheduleTimeRange(start=schedule.start, end=point.nearest_grid_time_y)

            self._update_schedule(schedule, point.new_time)
            self.events.emit(EventType.RESIZE_DRAG_END, point)
        finally:
            self._session = None

    def on_click(self, gesture: Gesture | None = None) -> None:
        """A zero-distance gesture on a handle: no schedule change."""
        self.pointer.off(self, DRAG, DRAG_END, CLICK)
        self._schedule_restore()
        self._session = None
        self.events.emit(EventType.RESIZE_CLICK, None)

    # ------------------------------------------------------------------
    # Bounds
    # ------------------------------------------------------------------

    @staticmethod
    def _view_rows(session: DragSession) -> GridRange:
        """Schedule rows in the frame of the column being dragged."""
        return view_grid_range(session.view, session.schedule.start, session.schedule.end)

    def _clamp(self, row: float, session: DragSession) -> tuple[float, bool]:
        """Clamp a row for the session's handle; returns (row, was_clamped)."""
        unit = session.view.options.min_cell_rows
        rows = self._view_rows(session)

        if session.direction is ResizeDirection.TOP:
            lower = 0.0
            upper = rows.end_row - unit
        else:
            lower = rows.start_row + unit
            upper = self._bottom_limit(session)

        clamped = max(lower, min(row, upper))
        return clamped, clamped != row

    @staticmethod
    def _bottom_limit(session: DragSession) -> float:
        hour_span = session.view.options.hour_span
        days_after = (session.schedule.end.date() - session.view.get_date()).days
        if days_after > 0:
            return days_after * 24 + hour_span
        return hour_span

    @staticmethod
    def _row_time(session: DragSession, row: float) -> datetime:
        options = session.view.options
        value = grid_row_to_time(session.view.get_date(), row, options.hour_start)
        if row == options.hour_span:
            value -= timedelta(seconds=1)
        return value

    @staticmethod
    def _pin(point: GridPoint, value: datetime, session: DragSession) -> None:
        """Move the point onto an exact time rather than a pointer read."""
        options = session.view.options
        days = (value.date() - session.view.get_date()).days
        point.nearest_grid_y = days * 24 + time_to_grid_row(
            value, options.hour_start, options.minute_cell, options.ratio_hour_grid_y,
        )
        point.grid_y = point.nearest_grid_y
        point.nearest_grid_time_y = value

    def _apply_bounds(self, session: DragSession, point: GridPoint, drag_range: GridRange) -> None:
        """Clamp the live row, then let the caller's predicate veto or override it."""
        session.stop_time = None
        session.frozen = False

        row, crossed = self._clamp(point.nearest_grid_y, session)
        if crossed:
            point.nearest_grid_y = row
            point.nearest_grid_time_y = self._row_time(session, row)
            session.stop_time = point.nearest_grid_time_y

        predicate = self.options.check_expected_condition_resize
        if predicate is None:
            return

        result = predicate(point, session.direction, drag_range, session.range_time, session.schedule)
        if isinstance(result, bool):
            if not result:
                session.frozen = True
                session.stop_time = None
                rows = self._view_rows(session)
                if session.direction is ResizeDirection.TOP:
                    point.nearest_grid_y = rows.start_row
                    point.nearest_grid_time_y = rows.start_time
                else:
                    point.nearest_grid_y = rows.end_row
                    point.nearest_grid_time_y = rows.end_time
        elif isinstance(result, (int, float)):
            stop = drag_range.start_time + timedelta(minutes=result)
            session.stop_time = stop
            self._pin(point, stop, session)

    # ------------------------------------------------------------------
    # Commit
    # ------------------------------------------------------------------

    def _update_schedule(self, schedule: Schedule, new_time: ScheduleTimeRange | None) -> None:
        if new_time is None:
            logger.debug("Resize of %s vetoed; nothing to commit", schedule.id)
            return

        changes = {
            name: getattr(new_time, name)
            for name in _TIME_FIELDS
            if getattr(new_time, name) != getattr(schedule, name)
        }
        if not changes:
            logger.debug("Resize of %s ended where it started", schedule.id)
            return

        self.events.emit(
            EventType.BEFORE_UPDATE_SCHEDULE,
            UpdateScheduleRequest(schedule=schedule, changes=changes, type="resize"),
        )

    # ------------------------------------------------------------------
    # Creation guide suppression
    # ------------------------------------------------------------------

    def _find_suppressor(self) -> GuideSuppressor | None:
        for context in self.pointer.contexts:
            if context is not self and isinstance(context, GuideSuppressor):
                return context
        return None

    def _suppress_creation(self) -> None:
        if self._restore_timer is not None:
            # previous resize still holds the guide; keep it suspended
            self._restore_timer.cancel()
            self._restore_timer = None
        if self._suppressed is not None:
            return

        suppressor = self._find_suppressor()
        if suppressor is not None:
            suppressor.suspend()
            self._suppressed = suppressor

    def _schedule_restore(self) -> None:
        if self._suppressed is None or self._restore_timer is not None:
            return
        self._restore_timer = self.timer.call_later(self.restore_delay_ms, self._on_restore)

    def _on_restore(self) -> None:
        self._restore_timer = None
        self._restore_creation()

    def _restore_creation(self) -> None:
        if self._suppressed is not None:
            self._suppressed.resume()
            self._suppressed = None
