"""Interaction session — the state one drag gesture carries from start to end.

A session is created at drag start, owned by the controller that created it
and dropped at drag end or cancellation. The point reader captured with it
keeps the view geometry of the drag start for the whole gesture.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable

from timegrid.core.events import GridPoint
from timegrid.core.grid_mapper import (
    GridRange,
    SnapMode,
    drag_grid_range,
    grid_row_to_time,
    pixel_to_grid_row,
    row_to_pixels,
    time_to_grid_row,
    unsnapped_row,
)
from timegrid.data.models import (
    BOTTOM_RESIZE_HANDLE,
    SCHEDULE_BLOCK_WRAP,
    TIME_DATE,
    TOP_RESIZE_HANDLE,
    VIEW_ID_RE,
)

if TYPE_CHECKING:
    from timegrid.data.models import PointerEvent, PointerTarget, Schedule
    from timegrid.ports.view_port import TimeGridPort, TimeViewPort

logger = logging.getLogger(__name__)

PointReader = Callable[..., GridPoint]


class ResizeDirection(Enum):
    TOP = "top"
    BOTTOM = "bottom"

    @property
    def snap_mode(self) -> SnapMode:
        return SnapMode.TOP if self is ResizeDirection.TOP else SnapMode.BOTTOM


@dataclass
class DragSession:
    """Transient data for one drag gesture."""

    view: TimeViewPort
    read_point: PointReader
    start_point: GridPoint

    # resize only
    direction: ResizeDirection | None = None
    target_model_id: str | None = None
    schedule: Schedule | None = None
    range_time: GridRange | None = None
    current_row: float | None = None   # last row seen, for de-duplication
    stop_time: datetime | None = None  # boundary to commit instead of a fresh read
    frozen: bool = False               # predicate vetoed movement


# ---------------------------------------------------------------------------
# Point readers
# ---------------------------------------------------------------------------


def make_point_reader(view: TimeViewPort, snap_mode: SnapMode = SnapMode.NONE) -> PointReader:
    """Capture the view geometry once and return a pointer -> GridPoint function."""
    options = view.options
    view_height = view.get_view_bound().height
    view_date = view.get_date()
    hour_span = options.hour_span

    def read_point(event: PointerEvent, **extra: Any) -> GridPoint:
        mouse_y = view.mouse_y(event)
        grid_y = unsnapped_row(mouse_y, view_height, hour_span)
        nearest_grid_y = pixel_to_grid_row(
            mouse_y, view_height, hour_span, snap_mode, options.ratio_hour_grid_y,
        )
        nearest_grid_time_y = grid_row_to_time(view_date, nearest_grid_y, options.hour_start)

        # The bottom line of the grid belongs to the day, not to the next one.
        if nearest_grid_y == hour_span:
            nearest_grid_time_y -= timedelta(seconds=1)

        return GridPoint(
            related_view=view,
            origin_event=event,
            mouse_y=mouse_y,
            grid_y=grid_y,
            time_y=grid_row_to_time(view_date, grid_y, options.hour_start),
            nearest_grid_y=nearest_grid_y,
            nearest_grid_time_y=nearest_grid_time_y,
            target=event.target,
            trigger_event=event.type,
            **extra,
        )

    return read_point


def point_from_dates(view: TimeViewPort, start: datetime, end: datetime) -> GridPoint:
    """Build a GridPoint for an existing time range instead of a pointer."""
    options = view.options
    view_date = view.get_date()

    # an end past midnight is pinned to the grid bottom, never wrapped
    rows = drag_grid_range(start, end, options)
    grid_y = rows.start_row
    grid_end_y = rows.end_row

    return GridPoint(
        related_view=view,
        origin_event=None,
        mouse_y=row_to_pixels(grid_y, options.hour_span, view.get_view_bound().height),
        grid_y=grid_y,
        time_y=grid_row_to_time(view_date, grid_y, options.hour_start),
        nearest_grid_y=grid_y,
        nearest_grid_time_y=grid_row_to_time(view_date, grid_y, options.hour_start),
        nearest_grid_end_y=grid_end_y,
        nearest_grid_end_time_y=grid_row_to_time(view_date, grid_end_y, options.hour_start),
        trigger_event="manual",
    )


def view_grid_range(view: TimeViewPort, start: datetime, end: datetime) -> GridRange:
    """Rows of a start/end pair measured from the view's own date.

    A start on an earlier day gets a negative row; an end on a later day is
    pinned to the bottom of the grid, as in drag_grid_range.
    """
    options = view.options
    view_date = view.get_date()
    table = options.ratio_hour_grid_y

    start_row = (start.date() - view_date).days * 24 + time_to_grid_row(
        start, options.hour_start, options.minute_cell, table,
    )
    if end.date() > view_date:
        end_row = options.hour_span
    else:
        end_row = (end.date() - view_date).days * 24 + time_to_grid_row(
            end, options.hour_start, options.minute_cell, table,
        )
    return GridRange(start_row=start_row, start_time=start, end_row=end_row, end_time=end)


# ---------------------------------------------------------------------------
# Hit-testing
# ---------------------------------------------------------------------------


def _view_id(node: PointerTarget) -> int | None:
    for name in node.classes:
        match = VIEW_ID_RE.match(name)
        if match:
            return int(match.group(1))
    return None


def grid_view_for_target(grid: TimeGridPort, target: PointerTarget | None) -> TimeViewPort | None:
    """Day column for a pointer on empty grid space, or None."""
    if target is None:
        return None
    if target.has_class(SCHEDULE_BLOCK_WRAP) and target.parent is not None:
        target = target.parent
    if not target.has_class(TIME_DATE):
        return None

    view_id = _view_id(target)
    if view_id is None:
        return None
    return grid.get_view(view_id)


def handle_direction(target: PointerTarget | None) -> ResizeDirection | None:
    if target is None:
        return None
    if target.has_class(TOP_RESIZE_HANDLE):
        return ResizeDirection.TOP
    if target.has_class(BOTTOM_RESIZE_HANDLE):
        return ResizeDirection.BOTTOM
    return None


def handle_view_for_target(grid: TimeGridPort, target: PointerTarget | None) -> TimeViewPort | None:
    """Day column owning a resize handle, or None."""
    if handle_direction(target) is None:
        return None

    container = target.closest(TIME_DATE)
    if container is None:
        return None

    view_id = _view_id(container)
    if view_id is None:
        return None
    return grid.get_view(view_id)
