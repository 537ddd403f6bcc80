"""Headless guide renderers — preview state without a rendering layer.

Each guide subscribes to one controller's events and keeps the pixel
geometry a real renderer would draw (visible, top, height). Drag and drag
end events without a preceding drag start are ignored, and neither guide
ever touches the schedule store.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from timegrid.core.events import EventType
from timegrid.core.grid_mapper import row_to_pixels, time_to_grid_row
from timegrid.core.session import ResizeDirection, view_grid_range

if TYPE_CHECKING:
    from timegrid.core.creation import CreationController
    from timegrid.core.events import GridPoint
    from timegrid.core.grid_mapper import GridRange
    from timegrid.core.resize import ResizeController


class _GuideState:
    def __init__(self) -> None:
        self.visible = False
        self.top_px: float | None = None
        self.height_px: float | None = None

    def _show(self, top_px: float, height_px: float) -> None:
        self.visible = True
        self.top_px = top_px
        self.height_px = height_px

    def clear(self, _payload: object = None) -> None:
        self.visible = False
        self.top_px = self.height_px = None


def _px(point: GridPoint, rows: float) -> float:
    view = point.related_view
    return row_to_pixels(rows, view.options.hour_span, view.get_view_bound().height)


class CreationGuide(_GuideState):
    """Preview of the schedule about to be created."""

    def __init__(self, creation: CreationController) -> None:
        super().__init__()
        self._start_row: float | None = None
        events = creation.events
        events.on(EventType.CREATION_DRAG_START, self._on_drag_start)
        events.on(EventType.CREATION_DRAG, self._on_drag)
        events.on(EventType.CREATION_DRAG_END, self._on_drag_end)
        events.on(EventType.CREATION_HOVER, self._on_preview)
        events.on(EventType.CREATION_CLICK, self._on_preview)
        events.on(EventType.CLEAR_CREATION_GUIDE, self.clear)

    def _on_drag_start(self, point: GridPoint) -> None:
        self._start_row = point.nearest_grid_y
        self._show(_px(point, point.nearest_grid_y), _px(point, point.related_view.options.min_cell_rows))

    def _on_drag(self, point: GridPoint) -> None:
        if self._start_row is None:
            return
        low, high = sorted([self._start_row, point.nearest_grid_y])
        unit = point.related_view.options.min_cell_rows
        self._show(_px(point, low), _px(point, high - low + unit))

    def _on_drag_end(self, point: GridPoint) -> None:
        if self._start_row is None:
            return
        self._start_row = None
        self.clear()

    def _on_preview(self, point: GridPoint) -> None:
        options = point.related_view.options
        rows = options.min_cell_rows
        if isinstance(point.end_time, datetime):
            end_row = time_to_grid_row(
                point.end_time, options.hour_start, options.minute_cell, options.ratio_hour_grid_y,
            )
            rows = max(end_row - point.nearest_grid_y, rows)
        self._show(_px(point, point.nearest_grid_y), _px(point, rows))


class ResizeGuide(_GuideState):
    """Preview of a schedule block while one of its edges is dragged."""

    def __init__(self, resize: ResizeController) -> None:
        super().__init__()
        self._start_point: GridPoint | None = None
        self._start_height_px = 0.0
        self._top_handle = False
        self._schedule_rows: GridRange | None = None
        self._resize = resize
        events = resize.events
        events.on(EventType.RESIZE_DRAG_START, self._on_drag_start)
        events.on(EventType.RESIZE_DRAG, self._on_drag)
        events.on(EventType.RESIZE_DRAG_END, self._on_drag_end)
        events.on(EventType.RESIZE_CLICK, self._on_drag_end)

    def _on_drag_start(self, point: GridPoint) -> None:
        if point.schedule is None:
            return
        schedule_rows = view_grid_range(point.related_view, point.schedule.start, point.schedule.end)
        # a block continued from the previous day starts at the column top
        top_row = max(schedule_rows.start_row, 0.0)

        self._start_point = point
        self._top_handle = self._resize.direction is ResizeDirection.TOP
        self._start_height_px = _px(point, schedule_rows.end_row - top_row)
        self._schedule_rows = schedule_rows
        self._show(_px(point, top_row), self._start_height_px)

    def _on_drag(self, point: GridPoint) -> None:
        start = self._start_point
        if start is None:
            return

        options = point.related_view.options
        view_height = point.related_view.get_view_bound().height
        rows = self._schedule_rows

        if self._top_handle:
            top_row = max(0.0, min(point.nearest_grid_y, rows.end_row - options.min_cell_rows))
            self._show(_px(point, top_row), _px(point, rows.end_row - top_row))
        else:
            height = self._start_height_px + _px(point, point.nearest_grid_y - start.nearest_grid_y)
            height = max(height, _px(point, options.min_cell_rows))
            height = min(height, view_height - self.top_px)
            self._show(self.top_px, height)

    def _on_drag_end(self, _point: GridPoint | None) -> None:
        if self._start_point is None:
            return
        self._start_point = None
        self.clear()
