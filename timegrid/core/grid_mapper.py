"""Grid/time mapping — pure functions shared by both controllers.

Converts pixel offsets and wall-clock times to fractional grid rows
("hours since hour_start") and back, honouring the snap table of the view.

No I/O and no state: this module only transforms numbers and datetimes.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Sequence

from timegrid.core.options import TimeGridOptions


class SnapMode(Enum):
    """How a raw fractional row is rounded onto the snap table."""

    NONE = "none"      # nearest breakpoint
    TOP = "top"        # snap backward, used for the start edge
    BOTTOM = "bottom"  # snap forward, used for the end edge and hover/click


@dataclass(frozen=True)
class GridRange:
    """A start/end pair and the grid rows they map to."""

    start_row: float
    start_time: datetime
    end_row: float
    end_time: datetime


def nearest(value: float, candidates: Sequence[float]) -> float:
    """Return the candidate closest to value; the first one wins ties."""
    return min(candidates, key=lambda c: abs(c - value))


def hour_fraction(minutes: int, minute_cell: int, snap_table: Sequence[float]) -> float:
    """Snapped fractional-hour value for a minute count.

    When ``minutes / minute_cell`` lands exactly on a (non-zero) table entry
    that entry is used; anything else falls back to the raw ratio rounded to
    two decimals, e.g. 10 minutes -> 0.17.
    """
    index = minutes / minute_cell
    if index.is_integer() and 0 <= index < len(snap_table) and snap_table[int(index)]:
        return snap_table[int(index)]
    return round(minutes / 60, 2)


def time_to_grid_row(
    value: datetime | time,
    hour_start: int,
    minute_cell: int,
    snap_table: Sequence[float],
) -> float:
    return value.hour - hour_start + hour_fraction(value.minute, minute_cell, snap_table)


def unsnapped_row(pixel_y: float, view_height_px: float, hour_span: float) -> float:
    """Linear pixel -> row ratio, before any snapping."""
    return pixel_y * hour_span / view_height_px


def snap_fraction(remainder: float, mode: SnapMode, snap_table: Sequence[float]) -> float:
    """Snap the fractional part of a row onto the table.

    TOP picks the largest breakpoint strictly below the remainder (0 if none).
    BOTTOM picks the smallest breakpoint at or above it, rolling over to the
    next hour (1.0) when the remainder is past the last breakpoint.
    """
    if mode is SnapMode.TOP:
        below = [step for step in snap_table if step < remainder]
        return below[-1] if below else 0
    if mode is SnapMode.BOTTOM:
        above = [step for step in snap_table if step >= remainder]
        return above[0] if above else 1.0
    return nearest(remainder, snap_table)


def pixel_to_grid_row(
    pixel_y: float,
    view_height_px: float,
    hour_span: float,
    mode: SnapMode,
    snap_table: Sequence[float],
) -> float:
    """Snapped grid row for a pixel offset inside a day column.

    >>> pixel_to_grid_row(925, 2400, 24, SnapMode.BOTTOM, (0, 0.5))
    9.5
    """
    row = unsnapped_row(pixel_y, view_height_px, hour_span)
    floored = math.floor(row)
    return floored + snap_fraction(row - floored, mode, snap_table)


def row_to_pixels(rows: float, hour_span: float, view_height_px: float) -> float:
    """Inverse of unsnapped_row, for row deltas as well as positions."""
    return rows * view_height_px / hour_span


def grid_row_to_time(day: date, row: float, hour_start: int) -> datetime:
    """Wall-clock time of a grid row on the given day, in whole minutes."""
    midnight = datetime.combine(day, time())
    return midnight + timedelta(minutes=round((row + hour_start) * 60))


def drag_grid_range(start: datetime, end: datetime, options: TimeGridOptions) -> GridRange:
    """Map a start/end pair to rows.

    An end that falls on a later calendar day than the start is pinned to the
    bottom of the grid instead of wrapping into the next day's rows.
    """
    start_row = time_to_grid_row(start, options.hour_start, options.minute_cell, options.ratio_hour_grid_y)
    end_row = time_to_grid_row(end, options.hour_start, options.minute_cell, options.ratio_hour_grid_y)

    if (end.date() - start.date()).days >= 1:
        end_row = options.hour_span

    return GridRange(start_row=start_row, start_time=start, end_row=end_row, end_time=end)


def range_for_day(day: date | datetime, options: TimeGridOptions) -> GridRange:
    """Clamp window a drag may not leave within a single day.

    Spans ``hour_start:00:00`` to ``(hour_end - 1):59:59`` of the given day.
    """
    if isinstance(day, datetime):
        day = day.date()
    range_start = datetime.combine(day, time(options.hour_start, 0, 0))
    range_end = datetime.combine(day, time(options.hour_end - 1, 59, 59))
    return drag_grid_range(range_start, range_end, options)


def limit_datetime(value: datetime, lower: datetime, upper: datetime) -> datetime:
    return max(lower, min(value, upper))
