"""View ports — the grid layout as seen by the controllers.

The view layer owns geometry and hit-testing; controllers only ask it for a
day column's date, options and bounds.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from timegrid.core.options import TimeGridOptions
    from timegrid.data.models import PointerEvent, ViewBound


class TimeViewPort(Protocol):
    """One day column of the time grid."""

    view_id: int
    options: TimeGridOptions

    def get_date(self) -> date: ...

    def get_view_bound(self) -> ViewBound: ...

    def mouse_y(self, event: PointerEvent) -> float: ...


class TimeGridPort(Protocol):
    """The whole grid: an ordered set of day columns."""

    options: TimeGridOptions

    def get_view(self, view_id: int) -> TimeViewPort | None: ...

    def views(self) -> list[TimeViewPort]: ...
