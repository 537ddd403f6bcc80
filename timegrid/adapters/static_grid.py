"""Static grid adapter — implements TimeViewPort and TimeGridPort.

A fixed set of day columns with known pixel bounds, plus builders for the
hit-test targets a real view layer would produce. Used by the replay runner
and the tests in place of a rendered grid.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta

from timegrid.core.options import TimeGridOptions
from timegrid.data.models import (
    BOTTOM_RESIZE_HANDLE,
    SCHEDULE_BLOCK,
    SCHEDULE_BLOCK_WRAP,
    TIME_DATE,
    TOP_RESIZE_HANDLE,
    PointerEvent,
    PointerTarget,
    ViewBound,
    view_class,
)


@dataclass
class StaticTimeView:
    """One day column."""

    view_id: int
    day: date
    options: TimeGridOptions
    bound: ViewBound
    column: PointerTarget = field(init=False)

    def __post_init__(self) -> None:
        self.column = PointerTarget(classes=frozenset({TIME_DATE, view_class(self.view_id)}))

    def get_date(self) -> date:
        return self.day

    def get_view_bound(self) -> ViewBound:
        return self.bound

    def mouse_y(self, event: PointerEvent) -> float:
        return event.client_y - self.bound.top

    # -- hit-test targets -------------------------------------------------

    def block_wrap(self) -> PointerTarget:
        return PointerTarget(classes=frozenset({SCHEDULE_BLOCK_WRAP}), parent=self.column)

    def schedule_block(self, schedule_id: str) -> PointerTarget:
        return PointerTarget(
            classes=frozenset({SCHEDULE_BLOCK}),
            data={"id": schedule_id},
            parent=self.block_wrap(),
        )

    def handle(self, schedule_id: str, top: bool) -> PointerTarget:
        name = TOP_RESIZE_HANDLE if top else BOTTOM_RESIZE_HANDLE
        return PointerTarget(classes=frozenset({name}), parent=self.schedule_block(schedule_id))


class StaticTimeGrid:
    """Ordered day columns sharing one set of options."""

    def __init__(self, views: list[StaticTimeView], options: TimeGridOptions) -> None:
        self.options = options
        self._views = {view.view_id: view for view in views}

    @classmethod
    def for_days(
        cls,
        first_day: date,
        days: int,
        options: TimeGridOptions | None = None,
        height: float = 2400.0,
        top: float = 0.0,
    ) -> StaticTimeGrid:
        options = options or TimeGridOptions()
        views = [
            StaticTimeView(
                view_id=index,
                day=first_day + timedelta(days=index),
                options=options,
                bound=ViewBound(top=top, height=height),
            )
            for index in range(days)
        ]
        return cls(views, options)

    def get_view(self, view_id: int) -> StaticTimeView | None:
        return self._views.get(view_id)

    def views(self) -> list[StaticTimeView]:
        return list(self._views.values())
