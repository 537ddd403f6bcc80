"""
TimeGrid — Grid and interaction options.

Per-view grid geometry and per-controller interaction switches. Both are
read-only for the lifetime of the view/controller that receives them.
"""

from __future__ import annotations

from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from timegrid.config import settings


class TimeGridOptions(BaseModel):
    """Geometry of one time grid.

    JSON example:
    {
        "hour_start": 0,
        "hour_end": 24,
        "minute_cell": 30,
        "ratio_hour_grid_y": [0, 0.5]
    }
    """

    model_config = ConfigDict(frozen=True)

    hour_start: int = 0
    hour_end: int = 24
    minute_cell: int = 30                           # snapping granularity
    ratio_hour_grid_y: tuple[float, ...] = (0, 0.5)  # snap table within one hour

    @field_validator("minute_cell")
    @classmethod
    def positive_cell(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("minute_cell must be positive")
        return v

    @field_validator("ratio_hour_grid_y")
    @classmethod
    def ascending_table(cls, v: tuple[float, ...]) -> tuple[float, ...]:
        if not v:
            raise ValueError("ratio_hour_grid_y must not be empty")
        if any(not 0 <= step < 1 for step in v):
            raise ValueError("ratio_hour_grid_y entries must lie in [0, 1)")
        if list(v) != sorted(v):
            raise ValueError("ratio_hour_grid_y must be ascending")
        return v

    @model_validator(mode="after")
    def hour_bounds(self) -> TimeGridOptions:
        if not 0 <= self.hour_start < self.hour_end <= 24:
            raise ValueError(
                f"expected 0 <= hour_start < hour_end <= 24, "
                f"got {self.hour_start}..{self.hour_end}"
            )
        return self

    @property
    def hour_span(self) -> int:
        return self.hour_end - self.hour_start

    @property
    def min_cell_rows(self) -> float:
        """One snap unit expressed in grid rows."""
        return self.minute_cell / 60


class TimeDelay(BaseModel):
    """Delays in milliseconds; None falls back to the configured default."""

    hover: int | None = None
    click: int | None = None


class ConditionResult(BaseModel):
    """What a hover/click predicate hands back when it accepts a position."""

    end_time: Any = None
    delta: float | None = None


class InteractionOptions(BaseModel):
    """Switches and caller-supplied predicates consumed by the controllers."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    disable_dbl_click: bool = False
    disable_click: bool = False
    show_creation_guide_on_hover: bool = False
    show_creation_guide_on_click: bool = False
    time_delay: TimeDelay = Field(default_factory=TimeDelay)

    check_expected_condition_hover: Callable[..., Any] | None = None
    check_expected_condition_click: Callable[..., Any] | None = None
    check_expected_condition_resize: Callable[..., Any] | None = None

    @property
    def hover_delay_ms(self) -> int:
        if self.time_delay.hover is None:
            return settings.HOVER_DELAY_MS
        return self.time_delay.hover

    @property
    def click_delay_ms(self) -> int:
        # A double click can't be told apart without waiting; with dblclick
        # disabled the single click fires on the next tick.
        if self.disable_dbl_click:
            return 0
        if self.time_delay.click is None:
            return settings.CLICK_DELAY_MS
        return self.time_delay.click
