"""Schedule store port — keyed collection the controllers read from.

Controllers never write to the store; they emit change requests that the
application applies.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from timegrid.data.models import Schedule


class ScheduleStoreError(Exception):
    """Raised when a store operation can't be carried out."""


class ScheduleStorePort(Protocol):
    """Abstract schedule lookup used by the resize controller."""

    def get(self, schedule_id: str) -> Schedule | None: ...
