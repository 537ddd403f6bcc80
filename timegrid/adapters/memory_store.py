"""In-memory schedule store — implements ScheduleStorePort.

Applies the create/update requests the controllers emit. Used by the
replay runner and the tests; a real application would persist instead.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from typing import TYPE_CHECKING

from timegrid.data.models import Schedule
from timegrid.ports.schedule_store_port import ScheduleStoreError

if TYPE_CHECKING:
    from timegrid.core.events import CreateScheduleRequest, UpdateScheduleRequest

logger = logging.getLogger(__name__)


class InMemoryScheduleStore:
    """Dict-backed schedule collection keyed by id."""

    def __init__(self, schedules: list[Schedule] | None = None) -> None:
        self._items: dict[str, Schedule] = {}
        for schedule in schedules or []:
            self.add(schedule)

    def add(self, schedule: Schedule) -> Schedule:
        if schedule.id in self._items:
            raise ScheduleStoreError(f"Schedule {schedule.id!r} already exists")
        self._items[schedule.id] = schedule
        return schedule

    def get(self, schedule_id: str) -> Schedule | None:
        return self._items.get(schedule_id)

    def remove(self, schedule_id: str) -> bool:
        return self._items.pop(schedule_id, None) is not None

    def all(self) -> list[Schedule]:
        return sorted(self._items.values(), key=lambda s: (s.start, s.id))

    def create(self, request: CreateScheduleRequest, title: str = "") -> Schedule:
        """Handler for beforeCreateSchedule."""
        schedule = Schedule(
            id=uuid.uuid4().hex[:12],
            start=request.start,
            end=request.end,
            title=title,
        )
        self.add(schedule)
        logger.info("Created schedule %s %s-%s", schedule.id, schedule.start, schedule.end)
        return schedule

    def apply_update(self, request: UpdateScheduleRequest) -> Schedule | None:
        """Handler for beforeUpdateSchedule; unknown ids are logged and skipped."""
        current = self._items.get(request.schedule.id)
        if current is None:
            logger.warning("Update for unknown schedule %s ignored", request.schedule.id)
            return None

        updated = replace(current, **request.changes)
        if updated.start > updated.end:
            raise ScheduleStoreError(
                f"Update would invert schedule {current.id!r}: {updated.start} > {updated.end}"
            )
        self._items[current.id] = updated
        logger.info(
            "Updated schedule %s (%s): %s",
            current.id, request.type, ", ".join(sorted(request.changes)),
        )
        return updated
