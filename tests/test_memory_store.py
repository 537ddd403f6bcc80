"""Tests for timegrid.adapters.memory_store.InMemoryScheduleStore."""

import logging
from datetime import datetime

import pytest

from timegrid.core.events import CreateScheduleRequest, UpdateScheduleRequest
from timegrid.data.models import Schedule
from timegrid.ports.schedule_store_port import ScheduleStoreError


def _schedule(schedule_id="a", start_hour=9, end_hour=10):
    return Schedule(
        id=schedule_id,
        start=datetime(2026, 10, 19, start_hour, 0),
        end=datetime(2026, 10, 19, end_hour, 0),
    )


class TestStore:
    def test_get_and_all_sorted(self, store):
        assert store.get("s1").title == "Standup"
        assert store.get("missing") is None
        assert [s.id for s in store.all()] == ["s1", "locked"]

    def test_duplicate_add_raises(self, store):
        with pytest.raises(ScheduleStoreError):
            store.add(_schedule("s1"))

    def test_remove(self, store):
        assert store.remove("s1") is True
        assert store.remove("s1") is False
        assert store.get("s1") is None

    def test_create_assigns_id(self, store):
        created = store.create(CreateScheduleRequest(
            start=datetime(2026, 10, 19, 15, 0), end=datetime(2026, 10, 19, 16, 0),
        ))
        assert len(created.id) == 12
        assert store.get(created.id) is created
        assert created.resizable is False

    def test_apply_update(self, store):
        original = store.get("s1")
        updated = store.apply_update(UpdateScheduleRequest(
            schedule=original, changes={"end": datetime(2026, 10, 19, 11, 30)},
        ))
        assert updated.end == datetime(2026, 10, 19, 11, 30)
        assert updated.start == original.start
        assert store.get("s1") is updated
        # the original snapshot is left untouched
        assert original.end == datetime(2026, 10, 19, 10, 0)

    def test_update_unknown_is_logged(self, store, caplog):
        with caplog.at_level(logging.WARNING):
            result = store.apply_update(UpdateScheduleRequest(
                schedule=_schedule("ghost"), changes={"end": datetime(2026, 10, 19, 12, 0)},
            ))
        assert result is None
        assert "ghost" in caplog.text

    def test_inverting_update_raises(self, store):
        with pytest.raises(ScheduleStoreError):
            store.apply_update(UpdateScheduleRequest(
                schedule=store.get("s1"), changes={"start": datetime(2026, 10, 19, 12, 0)},
            ))
        assert store.get("s1").start == datetime(2026, 10, 19, 9, 0)
