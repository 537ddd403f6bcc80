"""
TimeGrid — Gesture script replay.

Wires a static grid, an in-memory store and both controllers onto one
pointer dispatcher, replays a JSON gesture script on the asyncio loop and
logs every emitted event. Create/update requests are applied to the store
so the final schedule list reflects the replayed session.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from timegrid.adapters.asyncio_timer import AsyncioTimer
from timegrid.adapters.headless_guide import CreationGuide, ResizeGuide
from timegrid.adapters.memory_store import InMemoryScheduleStore
from timegrid.adapters.pointer_dispatcher import PointerDispatcher
from timegrid.adapters.static_grid import StaticTimeGrid
from timegrid.config import settings
from timegrid.core.creation import CreationController
from timegrid.core.events import EventType
from timegrid.core.options import InteractionOptions, TimeGridOptions
from timegrid.core.resize import ResizeController
from timegrid.data.models import Gesture, PointerEvent, Schedule

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Script contract
# ---------------------------------------------------------------------------


class ScriptSchedule(BaseModel):
    id: str
    start: datetime
    end: datetime
    resizable: bool = False
    title: str = ""


class ScriptStep(BaseModel):
    """One gesture, or a pause.

    JSON example:
    {"gesture": "dragStart", "view": 0, "y": 900, "target": "grid"}
    {"wait_ms": 350}
    """

    gesture: str | None = None
    view: int = 0
    y: float = 0.0
    target: str = "grid"   # grid | block-wrap | top-handle | bottom-handle | outside
    schedule: str | None = None
    wait_ms: int = 0


class ReplayScript(BaseModel):
    first_day: date
    days: int = 1
    height: float = 2400.0
    grid: TimeGridOptions = Field(default_factory=TimeGridOptions)
    interaction: InteractionOptions = Field(default_factory=InteractionOptions)
    schedules: list[ScriptSchedule] = []
    steps: list[ScriptStep] = []


@dataclass
class ReplayResult:
    events: list[str] = field(default_factory=list)
    schedules: list[Schedule] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Replay
# ---------------------------------------------------------------------------


def _build_gesture(grid: StaticTimeGrid, step: ScriptStep) -> Gesture:
    view = grid.get_view(step.view)
    if view is None or step.target == "outside":
        target = None
    elif step.target == "top-handle":
        target = view.handle(step.schedule or "", top=True)
    elif step.target == "bottom-handle":
        target = view.handle(step.schedule or "", top=False)
    elif step.target == "block-wrap":
        target = view.block_wrap()
    else:
        target = view.column

    top = view.bound.top if view is not None else 0.0
    event = PointerEvent(client_y=top + step.y, type=step.gesture or "", target=target)
    return Gesture(target=target, origin_event=event)


async def run_script(script: ReplayScript) -> ReplayResult:
    """Replay every step of the script and return what happened."""
    result = ReplayResult()

    grid = StaticTimeGrid.for_days(script.first_day, script.days, script.grid, height=script.height)
    store = InMemoryScheduleStore([Schedule(**s.model_dump()) for s in script.schedules])
    pointer = PointerDispatcher()
    timer = AsyncioTimer()

    creation = CreationController(pointer, grid, timer, script.interaction)
    resize = ResizeController(pointer, grid, store, timer, script.interaction)
    CreationGuide(creation)
    ResizeGuide(resize)

    def _record(event_type: EventType):
        def handler(payload: object) -> None:
            result.events.append(event_type.value)
            logger.info("%s %s", event_type.value, _describe(payload))
        return handler

    for event_type in EventType:
        creation.events.on(event_type, _record(event_type))
        resize.events.on(event_type, _record(event_type))

    creation.events.on(EventType.BEFORE_CREATE_SCHEDULE, store.create)
    resize.events.on(EventType.BEFORE_UPDATE_SCHEDULE, store.apply_update)

    for step in script.steps:
        if step.gesture is None:
            await asyncio.sleep(step.wait_ms / 1000)
            continue
        pointer.dispatch(step.gesture, _build_gesture(grid, step))

    # let pending click/restore timers settle
    await asyncio.sleep(max(creation.click_delay_ms, resize.restore_delay_ms) / 1000 + 0.01)

    creation.destroy()
    resize.destroy()
    result.schedules = store.all()
    return result


def _describe(payload: object) -> str:
    if payload is None:
        return ""
    for name in ("nearest_grid_time_y", "start"):
        value = getattr(payload, name, None)
        if value is not None:
            end = getattr(payload, "end", None)
            return f"{value:%Y-%m-%d %H:%M}" + (f"-{end:%H:%M}" if end is not None else "")
    changes = getattr(payload, "changes", None)
    if changes is not None:
        return ", ".join(f"{k}={v:%H:%M}" for k, v in sorted(changes.items()))
    return ""


def load_script(path: str | Path) -> ReplayScript:
    return ReplayScript.model_validate(json.loads(Path(path).read_text(encoding="utf-8")))


def main() -> None:
    path = sys.argv[1] if len(sys.argv) > 1 else settings.REPLAY_SCRIPT_PATH
    if not path:
        print("ERROR: pass a script path or set REPLAY_SCRIPT_PATH in .env", file=sys.stderr)
        sys.exit(1)

    try:
        script = load_script(path)
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        print(f"ERROR: cannot load replay script {path}: {exc}", file=sys.stderr)
        sys.exit(1)

    result = asyncio.run(run_script(script))
    logger.info("Replay finished: %d events", len(result.events))
    for schedule in result.schedules:
        print(f"{schedule.id}\t{schedule.start:%Y-%m-%d %H:%M}\t{schedule.end:%H:%M}\t{schedule.title}")
