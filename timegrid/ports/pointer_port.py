"""Pointer input port — source of gesture events.

Handlers are registered together with the object that owns them (the
"context"), so a controller can detach all of its handlers at once and
peers can discover each other through the registered contexts.
"""

from __future__ import annotations

from typing import Any, Callable, Protocol

# Gesture names
DRAG_START = "dragStart"
DRAG = "drag"
DRAG_END = "dragEnd"
CLICK = "click"
DBL_CLICK = "dblclick"
MOUSE_MOVE = "mousemove"
MOUSE_ENTER = "mouseenter"
MOUSE_LEAVE = "mouseleave"

GestureHandler = Callable[[Any], None]


class PointerInputPort(Protocol):
    """Abstract pointer input used by the controllers."""

    @property
    def contexts(self) -> list[object]: ...

    def on(self, gesture: str, handler: GestureHandler, context: object) -> None: ...

    def off(self, context: object, *gestures: str) -> None: ...
