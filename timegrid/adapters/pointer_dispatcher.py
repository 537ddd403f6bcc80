"""Pointer dispatcher — implements PointerInputPort.

Fans gesture events out to the handlers registered for them. Handlers are
kept per owning context so controllers can detach in one call and find
each other through ``contexts``.
"""

from __future__ import annotations

import logging
from typing import Any

from timegrid.ports.pointer_port import GestureHandler

logger = logging.getLogger(__name__)


class PointerDispatcher:
    """In-process gesture source shared by the controllers of one grid."""

    def __init__(self) -> None:
        # context -> [(gesture, handler), ...] in registration order
        self._registry: dict[int, tuple[object, list[tuple[str, GestureHandler]]]] = {}

    @property
    def contexts(self) -> list[object]:
        return [context for context, _ in self._registry.values()]

    def on(self, gesture: str, handler: GestureHandler, context: object) -> None:
        _, handlers = self._registry.setdefault(id(context), (context, []))
        if (gesture, handler) not in handlers:
            handlers.append((gesture, handler))

    def off(self, context: object, *gestures: str) -> None:
        """Detach a context's handlers, all of them when no gesture is named."""
        entry = self._registry.get(id(context))
        if entry is None:
            return
        if not gestures:
            del self._registry[id(context)]
            return
        _, handlers = entry
        handlers[:] = [(g, h) for g, h in handlers if g not in gestures]

    def dispatch(self, gesture: str, payload: Any = None) -> int:
        """Deliver a gesture; returns how many handlers received it."""
        targets = [
            handler
            for _, handlers in list(self._registry.values())
            for name, handler in list(handlers)
            if name == gesture
        ]
        logger.debug("dispatch %s to %d handler(s)", gesture, len(targets))
        for handler in targets:
            handler(payload)
        return len(targets)
