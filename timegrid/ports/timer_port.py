"""Timer port — cancellable delayed callbacks.

Every suspension point in the engine (hover debounce, click disambiguation,
guide restoration) goes through this port so that controllers own the
handles and can cancel them on teardown.
"""

from __future__ import annotations

from typing import Callable, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class TimerPort(Protocol):
    """Abstract scheduler used by the controllers."""

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle: ...
