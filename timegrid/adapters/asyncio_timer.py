"""asyncio timer adapter — implements TimerPort.

Wraps ``loop.call_later`` so controllers get cancellable handles in
milliseconds. The loop is resolved lazily so the adapter can be built
before the loop starts running.
"""

from __future__ import annotations

import asyncio
from typing import Callable


class AsyncioTimer:
    """asyncio implementation of TimerPort."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay_ms / 1000, callback)
