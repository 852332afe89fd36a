"""Cooperative frame scheduling.

Hosts own the clock. A pygame shell passes ``pygame.time.get_ticks`` and
calls ``run_pending`` once per loop iteration; tests and headless
environments use ``ManualClock`` and advance it explicitly.
"""

from __future__ import annotations

import time
from typing import Callable, Dict, Optional

FrameCallback = Callable[[float], None]
Clock = Callable[[], float]


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class ManualClock:
    def __init__(self, start_ms: float = 0.0) -> None:
        self.time_ms = float(start_ms)

    def advance(self, ms: float) -> float:
        self.time_ms += ms
        return self.time_ms

    def __call__(self) -> float:
        return self.time_ms


class FrameScheduler:
    def __init__(self, clock: Optional[Clock] = None) -> None:
        self.clock: Clock = clock or monotonic_ms
        self._callbacks: Dict[int, FrameCallback] = {}
        self._next_handle = 1

    def now(self) -> float:
        return float(self.clock())

    @property
    def pending(self) -> int:
        return len(self._callbacks)

    def request_frame(self, callback: FrameCallback) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._callbacks[handle] = callback
        return handle

    def cancel_frame(self, handle: Optional[int]) -> None:
        if handle is None:
            return
        self._callbacks.pop(handle, None)

    def run_pending(self) -> int:
        """Fire the callbacks queued before this call.

        Callbacks requested while firing wait for the next call.
        """
        due = sorted(self._callbacks)
        now = self.now()
        fired = 0
        for handle in due:
            callback = self._callbacks.pop(handle, None)
            if callback is None:
                continue
            callback(now)
            fired += 1
        return fired
