"""Clock capabilities consumed by the journey state machine.

A clock exposes the current monotonic time in milliseconds together with two
scheduling primitives: a one-shot deferred callback and a per-frame callback
that only repeats when it is scheduled again from within itself.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
from typing import Callable, Protocol, runtime_checkable

from journey_core.config import DEFAULT_FRAME_INTERVAL_MS

__all__ = ["Callback", "Clock", "AsyncioClock", "VirtualClock"]

Callback = Callable[[], None]


@runtime_checkable
class Clock(Protocol):
    def now(self) -> float: ...

    def after(self, duration_ms: float, callback: Callback) -> None: ...

    def every_frame(self, callback: Callback) -> None: ...


class AsyncioClock:
    """Clock driven by an :mod:`asyncio` event loop.

    ``time_scale`` speeds up (values above 1) or slows down the journey while
    keeping reported times in simulated milliseconds.
    """

    __slots__ = ("_loop", "_frame_interval_ms", "_time_scale", "_origin")

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop | None = None,
        *,
        frame_interval_ms: float = DEFAULT_FRAME_INTERVAL_MS,
        time_scale: float = 1.0,
    ) -> None:
        if time_scale <= 0:
            raise ValueError("time_scale must be positive")
        if frame_interval_ms <= 0:
            raise ValueError("frame_interval_ms must be positive")
        self._loop = loop or asyncio.get_running_loop()
        self._frame_interval_ms = float(frame_interval_ms)
        self._time_scale = float(time_scale)
        self._origin = self._loop.time()

    @property
    def time_scale(self) -> float:
        return self._time_scale

    def now(self) -> float:
        return (self._loop.time() - self._origin) * 1000.0 * self._time_scale

    def after(self, duration_ms: float, callback: Callback) -> None:
        delay = max(0.0, duration_ms) / 1000.0 / self._time_scale
        self._loop.call_later(delay, callback)

    def every_frame(self, callback: Callback) -> None:
        # Frames tick in wall time regardless of the scale.
        self._loop.call_later(self._frame_interval_ms / 1000.0, callback)


class VirtualClock:
    """Deterministic clock advanced explicitly, used by tests and replays."""

    __slots__ = ("_now", "_frame_interval_ms", "_queue", "_sequence", "frames")

    def __init__(
        self,
        *,
        start_ms: float = 0.0,
        frame_interval_ms: float = DEFAULT_FRAME_INTERVAL_MS,
    ) -> None:
        if frame_interval_ms <= 0:
            raise ValueError("frame_interval_ms must be positive")
        self._now = float(start_ms)
        self._frame_interval_ms = float(frame_interval_ms)
        self._queue: list[tuple[float, int, Callback]] = []
        self._sequence = itertools.count()
        self.frames = 0

    def now(self) -> float:
        return self._now

    @property
    def pending(self) -> int:
        return len(self._queue)

    def after(self, duration_ms: float, callback: Callback) -> None:
        self._push(self._now + max(0.0, float(duration_ms)), callback)

    def every_frame(self, callback: Callback) -> None:
        def frame() -> None:
            self.frames += 1
            callback()

        self._push(self._now + self._frame_interval_ms, frame)

    def advance(self, duration_ms: float) -> None:
        """Move time forward, firing every callback due on the way."""

        target = self._now + float(duration_ms)
        while self._queue and self._queue[0][0] <= target:
            due, _, callback = heapq.heappop(self._queue)
            self._now = due
            callback()
        self._now = target

    def run_until_idle(self, *, limit_ms: float = 3_600_000.0) -> None:
        """Fire callbacks in time order until nothing is scheduled."""

        deadline = self._now + limit_ms
        while self._queue:
            due, _, callback = heapq.heappop(self._queue)
            if due > deadline:
                raise RuntimeError(f"Callbacks still scheduled after {limit_ms} ms")
            self._now = due
            callback()

    def _push(self, due: float, callback: Callback) -> None:
        heapq.heappush(self._queue, (due, next(self._sequence), callback))
