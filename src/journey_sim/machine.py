"""Segment-sequencing state machine driving a journey run.

A run walks through every configured segment: it samples a duration, waits
for it on the clock and keeps a per-frame tick updating the live timer and
the active progress bar.  All mutation happens from clock callbacks on a
single thread, so no locking is involved.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Callable

from journey_core.config import JourneyConfig
from journey_core.errors import MissingSinkElementError
from journey_core.sampling import DurationSampler

from .clock import AsyncioClock, Clock
from .presenter import JourneyReport, ResultsPresenter, format_seconds
from .sink import PresentationSink, RegionState

__all__ = [
    "JourneyState",
    "TimingMode",
    "JourneyRun",
    "JourneyOutcome",
    "JourneyStateMachine",
    "run_journey",
]

logger = logging.getLogger(__name__)


class JourneyState(str, enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"


class TimingMode(str, enum.Enum):
    """Source of truth for recorded segment durations."""

    GENERATED = "generated"
    WALL_CLOCK = "wall-clock"


@dataclass(slots=True)
class JourneyRun:
    """Mutable record of a single execution of the journey."""

    segment_count: int
    segment_durations: list[float] = field(default_factory=list)
    sampled_durations: list[float] = field(default_factory=list)
    running: bool = False
    current_segment_index: int = 0
    current_segment_start: float = 0.0
    current_segment_duration: float = 0.0
    started_at: float = 0.0
    finished_at: float | None = None
    total_ms: float = 0.0

    @property
    def completed_ms(self) -> float:
        return float(sum(self.segment_durations))

    @property
    def is_complete(self) -> bool:
        return len(self.segment_durations) == self.segment_count


@dataclass(frozen=True, slots=True)
class JourneyOutcome:
    run: JourneyRun
    report: JourneyReport | None
    error: Exception | None = None


CompletionListener = Callable[[JourneyOutcome], None]


class JourneyStateMachine:
    """Sequence the journey segments and hand the result to the presenter."""

    def __init__(
        self,
        config: JourneyConfig,
        sampler: DurationSampler,
        clock: Clock,
        sink: PresentationSink,
        presenter: ResultsPresenter,
        *,
        timing: TimingMode | str = TimingMode.GENERATED,
    ) -> None:
        self._config = config
        self._sampler = sampler
        self._clock = clock
        self._sink = sink
        self._presenter = presenter
        self._timing = TimingMode(timing)
        self._state = JourneyState.IDLE
        self._run: JourneyRun | None = None
        self._listeners: list[CompletionListener] = []
        self._last_outcome: JourneyOutcome | None = None

    @property
    def state(self) -> JourneyState:
        return self._state

    @property
    def timing(self) -> TimingMode:
        return self._timing

    @property
    def run(self) -> JourneyRun | None:
        return self._run

    @property
    def last_outcome(self) -> JourneyOutcome | None:
        return self._last_outcome

    @property
    def running(self) -> bool:
        return self._run is not None and self._run.running

    def add_completion_listener(self, listener: CompletionListener) -> None:
        self._listeners.append(listener)

    def remove_completion_listener(self, listener: CompletionListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def elapsed_ms(self) -> float:
        """Completed segment time plus the clamped progress of the current one."""

        run = self._run
        if run is None:
            return 0.0
        if not run.running:
            return run.total_ms
        current = 0.0
        if run.current_segment_duration > 0:
            current = min(
                self._clock.now() - run.current_segment_start,
                run.current_segment_duration,
            )
        return run.completed_ms + max(0.0, current)

    def start(self) -> bool:
        """Begin a new run; returns ``False`` when one is already running."""

        if self.running:
            logger.debug("Journey already running", extra={"event": "journey.double_start"})
            return False

        run = JourneyRun(segment_count=self._config.segment_count)
        run.running = True
        run.started_at = self._clock.now()
        self._run = run
        self._state = JourneyState.RUNNING
        logger.info(
            "Journey started",
            extra={"event": "journey.start", "segments": run.segment_count, "timing": self._timing.value},
        )

        self._reset_sink()
        self._cosmetic(self._sink.set_start_enabled, False)
        self._cosmetic(self._sink.set_results_visible, False)
        self._cosmetic(self._sink.set_timer_visible, True)
        self._cosmetic(self._sink.set_region_state, 0, RegionState.ACTIVE)

        self._begin_segment(run, 0)
        self._tick()
        return True

    async def run_async(self) -> JourneyOutcome:
        """Start (or join) a run and wait for its outcome on the running loop."""

        loop = asyncio.get_running_loop()
        future: asyncio.Future[JourneyOutcome] = loop.create_future()

        def _resolve(outcome: JourneyOutcome) -> None:
            if not future.done():
                future.set_result(outcome)

        self.add_completion_listener(_resolve)
        try:
            self.start()
            return await future
        finally:
            self.remove_completion_listener(_resolve)

    def _reset_sink(self) -> None:
        for index in range(self._config.segment_count + 1):
            self._cosmetic(self._sink.set_region_state, index, None)
        for index in range(self._config.segment_count):
            self._cosmetic(self._sink.set_progress, index, 0.0)
        self._cosmetic(self._sink.set_elapsed, format_seconds(0.0))

    def _cosmetic(self, method: Callable[..., Any], *args: Any) -> None:
        try:
            method(*args)
        except MissingSinkElementError as exc:
            logger.warning(
                "Skipping update for missing presentation element",
                extra={"event": "sink.missing_element", "element": exc.element},
            )

    def _begin_segment(self, run: JourneyRun, index: int) -> None:
        duration = self._sampler.sample(self._config.segments[index])
        run.current_segment_index = index
        run.current_segment_start = self._clock.now()
        run.current_segment_duration = duration
        run.sampled_durations.append(duration)
        logger.debug(
            "Segment started",
            extra={
                "event": "journey.segment.start",
                "segment": index,
                "label": self._config.segment_label(index),
                "duration_ms": round(duration, 3),
            },
        )
        self._clock.after(duration, partial(self._finish_segment, run, index))

    def _finish_segment(self, run: JourneyRun, index: int) -> None:
        if run is not self._run or not run.running:
            return
        if self._timing is TimingMode.GENERATED:
            realised = run.current_segment_duration
        else:
            realised = self._clock.now() - run.current_segment_start
        run.segment_durations.append(realised)
        logger.debug(
            "Segment completed",
            extra={"event": "journey.segment.complete", "segment": index, "duration_ms": round(realised, 3)},
        )

        self._cosmetic(self._sink.set_progress, index, 100.0)
        self._cosmetic(self._sink.set_region_state, index, RegionState.COMPLETED)
        self._cosmetic(self._sink.set_region_state, index + 1, RegionState.ACTIVE)

        if index + 1 < run.segment_count:
            self._begin_segment(run, index + 1)
        else:
            self._complete(run)

    def _tick(self) -> None:
        run = self._run
        if run is None or not run.running:
            return
        self._cosmetic(self._sink.set_elapsed, format_seconds(self.elapsed_ms()))
        if run.current_segment_index < run.segment_count and run.current_segment_duration > 0:
            elapsed = self._clock.now() - run.current_segment_start
            percent = min(elapsed / run.current_segment_duration, 1.0) * 100.0
            self._cosmetic(self._sink.set_progress, run.current_segment_index, max(0.0, percent))
        self._clock.every_frame(self._tick)

    def _complete(self, run: JourneyRun) -> None:
        run.running = False
        run.finished_at = self._clock.now()
        if self._timing is TimingMode.GENERATED:
            run.total_ms = run.completed_ms
        else:
            run.total_ms = run.finished_at - run.started_at
        self._state = JourneyState.COMPLETED
        logger.info(
            "Journey completed",
            extra={
                "event": "journey.complete",
                "total_ms": round(run.total_ms, 3),
                "segments": [round(value, 3) for value in run.segment_durations],
            },
        )

        last_region = run.segment_count
        self._cosmetic(self._sink.set_region_state, last_region, RegionState.COMPLETED)
        self._cosmetic(self._sink.set_elapsed, format_seconds(run.total_ms))
        self._cosmetic(self._sink.set_timer_visible, False)

        report: JourneyReport | None = None
        error: Exception | None = None
        try:
            report = self._presenter.present(run)
        except MissingSinkElementError as exc:
            logger.error(
                "Unable to present journey results",
                extra={"event": "journey.results_failed", "element": exc.element},
            )
            error = exc
        finally:
            self._state = JourneyState.IDLE
            self._cosmetic(self._sink.set_start_enabled, True)

        outcome = JourneyOutcome(run=run, report=report, error=error)
        self._last_outcome = outcome
        for listener in list(self._listeners):
            try:
                listener(outcome)
            except Exception:
                logger.exception(
                    "Completion listener failed",
                    extra={"event": "journey.listener_failed", "listener": repr(listener)},
                )


async def run_journey(
    config: JourneyConfig,
    sampler: DurationSampler,
    sink: PresentationSink,
    presenter: ResultsPresenter,
    *,
    timing: TimingMode | str = TimingMode.GENERATED,
    time_scale: float = 1.0,
) -> JourneyOutcome:
    """Animate one journey on the running event loop."""

    clock = AsyncioClock(frame_interval_ms=config.frame_interval_ms, time_scale=time_scale)
    machine = JourneyStateMachine(config, sampler, clock, sink, presenter, timing=timing)
    return await machine.run_async()
