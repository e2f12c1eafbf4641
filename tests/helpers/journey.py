"""Factories for journey runs, machines and configuration payloads."""

from __future__ import annotations

from typing import Any, Iterable

from journey_core.classification import Classifier, ThresholdClassifier
from journey_core.config import JourneyConfig, SegmentStat
from journey_sim.clock import VirtualClock
from journey_sim.machine import JourneyRun, JourneyStateMachine, TimingMode
from journey_sim.presenter import ResultsPresenter
from journey_sim.sink import RecordingSink


class ScriptedSampler:
    """Sampler replaying fixed durations in order."""

    def __init__(self, durations: Iterable[float]) -> None:
        self._durations = list(durations)
        self.requested: list[SegmentStat] = []

    def sample(self, stat: SegmentStat) -> float:
        self.requested.append(stat)
        if not self._durations:
            raise AssertionError("ScriptedSampler ran out of durations")
        return self._durations.pop(0)


class LaggingClock(VirtualClock):
    """Virtual clock whose deferred callbacks fire ``lag_ms`` late."""

    def __init__(self, lag_ms: float, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.lag_ms = lag_ms

    def after(self, duration_ms: float, callback) -> None:
        super().after(duration_ms + self.lag_ms, callback)


def build_journey_mapping(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "waypoints": ["Start", "London", "Tokyo", "End"],
        "segments": [
            {"mean": 485.28, "std_dev": 245.48},
            {"mean": 2198.38, "std_dev": 120.45},
            {"mean": 2145.91, "std_dev": 129.14},
        ],
        "thresholds": {
            "total": [4.453, 4.624, 4.992, 5.203],
            "segments": [
                [0.166, 0.308, 0.674, 0.826],
                [2.038, 2.128, 2.285, 2.358],
                [1.978, 2.043, 2.253, 2.317],
            ],
        },
    }
    payload.update(overrides)
    return payload


def build_machine(
    config: JourneyConfig,
    durations: Iterable[float] = (600.0, 2200.0, 2100.0),
    *,
    sink: RecordingSink | None = None,
    clock: VirtualClock | None = None,
    classifier: Classifier | None = None,
    timing: TimingMode = TimingMode.GENERATED,
) -> tuple[JourneyStateMachine, VirtualClock, RecordingSink]:
    sink = sink if sink is not None else RecordingSink(config.segment_count + 1)
    clock = clock if clock is not None else VirtualClock(frame_interval_ms=config.frame_interval_ms)
    presenter = ResultsPresenter(classifier or ThresholdClassifier(config.thresholds), sink)
    machine = JourneyStateMachine(
        config, ScriptedSampler(durations), clock, sink, presenter, timing=timing
    )
    return machine, clock, sink


def build_run(durations: Iterable[float], total_ms: float | None = None) -> JourneyRun:
    values = [float(value) for value in durations]
    run = JourneyRun(segment_count=len(values))
    run.segment_durations.extend(values)
    run.total_ms = float(sum(values)) if total_ms is None else float(total_ms)
    return run
