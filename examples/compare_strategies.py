"""Example that rates the same journey with both rating strategies."""

from __future__ import annotations

from journey_core import (
    DurationSampler,
    NumpyUniformSource,
    build_classifier,
    default_journey_config,
)
from journey_sim import RecordingSink, ResultsPresenter, VirtualClock
from journey_sim.machine import JourneyStateMachine


def main() -> None:
    config = default_journey_config()
    for strategy in ("threshold", "percentile"):
        sampler = DurationSampler(NumpyUniformSource(seed=2024), floor_ms=config.floor_ms)
        sink = RecordingSink(config.segment_count + 1)
        presenter = ResultsPresenter(build_classifier(strategy, config, sampler), sink)
        clock = VirtualClock(frame_interval_ms=config.frame_interval_ms)
        machine = JourneyStateMachine(config, sampler, clock, sink, presenter)
        machine.start()
        clock.run_until_idle()
        report = machine.last_outcome.report
        print(f"[{strategy}] total {report.total_text}: {report.total_rating.level}")
        for segment in report.segments:
            print(f"  {config.segment_label(segment.index)}: {segment.time_text} {segment.rating.level}")


if __name__ == "__main__":
    main()
