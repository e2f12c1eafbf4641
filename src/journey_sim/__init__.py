"""Journey simulator runtime.

This package schedules journey runs on a clock, keeps a presentation sink in
sync with the elapsed time and publishes star ratings once the final
waypoint is reached.  The pure timing and rating engine lives in
:mod:`journey_core`.
"""

from ._version import __version__
from .clock import AsyncioClock, Clock, VirtualClock
from .machine import (
    JourneyOutcome,
    JourneyRun,
    JourneyState,
    JourneyStateMachine,
    TimingMode,
    run_journey,
)
from .presenter import JourneyReport, ResultsPresenter, SegmentReport, format_seconds
from .sink import (
    ConsoleSink,
    Emphasis,
    PresentationSink,
    RatingBlock,
    RecordingSink,
    RegionState,
)

__all__ = [
    "AsyncioClock",
    "Clock",
    "VirtualClock",
    "JourneyOutcome",
    "JourneyRun",
    "JourneyState",
    "JourneyStateMachine",
    "TimingMode",
    "run_journey",
    "JourneyReport",
    "ResultsPresenter",
    "SegmentReport",
    "format_seconds",
    "ConsoleSink",
    "Emphasis",
    "PresentationSink",
    "RatingBlock",
    "RecordingSink",
    "RegionState",
    "__version__",
]
