from __future__ import annotations

import io

import pytest

from journey_core.errors import MissingSinkElementError
from journey_core.ratings import RATING_LEVELS, Rating
from journey_sim.sink import (
    ConsoleSink,
    Emphasis,
    PresentationSink,
    RatingBlock,
    RecordingSink,
    RegionState,
    results_elements,
)


def test_rating_block_render() -> None:
    block = RatingBlock.from_rating(
        Rating(RATING_LEVELS[1], 80.0, "80.0th percentile of 10 simulated runs"),
        Emphasis.SECONDARY,
    )

    assert block.emphasis is Emphasis.SECONDARY
    assert block.render() == "⭐⭐⭐⭐ Fast (80.0th percentile of 10 simulated runs)"
    assert RatingBlock("⭐", "Very Slow").render() == "⭐ Very Slow"


def test_recording_sink_tracks_state_and_events() -> None:
    sink = RecordingSink(4)

    sink.set_region_state(0, RegionState.ACTIVE)
    sink.set_progress(0, 42.0)
    sink.set_elapsed("0.123s")

    assert isinstance(sink, PresentationSink)
    assert sink.regions == [RegionState.ACTIVE, None, None, None]
    assert sink.progress == [42.0, 0.0, 0.0]
    assert sink.elapsed == "0.123s"
    assert sink.events_named("progress") == [(0, 42.0)]


def test_recording_sink_reports_missing_elements() -> None:
    sink = RecordingSink(4, missing={"segment_rating[2]"})

    with pytest.raises(MissingSinkElementError) as excinfo:
        sink.set_segment_result(2, "2.100s", RatingBlock("⭐", "Very Slow"))

    assert excinfo.value.element == "segment_rating[2]"
    assert isinstance(excinfo.value, LookupError)


def test_require_elements_checks_without_writing() -> None:
    sink = RecordingSink(4, missing={"segment_time[2]"})

    assert results_elements(1) == (
        "results",
        "total_time",
        "primary_rating",
        "segment_time[0]",
        "segment_rating[0]",
    )
    sink.require_elements(results_elements(2))
    with pytest.raises(MissingSinkElementError) as excinfo:
        sink.require_elements(results_elements(3))

    assert excinfo.value.element == "segment_time[2]"
    assert sink.events == []


def test_console_sink_prints_transitions_and_results() -> None:
    stream = io.StringIO()
    sink = ConsoleSink(["Start", "London", "Tokyo", "End"], stream, live=False)

    sink.set_region_state(0, RegionState.ACTIVE)
    sink.set_timer_visible(True)
    sink.set_elapsed("0.300s")
    sink.set_region_state(3, RegionState.COMPLETED)
    sink.set_total_time("4.900s")
    sink.set_primary_rating(RatingBlock("⭐⭐⭐", "Average"))
    sink.set_segment_result(1, "2.200s", RatingBlock("⭐⭐⭐", "Average", emphasis=Emphasis.SECONDARY))

    assert stream.getvalue().splitlines() == [
        "→ Start",
        "✓ End",
        "Total time: 4.900s",
        "Rating: ⭐⭐⭐ Average",
        "  London → Tokyo: 2.200s  ⭐⭐⭐ Average",
    ]


def test_console_sink_live_redraw() -> None:
    stream = io.StringIO()
    sink = ConsoleSink(["Start", "London", "Tokyo", "End"], stream, live=True, panel=False)

    sink.set_timer_visible(True)
    sink.set_progress(0, 50.0)
    sink.set_elapsed("0.300s")
    sink.set_timer_visible(False)
    sink.set_total_time("4.900s")

    output = stream.getvalue()
    assert output.startswith("\rStart [######......] London [............]")
    assert output.endswith("End  0.300s\n")
    assert "Total time" not in output
