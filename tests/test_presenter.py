from __future__ import annotations

import pytest

from journey_core.classification import PercentileClassifier, ThresholdClassifier
from journey_core.errors import MissingSinkElementError
from journey_core.population import PopulationSet, ReferencePopulation
from journey_sim.presenter import ResultsPresenter, format_seconds
from journey_sim.sink import Emphasis, RecordingSink

from tests.helpers import build_run


@pytest.mark.parametrize(
    "duration_ms, expected",
    [(4900.0, "4.900s"), (0.0, "0.000s"), (485.2849, "0.485s"), (2198.3851, "2.198s")],
)
def test_format_seconds(duration_ms: float, expected: str) -> None:
    assert format_seconds(duration_ms) == expected


def test_present_writes_results_panel(journey_config, recording_sink: RecordingSink) -> None:
    presenter = ResultsPresenter(ThresholdClassifier(journey_config.thresholds), recording_sink)

    report = presenter.present(build_run([600.0, 2200.0, 2100.0]))

    assert report.strategy == "threshold"
    assert report.total_ms == 4900.0
    assert report.total_text == "4.900s"
    assert report.total_rating.label == "Average"
    assert [segment.time_text for segment in report.segments] == ["0.600s", "2.200s", "2.100s"]
    assert [segment.rating.label for segment in report.segments] == ["Average"] * 3
    assert recording_sink.total_time == "4.900s"
    assert recording_sink.primary_rating is not None
    assert recording_sink.primary_rating.emphasis is Emphasis.PRIMARY
    assert recording_sink.primary_rating.stars == "⭐⭐⭐"
    time_text, block = recording_sink.segment_results[0]
    assert time_text == "0.600s"
    assert block.emphasis is Emphasis.SECONDARY
    assert recording_sink.results_visible is True


def test_present_is_idempotent(journey_config, recording_sink: RecordingSink) -> None:
    presenter = ResultsPresenter(ThresholdClassifier(journey_config.thresholds), recording_sink)
    run = build_run([350.0, 2050.0, 2300.0])

    first = presenter.present(run)
    first_events = list(recording_sink.events)
    second = presenter.present(run)

    assert first == second
    assert recording_sink.events[len(first_events):] == first_events


def test_missing_results_element_is_fatal(journey_config) -> None:
    sink = RecordingSink(4, missing={"segment_time[1]"})
    presenter = ResultsPresenter(ThresholdClassifier(journey_config.thresholds), sink)

    with pytest.raises(MissingSinkElementError):
        presenter.present(build_run([600.0, 2200.0, 2100.0]))

    assert sink.results_visible is False
    assert sink.total_time is None
    assert sink.primary_rating is None
    assert sink.events == []


def test_percentile_report_carries_description(recording_sink: RecordingSink) -> None:
    population = ReferencePopulation(range(100, 1100, 100))
    classifier = PercentileClassifier(
        PopulationSet(total=population, segments=(population, population, population))
    )
    presenter = ResultsPresenter(classifier, recording_sink)

    report = presenter.present(build_run([100.0, 500.0, 1000.0], total_ms=950.0))

    assert report.strategy == "percentile"
    assert report.total_rating.percentile == 90.0
    assert report.total_rating.label == "Lightning Fast"
    assert [segment.rating.label for segment in report.segments] == [
        "Slow",
        "Average",
        "Lightning Fast",
    ]
    assert recording_sink.primary_rating.description == "90.0th percentile of 10 simulated runs"
    payload = report.as_dict()
    assert payload["rating"]["percentile"] == 90.0
    assert payload["segments"][2]["rating"]["level"] == 0
