from __future__ import annotations

import pytest

from journey_core.classification import (
    TOTAL_AXIS,
    Classifier,
    PercentileClassifier,
    ThresholdClassifier,
    build_classifier,
    classify_by_percentile,
    classify_by_threshold,
    level_for_percentile,
)
from journey_core.errors import ConfigurationError
from journey_core.population import PopulationSet, ReferencePopulation
from journey_core.ratings import RATING_LEVELS, WORST_LEVEL
from journey_core.sampling import DurationSampler, NumpyUniformSource

TABLE = (2.038, 2.128, 2.285, 2.358)


@pytest.mark.parametrize(
    "duration_ms, expected",
    [
        (1000.0, 0),
        (2038.0, 0),
        (2038.5, 1),
        (2128.0, 1),
        (2200.0, 2),
        (2285.0, 2),
        (2358.0, 3),
        (2358.001, 4),
        (10_000.0, 4),
    ],
)
def test_threshold_boundaries_are_inclusive(duration_ms: float, expected: int) -> None:
    assert classify_by_threshold(duration_ms, TABLE) is RATING_LEVELS[expected]


def test_empty_threshold_sequence_returns_worst_level() -> None:
    assert classify_by_threshold(1.0, ()) is WORST_LEVEL


@pytest.mark.parametrize(
    "percentile, expected",
    [
        (100.0, 0),
        (90.0, 0),
        (89.99, 1),
        (75.0, 1),
        (74.9, 2),
        (25.0, 2),
        (24.9, 3),
        (10.0, 3),
        (9.99, 4),
        (0.0, 4),
    ],
)
def test_percentile_bands(percentile: float, expected: int) -> None:
    assert level_for_percentile(percentile) is RATING_LEVELS[expected]


def test_classify_by_percentile_uses_inclusive_rank() -> None:
    population = ReferencePopulation([100.0, 200.0, 300.0])

    percentile, level = classify_by_percentile(200.0, population)

    assert percentile == pytest.approx(66.67, abs=0.01)
    assert level.label == "Average"
    assert classify_by_percentile(300.0, population) == (100.0, RATING_LEVELS[0])
    assert classify_by_percentile(50.0, ReferencePopulation([])) == (0.0, WORST_LEVEL)


def test_threshold_classifier_axes(journey_config) -> None:
    classifier = ThresholdClassifier(journey_config.thresholds)

    assert isinstance(classifier, Classifier)
    assert classifier.classify(4900.0, TOTAL_AXIS).label == "Average"
    assert classifier.classify(4400.0, TOTAL_AXIS).label == "Lightning Fast"
    assert classifier.classify(600.0, 0).label == "Average"
    assert classifier.classify(700.0, 0).label == "Slow"
    assert classifier.classify(2100.0, 2).label == "Average"
    assert classifier.classify(2000.0, 2).label == "Fast"
    assert classifier.classify(600.0, 0).percentile is None
    with pytest.raises(KeyError):
        classifier.classify(600.0, 3)


def test_percentile_classifier_describes_rank() -> None:
    population = ReferencePopulation([100.0, 200.0, 300.0])
    classifier = PercentileClassifier(PopulationSet(total=population, segments=(population,)))

    rating = classifier.classify(200.0, 0)

    assert isinstance(classifier, Classifier)
    assert rating.percentile == pytest.approx(66.666, abs=0.01)
    assert rating.label == "Average"
    assert rating.description == "66.7th percentile of 3 simulated runs"
    assert classifier.classify(300.0, TOTAL_AXIS).label == "Lightning Fast"
    with pytest.raises(KeyError):
        classifier.classify(200.0, 1)


def test_build_classifier_strategies(journey_config) -> None:
    sampler = DurationSampler(NumpyUniformSource(seed=2))

    threshold = build_classifier("threshold", journey_config)
    percentile = build_classifier(" Percentile ", journey_config, sampler)

    assert isinstance(threshold, ThresholdClassifier)
    assert isinstance(percentile, PercentileClassifier)
    assert percentile.populations.total.size == journey_config.population_size
    with pytest.raises(ConfigurationError):
        build_classifier("median", journey_config)
