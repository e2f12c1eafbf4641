from __future__ import annotations

import numpy as np
import pytest

from journey_core.config import SegmentStat
from journey_core.population import (
    PopulationSet,
    ReferencePopulation,
    build_population,
    build_total_population,
    calculate_percentile,
)
from journey_core.sampling import DurationSampler, NumpyUniformSource


def test_calculate_percentile_counts_inclusive() -> None:
    assert calculate_percentile(200, [100, 200, 300]) == pytest.approx(66.67, abs=0.01)
    assert calculate_percentile(99, [100, 200, 300]) == 0.0
    assert calculate_percentile(300, [300, 100, 200]) == 100.0


def test_empty_population_yields_zero() -> None:
    assert calculate_percentile(1234.0, []) == 0.0
    assert ReferencePopulation([]).percentile(5.0) == 0.0


def test_population_is_sorted_and_read_only() -> None:
    population = ReferencePopulation([300.0, 100.0, 200.0, 200.0])

    np.testing.assert_array_equal(population.values, [100.0, 200.0, 200.0, 300.0])
    assert population.size == len(population) == 4
    assert population.rank(200.0) == 3
    assert population.rank(50.0) == 0
    with pytest.raises(ValueError):
        population.values[0] = 0.0


def test_population_accepts_generators() -> None:
    population = ReferencePopulation(float(value) for value in (3, 1, 2))

    np.testing.assert_array_equal(population.values, [1.0, 2.0, 3.0])


def test_build_population_draws_requested_count() -> None:
    sampler = DurationSampler(NumpyUniformSource(seed=11))

    population = build_population(SegmentStat(485.28, 245.48), 500, sampler)

    assert population.size == 500
    assert np.all(np.diff(population.values) >= 0)
    assert population.values[0] >= 100.0


def test_total_population_sums_independent_trials() -> None:
    sampler = DurationSampler(NumpyUniformSource(seed=5))
    stats = [SegmentStat(500.0, 0.0), SegmentStat(2000.0, 0.0), SegmentStat(1500.0, 0.0)]

    total = build_total_population(stats, 10, sampler)

    np.testing.assert_allclose(total.values, [4000.0] * 10)
    assert build_total_population(stats, 0, sampler).size == 0


def test_population_set_for_configured_journey(journey_config) -> None:
    sampler = DurationSampler(NumpyUniformSource(seed=9))

    populations = PopulationSet.build(journey_config, sampler, size=2000)

    assert populations.total.size == 2000
    assert len(populations.segments) == 3
    assert populations.for_axis("total") is populations.total
    assert populations.for_axis(2) is populations.segments[2]
    expected_total = sum(stat.mean for stat in journey_config.segments)
    assert float(np.median(populations.total.values)) == pytest.approx(expected_total, rel=0.02)
    with pytest.raises(KeyError):
        populations.for_axis(3)
