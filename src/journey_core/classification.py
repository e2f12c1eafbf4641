"""Rating strategies mapping journey durations onto the five rating levels.

Two strategies share the :class:`Classifier` capability so the runtime can
swap them without further changes:

* :class:`ThresholdClassifier` compares the duration in seconds against fixed
  ascending cutoffs.
* :class:`PercentileClassifier` ranks the duration inside a synthetic
  :class:`~journey_core.population.PopulationSet` and maps the percentile onto
  bands.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, Union, runtime_checkable

from .config import JourneyConfig, ThresholdTable
from .errors import ConfigurationError
from .population import PopulationSet, ReferencePopulation
from .ratings import RATING_LEVELS, WORST_LEVEL, Rating, RatingLevel
from .sampling import DurationSampler

__all__ = [
    "Axis",
    "TOTAL_AXIS",
    "PERCENTILE_BANDS",
    "STRATEGIES",
    "Classifier",
    "ThresholdClassifier",
    "PercentileClassifier",
    "classify_by_threshold",
    "classify_by_percentile",
    "level_for_percentile",
    "build_classifier",
]

Axis = Union[str, int]

TOTAL_AXIS = "total"

# Lower bound (inclusive) of each percentile band, best level first.
PERCENTILE_BANDS: tuple[float, ...] = (90.0, 75.0, 25.0, 10.0)

STRATEGIES = ("threshold", "percentile")


def classify_by_threshold(duration_ms: float, thresholds: Sequence[float]) -> RatingLevel:
    """Return the first level whose cutoff is at or above the duration."""

    seconds = duration_ms / 1000.0
    for index, cutoff in enumerate(thresholds):
        if index >= len(RATING_LEVELS) - 1:
            break
        if seconds <= cutoff:
            return RATING_LEVELS[index]
    return WORST_LEVEL


def level_for_percentile(percentile: float) -> RatingLevel:
    for index, lower in enumerate(PERCENTILE_BANDS):
        if percentile >= lower:
            return RATING_LEVELS[index]
    return WORST_LEVEL


def classify_by_percentile(
    duration_ms: float, population: ReferencePopulation
) -> tuple[float, RatingLevel]:
    percentile = population.percentile(duration_ms)
    return percentile, level_for_percentile(percentile)


@runtime_checkable
class Classifier(Protocol):
    """Capability shared by the rating strategies."""

    name: str

    def classify(self, duration_ms: float, axis: Axis) -> Rating: ...


class ThresholdClassifier:
    """Fixed-cutoff strategy backed by a :class:`ThresholdTable`."""

    name = "threshold"

    __slots__ = ("_table",)

    def __init__(self, table: ThresholdTable) -> None:
        self._table = table

    @property
    def table(self) -> ThresholdTable:
        return self._table

    def classify(self, duration_ms: float, axis: Axis) -> Rating:
        return Rating(level=classify_by_threshold(duration_ms, self._table.for_axis(axis)))


class PercentileClassifier:
    """Percentile strategy ranking durations inside reference populations."""

    name = "percentile"

    __slots__ = ("_populations",)

    def __init__(self, populations: PopulationSet) -> None:
        self._populations = populations

    @property
    def populations(self) -> PopulationSet:
        return self._populations

    def classify(self, duration_ms: float, axis: Axis) -> Rating:
        population = self._populations.for_axis(axis)
        percentile, level = classify_by_percentile(duration_ms, population)
        return Rating(
            level=level,
            percentile=percentile,
            description=f"{percentile:.1f}th percentile of {population.size} simulated runs",
        )


def build_classifier(
    strategy: str,
    config: JourneyConfig,
    sampler: DurationSampler | None = None,
) -> Classifier:
    """Instantiate the named strategy for ``config``."""

    key = (strategy or "").strip().lower()
    if key == "threshold":
        return ThresholdClassifier(config.thresholds)
    if key == "percentile":
        sampler = sampler or DurationSampler(floor_ms=config.floor_ms)
        return PercentileClassifier(PopulationSet.build(config, sampler))
    raise ConfigurationError(
        f"Unknown rating strategy {strategy!r}; expected one of {', '.join(STRATEGIES)}"
    )
