"""Synthetic reference populations used by the percentile rating strategy."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import numpy as np

from .config import JourneyConfig, SegmentStat
from .sampling import DurationSampler

__all__ = [
    "ReferencePopulation",
    "PopulationSet",
    "calculate_percentile",
    "build_population",
    "build_total_population",
]

logger = logging.getLogger(__name__)


class ReferencePopulation:
    """Sorted, read-only sample of durations in milliseconds."""

    __slots__ = ("_values",)

    def __init__(self, values: Iterable[float] | np.ndarray) -> None:
        if not isinstance(values, np.ndarray):
            values = list(values)
        array = np.sort(np.asarray(values, dtype=float))
        array.setflags(write=False)
        self._values = array

    @property
    def values(self) -> np.ndarray:
        return self._values

    @property
    def size(self) -> int:
        return int(self._values.size)

    def __len__(self) -> int:
        return self.size

    def rank(self, value: float) -> int:
        """Number of elements less than or equal to ``value``."""

        return int(np.searchsorted(self._values, float(value), side="right"))

    def percentile(self, value: float) -> float:
        if self.size == 0:
            return 0.0
        return 100.0 * self.rank(value) / self.size

    def __repr__(self) -> str:
        return f"ReferencePopulation(size={self.size})"


def calculate_percentile(
    value: float, population: ReferencePopulation | Sequence[float]
) -> float:
    """Percentage of ``population`` at or below ``value``; 0 when empty."""

    if not isinstance(population, ReferencePopulation):
        population = ReferencePopulation(population)
    return population.percentile(value)


def build_population(
    stat: SegmentStat, count: int, sampler: DurationSampler
) -> ReferencePopulation:
    """Draw ``count`` independent samples of one segment."""

    return ReferencePopulation(sampler.sample_many(stat, count))


def build_total_population(
    stats: Sequence[SegmentStat], count: int, sampler: DurationSampler
) -> ReferencePopulation:
    """Per-trial sums of one independent draw per segment.

    The total is approximated by summing fresh samples trial by trial rather
    than convolving the segment distributions.
    """

    if count <= 0 or not stats:
        return ReferencePopulation(np.empty(0, dtype=float))
    totals = np.zeros(count, dtype=float)
    for stat in stats:
        totals += sampler.sample_many(stat, count)
    return ReferencePopulation(totals)


@dataclass(frozen=True, slots=True)
class PopulationSet:
    """Reference populations for the total and for each segment."""

    total: ReferencePopulation
    segments: tuple[ReferencePopulation, ...]

    def for_axis(self, axis: str | int) -> ReferencePopulation:
        if axis == "total":
            return self.total
        if isinstance(axis, int) and 0 <= axis < len(self.segments):
            return self.segments[axis]
        raise KeyError(axis)

    @classmethod
    def build(
        cls,
        config: JourneyConfig,
        sampler: DurationSampler,
        *,
        size: int | None = None,
    ) -> "PopulationSet":
        count = config.population_size if size is None else int(size)
        started = time.perf_counter()
        segments = tuple(build_population(stat, count, sampler) for stat in config.segments)
        total = build_total_population(config.segments, count, sampler)
        logger.debug(
            "Built reference populations",
            extra={
                "event": "population.built",
                "size": count,
                "segments": len(segments),
                "elapsed_ms": round((time.perf_counter() - started) * 1000.0, 3),
            },
        )
        return cls(total=total, segments=segments)
