"""Randomised segment durations drawn with the Box–Muller transform."""

from __future__ import annotations

import math
from collections.abc import Iterable
from typing import Protocol, runtime_checkable

import numpy as np

from .config import DEFAULT_FLOOR_MS, SegmentStat

__all__ = [
    "UniformSource",
    "NumpyUniformSource",
    "SequenceUniformSource",
    "DurationSampler",
]


@runtime_checkable
class UniformSource(Protocol):
    """Source of independent uniform draws in the half-open interval (0, 1]."""

    def uniform(self) -> float: ...


class NumpyUniformSource:
    """Uniform draws backed by :func:`numpy.random.default_rng`."""

    __slots__ = ("_rng",)

    def __init__(self, seed: int | None = None) -> None:
        self._rng = np.random.default_rng(seed)

    def uniform(self) -> float:
        # Generator.random() is [0, 1); flipping it excludes zero.
        return 1.0 - float(self._rng.random())

    def uniform_array(self, count: int) -> np.ndarray:
        return 1.0 - self._rng.random(count)


class SequenceUniformSource:
    """Replay a fixed sequence of uniforms, used for deterministic runs."""

    __slots__ = ("_values", "_position")

    def __init__(self, values: Iterable[float]) -> None:
        self._values = tuple(float(value) for value in values)
        for value in self._values:
            if not 0.0 < value <= 1.0:
                raise ValueError(f"Uniform draws must lie in (0, 1], got {value}")
        self._position = 0

    @property
    def remaining(self) -> int:
        return len(self._values) - self._position

    def uniform(self) -> float:
        if self._position >= len(self._values):
            raise RuntimeError("Uniform sequence exhausted")
        value = self._values[self._position]
        self._position += 1
        return value


def standard_normal(u1: float, u2: float) -> float:
    """Box–Muller deviate for two uniforms with ``u1`` in (0, 1]."""

    return math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)


class DurationSampler:
    """Draw non-negative segment durations in milliseconds.

    Every call consumes two uniforms from ``source``. Results are clamped to
    ``floor_ms`` so that a large negative deviate never yields a degenerate
    segment.
    """

    __slots__ = ("_source", "_floor_ms")

    def __init__(
        self,
        source: UniformSource | None = None,
        *,
        floor_ms: float = DEFAULT_FLOOR_MS,
    ) -> None:
        self._source = source if source is not None else NumpyUniformSource()
        self._floor_ms = float(floor_ms)

    @property
    def floor_ms(self) -> float:
        return self._floor_ms

    @property
    def source(self) -> UniformSource:
        return self._source

    def sample(self, stat: SegmentStat) -> float:
        u1 = self._source.uniform()
        u2 = self._source.uniform()
        z = standard_normal(u1, u2)
        return max(self._floor_ms, stat.mean + z * stat.std_dev)

    def sample_many(self, stat: SegmentStat, count: int) -> np.ndarray:
        """Return ``count`` independent samples as a float array."""

        if count <= 0:
            return np.empty(0, dtype=float)
        uniform_array = getattr(self._source, "uniform_array", None)
        if uniform_array is None:
            return np.fromiter(
                (self.sample(stat) for _ in range(count)), dtype=float, count=count
            )
        u1 = uniform_array(count)
        u2 = uniform_array(count)
        z = np.sqrt(-2.0 * np.log(u1)) * np.cos(2.0 * np.pi * u2)
        return np.maximum(self._floor_ms, stat.mean + z * stat.std_dev)
