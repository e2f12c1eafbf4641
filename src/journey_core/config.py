"""Immutable journey configuration and its YAML loader.

The configuration captures everything the engine needs before a run starts:
the per-segment duration statistics, the threshold tables used by the fixed
rating strategy and a handful of runtime knobs.  All validation happens in
:meth:`JourneyConfig.from_mapping` so that an invalid document fails before
any journey is animated.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping as MappingABC, Sequence
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Any, Mapping

import yaml

from .errors import ConfigurationError
from .ratings import LEVEL_COUNT

__all__ = [
    "SegmentStat",
    "ThresholdTable",
    "JourneyConfig",
    "DEFAULT_FLOOR_MS",
    "DEFAULT_POPULATION_SIZE",
    "DEFAULT_FRAME_INTERVAL_MS",
    "load_journey_config",
    "default_journey_config",
]


DEFAULT_FLOOR_MS = 100.0
DEFAULT_POPULATION_SIZE = 10_000
DEFAULT_FRAME_INTERVAL_MS = 16.0

_RESOURCE_PACKAGE = "journey_core.resources"
_RESOURCE_NAME = "journey.yaml"


def _finite(value: Any, name: str) -> float:
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be numeric, got {value!r}") from None
    if not math.isfinite(numeric):
        raise ConfigurationError(f"{name} must be finite, got {value!r}")
    return numeric


@dataclass(frozen=True, slots=True)
class SegmentStat:
    """Mean and standard deviation (milliseconds) of one journey leg."""

    mean: float
    std_dev: float

    def __post_init__(self) -> None:
        mean = _finite(self.mean, "mean")
        std_dev = _finite(self.std_dev, "std_dev")
        if mean <= 0:
            raise ConfigurationError(f"Segment mean must be positive, got {mean}")
        if std_dev < 0:
            raise ConfigurationError(
                f"Segment standard deviation must not be negative, got {std_dev}"
            )
        object.__setattr__(self, "mean", mean)
        object.__setattr__(self, "std_dev", std_dev)


def _cutoffs(values: Any, name: str) -> tuple[float, ...]:
    if isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
        raise ConfigurationError(f"{name} must be a sequence of cutoffs")
    cutoffs = tuple(_finite(value, name) for value in values)
    if not cutoffs:
        raise ConfigurationError(f"{name} must not be empty")
    if len(cutoffs) != LEVEL_COUNT - 1:
        raise ConfigurationError(
            f"{name} must define {LEVEL_COUNT - 1} cutoffs, got {len(cutoffs)}"
        )
    for previous, current in zip(cutoffs, cutoffs[1:]):
        if current < previous:
            raise ConfigurationError(f"{name} cutoffs must be ascending: {list(cutoffs)}")
    return cutoffs


@dataclass(frozen=True, slots=True)
class ThresholdTable:
    """Ascending cutoffs in seconds for the total and for every segment."""

    total: tuple[float, ...]
    segments: tuple[tuple[float, ...], ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "total", _cutoffs(self.total, "thresholds.total"))
        object.__setattr__(
            self,
            "segments",
            tuple(
                _cutoffs(table, f"thresholds.segments[{index}]")
                for index, table in enumerate(self.segments)
            ),
        )

    def for_axis(self, axis: str | int) -> tuple[float, ...]:
        if axis == "total":
            return self.total
        if isinstance(axis, int) and 0 <= axis < len(self.segments):
            return self.segments[axis]
        raise KeyError(axis)


@dataclass(frozen=True, slots=True)
class JourneyConfig:
    """Validated configuration for a multi-leg journey."""

    segments: tuple[SegmentStat, ...]
    thresholds: ThresholdTable
    waypoints: tuple[str, ...] = ()
    floor_ms: float = DEFAULT_FLOOR_MS
    population_size: int = DEFAULT_POPULATION_SIZE
    frame_interval_ms: float = DEFAULT_FRAME_INTERVAL_MS
    source: str | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not self.segments:
            raise ConfigurationError("At least one segment must be configured")
        count = len(self.segments)
        if len(self.thresholds.segments) != count:
            raise ConfigurationError(
                f"Expected {count} segment threshold tables, "
                f"got {len(self.thresholds.segments)}"
            )
        waypoints = tuple(str(name) for name in self.waypoints) or tuple(
            ["Start", *(f"Waypoint {index}" for index in range(1, count)), "End"]
        )
        if len(waypoints) != count + 1:
            raise ConfigurationError(
                f"Expected {count + 1} waypoints for {count} segments, got {len(waypoints)}"
            )
        object.__setattr__(self, "waypoints", waypoints)
        floor_ms = _finite(self.floor_ms, "floor_ms")
        if floor_ms <= 0:
            raise ConfigurationError(f"floor_ms must be positive, got {floor_ms}")
        object.__setattr__(self, "floor_ms", floor_ms)
        try:
            population_size = int(self.population_size)
        except (TypeError, ValueError):
            raise ConfigurationError(
                f"population_size must be an integer, got {self.population_size!r}"
            ) from None
        if population_size < 0:
            raise ConfigurationError("population_size must not be negative")
        object.__setattr__(self, "population_size", population_size)
        frame_interval = _finite(self.frame_interval_ms, "frame_interval_ms")
        if frame_interval <= 0:
            raise ConfigurationError("frame_interval_ms must be positive")
        object.__setattr__(self, "frame_interval_ms", frame_interval)

    @property
    def segment_count(self) -> int:
        return len(self.segments)

    def segment_label(self, index: int) -> str:
        """Return the ``"A → B"`` label of segment ``index``."""

        return f"{self.waypoints[index]} → {self.waypoints[index + 1]}"

    @classmethod
    def from_mapping(
        cls, payload: Mapping[str, Any], *, source: str | None = None
    ) -> "JourneyConfig":
        """Build a configuration from a decoded YAML/TOML mapping."""

        if not isinstance(payload, MappingABC):
            raise ConfigurationError("Journey configuration must be a mapping")
        segments_raw = payload.get("segments")
        if not isinstance(segments_raw, Sequence) or isinstance(segments_raw, (str, bytes)):
            raise ConfigurationError("'segments' must be a list of {mean, std_dev} entries")
        segments: list[SegmentStat] = []
        for index, entry in enumerate(segments_raw):
            if not isinstance(entry, MappingABC):
                raise ConfigurationError(f"segments[{index}] must be a mapping")
            if "mean" not in entry:
                raise ConfigurationError(f"segments[{index}] is missing 'mean'")
            std_dev = entry.get("std_dev", entry.get("stddev", 0.0))
            segments.append(SegmentStat(entry["mean"], std_dev))

        thresholds_raw = payload.get("thresholds")
        if not isinstance(thresholds_raw, MappingABC):
            raise ConfigurationError("'thresholds' must be a mapping with total/segments")
        segment_tables = thresholds_raw.get("segments")
        if not isinstance(segment_tables, Sequence) or isinstance(segment_tables, (str, bytes)):
            raise ConfigurationError("'thresholds.segments' must be a list of tables")
        thresholds = ThresholdTable(
            total=thresholds_raw.get("total", ()),
            segments=tuple(segment_tables),
        )

        waypoints_raw = payload.get("waypoints") or ()
        if isinstance(waypoints_raw, str):
            raise ConfigurationError("'waypoints' must be a list of names")

        return cls(
            segments=tuple(segments),
            thresholds=thresholds,
            waypoints=tuple(waypoints_raw),
            floor_ms=payload.get("floor_ms", DEFAULT_FLOOR_MS),
            population_size=payload.get("population_size", DEFAULT_POPULATION_SIZE),
            frame_interval_ms=payload.get("frame_interval_ms", DEFAULT_FRAME_INTERVAL_MS),
            source=source,
        )


def load_journey_config(
    path: str | Path | None = None,
    *,
    search_paths: Iterable[str | Path] | None = None,
) -> JourneyConfig:
    """Load and validate the journey configuration.

    Parameters
    ----------
    path:
        YAML file to read directly. A missing file raises
        :class:`FileNotFoundError`.
    search_paths:
        Optional directories or files inspected in order. Directories resolve
        against ``journey.yaml``; the first existing file wins.

    When nothing is found the packaged default is used.
    """

    if path is not None:
        candidate = Path(path).expanduser()
        if not candidate.is_file():
            raise FileNotFoundError(candidate)
        return _load_from_text(candidate.read_text(encoding="utf-8"), source=str(candidate))

    for entry in search_paths or ():
        entry_path = Path(entry).expanduser()
        if entry_path.is_dir():
            entry_path = entry_path / _RESOURCE_NAME
        if entry_path.is_file():
            return _load_from_text(entry_path.read_text(encoding="utf-8"), source=str(entry_path))

    return default_journey_config()


def default_journey_config() -> JourneyConfig:
    """Return the configuration bundled with the package."""

    resource = resources.files(_RESOURCE_PACKAGE).joinpath(_RESOURCE_NAME)
    return _load_from_text(resource.read_text(encoding="utf-8"), source=str(resource))


def _load_from_text(payload: str, *, source: str) -> JourneyConfig:
    try:
        data = yaml.safe_load(payload)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in journey configuration: {source}") from exc
    if data is None:
        raise ConfigurationError(f"Journey configuration in {source} is empty")
    if not isinstance(data, MappingABC):
        raise ConfigurationError(f"Journey configuration in {source} must decode to a mapping")
    return JourneyConfig.from_mapping(data, source=source)
