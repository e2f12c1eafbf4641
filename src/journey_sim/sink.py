"""Presentation sinks receiving progress and result updates.

Element names follow the layout of the journey page: ``region[i]`` for the
waypoints, ``progress[i]`` for the segment bars, ``current_time`` and
``timer`` for the live timer, ``start_control`` for the start button and
``results``, ``total_time``, ``primary_rating``, ``segment_time[i]`` and
``segment_rating[i]`` for the results panel.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Protocol, TextIO, runtime_checkable

from journey_core.errors import MissingSinkElementError
from journey_core.ratings import Rating

__all__ = [
    "RegionState",
    "Emphasis",
    "RatingBlock",
    "PresentationSink",
    "RecordingSink",
    "ConsoleSink",
    "results_elements",
]


def results_elements(segment_count: int) -> tuple[str, ...]:
    """Names of the elements the results panel needs for ``segment_count`` segments."""

    names = ["results", "total_time", "primary_rating"]
    for index in range(segment_count):
        names.extend((f"segment_time[{index}]", f"segment_rating[{index}]"))
    return tuple(names)


class RegionState(str, enum.Enum):
    ACTIVE = "active"
    COMPLETED = "completed"


class Emphasis(str, enum.Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"


@dataclass(frozen=True, slots=True)
class RatingBlock:
    """Stars and label (plus optional description) as shown in the results."""

    stars: str
    label: str
    description: str | None = None
    emphasis: Emphasis = Emphasis.PRIMARY

    @classmethod
    def from_rating(cls, rating: Rating, emphasis: Emphasis) -> "RatingBlock":
        return cls(
            stars=rating.stars,
            label=rating.label,
            description=rating.description,
            emphasis=emphasis,
        )

    def render(self) -> str:
        text = f"{self.stars} {self.label}"
        if self.description:
            text = f"{text} ({self.description})"
        return text


@runtime_checkable
class PresentationSink(Protocol):
    """Capability the runtime writes visual updates to.

    Every method may raise :class:`MissingSinkElementError` when the target
    element is unavailable.
    ``require_elements`` raises it for the first unavailable name without
    writing anything.
    """

    def set_region_state(self, index: int, state: RegionState | None) -> None: ...

    def set_progress(self, index: int, percent: float) -> None: ...

    def set_elapsed(self, text: str) -> None: ...

    def set_timer_visible(self, visible: bool) -> None: ...

    def set_start_enabled(self, enabled: bool) -> None: ...

    def set_results_visible(self, visible: bool) -> None: ...

    def set_total_time(self, text: str) -> None: ...

    def set_primary_rating(self, block: RatingBlock) -> None: ...

    def set_segment_result(self, index: int, time_text: str, block: RatingBlock) -> None: ...

    def require_elements(self, elements: Iterable[str]) -> None: ...


class RecordingSink:
    """In-memory sink keeping the latest state and an ordered event log."""

    def __init__(
        self,
        regions: int = 4,
        *,
        missing: Iterable[str] = (),
    ) -> None:
        self.missing = set(missing)
        self.regions: list[RegionState | None] = [None] * regions
        self.progress: list[float] = [0.0] * max(0, regions - 1)
        self.elapsed = ""
        self.timer_visible = False
        self.start_enabled = True
        self.results_visible = False
        self.total_time: str | None = None
        self.primary_rating: RatingBlock | None = None
        self.segment_results: dict[int, tuple[str, RatingBlock]] = {}
        self.events: list[tuple[str, Any]] = []

    def _require(self, element: str) -> None:
        if element in self.missing:
            raise MissingSinkElementError(element)

    def require_elements(self, elements: Iterable[str]) -> None:
        for element in elements:
            self._require(element)

    def _record(self, name: str, payload: Any) -> None:
        self.events.append((name, payload))

    def set_region_state(self, index: int, state: RegionState | None) -> None:
        self._require(f"region[{index}]")
        self.regions[index] = state
        self._record("region", (index, state))

    def set_progress(self, index: int, percent: float) -> None:
        self._require(f"progress[{index}]")
        self.progress[index] = float(percent)
        self._record("progress", (index, float(percent)))

    def set_elapsed(self, text: str) -> None:
        self._require("current_time")
        self.elapsed = text
        self._record("elapsed", text)

    def set_timer_visible(self, visible: bool) -> None:
        self._require("timer")
        self.timer_visible = visible
        self._record("timer_visible", visible)

    def set_start_enabled(self, enabled: bool) -> None:
        self._require("start_control")
        self.start_enabled = enabled
        self._record("start_enabled", enabled)

    def set_results_visible(self, visible: bool) -> None:
        self._require("results")
        self.results_visible = visible
        self._record("results_visible", visible)

    def set_total_time(self, text: str) -> None:
        self._require("total_time")
        self.total_time = text
        self._record("total_time", text)

    def set_primary_rating(self, block: RatingBlock) -> None:
        self._require("primary_rating")
        self.primary_rating = block
        self._record("primary_rating", block)

    def set_segment_result(self, index: int, time_text: str, block: RatingBlock) -> None:
        self._require(f"segment_time[{index}]")
        self._require(f"segment_rating[{index}]")
        self.segment_results[index] = (time_text, block)
        self._record("segment_result", (index, time_text, block))

    def events_named(self, name: str) -> list[Any]:
        return [payload for event, payload in self.events if event == name]


class ConsoleSink:
    """Render the journey to a text stream.

    With ``live`` enabled the timer and progress bars are redrawn in place on a
    single line; otherwise only waypoint transitions and results are printed.
    ``panel=False`` leaves the results panel to the caller.
    """

    _BAR_WIDTH = 12

    def __init__(
        self,
        waypoints: Iterable[str],
        stream: TextIO,
        *,
        live: bool | None = None,
        panel: bool = True,
    ) -> None:
        self._waypoints = tuple(waypoints)
        self._stream = stream
        self._panel = panel
        if live is None:
            isatty = getattr(stream, "isatty", None)
            live = bool(isatty and isatty())
        self._live = live
        self._progress = [0.0] * max(0, len(self._waypoints) - 1)
        self._elapsed = "0.000s"
        self._timer_visible = False
        self._line_open = False

    def _write_line(self, text: str) -> None:
        if self._line_open:
            self._stream.write("\n")
            self._line_open = False
        self._stream.write(text + "\n")

    def _redraw(self) -> None:
        if not (self._live and self._timer_visible):
            return
        bars = []
        for index, percent in enumerate(self._progress):
            filled = int(round(self._BAR_WIDTH * min(max(percent, 0.0), 100.0) / 100.0))
            bars.append(f"{self._waypoints[index]} [{'#' * filled}{'.' * (self._BAR_WIDTH - filled)}]")
        line = " ".join(bars) + f" {self._waypoints[-1]}  {self._elapsed}"
        self._stream.write("\r" + line)
        self._stream.flush()
        self._line_open = True

    def set_region_state(self, index: int, state: RegionState | None) -> None:
        if state is None:
            return
        name = self._waypoints[index]
        if state is RegionState.ACTIVE:
            self._write_line(f"→ {name}")
        elif index == len(self._waypoints) - 1:
            self._write_line(f"✓ {name}")

    def set_progress(self, index: int, percent: float) -> None:
        self._progress[index] = float(percent)

    def set_elapsed(self, text: str) -> None:
        self._elapsed = text
        self._redraw()

    def set_timer_visible(self, visible: bool) -> None:
        self._timer_visible = visible
        if not visible and self._line_open:
            self._stream.write("\n")
            self._line_open = False

    def set_start_enabled(self, enabled: bool) -> None:
        return None

    def require_elements(self, elements: Iterable[str]) -> None:
        return None

    def set_results_visible(self, visible: bool) -> None:
        if visible:
            self._stream.flush()

    def set_total_time(self, text: str) -> None:
        if self._panel:
            self._write_line(f"Total time: {text}")

    def set_primary_rating(self, block: RatingBlock) -> None:
        if self._panel:
            self._write_line(f"Rating: {block.render()}")

    def set_segment_result(self, index: int, time_text: str, block: RatingBlock) -> None:
        if not self._panel:
            return
        label = f"{self._waypoints[index]} → {self._waypoints[index + 1]}"
        self._write_line(f"  {label}: {time_text}  {block.render()}")
