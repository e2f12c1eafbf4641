"""Format and publish the results of a completed journey."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Mapping

from journey_core.classification import TOTAL_AXIS, Classifier
from journey_core.ratings import Rating

from .sink import Emphasis, PresentationSink, RatingBlock, results_elements

if TYPE_CHECKING:  # pragma: no cover
    from .machine import JourneyRun

__all__ = ["SegmentReport", "JourneyReport", "ResultsPresenter", "format_seconds"]


def format_seconds(duration_ms: float) -> str:
    """Render milliseconds as seconds with three decimals, e.g. ``4.900s``."""

    return f"{duration_ms / 1000.0:.3f}s"


def _rating_payload(rating: Rating) -> dict[str, Any]:
    return {
        "level": rating.level.index,
        "stars": rating.stars,
        "label": rating.label,
        "percentile": rating.percentile,
        "description": rating.description,
    }


@dataclass(frozen=True, slots=True)
class SegmentReport:
    index: int
    duration_ms: float
    time_text: str
    rating: Rating


@dataclass(frozen=True, slots=True)
class JourneyReport:
    """Formatted outcome of a journey as published to the sink."""

    strategy: str
    total_ms: float
    total_text: str
    total_rating: Rating
    segments: tuple[SegmentReport, ...]

    def as_dict(self) -> Mapping[str, Any]:
        return {
            "strategy": self.strategy,
            "total_ms": self.total_ms,
            "total": self.total_text,
            "rating": _rating_payload(self.total_rating),
            "segments": [
                {
                    "index": segment.index,
                    "duration_ms": segment.duration_ms,
                    "time": segment.time_text,
                    "rating": _rating_payload(segment.rating),
                }
                for segment in self.segments
            ],
        }


class ResultsPresenter:
    """Classify a finished run and write the results panel.

    The presenter holds no state between calls: presenting the same run twice
    yields the same report and the same sink writes.  A missing results
    element raises :class:`~journey_core.errors.MissingSinkElementError`
    before anything is written.
    """

    __slots__ = ("_classifier", "_sink")

    def __init__(self, classifier: Classifier, sink: PresentationSink) -> None:
        self._classifier = classifier
        self._sink = sink

    @property
    def classifier(self) -> Classifier:
        return self._classifier

    def build_report(self, run: "JourneyRun") -> JourneyReport:
        total_ms = run.total_ms
        segments = tuple(
            SegmentReport(
                index=index,
                duration_ms=duration,
                time_text=format_seconds(duration),
                rating=self._classifier.classify(duration, index),
            )
            for index, duration in enumerate(run.segment_durations)
        )
        return JourneyReport(
            strategy=getattr(self._classifier, "name", type(self._classifier).__name__),
            total_ms=total_ms,
            total_text=format_seconds(total_ms),
            total_rating=self._classifier.classify(total_ms, TOTAL_AXIS),
            segments=segments,
        )

    def present(self, run: "JourneyRun") -> JourneyReport:
        report = self.build_report(run)
        self._sink.require_elements(results_elements(len(report.segments)))
        self._sink.set_total_time(report.total_text)
        self._sink.set_primary_rating(
            RatingBlock.from_rating(report.total_rating, Emphasis.PRIMARY)
        )
        for segment in report.segments:
            self._sink.set_segment_result(
                segment.index,
                segment.time_text,
                RatingBlock.from_rating(segment.rating, Emphasis.SECONDARY),
            )
        self._sink.set_results_visible(True)
        return report
