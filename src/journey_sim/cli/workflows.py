"""Command handlers for the journey command line."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any, Mapping, Optional

from journey_core.classification import STRATEGIES, build_classifier
from journey_core.config import JourneyConfig
from journey_core.errors import ConfigurationError
from journey_core.ratings import RATING_LEVELS
from journey_core.sampling import DurationSampler, NumpyUniformSource

from ..machine import JourneyRun, TimingMode, run_journey
from ..presenter import JourneyReport, ResultsPresenter
from ..sink import ConsoleSink, RecordingSink
from .errors import CliError
from .io import resolve_journey_config

__all__ = [
    "render_report",
    "handle_run",
    "handle_rate",
    "handle_thresholds",
    "default_strategy",
    "default_timing",
]


def default_strategy(config: Mapping[str, Any]) -> str:
    value = str(config.get("strategy", "threshold")).strip().lower()
    return value if value in STRATEGIES else "threshold"


def default_timing(config: Mapping[str, Any]) -> str:
    value = str(config.get("timing", TimingMode.GENERATED.value)).strip().lower()
    try:
        return TimingMode(value).value
    except ValueError:
        return TimingMode.GENERATED.value


def _resolve_seed(namespace: argparse.Namespace, config: Mapping[str, Any]) -> Optional[int]:
    seed = getattr(namespace, "seed", None)
    if seed is None:
        seed = config.get("seed")
    if seed is None:
        return None
    try:
        return int(seed)
    except (TypeError, ValueError):
        raise CliError(
            f"Seed must be an integer, got {seed!r}", category="usage", context={"seed": seed}
        ) from None


def _build_presenter(
    strategy: str, journey: JourneyConfig, sampler: DurationSampler, sink: Any
) -> ResultsPresenter:
    try:
        classifier = build_classifier(strategy, journey, sampler)
    except ConfigurationError as exc:
        raise CliError(str(exc), category="usage", context={"strategy": strategy}) from exc
    return ResultsPresenter(classifier, sink)


def render_report(report: JourneyReport, journey: JourneyConfig, fmt: str = "text") -> str:
    """Render ``report`` as plain text or JSON."""

    if fmt == "json":
        payload = dict(report.as_dict())
        for entry in payload["segments"]:
            entry["label"] = journey.segment_label(entry["index"])
        return json.dumps(payload, ensure_ascii=False, indent=2)

    def _rating_text(rating: Any) -> str:
        text = f"{rating.stars} {rating.label}"
        if rating.description:
            text = f"{text} ({rating.description})"
        return text

    lines = [f"Total time: {report.total_text}  {_rating_text(report.total_rating)}"]
    for segment in report.segments:
        lines.append(
            f"  {journey.segment_label(segment.index)}: {segment.time_text}  "
            f"{_rating_text(segment.rating)}"
        )
    return "\n".join(lines)


def handle_run(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    journey = resolve_journey_config(namespace.journey_config, config)
    seed = _resolve_seed(namespace, config)
    sampler = DurationSampler(NumpyUniformSource(seed), floor_ms=journey.floor_ms)
    if namespace.speed <= 0:
        raise CliError("--speed must be positive", category="usage", context={"speed": namespace.speed})

    if namespace.format == "json" or namespace.quiet:
        sink: Any = RecordingSink(journey.segment_count + 1)
    else:
        sink = ConsoleSink(journey.waypoints, sys.stderr, panel=False)
    presenter = _build_presenter(namespace.strategy, journey, sampler, sink)

    outcome = asyncio.run(
        run_journey(
            journey,
            sampler,
            sink,
            presenter,
            timing=namespace.timing,
            time_scale=namespace.speed,
        )
    )
    if outcome.error is not None or outcome.report is None:
        raise CliError(
            f"Journey results could not be presented: {outcome.error}",
            category="runtime",
        )
    return render_report(outcome.report, journey, namespace.format)


def handle_rate(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    journey = resolve_journey_config(namespace.journey_config, config)
    segments = list(namespace.segments or [])
    if len(segments) != journey.segment_count:
        raise CliError(
            f"Expected {journey.segment_count} segment times, got {len(segments)}",
            category="usage",
            context={"segments": len(segments)},
        )
    if any(value <= 0 for value in segments):
        raise CliError("Segment times must be positive", category="usage")
    if namespace.total is not None and namespace.total <= 0:
        raise CliError("Total time must be positive", category="usage")

    run = JourneyRun(segment_count=journey.segment_count)
    run.segment_durations.extend(value * 1000.0 for value in segments)
    total = namespace.total if namespace.total is not None else sum(segments)
    run.total_ms = total * 1000.0

    seed = _resolve_seed(namespace, config)
    sampler = DurationSampler(NumpyUniformSource(seed), floor_ms=journey.floor_ms)
    presenter = _build_presenter(
        namespace.strategy, journey, sampler, RecordingSink(journey.segment_count + 1)
    )
    return render_report(presenter.present(run), journey, namespace.format)


def handle_thresholds(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    journey = resolve_journey_config(namespace.journey_config, config)
    header = "Axis".ljust(24) + "".join(level.label.rjust(16) for level in RATING_LEVELS[:-1])

    def _row(label: str, cutoffs: tuple[float, ...]) -> str:
        return label.ljust(24) + "".join(f"≤{value:.3f}s".rjust(16) for value in cutoffs)

    lines = [header, _row("Total", journey.thresholds.total)]
    for index, cutoffs in enumerate(journey.thresholds.segments):
        lines.append(_row(journey.segment_label(index), cutoffs))
    lines.append("")
    lines.extend(str(level) for level in RATING_LEVELS)
    return "\n".join(lines)
