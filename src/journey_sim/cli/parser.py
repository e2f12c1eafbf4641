"""Argument parsing for the journey command line."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Mapping, Optional

from journey_core.classification import STRATEGIES

from ..machine import TimingMode
from .workflows import (
    default_strategy,
    default_timing,
    handle_rate,
    handle_run,
    handle_thresholds,
)


def _add_journey_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--journey",
        dest="journey_config",
        type=Path,
        default=None,
        help="Journey YAML file (default: [tool.journey_sim].config or the bundled journey).",
    )


def _add_strategy_arguments(parser: argparse.ArgumentParser, config: Mapping[str, Any]) -> None:
    parser.add_argument(
        "--strategy",
        choices=STRATEGIES,
        default=default_strategy(config),
        help="Rating strategy: fixed thresholds or percentile against simulated runs.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the random duration generator.",
    )
    parser.add_argument(
        "--format",
        choices=("text", "json"),
        default="text",
        help="Output format of the results.",
    )


def build_parser(config: Optional[Mapping[str, Any]] = None) -> argparse.ArgumentParser:
    config = dict(config or {})
    logging_cfg = dict(config.get("logging", {}) or {})

    parser = argparse.ArgumentParser(
        prog="journey-sim",
        description="Animate a simulated multi-leg journey and rate its timing.",
    )
    parser.add_argument(
        "--config",
        dest="config_path",
        type=Path,
        default=None,
        help="Path to the pyproject.toml holding [tool.journey_sim].",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        default=logging_cfg.get("level", "warning"),
        help="Logging level (e.g. debug, info, warning).",
    )
    parser.add_argument(
        "--log-output",
        dest="log_output",
        default=logging_cfg.get("output", "stderr"),
        help="Logging destination (stdout, stderr or a file path).",
    )
    parser.add_argument(
        "--log-format",
        dest="log_format",
        choices=("json", "text"),
        default=logging_cfg.get("format", "json"),
        help="Logging formatter (json or text).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Animate one journey and rate it.")
    _add_journey_argument(run_parser)
    _add_strategy_arguments(run_parser, config)
    run_parser.add_argument(
        "--timing",
        choices=tuple(mode.value for mode in TimingMode),
        default=default_timing(config),
        help="Record generated durations or wall-clock measurements.",
    )
    run_parser.add_argument(
        "--speed",
        type=float,
        default=1.0,
        help="Time scale of the animation (2 plays twice as fast).",
    )
    run_parser.add_argument(
        "--quiet",
        action="store_true",
        help="Skip the live animation and print only the results.",
    )
    run_parser.set_defaults(handler=handle_run)

    rate_parser = subparsers.add_parser(
        "rate", help="Rate given segment times without animating."
    )
    _add_journey_argument(rate_parser)
    _add_strategy_arguments(rate_parser, config)
    rate_parser.add_argument(
        "--segment",
        dest="segments",
        type=float,
        action="append",
        required=True,
        help="Segment time in seconds; repeat once per segment in order.",
    )
    rate_parser.add_argument(
        "--total",
        type=float,
        default=None,
        help="Total time in seconds (default: sum of the segments).",
    )
    rate_parser.set_defaults(handler=handle_rate)

    thresholds_parser = subparsers.add_parser(
        "thresholds", help="Show the configured rating thresholds."
    )
    _add_journey_argument(thresholds_parser)
    thresholds_parser.set_defaults(handler=handle_thresholds)

    return parser


__all__ = ["build_parser"]
