"""Command line application entry point for the journey simulator."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from ..logging.config import setup_logging
from .errors import CliError, log_cli_error
from .io import load_cli_config
from .parser import build_parser


def run_cli(args: Optional[Sequence[str]] = None) -> str:
    """Execute the journey command line and return its printed output."""

    config_parser = argparse.ArgumentParser(add_help=False)
    config_parser.add_argument("--config", dest="config_path", type=Path, default=None)
    config_parser.add_argument("--log-level", dest="log_level", default=None)
    config_parser.add_argument("--log-output", dest="log_output", default=None)
    config_parser.add_argument(
        "--log-format", dest="log_format", choices=("json", "text"), default=None
    )
    preliminary, remaining = config_parser.parse_known_args(args)

    config = load_cli_config(preliminary.config_path)
    logging_config = dict(config.get("logging", {}) or {})
    if preliminary.log_level is not None:
        logging_config["level"] = preliminary.log_level
    if preliminary.log_output is not None:
        logging_config["output"] = preliminary.log_output
    if preliminary.log_format is not None:
        logging_config["format"] = preliminary.log_format
    logging_config.setdefault("level", "warning")
    logging_config.setdefault("output", "stderr")
    logging_config.setdefault("format", "json")
    config["logging"] = logging_config
    try:
        setup_logging(config)
    except ValueError as exc:
        error = CliError(str(exc), category="usage", context={"logging": logging_config})
        sys.stdout.write(error.payload.message + "\n")
        raise SystemExit(error.status_code) from exc

    parser = build_parser(config)
    namespace = parser.parse_args(list(remaining), namespace=preliminary)
    namespace.config = config

    try:
        result = namespace.handler(namespace, config=config)
    except CliError as exc:
        if not exc.logged:
            log_cli_error(exc.payload, exc_info=exc)
            exc.logged = True
        sys.stdout.write(exc.payload.message + "\n")
        raise SystemExit(exc.status_code) from exc
    if result:
        sys.stdout.write(result)
        if not result.endswith("\n"):
            sys.stdout.write("\n")
    return result


def main() -> None:  # pragma: no cover - thin wrapper
    run_cli()


if __name__ == "__main__":  # pragma: no cover - CLI invocation guard
    main()
