"""Command line interface for the journey simulator."""

from .app import main, run_cli
from .errors import CliError

__all__ = ["CliError", "main", "run_cli"]
