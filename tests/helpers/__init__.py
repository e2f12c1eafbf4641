"""Convenience re-exports for test helpers."""

from __future__ import annotations

from .cli import write_journey_yaml, write_pyproject
from .journey import (
    LaggingClock,
    ScriptedSampler,
    build_journey_mapping,
    build_machine,
    build_run,
)

__all__ = [
    "LaggingClock",
    "ScriptedSampler",
    "build_journey_mapping",
    "build_machine",
    "build_run",
    "write_journey_yaml",
    "write_pyproject",
]
