"""Configuration discovery for the journey command line."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

try:  # Python 3.11+
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover - Python < 3.11 fallback
    import tomli as tomllib  # type: ignore

from journey_core.config import JourneyConfig, load_journey_config
from journey_core.errors import ConfigurationError

from .errors import CliError

CONFIG_ENV_VAR = "JOURNEY_SIM_CONFIG"
PROJECT_CONFIG_FILENAME = "pyproject.toml"
PROJECT_TABLE = ("tool", "journey_sim")


def _iter_unique_paths(candidates: List[Path]) -> List[Path]:
    seen: Dict[Path, None] = {}
    ordered: List[Path] = []
    for candidate in candidates:
        resolved = candidate.expanduser().resolve(strict=False)
        if resolved in seen:
            continue
        seen[resolved] = None
        ordered.append(resolved)
    return ordered


def _pyproject_candidates(base: Path) -> List[Path]:
    base = base.expanduser()
    if base.name == PROJECT_CONFIG_FILENAME:
        return [base]
    if base.suffix:
        return []
    return [base / PROJECT_CONFIG_FILENAME]


def read_project_table(pyproject: Path) -> Optional[Dict[str, Any]]:
    """Return the ``[tool.journey_sim]`` table of ``pyproject``, if it has one.

    Nested tables such as ``[tool.journey_sim.logging]`` come back as plain
    dictionaries so callers may mutate them.
    """

    if not pyproject.is_file():
        return None
    with pyproject.open("rb") as handle:
        table: Any = tomllib.load(handle)
    for key in PROJECT_TABLE:
        if not isinstance(table, Mapping):
            return None
        table = table.get(key)
    if not isinstance(table, Mapping):
        return None
    return {
        str(key): dict(value) if isinstance(value, Mapping) else value
        for key, value in table.items()
    }


def _normalise_cli_config(payload: Mapping[str, Any], source: Path) -> dict[str, Any]:
    data = {str(key): value for key, value in payload.items()}
    journey_path = data.get("config")
    if isinstance(journey_path, str) and journey_path:
        candidate = Path(journey_path).expanduser()
        if not candidate.is_absolute():
            candidate = source.parent / candidate
        data["config"] = str(candidate)
    data["_config_path"] = str(source.expanduser().resolve())
    return data


def load_cli_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load CLI defaults from the ``[tool.journey_sim]`` table of ``pyproject.toml``.

    An explicit ``path`` wins, then ``$JOURNEY_SIM_CONFIG``, then the current
    working directory.
    """

    bases: List[Path] = []
    if path is not None:
        bases.append(path)
    env_config = os.environ.get(CONFIG_ENV_VAR)
    if env_config:
        bases.append(Path(env_config))
    bases.append(Path.cwd())

    for base in bases:
        for candidate in _iter_unique_paths(_pyproject_candidates(base)):
            payload = read_project_table(candidate)
            if payload is None:
                continue
            return _normalise_cli_config(payload, candidate)

    return {"_config_path": None}


def resolve_journey_config(
    explicit: Optional[Path], config: Mapping[str, Any]
) -> JourneyConfig:
    """Load the journey YAML named on the command line or in the project config."""

    target = explicit if explicit is not None else config.get("config")
    try:
        return load_journey_config(target)
    except FileNotFoundError as exc:
        raise CliError(
            f"Journey configuration not found: {exc}",
            category="not_found",
            context={"path": target},
        ) from exc
    except ConfigurationError as exc:
        raise CliError(
            f"Invalid journey configuration: {exc}",
            category="usage",
            context={"path": target},
        ) from exc


__all__ = [
    "CONFIG_ENV_VAR",
    "load_cli_config",
    "read_project_table",
    "resolve_journey_config",
]
