"""Structured logging configuration shared by the CLI and library users."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Mapping
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, TextIO

__all__ = ["JsonFormatter", "setup_logging", "HANDLER_NAME"]

HANDLER_NAME = "journey_sim"

_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Attributes present on every LogRecord; anything else came in through ``extra``.
_RESERVED_ATTRIBUTES = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime"}


def _jsonable(value: Any) -> Any:
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if isinstance(value, Mapping):
        return {str(key): _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_jsonable(item) for item in value]
    return str(value)


class JsonFormatter(logging.Formatter):
    """Render each record as a single JSON object including ``extra`` fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key in _RESERVED_ATTRIBUTES or key.startswith("_"):
                continue
            payload[key] = _jsonable(value)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, sort_keys=False)


def _resolve_level(value: Any) -> int:
    if isinstance(value, int):
        return value
    name = str(value or "info").strip().upper()
    if name == "WARN":
        name = "WARNING"
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        raise ValueError(f"Unknown logging level: {value!r}")
    return level


def _build_handler(output: str) -> logging.Handler:
    target = (output or "stderr").strip()
    lowered = target.lower()
    if lowered == "stdout":
        stream: TextIO = sys.stdout
        return logging.StreamHandler(stream)
    if lowered == "stderr":
        return logging.StreamHandler(sys.stderr)
    path = Path(target).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(path, encoding="utf-8")


def setup_logging(config: Mapping[str, Any] | None = None) -> logging.Logger:
    """Configure the ``journey_core``/``journey_sim`` loggers.

    ``config`` is the CLI configuration mapping; its ``logging`` table may set
    ``level``, ``output`` (``stdout``, ``stderr`` or a file path) and
    ``format`` (``json`` or ``text``).  Calling the function again replaces the
    handler installed previously.
    """

    section = dict((config or {}).get("logging", {}) or {})
    level = _resolve_level(section.get("level", "info"))
    fmt = str(section.get("format", "json")).strip().lower()
    if fmt not in {"json", "text"}:
        raise ValueError(f"Unknown logging format: {fmt!r}")

    handler = _build_handler(str(section.get("output", "stderr")))
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(JsonFormatter() if fmt == "json" else logging.Formatter(_TEXT_FORMAT))

    root = logging.getLogger("journey_sim")
    for name in ("journey_sim", "journey_core"):
        target = logging.getLogger(name)
        for existing in list(target.handlers):
            if existing.get_name() == HANDLER_NAME:
                target.removeHandler(existing)
                existing.close()
        target.addHandler(handler)
        target.setLevel(level)
        target.propagate = False
    return root
