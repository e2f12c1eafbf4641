"""Error reporting for the journey command line."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

__all__ = ["CliError", "ErrorPayload", "build_error_payload", "log_cli_error"]


_CATEGORY_STATUS_CODES: Mapping[str, int] = {
    "runtime": 1,
    "usage": 2,
    "io": 3,
    "not_found": 4,
}

_DEFAULT_CATEGORY = "runtime"
_LOGGER_NAME = "journey_sim.cli"


@dataclass(frozen=True, slots=True)
class ErrorPayload:
    """Structured description of a failed command."""

    status_code: int
    category: str
    message: str
    context: Mapping[str, Any]

    def as_dict(self) -> Mapping[str, Any]:
        return {
            "status_code": self.status_code,
            "category": self.category,
            "message": self.message,
            "context": dict(self.context),
        }


def _scalar_context(context: Optional[Mapping[str, Any]]) -> dict[str, Any]:
    scalars: dict[str, Any] = {}
    for key, value in (context or {}).items():
        if isinstance(value, (str, int, float, bool)) or value is None:
            scalars[str(key)] = value
        else:
            scalars[str(key)] = str(value)
    return scalars


def build_error_payload(
    message: str,
    *,
    category: str = _DEFAULT_CATEGORY,
    context: Optional[Mapping[str, Any]] = None,
) -> ErrorPayload:
    resolved = category if category in _CATEGORY_STATUS_CODES else _DEFAULT_CATEGORY
    return ErrorPayload(
        status_code=_CATEGORY_STATUS_CODES[resolved],
        category=resolved,
        message=message,
        context=_scalar_context(context),
    )


def log_cli_error(
    payload: ErrorPayload,
    *,
    logger: Optional[logging.Logger] = None,
    exc_info: Optional[BaseException] = None,
) -> None:
    """Emit ``payload`` through ``logger.error`` with its context as extras."""

    target = logger or logging.getLogger(_LOGGER_NAME)
    target.error(
        payload.message,
        extra={
            "event": "cli.error",
            "category": payload.category,
            "status_code": payload.status_code,
            "context": dict(payload.context),
        },
        exc_info=exc_info,
    )


class CliError(RuntimeError):
    """Failure of a CLI command, mapped onto a process exit status."""

    __slots__ = ("payload", "logged")

    def __init__(
        self,
        message: str,
        *,
        category: str = _DEFAULT_CATEGORY,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.payload = build_error_payload(message, category=category, context=context)
        self.logged = False

    @property
    def category(self) -> str:
        return self.payload.category

    @property
    def status_code(self) -> int:
        return self.payload.status_code

    @property
    def context(self) -> Mapping[str, Any]:
        return self.payload.context
