"""Exception hierarchy shared by the journey engine and its runtime."""

from __future__ import annotations

__all__ = ["JourneyError", "ConfigurationError", "MissingSinkElementError"]


class JourneyError(Exception):
    """Base class for failures raised by the journey packages."""


class ConfigurationError(JourneyError, ValueError):
    """Raised when journey configuration fails validation."""


class MissingSinkElementError(JourneyError, LookupError):
    """Raised by a presentation sink when a required element is absent."""

    __slots__ = ("element",)

    def __init__(self, element: str, message: str | None = None) -> None:
        super().__init__(message or f"Presentation element '{element}' is not available")
        self.element = element
