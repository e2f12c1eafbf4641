"""Ordered rating levels used to qualify journey durations."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "RatingLevel",
    "Rating",
    "RATING_LEVELS",
    "LEVEL_COUNT",
    "BEST_LEVEL",
    "WORST_LEVEL",
    "rating_level",
]


@dataclass(frozen=True, slots=True)
class RatingLevel:
    """A single qualitative bucket, ``index`` 0 being the best."""

    index: int
    stars: str
    label: str

    def __str__(self) -> str:
        return f"{self.stars} {self.label}"


@dataclass(frozen=True, slots=True)
class Rating:
    """Classification outcome for one axis of a journey."""

    level: RatingLevel
    percentile: float | None = None
    description: str | None = None

    @property
    def stars(self) -> str:
        return self.level.stars

    @property
    def label(self) -> str:
        return self.level.label


RATING_LEVELS: tuple[RatingLevel, ...] = (
    RatingLevel(0, "⭐⭐⭐⭐⭐", "Lightning Fast"),
    RatingLevel(1, "⭐⭐⭐⭐", "Fast"),
    RatingLevel(2, "⭐⭐⭐", "Average"),
    RatingLevel(3, "⭐⭐", "Slow"),
    RatingLevel(4, "⭐", "Very Slow"),
)

LEVEL_COUNT = len(RATING_LEVELS)
BEST_LEVEL = RATING_LEVELS[0]
WORST_LEVEL = RATING_LEVELS[-1]


def rating_level(index: int) -> RatingLevel:
    """Return the level at ``index`` (0 best, 4 worst)."""

    if not 0 <= index < LEVEL_COUNT:
        raise IndexError(f"Rating level index {index} outside 0..{LEVEL_COUNT - 1}")
    return RATING_LEVELS[index]
