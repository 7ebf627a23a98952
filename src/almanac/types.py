"""Value types for almanac.

Frozen dataclasses that flow between pipeline stages:
  Category → Quantity (one coordinate) / Interval (half-open coordinate range)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from almanac.exceptions import MalformedInputError

__all__ = [
    "Category",
    "Interval",
    "Quantity",
]


class Category(str, Enum):
    """Pipeline stage, declared in pipeline order."""

    SEED = "seed"
    SOIL = "soil"
    FERTILIZER = "fertilizer"
    WATER = "water"
    LIGHT = "light"
    TEMPERATURE = "temperature"
    HUMIDITY = "humidity"
    LOCATION = "location"

    @classmethod
    def parse(cls, name: str) -> Category:
        """Map an almanac category name (e.g. ``"seed"``) to a member.

        Raises:
            MalformedInputError: If the name is not a known category.
        """
        try:
            return cls(name.strip().lower())
        except ValueError as e:
            raise MalformedInputError(f"Unknown category: {name!r}") from e

    @property
    def position(self) -> int:
        return _ORDER.index(self)

    def next(self) -> Category | None:
        """Return the category immediately downstream, or None for the terminal one."""
        pos = self.position + 1
        return _ORDER[pos] if pos < len(_ORDER) else None

    def is_adjacent(self, other: Category) -> bool:
        """True when ``other`` immediately follows this category."""
        return self.next() is other


_ORDER: tuple[Category, ...] = tuple(Category)


@dataclass(frozen=True)
class Quantity:
    """A coordinate tagged with its category."""

    category: Category
    value: int

    def shift(self, offset: int, category: Category) -> Quantity:
        return Quantity(category=category, value=self.value + offset)

    def __str__(self) -> str:
        return f"{self.category.value} {self.value}"


@dataclass(frozen=True)
class Interval:
    """Half-open coordinate range ``[start, end)`` within one category."""

    category: Category
    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"Interval start ({self.start}) must be <= end ({self.end})")

    @classmethod
    def point(cls, quantity: Quantity) -> Interval:
        """A one-wide interval holding a single quantity."""
        return cls(quantity.category, quantity.value, quantity.value + 1)

    @property
    def length(self) -> int:
        return self.end - self.start

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    def contains(self, value: int) -> bool:
        return self.start <= value < self.end

    def intersect(self, start: int, end: int) -> Interval:
        """Clip this interval to ``[start, end)``; the result may be empty."""
        lo = max(self.start, start)
        hi = min(self.end, end)
        if lo >= hi:
            return Interval(self.category, lo, lo)
        return Interval(self.category, lo, hi)

    def shift(self, offset: int, category: Category) -> Interval:
        return Interval(category, self.start + offset, self.end + offset)

    def __str__(self) -> str:
        return f"{self.category.value} [{self.start}, {self.end})"
