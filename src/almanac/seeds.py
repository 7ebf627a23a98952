"""Seed sets: the initial working set fed into the pipeline.

The same raw ``seeds:`` line is read either as discrete seeds or as
``(start, length)`` ranges, depending on which constructor the caller picks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from almanac.exceptions import MalformedInputError
from almanac.types import Category, Interval, Quantity

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence

__all__ = ["SeedSet"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeedSet:
    """Immutable collection of seed intervals.

    Overlapping intervals are kept as given; a single-point interval stands
    for one discrete seed.
    """

    intervals: tuple[Interval, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "intervals", tuple(self.intervals))
        for interval in self.intervals:
            if interval.category is not Category.SEED:
                raise MalformedInputError(f"Seed set cannot hold {interval}")

    @classmethod
    def from_points(cls, numbers: Iterable[int]) -> SeedSet:
        """One seed per number."""
        return cls(tuple(Interval(Category.SEED, n, n + 1) for n in numbers))

    @classmethod
    def from_ranges(cls, numbers: Sequence[int]) -> SeedSet:
        """Consecutive ``(start, length)`` pairs, each covering ``length`` seeds.

        Raises:
            MalformedInputError: If the numbers cannot be paired up or a length is negative.
        """
        if len(numbers) % 2:
            raise MalformedInputError(
                f"Seed ranges need (start, length) pairs, got {len(numbers)} numbers"
            )

        intervals: list[Interval] = []
        for start, length in zip(numbers[::2], numbers[1::2]):
            if length < 0:
                raise MalformedInputError(f"Seed range starting at {start} has negative length")
            if length == 0:
                logger.debug("Dropping empty seed range at %d", start)
                continue
            intervals.append(Interval(Category.SEED, start, start + length))
        return cls(tuple(intervals))

    def __len__(self) -> int:
        return len(self.intervals)

    def __iter__(self) -> Iterator[Interval]:
        return iter(self.intervals)

    @property
    def size(self) -> int:
        """Total seed count, overlaps counted twice."""
        return sum(interval.length for interval in self.intervals)

    @property
    def is_empty(self) -> bool:
        return self.size == 0

    def points(self) -> Iterator[Quantity]:
        """Yield every individual seed. Only viable for small sets."""
        for interval in self.intervals:
            for value in range(interval.start, interval.end):
                yield Quantity(Category.SEED, value)
