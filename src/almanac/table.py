"""Translation tables: one pipeline stage of piecewise shifts.

A table owns a set of disjoint rules. Each rule shifts a contiguous source
interval by a constant offset; anything no rule covers maps to itself.
"""

from __future__ import annotations

from dataclasses import dataclass

from almanac.exceptions import (
    CategoryMismatchError,
    MalformedInputError,
    NonContiguousPipelineError,
)
from almanac.types import Category, Interval, Quantity

__all__ = ["TranslationRule", "TranslationTable"]


@dataclass(frozen=True)
class TranslationRule:
    """Shift every coordinate in ``[start, start + length)`` by ``offset``."""

    start: int
    length: int
    offset: int

    def __post_init__(self) -> None:
        if self.length < 0:
            raise MalformedInputError(f"Rule length must be non-negative, got {self.length}")

    @classmethod
    def from_triple(cls, destination_start: int, source_start: int, length: int) -> TranslationRule:
        """Build a rule from an almanac ``dest src length`` line."""
        return cls(start=source_start, length=length, offset=destination_start - source_start)

    @property
    def end(self) -> int:
        return self.start + self.length

    def contains(self, value: int) -> bool:
        return self.start <= value < self.end

    def apply(self, value: int) -> int | None:
        """Return the shifted value, or None when the value is outside this rule."""
        return value + self.offset if self.contains(value) else None

    def overlaps(self, other: TranslationRule) -> bool:
        return self.start < other.end and other.start < self.end


@dataclass(frozen=True)
class TranslationTable:
    """All rules for one ``source → destination`` stage.

    Lookups fall back to identity for coordinates outside every rule. Rules
    are expected to be disjoint; :meth:`overlaps` reports violations rather
    than merging them.
    """

    source: Category
    destination: Category
    rules: tuple[TranslationRule, ...] = ()

    def __post_init__(self) -> None:
        if not self.source.is_adjacent(self.destination):
            raise NonContiguousPipelineError(
                f"No stage maps {self.source.value} to {self.destination.value}; "
                f"expected {self.source.value} to map to {_next_name(self.source)}"
            )
        # Accept any iterable of rules but store an immutable tuple
        object.__setattr__(self, "rules", tuple(self.rules))

    @property
    def name(self) -> str:
        return f"{self.source.value}-to-{self.destination.value}"

    def lookup(self, quantity: Quantity) -> Quantity:
        """Translate one source-category quantity into the destination category.

        Raises:
            CategoryMismatchError: If ``quantity`` is not in the source category.
        """
        self._check_category(quantity.category)
        for rule in self.rules:
            mapped = rule.apply(quantity.value)
            if mapped is not None:
                return Quantity(self.destination, mapped)
        return Quantity(self.destination, quantity.value)

    def lookup_interval(self, interval: Interval) -> list[Interval]:
        """Split ``interval`` on rule boundaries and translate every piece.

        Each rule's intersection with ``interval`` is shifted by that rule's
        offset; the uncovered remainder passes through unchanged. With
        disjoint rules the pieces tile ``interval`` exactly, so their total
        length equals ``interval.length``. Empty pieces are never returned.

        Raises:
            CategoryMismatchError: If ``interval`` is not in the source category.
        """
        self._check_category(interval.category)
        if interval.is_empty:
            return []

        covered: list[tuple[Interval, int]] = []
        for rule in self.rules:
            piece = interval.intersect(rule.start, rule.end)
            if not piece.is_empty:
                covered.append((piece, rule.offset))
        covered.sort(key=lambda item: item[0].start)

        result: list[Interval] = []
        cursor = interval.start
        for piece, offset in covered:
            if piece.start > cursor:
                result.append(Interval(self.destination, cursor, piece.start))
            result.append(piece.shift(offset, self.destination))
            cursor = max(cursor, piece.end)
        if cursor < interval.end:
            result.append(Interval(self.destination, cursor, interval.end))

        return result

    def overlaps(self) -> list[tuple[TranslationRule, TranslationRule]]:
        """Return every pair of rules whose source intervals overlap."""
        ordered = sorted(self.rules, key=lambda r: r.start)
        pairs: list[tuple[TranslationRule, TranslationRule]] = []
        for i, rule in enumerate(ordered):
            for other in ordered[i + 1 :]:
                if other.start >= rule.end:
                    break
                if rule.overlaps(other):
                    pairs.append((rule, other))
        return pairs

    def _check_category(self, category: Category) -> None:
        if category is not self.source:
            raise CategoryMismatchError(
                f"Table {self.name} cannot look up a {category.value} value"
            )


def _next_name(category: Category) -> str:
    nxt = category.next()
    return nxt.value if nxt is not None else "nothing"
