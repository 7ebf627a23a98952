"""Pipeline orchestrator for almanac.

Composes the translation tables seed → soil → ... → location and folds
quantities or interval sets through them stage by stage.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from almanac.exceptions import CategoryMismatchError, NonContiguousPipelineError
from almanac.types import Category

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from almanac.table import TranslationTable
    from almanac.types import Interval, Quantity

__all__ = ["Pipeline"]

logger = logging.getLogger(__name__)

FIRST_CATEGORY = Category.SEED
TERMINAL_CATEGORY = Category.LOCATION


class Pipeline:
    """Ordered chain of translation tables from seed to location.

    The chain is validated once at construction, so evaluation never needs a
    per-stage category check beyond the one each table performs on its input.

    Usage::

        pipeline = Pipeline([seed_to_soil, soil_to_fertilizer, ..., humidity_to_location])
        pipeline.locate(Quantity(Category.SEED, 79))      # Quantity(LOCATION, 82)
        pipeline.locate_intervals([Interval(Category.SEED, 79, 93)])
    """

    def __init__(self, tables: Iterable[TranslationTable]) -> None:
        self._tables: tuple[TranslationTable, ...] = tuple(tables)
        _check_contiguous(self._tables)
        self._by_source = {table.source: table for table in self._tables}
        logger.debug(
            "Built pipeline with %d stages: %s",
            len(self._tables),
            " → ".join(t.name for t in self._tables),
        )

    @property
    def tables(self) -> tuple[TranslationTable, ...]:
        """The stages in evaluation order; fixed once the pipeline is built."""
        return self._tables

    @property
    def source(self) -> Category:
        return self._tables[0].source

    @property
    def destination(self) -> Category:
        return self._tables[-1].destination

    def __len__(self) -> int:
        return len(self._tables)

    def __iter__(self) -> Iterator[TranslationTable]:
        return iter(self._tables)

    def correlate(self, quantity: Quantity) -> Quantity:
        """Apply the single stage whose source matches ``quantity``'s category.

        Raises:
            CategoryMismatchError: If no stage starts at that category.
        """
        table = self._by_source.get(quantity.category)
        if table is None:
            raise CategoryMismatchError(f"No stage starts at {quantity.category.value}")
        return table.lookup(quantity)

    def locate(self, quantity: Quantity) -> Quantity:
        """Fold one seed quantity through every stage."""
        for table in self._tables:
            quantity = table.lookup(quantity)
        return quantity

    def trace(self, quantity: Quantity) -> list[Quantity]:
        """Return the quantity at every stage, starting with the input itself."""
        steps = [quantity]
        for table in self._tables:
            steps.append(table.lookup(steps[-1]))
        return steps

    def locate_intervals(self, intervals: Iterable[Interval]) -> list[Interval]:
        """Fold a set of seed intervals through every stage.

        The working set after each stage is the union of every fragment that
        stage produced. Empty intervals are dropped before the first stage and
        never produced afterwards.
        """
        working = [interval for interval in intervals if not interval.is_empty]
        for table in self._tables:
            fragments: list[Interval] = []
            for interval in working:
                fragments.extend(table.lookup_interval(interval))
            logger.debug(
                "%s: %d interval(s) → %d interval(s)", table.name, len(working), len(fragments)
            )
            working = fragments
        return working


def _check_contiguous(tables: tuple[TranslationTable, ...]) -> None:
    """Verify the tables chain seed → location with no gaps or repeats.

    Raises:
        NonContiguousPipelineError: On an empty, broken, or wrongly anchored chain.
    """
    if not tables:
        raise NonContiguousPipelineError("Pipeline needs at least one translation table")

    if tables[0].source is not FIRST_CATEGORY:
        raise NonContiguousPipelineError(
            f"Pipeline must start at {FIRST_CATEGORY.value}, not {tables[0].source.value}"
        )

    for previous, current in zip(tables, tables[1:]):
        if previous.destination is not current.source:
            raise NonContiguousPipelineError(
                f"Stage {previous.name} is followed by {current.name}; "
                f"expected a stage starting at {previous.destination.value}"
            )

    if tables[-1].destination is not TERMINAL_CATEGORY:
        raise NonContiguousPipelineError(
            f"Pipeline must end at {TERMINAL_CATEGORY.value}, not {tables[-1].destination.value}"
        )
