"""Lowest-location queries over a seed set.

Range evaluation never touches individual seeds: every stage maps each
fragment by a constant shift, so a fragment's smallest coordinate always
lands on the smallest coordinate of its image. The minimum over all
terminal fragments' ``start`` is therefore the exact answer.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from almanac.exceptions import EmptySeedSetError, EnumerationLimitError

if TYPE_CHECKING:
    from almanac.pipeline import Pipeline
    from almanac.seeds import SeedSet

__all__ = ["Minimizer"]

logger = logging.getLogger(__name__)


class Minimizer:
    """Drives a pipeline over a seed set and reports the lowest location."""

    def __init__(self, pipeline: Pipeline) -> None:
        self.pipeline = pipeline

    def lowest_location(self, seeds: SeedSet) -> int | None:
        """Lowest location reachable from any seed, found by interval splitting.

        Returns:
            The minimum location number, or None when ``seeds`` is empty.
        """
        if seeds.is_empty:
            logger.info("No seeds to evaluate")
            return None

        locations = self.pipeline.locate_intervals(seeds)
        logger.info(
            "Evaluated %d seed interval(s) into %d location interval(s)",
            len(seeds),
            len(locations),
        )
        return min(interval.start for interval in locations)

    def lowest_location_of_points(self, seeds: SeedSet) -> int | None:
        """Lowest location by point evaluation of every seed in ``seeds``."""
        values = [self.pipeline.locate(seed).value for seed in seeds.points()]
        return min(values) if values else None

    def lowest_location_by_enumeration(self, seeds: SeedSet, limit: int) -> int | None:
        """Brute-force cross-check of :meth:`lowest_location`.

        Raises:
            EnumerationLimitError: If ``seeds`` holds more than ``limit`` seeds.
        """
        if seeds.size > limit:
            raise EnumerationLimitError(
                f"Refusing to enumerate {seeds.size} seeds (limit {limit})"
            )
        return self.lowest_location_of_points(seeds)

    def require_lowest_location(self, seeds: SeedSet) -> int:
        """Like :meth:`lowest_location` but an empty seed set is an error.

        Raises:
            EmptySeedSetError: If ``seeds`` is empty.
        """
        lowest = self.lowest_location(seeds)
        if lowest is None:
            raise EmptySeedSetError("Seed set is empty; there is no lowest location")
        return lowest
