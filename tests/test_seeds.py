"""Tests for almanac.seeds module — the two readings of the seeds line."""

from __future__ import annotations

import dataclasses

import pytest

from almanac.exceptions import MalformedInputError
from almanac.seeds import SeedSet
from almanac.types import Category, Interval, Quantity

SEED = Category.SEED


class TestFromPoints:
    def test_one_interval_per_seed(self):
        seeds = SeedSet.from_points([79, 14, 55, 13])
        assert len(seeds) == 4
        assert seeds.size == 4
        assert list(seeds)[0] == Interval(SEED, 79, 80)

    def test_points_yields_quantities(self):
        seeds = SeedSet.from_points([79, 14, 55, 13])
        assert list(seeds.points()) == [
            Quantity(SEED, 79),
            Quantity(SEED, 14),
            Quantity(SEED, 55),
            Quantity(SEED, 13),
        ]

    def test_duplicates_kept(self):
        assert len(SeedSet.from_points([5, 5])) == 2

    def test_empty(self):
        seeds = SeedSet.from_points([])
        assert seeds.is_empty
        assert len(seeds) == 0


class TestFromRanges:
    def test_pairs_become_intervals(self):
        seeds = SeedSet.from_ranges([79, 14, 55, 13])
        assert list(seeds) == [Interval(SEED, 79, 93), Interval(SEED, 55, 68)]
        assert seeds.size == 27

    def test_odd_count_raises(self):
        with pytest.raises(MalformedInputError, match="pairs"):
            SeedSet.from_ranges([79, 14, 55])

    def test_negative_length_raises(self):
        with pytest.raises(MalformedInputError, match="negative length"):
            SeedSet.from_ranges([10, -1])

    def test_zero_length_dropped(self):
        seeds = SeedSet.from_ranges([10, 0, 20, 2])
        assert list(seeds) == [Interval(SEED, 20, 22)]

    def test_overlaps_not_merged(self):
        seeds = SeedSet.from_ranges([0, 10, 5, 10])
        assert len(seeds) == 2
        assert seeds.size == 20

    def test_huge_range_is_lazy(self):
        seeds = SeedSet.from_ranges([0, 10**12])
        assert seeds.size == 10**12
        assert next(seeds.points()) == Quantity(SEED, 0)


class TestSeedSet:
    def test_frozen(self):
        seeds = SeedSet.from_points([1])
        with pytest.raises(dataclasses.FrozenInstanceError):
            seeds.intervals = ()  # type: ignore[misc]

    def test_rejects_non_seed_intervals(self):
        with pytest.raises(MalformedInputError, match="Seed set cannot hold"):
            SeedSet((Interval(Category.SOIL, 0, 1),))

    def test_accepts_list(self):
        seeds = SeedSet([Interval(SEED, 0, 3)])  # type: ignore[arg-type]
        assert seeds.intervals == (Interval(SEED, 0, 3),)
