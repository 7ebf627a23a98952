"""Tests for almanac.parser — almanac text to seeds and pipeline."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from almanac.config import AlmanacConfig, SeedMode
from almanac.exceptions import MalformedInputError, NonContiguousPipelineError
from almanac.parser import Almanac, load_almanac, parse_almanac, parse_numbers
from almanac.types import Category, Interval

if TYPE_CHECKING:
    from pathlib import Path

MINIMAL_TABLES = "\n\n".join(
    f"{s.value}-to-{d.value} map:\n0 0 1"
    for s, d in zip(list(Category)[:-1], list(Category)[1:])
)


def _almanac_with(seeds_line: str = "seeds: 1 2", tables: str = MINIMAL_TABLES) -> str:
    return f"{seeds_line}\n\n{tables}\n"


class TestParseNumbers:
    def test_whitespace_separated(self):
        assert parse_numbers(" 79 14\t55  13 ") == [79, 14, 55, 13]

    def test_negative(self):
        assert parse_numbers("-3 4") == [-3, 4]

    def test_empty(self):
        assert parse_numbers("") == []

    def test_non_integer_raises(self):
        with pytest.raises(MalformedInputError, match="Not an integer"):
            parse_numbers("1 two 3")


class TestParseExample:
    def test_returns_almanac(self, example_almanac: Almanac):
        assert isinstance(example_almanac, Almanac)

    def test_seed_numbers(self, example_almanac: Almanac):
        assert example_almanac.seed_numbers == (79, 14, 55, 13)

    def test_seven_stages(self, example_almanac: Almanac):
        assert [t.name for t in example_almanac.pipeline] == [
            "seed-to-soil",
            "soil-to-fertilizer",
            "fertilizer-to-water",
            "water-to-light",
            "light-to-temperature",
            "temperature-to-humidity",
            "humidity-to-location",
        ]

    def test_rule_derivation(self, example_almanac: Almanac):
        seed_to_soil = next(iter(example_almanac.pipeline))
        first = seed_to_soil.rules[0]
        assert (first.start, first.length, first.offset) == (98, 2, -48)

    def test_seeds_as_points(self, example_almanac: Almanac):
        seeds = example_almanac.seeds(SeedMode.POINTS)
        assert len(seeds) == 4
        assert seeds.size == 4

    def test_seeds_as_ranges(self, example_almanac: Almanac):
        seeds = example_almanac.seeds(SeedMode.RANGES)
        assert list(seeds) == [
            Interval(Category.SEED, 79, 93),
            Interval(Category.SEED, 55, 68),
        ]

    def test_default_mode_is_points(self, example_almanac: Almanac):
        assert example_almanac.seeds().size == 4

    def test_windows_line_endings(self, example_text: str):
        almanac = parse_almanac(example_text.replace("\n", "\r\n"))
        assert len(almanac.pipeline) == 7

    def test_extra_blank_lines(self, example_text: str):
        almanac = parse_almanac(example_text.replace("\n\n", "\n\n\n  \n"))
        assert len(almanac.pipeline) == 7


class TestMalformedInput:
    def test_empty_text(self):
        with pytest.raises(MalformedInputError, match="empty"):
            parse_almanac("   \n")

    def test_missing_seeds_line(self):
        with pytest.raises(MalformedInputError, match="seeds:"):
            parse_almanac(_almanac_with(seeds_line="plants: 1 2"))

    def test_non_numeric_seed(self):
        with pytest.raises(MalformedInputError):
            parse_almanac(_almanac_with(seeds_line="seeds: 1 x"))

    def test_bad_header(self):
        tables = MINIMAL_TABLES.replace("seed-to-soil map:", "seed to soil:")
        with pytest.raises(MalformedInputError, match="Block 2"):
            parse_almanac(_almanac_with(tables=tables))

    def test_unknown_category(self):
        tables = MINIMAL_TABLES.replace("seed-to-soil map:", "seed-to-compost map:")
        with pytest.raises(MalformedInputError, match="compost"):
            parse_almanac(_almanac_with(tables=tables))

    def test_rule_with_two_numbers(self):
        tables = MINIMAL_TABLES.replace("seed-to-soil map:\n0 0 1", "seed-to-soil map:\n0 1")
        with pytest.raises(MalformedInputError, match="line 2"):
            parse_almanac(_almanac_with(tables=tables))

    def test_rule_with_negative_length(self):
        tables = MINIMAL_TABLES.replace("seed-to-soil map:\n0 0 1", "seed-to-soil map:\n0 0 -1")
        with pytest.raises(MalformedInputError, match="non-negative"):
            parse_almanac(_almanac_with(tables=tables))


class TestPipelineShape:
    def test_missing_stage(self):
        blocks = MINIMAL_TABLES.split("\n\n")
        del blocks[2]
        with pytest.raises(NonContiguousPipelineError):
            parse_almanac(_almanac_with(tables="\n\n".join(blocks)))

    def test_skipping_header(self):
        tables = MINIMAL_TABLES.replace("seed-to-soil map:", "seed-to-fertilizer map:")
        with pytest.raises(NonContiguousPipelineError):
            parse_almanac(_almanac_with(tables=tables))

    def test_no_tables(self):
        with pytest.raises(NonContiguousPipelineError):
            parse_almanac("seeds: 1 2\n")

    def test_table_without_rules_is_identity(self, caplog: pytest.LogCaptureFixture):
        tables = MINIMAL_TABLES.replace("seed-to-soil map:\n0 0 1", "seed-to-soil map:")
        with caplog.at_level(logging.WARNING, logger="almanac.parser"):
            almanac = parse_almanac(_almanac_with(tables=tables))
        assert next(iter(almanac.pipeline)).rules == ()
        assert "has no rules" in caplog.text


class TestOverlappingRules:
    TABLES = MINIMAL_TABLES.replace(
        "seed-to-soil map:\n0 0 1", "seed-to-soil map:\n0 0 10\n50 5 10"
    )

    def test_rejected_by_default(self):
        with pytest.raises(MalformedInputError, match="overlapping"):
            parse_almanac(_almanac_with(tables=self.TABLES))

    def test_warned_when_allowed(self, caplog: pytest.LogCaptureFixture):
        with caplog.at_level(logging.WARNING, logger="almanac.parser"):
            almanac = parse_almanac(_almanac_with(tables=self.TABLES), reject_overlaps=False)
        assert len(next(iter(almanac.pipeline)).rules) == 2
        assert "overlapping" in caplog.text


class TestLoadAlmanac:
    def test_loads_file(self, example_file: Path):
        almanac = load_almanac(example_file, AlmanacConfig())
        assert almanac.seed_numbers == (79, 14, 55, 13)

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(MalformedInputError, match="not found"):
            load_almanac(tmp_path / "nope.txt", AlmanacConfig())

    def test_directory_rejected(self, tmp_path: Path):
        with pytest.raises(MalformedInputError, match="not found"):
            load_almanac(tmp_path, AlmanacConfig())

    def test_strips_bom(self, tmp_path: Path, example_text: str):
        f = tmp_path / "bom.txt"
        f.write_text("\ufeff" + example_text, encoding="utf-8")
        assert load_almanac(f, AlmanacConfig()).seed_numbers == (79, 14, 55, 13)

    def test_size_limit(self, example_file: Path):
        config = AlmanacConfig()
        config.input.max_file_bytes = 10
        with pytest.raises(MalformedInputError, match="exceeds maximum size"):
            load_almanac(example_file, config)

    def test_invalid_utf8(self, tmp_path: Path):
        f = tmp_path / "binary.txt"
        f.write_bytes(b"seeds: \xff\xfe")
        with pytest.raises(MalformedInputError, match="Cannot read"):
            load_almanac(f, AlmanacConfig())

    def test_overlap_setting_respected(self, tmp_path: Path):
        f = tmp_path / "overlap.txt"
        f.write_text(_almanac_with(tables=TestOverlappingRules.TABLES), encoding="utf-8")
        config = AlmanacConfig()
        config.input.reject_overlapping_rules = False
        assert len(load_almanac(f, config).pipeline) == 7
