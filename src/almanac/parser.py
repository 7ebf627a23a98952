"""Almanac text parser.

Turns puzzle input into seed numbers and a validated :class:`Pipeline`::

    seeds: 79 14 55 13

    seed-to-soil map:
    50 98 2
    52 50 48
    ...

This parser is 100% deterministic and builds no partial pipelines: any
malformed block aborts the whole parse.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from almanac.config import SeedMode
from almanac.exceptions import MalformedInputError
from almanac.pipeline import Pipeline
from almanac.seeds import SeedSet
from almanac.table import TranslationRule, TranslationTable
from almanac.types import Category

if TYPE_CHECKING:
    from pathlib import Path

    from almanac.config import AlmanacConfig

__all__ = [
    "Almanac",
    "load_almanac",
    "parse_almanac",
    "parse_numbers",
]

logger = logging.getLogger(__name__)

_SEEDS_RE = re.compile(r"^seeds:\s*(?P<numbers>[-\d\s]*)$")
_HEADER_RE = re.compile(r"^(?P<source>\w+)-to-(?P<destination>\w+) map:$")

# Separates blocks: one or more blank (or whitespace-only) lines
_BLOCK_SEP_RE = re.compile(r"\r?\n[ \t\r]*\n\s*")


@dataclass(frozen=True)
class Almanac:
    """Parsed input: the raw ``seeds:`` numbers plus the translation pipeline."""

    seed_numbers: tuple[int, ...]
    pipeline: Pipeline

    def seeds(self, mode: SeedMode = SeedMode.POINTS) -> SeedSet:
        """Read the seed numbers as discrete seeds or as ``(start, length)`` ranges."""
        if mode is SeedMode.RANGES:
            return SeedSet.from_ranges(self.seed_numbers)
        return SeedSet.from_points(self.seed_numbers)


def parse_numbers(text: str) -> list[int]:
    """Parse whitespace-separated integers.

    Raises:
        MalformedInputError: If any token is not an integer.
    """
    numbers: list[int] = []
    for token in text.split():
        try:
            numbers.append(int(token))
        except ValueError as e:
            raise MalformedInputError(f"Not an integer: {token!r}") from e
    return numbers


def parse_almanac(text: str, *, reject_overlaps: bool = True) -> Almanac:
    """Parse almanac text into seed numbers and a pipeline.

    Args:
        text: Full puzzle input.
        reject_overlaps: Treat a table whose rules overlap as malformed input.
            When False the overlap is only logged.

    Returns:
        Almanac holding the seed numbers and a contiguous pipeline.

    Raises:
        MalformedInputError: If the seeds line, a header, or a rule line is malformed.
        NonContiguousPipelineError: If the tables do not chain seed → location.
    """
    blocks = [b for b in _BLOCK_SEP_RE.split(text.strip()) if b.strip()]
    if not blocks:
        raise MalformedInputError("Almanac is empty")

    seed_numbers = _parse_seeds(blocks[0])
    tables = [
        _parse_table(block, index, reject_overlaps=reject_overlaps)
        for index, block in enumerate(blocks[1:], start=2)
    ]

    pipeline = Pipeline(tables)
    logger.info("Parsed %d seed number(s) and %d table(s)", len(seed_numbers), len(tables))
    return Almanac(seed_numbers=tuple(seed_numbers), pipeline=pipeline)


def load_almanac(path: Path, config: AlmanacConfig) -> Almanac:
    """Read and parse an almanac file.

    Raises:
        MalformedInputError: If the file is missing, unreadable, too large, or malformed.
    """
    if not path.is_file():
        raise MalformedInputError(f"Almanac file not found: {path}")

    file_size = path.stat().st_size
    if file_size > config.input.max_file_bytes:
        raise MalformedInputError(
            f"Almanac file {path.name} ({file_size} bytes) exceeds maximum size "
            f"({config.input.max_file_bytes} bytes)"
        )

    logger.info("Reading almanac: %s", path)
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise MalformedInputError(f"Cannot read almanac file {path.name}: {e}") from e

    # Strip BOM if present
    if raw.startswith("\ufeff"):
        raw = raw[1:]

    return parse_almanac(raw, reject_overlaps=config.input.reject_overlapping_rules)


# ── Module-level helpers ────────────────────────────────────────────


def _parse_seeds(block: str) -> list[int]:
    lines = block.strip().splitlines()
    match = _SEEDS_RE.match(lines[0].strip())
    if match is None or len(lines) > 1:
        raise MalformedInputError(f"Expected a 'seeds: <numbers>' line, got {lines[0]!r}")
    return parse_numbers(match.group("numbers"))


def _parse_table(block: str, index: int, *, reject_overlaps: bool) -> TranslationTable:
    lines = [line.strip() for line in block.strip().splitlines()]
    header = _HEADER_RE.match(lines[0])
    if header is None:
        raise MalformedInputError(
            f"Block {index}: expected '<source>-to-<destination> map:', got {lines[0]!r}"
        )

    source = Category.parse(header.group("source"))
    destination = Category.parse(header.group("destination"))

    rules: list[TranslationRule] = []
    for line_no, line in enumerate(lines[1:], start=2):
        numbers = parse_numbers(line)
        if len(numbers) != 3:
            raise MalformedInputError(
                f"Block {index}, line {line_no}: expected 'destination source length', "
                f"got {line!r}"
            )
        rules.append(TranslationRule.from_triple(*numbers))

    if not rules:
        logger.warning("Table %s-to-%s has no rules", source.value, destination.value)

    table = TranslationTable(source, destination, rules)

    overlapping = table.overlaps()
    if overlapping:
        first, second = overlapping[0]
        msg = (
            f"Table {table.name} has {len(overlapping)} overlapping rule pair(s), "
            f"e.g. [{first.start}, {first.end}) and [{second.start}, {second.end})"
        )
        if reject_overlaps:
            raise MalformedInputError(msg)
        logger.warning("%s; results depend on rule order", msg)

    return table
