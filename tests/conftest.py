"""Shared fixtures for almanac tests."""

from __future__ import annotations

import random
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from almanac.parser import parse_almanac
from almanac.pipeline import Pipeline
from almanac.table import TranslationRule, TranslationTable
from almanac.types import Category

if TYPE_CHECKING:
    from collections.abc import Callable

    from almanac.parser import Almanac

FIXTURE_DIR = Path(__file__).parent / "fixtures"
EXAMPLE_FILE = FIXTURE_DIR / "example.txt"

STAGES = list(zip(list(Category)[:-1], list(Category)[1:]))


@pytest.fixture
def example_text() -> str:
    """The published seven-stage example almanac."""
    return EXAMPLE_FILE.read_text(encoding="utf-8")


@pytest.fixture
def example_almanac(example_text: str) -> Almanac:
    return parse_almanac(example_text)


@pytest.fixture
def example_pipeline(example_almanac: Almanac) -> Pipeline:
    return example_almanac.pipeline


@pytest.fixture
def example_file(tmp_path: Path, example_text: str) -> Path:
    """A copy of the example almanac in a temporary directory."""
    f = tmp_path / "almanac.txt"
    f.write_text(example_text, encoding="utf-8")
    return f


def random_rules(rng: random.Random, count: int = 4, span: int = 200) -> list[TranslationRule]:
    """Disjoint rules inside ``[0, span)`` with random offsets, in random order."""
    cuts = sorted(rng.sample(range(span), count * 2))
    rules = [
        TranslationRule(start=start, length=end - start, offset=rng.randint(-100, 100))
        for start, end in zip(cuts[::2], cuts[1::2])
    ]
    rng.shuffle(rules)
    return rules


@pytest.fixture
def random_pipeline() -> Callable[[int], Pipeline]:
    """Factory building a seeded random seed → location pipeline."""

    def _build(seed: int) -> Pipeline:
        rng = random.Random(seed)
        return Pipeline(
            TranslationTable(source, destination, random_rules(rng, count=rng.randint(0, 6)))
            for source, destination in STAGES
        )

    return _build


@pytest.fixture
def make_rules() -> Callable[..., list[TranslationRule]]:
    """Factory for disjoint random rules; see :func:`random_rules`."""
    return random_rules
