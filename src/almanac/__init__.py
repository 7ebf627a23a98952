"""almanac: staged interval remapping from seeds to locations."""

from almanac.exceptions import (
    AlmanacError,
    CategoryMismatchError,
    EmptySeedSetError,
    MalformedInputError,
    NonContiguousPipelineError,
)
from almanac.minimizer import Minimizer
from almanac.parser import Almanac, load_almanac, parse_almanac
from almanac.pipeline import Pipeline
from almanac.seeds import SeedSet
from almanac.table import TranslationRule, TranslationTable
from almanac.types import Category, Interval, Quantity

__version__ = "0.1.0"

__all__ = [
    "Almanac",
    "AlmanacError",
    "Category",
    "CategoryMismatchError",
    "EmptySeedSetError",
    "Interval",
    "MalformedInputError",
    "Minimizer",
    "NonContiguousPipelineError",
    "Pipeline",
    "Quantity",
    "SeedSet",
    "TranslationRule",
    "TranslationTable",
    "__version__",
    "load_almanac",
    "parse_almanac",
]
