"""Custom exception hierarchy for almanac."""

__all__ = [
    "AlmanacError",
    "CategoryMismatchError",
    "ConfigError",
    "EmptySeedSetError",
    "EnumerationLimitError",
    "MalformedInputError",
    "NonContiguousPipelineError",
]


class AlmanacError(Exception):
    """Base exception for all almanac errors."""


class ConfigError(AlmanacError):
    """Raised when configuration loading or validation fails."""


class MalformedInputError(AlmanacError):
    """Raised when almanac text does not match the expected block or line shape."""


class NonContiguousPipelineError(AlmanacError):
    """Raised when translation tables do not chain seed → location without gaps."""


class CategoryMismatchError(AlmanacError, AssertionError):
    """Raised when a lookup receives a value tagged with the wrong category.

    This is an invariant violation, never a user-facing input problem.
    """


class EmptySeedSetError(AlmanacError):
    """Raised when a minimum is requested over zero seeds."""


class EnumerationLimitError(AlmanacError):
    """Raised when a brute-force enumeration would exceed the configured limit."""
