"""Configuration system for almanac.

Reads and writes an ``almanac.toml`` file with typed dataclass sections
and sensible defaults for all values.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from typing import TYPE_CHECKING, TypeVar

import tomli_w

if sys.version_info >= (3, 12):
    import tomllib
else:
    import tomli as tomllib

from almanac.exceptions import ConfigError

if TYPE_CHECKING:
    from pathlib import Path

_T = TypeVar("_T")

__all__ = [
    "CONFIG_FILE",
    "AlmanacConfig",
    "EvaluationConfig",
    "InputConfig",
    "LoggingConfig",
    "SeedMode",
    "default_config",
    "load_config",
    "save_config",
]

logger = logging.getLogger(__name__)

CONFIG_FILE = "almanac.toml"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class SeedMode(str, Enum):
    """How the ``seeds:`` line is read."""

    POINTS = "points"
    RANGES = "ranges"


@dataclass
class InputConfig:
    """[input] section."""

    max_file_bytes: int = 10 * 1024 * 1024
    reject_overlapping_rules: bool = True


@dataclass
class EvaluationConfig:
    """[evaluation] section."""

    mode: str = SeedMode.POINTS.value
    enumeration_limit: int = 1_000_000


@dataclass
class LoggingConfig:
    """[logging] section."""

    level: str = "WARNING"


@dataclass
class AlmanacConfig:
    """Root configuration combining all sections."""

    input: InputConfig = field(default_factory=InputConfig)
    evaluation: EvaluationConfig = field(default_factory=EvaluationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def seed_mode(self) -> SeedMode:
        return SeedMode(self.evaluation.mode)


def default_config() -> AlmanacConfig:
    """Return a config with all default values."""
    return AlmanacConfig()


# TOML table name -> section dataclass, in file order.
_SECTIONS: dict[str, type] = {
    "input": InputConfig,
    "evaluation": EvaluationConfig,
    "logging": LoggingConfig,
}


def save_config(config: AlmanacConfig, path: Path) -> None:
    """Save configuration to a TOML file, one table per section."""
    tables = {name: asdict(getattr(config, name)) for name in _SECTIONS}
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(tomli_w.dumps(tables).encode("utf-8"))
    except OSError as e:
        raise ConfigError(f"Failed to save config to {path}: {e}") from e
    logger.info("Saved config to %s", path)


def _check_type(key: str, value: object, expected: type) -> None:
    # bool is an int subclass; TOML keeps them apart, so do we.
    if isinstance(value, bool) != (expected is bool) or not isinstance(value, expected):
        raise ConfigError(f"{key} must be {expected.__name__}, got {type(value).__name__}")


def _read_section(name: str, cls: type[_T], table: object) -> _T:
    """Build one section from its TOML table, type-checking each known key.

    Expected types come from each field's default. Unknown keys are logged
    and skipped.
    """
    if not isinstance(table, dict):
        raise ConfigError(f"[{name}] must be a table, got {type(table).__name__}")

    values: dict[str, object] = {}
    for f in fields(cls):  # type: ignore[arg-type]
        if f.name in table:
            _check_type(f"{name}.{f.name}", table[f.name], type(f.default))
            values[f.name] = table[f.name]

    extra = sorted(set(table) - set(values))
    if extra:
        logger.debug("Ignoring unknown keys in [%s]: %s", name, ", ".join(extra))
    return cls(**values)


def _validate(config: AlmanacConfig) -> None:
    """Reject well-typed values the rest of the package cannot act on."""
    modes = [m.value for m in SeedMode]
    if config.evaluation.mode not in modes:
        raise ConfigError(
            f"Invalid evaluation.mode {config.evaluation.mode!r}; expected one of {modes}"
        )
    if config.evaluation.enumeration_limit < 0:
        raise ConfigError("evaluation.enumeration_limit must be non-negative")
    if config.input.max_file_bytes <= 0:
        raise ConfigError("input.max_file_bytes must be positive")
    config.logging.level = config.logging.level.upper()
    if config.logging.level not in _LOG_LEVELS:
        raise ConfigError(
            f"Invalid logging.level {config.logging.level!r}; expected one of {list(_LOG_LEVELS)}"
        )


def load_config(path: Path) -> AlmanacConfig:
    """Load configuration from a TOML file.

    Missing sections or keys get default values. Any value of the wrong
    type, or a section that is not a table, raises ``ConfigError``.
    """
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        document = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Failed to load config from {path}: {e}") from e

    unknown = sorted(set(document) - set(_SECTIONS))
    if unknown:
        logger.debug("Ignoring unknown sections in %s: %s", path, ", ".join(unknown))

    config = AlmanacConfig(
        **{
            name: _read_section(name, cls, document[name])
            for name, cls in _SECTIONS.items()
            if name in document
        }
    )
    _validate(config)
    logger.info("Loaded config from %s", path)
    return config
