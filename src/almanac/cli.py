"""CLI interface for almanac.

Typer-based command-line interface with Rich output formatting.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from almanac import __version__
from almanac.config import (
    CONFIG_FILE,
    AlmanacConfig,
    SeedMode,
    default_config,
    load_config,
    save_config,
)
from almanac.exceptions import AlmanacError, EnumerationLimitError
from almanac.minimizer import Minimizer
from almanac.parser import load_almanac
from almanac.types import Category, Quantity

__all__ = ["app"]

app = typer.Typer(
    name="almanac",
    help="Almanac: map seeds through translation tables to their lowest location.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
console = Console()

logger = logging.getLogger(__name__)

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", help=f"Config file (default: ./{CONFIG_FILE} if present)"),
]


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _prepare(ctx: typer.Context, path: Path | None) -> AlmanacConfig:
    """Load an explicit config, ./almanac.toml when present, or the defaults.

    Also configures logging: ``--verbose`` wins over the config's level.
    """
    if path is None:
        candidate = Path.cwd() / CONFIG_FILE
        path = candidate if candidate.exists() else None
    config = load_config(path) if path is not None else default_config()

    verbose = bool(ctx.obj and ctx.obj.get("verbose"))
    _configure_logging("DEBUG" if verbose else config.logging.level)
    return config


def _fail(message: str, error: Exception) -> typer.Exit:
    console.print(f"[red]{message}:[/red] {escape(str(error))}")
    logger.debug("Command failed", exc_info=error)
    return typer.Exit(code=1)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
) -> None:
    """Map seeds through translation tables to their lowest location."""
    ctx.obj = {"verbose": verbose}


@app.command()
def version() -> None:
    """Show almanac version."""
    console.print(f"almanac {__version__}")


@app.command()
def solve(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="Almanac input file")],
    mode: Annotated[
        SeedMode | None,
        typer.Option("--mode", "-m", help="Read seeds as points or (start, length) ranges"),
    ] = None,
    config_path: ConfigOption = None,
) -> None:
    """Print the lowest location number reachable from the seeds."""
    try:
        config = _prepare(ctx, config_path)
        almanac = load_almanac(path, config)
        seeds = almanac.seeds(mode or config.seed_mode)
        lowest = Minimizer(almanac.pipeline).require_lowest_location(seeds)
    except AlmanacError as e:
        raise _fail("Cannot solve almanac", e) from e

    console.print(lowest)


@app.command()
def trace(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="Almanac input file")],
    seed: Annotated[int, typer.Argument(help="Seed number to follow")],
    config_path: ConfigOption = None,
) -> None:
    """Show the value of one seed at every stage."""
    try:
        config = _prepare(ctx, config_path)
        almanac = load_almanac(path, config)
        steps = almanac.pipeline.trace(Quantity(Category.SEED, seed))
    except AlmanacError as e:
        raise _fail("Cannot trace seed", e) from e

    table = Table(show_header=True, box=None, padding=(0, 2))
    table.add_column("category", style="dim")
    table.add_column("value", style="bold", justify="right")
    for step in steps:
        table.add_row(step.category.value, str(step.value))
    console.print(table)


@app.command()
def check(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="Almanac input file")],
    limit: Annotated[
        int | None,
        typer.Option("--limit", "-l", help="Maximum number of seeds to enumerate"),
    ] = None,
    config_path: ConfigOption = None,
) -> None:
    """Cross-check range evaluation against per-seed enumeration."""
    try:
        config = _prepare(ctx, config_path)
        almanac = load_almanac(path, config)
    except AlmanacError as e:
        raise _fail("Cannot check almanac", e) from e

    minimizer = Minimizer(almanac.pipeline)
    effective_limit = config.evaluation.enumeration_limit if limit is None else limit

    table = Table(show_header=True, box=None, padding=(0, 2))
    table.add_column("mode", style="dim")
    table.add_column("seeds", justify="right")
    table.add_column("ranges", justify="right")
    table.add_column("enumerated", justify="right")

    mismatched = False
    for mode in SeedMode:
        try:
            seeds = almanac.seeds(mode)
        except AlmanacError as e:
            logger.warning("Cannot read seeds as %s: %s", mode.value, e)
            table.add_row(mode.value, "-", "-", "[dim]unavailable[/dim]")
            continue
        by_ranges = minimizer.lowest_location(seeds)
        try:
            by_points = minimizer.lowest_location_by_enumeration(seeds, effective_limit)
        except EnumerationLimitError as e:
            logger.info("Skipping %s enumeration: %s", mode.value, e)
            table.add_row(mode.value, str(seeds.size), str(by_ranges), "[dim]skipped[/dim]")
            continue
        mismatched = mismatched or by_ranges != by_points
        table.add_row(mode.value, str(seeds.size), str(by_ranges), str(by_points))

    console.print(table)
    if mismatched:
        console.print("[red]Range evaluation disagrees with enumeration.[/red]")
        raise typer.Exit(code=1)
    console.print("[green]Range evaluation matches enumeration.[/green]")


@app.command(name="init-config")
def init_config(
    path: Annotated[
        Path,
        typer.Argument(help="Where to write the config file"),
    ] = Path(CONFIG_FILE),
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing file"),
    ] = False,
) -> None:
    """Write a default almanac.toml."""
    if path.exists() and not force:
        console.print(f"[yellow]{path} already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(code=1)

    try:
        save_config(default_config(), path)
    except AlmanacError as e:
        raise _fail("Cannot write config", e) from e

    console.print(f"[green]Wrote default config[/green] to {path}")
