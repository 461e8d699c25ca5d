"""CLI entry point for tierkit."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Annotated, Any

import typer
from rich import print as rprint
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from tierkit import __version__
from tierkit.core.config import ELO_SCALE, PYRAMID_RATIO, EngineConfig
from tierkit.core.engine import TierEngine, create_engine
from tierkit.core.errors import TierkitError

app = typer.Typer(
    name="tierkit",
    help="Turn pairwise comparisons into ratings and tier lists",
    add_completion=False,
    no_args_is_help=True,
)
console = Console()


def load_comparison_file(path: Path) -> tuple[list[str], list[dict[str, Any]]]:
    """Read item ids and comparison records from a JSON file.

    The file holds either a list of comparison objects or an object with
    optional "items" and "comparisons" lists.
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, list):
        return [], data
    if isinstance(data, dict):
        return list(data.get("items", [])), list(data.get("comparisons", []))
    raise ValueError(f"Expected a list or an object at the top level of {path}")


def _build_engine(
    path: Path,
    decay: bool,
    now: datetime | None,
    verbose: bool,
) -> TierEngine:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        items, comparisons = load_comparison_file(path)
    except (OSError, ValueError) as e:
        rprint(f"[red]Could not read {path}: {e}[/red]")
        raise typer.Exit(1) from e

    clock = (lambda: now) if now is not None else None
    engine = create_engine(clock=clock, decay_enabled=decay)
    try:
        engine.initialize(items)
    except (TypeError, ValueError) as e:
        rprint(f"[red]Invalid item record in {path}: {e}[/red]")
        raise typer.Exit(1) from e

    result = engine.record_comparisons(comparisons)
    rprint(f"[green]Applied {result.applied} comparisons[/green]")
    for rejected in result.rejected:
        rprint(f"[yellow]Skipped record {rejected.index}: {rejected.reason}[/yellow]")

    return engine


def version_callback(value: bool) -> None:
    if value:
        rprint(f"[bold blue]tierkit[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """tierkit: pairwise-comparison ratings and tier lists."""


@app.command()
def rank(
    comparisons: Annotated[Path, typer.Argument(help="JSON file with comparisons")],
    tiers: Annotated[
        int | None, typer.Option("--tiers", "-t", help="Number of tiers")
    ] = None,
    labels: Annotated[
        str | None, typer.Option("--labels", "-l", help="Comma-separated tier labels")
    ] = None,
    decay: Annotated[
        bool, typer.Option("--decay/--no-decay", help="Down-weight old comparisons")
    ] = True,
    now: Annotated[
        datetime | None, typer.Option("--now", help="Reference time for decay")
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logs")] = False,
) -> None:
    """Rate items from comparisons and print the tier list."""
    engine = _build_engine(comparisons, decay, now, verbose)
    label_list = None
    if labels:
        label_list = [label.strip() for label in labels.split(",") if label.strip()]

    try:
        definitions = engine.generate_tiers(tiers, label_list)
        summary = engine.summarize_confidence(definitions)
    except TierkitError as e:
        rprint(f"[red]{e}[/red]")
        raise typer.Exit(1) from e

    store = engine.store
    table = Table(title="Tier List")
    table.add_column("Tier", style="bold")
    table.add_column("#", justify="right")
    table.add_column("Item", style="cyan")
    table.add_column("Rating", justify="right", style="green")
    table.add_column("W-L-D", justify="right")
    table.add_column("Confidence", justify="right")
    table.add_column("Could be", style="yellow")

    for rank_number, entry in enumerate(summary.confidences, start=1):
        item = store.get(entry.item_id)
        if item is None:
            continue
        tier = entry.tier
        tier_cell = Text(f" {tier.label} ", style=f"bold {tier.color.text} on {tier.color.primary}")
        alternative = ""
        if entry.alternative_tier is not None:
            alternative = f"{entry.alternative_tier.label} ({entry.alternative_confidence}%)"
        table.add_row(
            tier_cell,
            str(rank_number),
            entry.item_id,
            f"{item.rating:.1f}",
            f"{item.wins}-{item.losses}-{item.draws}",
            f"{entry.confidence}%",
            alternative,
        )

    console.print(table)
    rprint(f"\nOverall confidence: [bold]{summary.overall_confidence}%[/bold]")
    for recommendation in summary.recommendations:
        rprint(f"[dim]- {recommendation}[/dim]")


@app.command()
def boundaries(
    comparisons: Annotated[Path, typer.Argument(help="JSON file with comparisons")],
    tiers: Annotated[int, typer.Option("--tiers", "-t", help="Number of tiers")] = 5,
    decay: Annotated[
        bool, typer.Option("--decay/--no-decay", help="Down-weight old comparisons")
    ] = True,
    now: Annotated[
        datetime | None, typer.Option("--now", help="Reference time for decay")
    ] = None,
) -> None:
    """Print pyramid tier boundaries for the rated items."""
    engine = _build_engine(comparisons, decay, now, verbose=False)

    try:
        result = engine.compute_boundaries(tiers)
    except TierkitError as e:
        rprint(f"[red]{e}[/red]")
        raise typer.Exit(1) from e

    rprint(f"Boundaries: {json.dumps(result)}")

    table = Table(title="Tier Ranges")
    table.add_column("Tier", style="cyan")
    table.add_column("Start", justify="right")
    table.add_column("End", justify="right")
    table.add_column("Items", justify="right", style="green")
    for i, (start, end) in enumerate(zip(result, result[1:]), start=1):
        table.add_row(str(i), str(start), str(end), str(end - start))
    console.print(table)


@app.command()
def info() -> None:
    """Show configuration and model constants."""
    config = EngineConfig()

    rprint(Panel.fit(f"[bold blue]tierkit[/bold blue] v{__version__}", title="Version"))

    table = Table(title="Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Initial Rating", str(config.initial_rating))
    table.add_row("K-Factor", str(config.k_factor))
    table.add_row("Adaptive K", str(config.adaptive_k))
    table.add_row("Decay", "on" if config.decay_active else "off")
    table.add_row("Decay Factor (per week)", str(config.decay_factor))
    table.add_row("Min Comparisons", str(config.min_comparisons))
    table.add_row("Default Tier Count", str(config.default_tier_count))

    console.print(table)

    constants = Table(title="Model Constants")
    constants.add_column("Constant", style="cyan")
    constants.add_column("Value", style="green")
    constants.add_row("Elo scale", str(ELO_SCALE))
    constants.add_row("Pyramid ratio", str(PYRAMID_RATIO))

    console.print(constants)


if __name__ == "__main__":
    app()
