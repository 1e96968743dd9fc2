"""CLI entry point for jmu-sankey.

Commands:
- build: Load the dataset and write the static site with all four diagrams
- graph: Print one diagram's {nodes, links} payload as JSON
- kinds: List the diagram kinds and the page containers they are drawn into
"""

import asyncio
import json
from pathlib import Path

import click
from rich.console import Console

from jmu_sankey import __version__
from jmu_sankey.config import Config, load_config
from jmu_sankey.dataset import DatasetLoadError, MissingCollectionError, load_dataset
from jmu_sankey.graph import DIAGRAM_SLOTS, DiagramKind, build
from jmu_sankey.logging import setup_logging

console = Console()

DEFAULT_CONFIG = Path("config.yaml")


def _load(config: Path | None, dataset: str | None) -> Config:
    """Load config from file (or defaults) and apply CLI overrides."""
    if config is not None:
        cfg = load_config(config)
    elif DEFAULT_CONFIG.exists():
        cfg = load_config(DEFAULT_CONFIG)
    else:
        cfg = Config()

    if dataset is not None:
        cfg.dataset.source = dataset
    return cfg


@click.group()
@click.version_option(version=__version__, prog_name="jmu-sankey")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable verbose output")
@click.option("--json-logs", is_flag=True, default=False, help="Emit logs as JSON lines")
@click.pass_context
def main(ctx: click.Context, verbose: bool, json_logs: bool) -> None:
    """JMU budget Sankey diagram generator.

    Turns the budget dataset (student costs, comprehensive fee, revenues,
    athletics) into flow graphs and a static page that draws them.

    \b
    Quick Start:
        jmu-sankey build --dataset data/jmu.json --output site
        jmu-sankey graph revenues --dataset data/jmu.json
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    setup_logging(verbose=verbose, json_format=json_logs)


@main.command(name="build")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to config.yaml file",
)
@click.option("--dataset", "-d", type=str, default=None, help="Dataset path or URL")
@click.option(
    "--output",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Override output directory from config",
)
@click.pass_context
def build_cmd(
    ctx: click.Context,
    config: Path | None,
    dataset: str | None,
    output: Path | None,
) -> None:
    """Build the static site with all four diagrams.

    The dataset is loaded once. If it cannot be loaded nothing is written.
    A diagram whose data collection is missing is rendered as unavailable
    while the others are built normally.
    """
    from jmu_sankey.report.build import build_site

    cfg = _load(config, dataset)
    if output is not None:
        cfg.report.output_dir = output

    console.print(f"[bold]Building diagrams from {cfg.dataset.source}[/bold]")

    try:
        stats = build_site(cfg)
    except DatasetLoadError as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}")
        if ctx.obj.get("verbose"):
            import traceback

            console.print("\n[dim]Traceback:[/dim]")
            console.print(traceback.format_exc(), markup=False)
        raise click.Abort() from e

    console.print()
    for kind, counts in stats["graphs"].items():
        if kind in stats["diagrams_failed"]:
            console.print(f"  [red]✗[/red] {kind}: unavailable")
        else:
            console.print(
                f"  [green]✓[/green] {kind}: {counts['nodes']} nodes, {counts['links']} links"
            )
            if counts["skipped"]:
                console.print(f"    [yellow]{counts['skipped']} records skipped[/yellow]")

    console.print()
    console.print(f"  Data files: {stats['data_files_written']}")
    console.print(f"  Assets copied: {stats['assets_copied']}")
    console.print(f"  Output: {cfg.report.output_dir}")

    if stats["errors"]:
        console.print(f"\n[yellow]Warnings:[/yellow] {len(stats['errors'])}")
        for error in stats["errors"]:
            console.print(f"  - {error}")

    console.print()
    console.print("[bold]To view the site:[/bold]")
    console.print(f"  python -m http.server -d {cfg.report.output_dir}")


@main.command(name="graph")
@click.argument("kind", type=click.Choice([k.value for k in DiagramKind]))
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to config.yaml file",
)
@click.option("--dataset", "-d", type=str, default=None, help="Dataset path or URL")
def graph_cmd(kind: str, config: Path | None, dataset: str | None) -> None:
    """Print one diagram's {nodes, links} graph as JSON."""
    cfg = _load(config, dataset)

    try:
        data = asyncio.run(
            load_dataset(cfg.dataset.source, timeout=cfg.dataset.timeout_seconds)
        )
        graph = build(data, kind, revenue_year=cfg.dataset.revenue_year)
    except (DatasetLoadError, MissingCollectionError) as e:
        Console(stderr=True).print(f"[bold red]Error:[/bold red] {e}")
        raise click.Abort() from e

    click.echo(json.dumps(graph.to_dict(), indent=2))


@main.command(name="kinds")
def kinds_cmd() -> None:
    """List diagram kinds and their page containers."""
    for kind, container in DIAGRAM_SLOTS:
        console.print(f"{kind.value}\t{container}")


if __name__ == "__main__":
    main()
