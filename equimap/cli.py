"""
EQUIMAP CLI - build, inspect and query the toolkit map from a record file
"""
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from equimap import __version__
from equimap.graph import NodeType, validate_graph
from equimap.session import MapSession
from equimap.settings import EquimapSettings, reload_settings
from equimap.utils import DataLoadError, get_logger, read_json, setup_logging, write_json

console = Console()
logger = get_logger(__name__)

_TYPE_CHOICES = {t.value.lower(): t for t in NodeType}


def load_records(path: str | Path) -> tuple[list, list]:
    """Load records (and optional layer descriptions) from a JSON file.

    The file holds either a list of records or an object with ``records``
    and optional ``layerDescriptions`` keys.
    """
    try:
        data = read_json(path)
    except (OSError, ValueError) as e:
        raise DataLoadError(f"Could not read records from {path}: {e}") from e

    if isinstance(data, list):
        return data, []
    if isinstance(data, dict) and isinstance(data.get("records"), list):
        return data["records"], list(data.get("layerDescriptions") or [])
    raise DataLoadError(f"{path} must contain a list of records or a 'records' list")


def _session(config: str | None, width: float | None, height: float | None, seed: int | None) -> MapSession:
    settings = reload_settings(config) if config else EquimapSettings()
    overrides = {}
    if width is not None:
        overrides["canvas_width"] = width
    if height is not None:
        overrides["canvas_height"] = height
    if seed is not None:
        overrides["seed"] = seed
    if overrides:
        settings = settings.model_copy(update=overrides)
    setup_logging(settings.log_level, str(settings.log_file) if settings.log_file else None)
    return MapSession(settings=settings)


# ═══════════════════════════════════════════════════════════════════
# MAIN CLI GROUP
# ═══════════════════════════════════════════════════════════════════

@click.group()
@click.version_option(version=__version__)
def main():
    """
    EQUIMAP - Internet Equalities toolkit map engine

    Builds the three-ring knowledge area / discipline / tool map from
    curated records and answers highlight queries against it.
    """
    pass


# ═══════════════════════════════════════════════════════════════════
# BUILD COMMANDS
# ═══════════════════════════════════════════════════════════════════

@main.command()
@click.argument('records_path', type=click.Path(exists=True, dir_okay=False))
@click.option('--width', type=float, help='Canvas width')
@click.option('--height', type=float, help='Canvas height')
@click.option('--seed', type=int, help='Layout random seed')
@click.option('--config', '-c', type=click.Path(exists=True, dir_okay=False), help='YAML settings file')
@click.option('--output', '-o', type=click.Path(), help='Write the map view as JSON')
def build(records_path, width, height, seed, config, output):
    """Build graph and layout from a records JSON file"""
    console.print(f"\n[bold blue]Building map from:[/bold blue] {records_path}")

    try:
        records, descriptions = load_records(records_path)
        session = _session(config, width, height, seed)
        view = session.rebuild(records, layer_descriptions=descriptions)

        report = validate_graph(view.graph)
        stats = report["statistics"]

        table = Table(title="Map Statistics")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="magenta")

        for node_type, count in stats["node_counts"].items():
            table.add_row(f"{node_type} nodes", str(count))
        table.add_row("Edges", str(stats["total_edges"]))
        table.add_row("Labelled edges", str(stats["labelled_edges"]))
        table.add_row("Tools with content", str(stats["tools_with_content"]))
        table.add_row("Skipped records", str(stats["skipped_records"]))
        table.add_row("Layout fallbacks", str(view.layout.fallback_count))

        console.print(table)

        if report["issues"]:
            console.print("\n[yellow]Invariant issues:[/yellow]")
            for issue in report["issues"]:
                console.print(f"  • {issue}")
        else:
            console.print("\n[green]✓ All graph invariants hold[/green]")

        if output:
            write_json(view.to_dict(), output)
            console.print(f"\n[green]✓ Saved to {output}[/green]")

    except Exception as e:
        console.print(f"\n[red]✗ Error: {e}[/red]")
        raise


# ═══════════════════════════════════════════════════════════════════
# QUERY COMMANDS
# ═══════════════════════════════════════════════════════════════════

@main.command()
@click.argument('records_path', type=click.Path(exists=True, dir_okay=False))
@click.argument('name')
@click.option('--type', 'node_type', type=click.Choice(sorted(_TYPE_CHOICES), case_sensitive=False),
              help='Restrict the lookup to one node type')
@click.option('--select', is_flag=True, help='Click the node instead of hovering it')
def focus(records_path, name, node_type, select):
    """Show the highlight for a node looked up by name"""
    try:
        records, descriptions = load_records(records_path)
        session = _session(None, None, None, None)
        session.rebuild(records, layer_descriptions=descriptions)

        wanted = _TYPE_CHOICES[node_type.lower()] if node_type else None
        matches = session.graph.find_by_name(name, wanted)
        if not matches:
            console.print(f"\n[red]✗ No node named '{name}'[/red]")
            raise SystemExit(1)
        if len(matches) > 1:
            console.print(
                f"\n[yellow]{len(matches)} nodes named '{name}', using the first "
                f"({matches[0].type.value})[/yellow]"
            )

        node = matches[0]
        snapshot = session.click(node.id) if select else session.hover(node.id)
        graph = session.graph

        console.print(f"\n[bold blue]{node.name}[/bold blue] ({node.type.value}) - {snapshot.phase.value}")
        detail = session.node_detail(node.id)
        if detail is not None:
            console.print(f"  {detail.description}")
            if detail.voice_hook:
                console.print(f"  [italic]{detail.voice_hook}[/italic]")
            if detail.related_work_count:
                console.print(f"  Related work: [cyan]{detail.related_work_count}[/cyan]")

        table = Table(title="Highlighted Neighbours")
        table.add_column("Neighbour", style="cyan")
        table.add_column("Type", style="green")
        table.add_column("Inequality", style="magenta")

        for neighbor_id in sorted(snapshot.neighbor_ids):
            neighbor = graph.get_node(neighbor_id)
            label = graph.label_for(node.id, neighbor_id) or ""
            table.add_row(neighbor.name, neighbor.type.value, label)

        console.print(table)
        console.print(
            f"\nActive edges: [cyan]{len(snapshot.active_edge_ids)}[/cyan], "
            f"visible labels: [cyan]{len(snapshot.visible_label_edge_ids)}[/cyan]"
        )

    except Exception as e:
        console.print(f"\n[red]✗ Error: {e}[/red]")
        raise


# ═══════════════════════════════════════════════════════════════════
# UTILITY COMMANDS
# ═══════════════════════════════════════════════════════════════════

@main.command()
@click.option('--config', '-c', type=click.Path(exists=True, dir_okay=False), help='YAML settings file')
def info(config):
    """Show active settings"""
    settings = reload_settings(config) if config else EquimapSettings()

    table = Table(title="EQUIMAP Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="magenta")

    for name, value in settings.model_dump().items():
        table.add_row(name, str(value))

    console.print(table)


if __name__ == '__main__':
    main()
