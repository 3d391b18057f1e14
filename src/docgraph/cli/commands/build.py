"""Build command: scan a document tree and summarise its link graph."""

import asyncio
from pathlib import Path

import typer
from rich.table import Table

from ...config.settings import DocGraphSettings
from ...core.exceptions import DocGraphError
from ...core.graph_builder import build_graph_data
from ...core.models import EdgeType, GraphData, NodeType, is_document_node
from ...core.progress import BuildProgressReporter
from ..output import console, print_error, print_json


def load_graph(
    root: Path,
    include_external_links: bool,
    max_nodes: int | None,
    offset: int,
    show_progress: bool,
    verbose: bool = False,
) -> GraphData:
    """Run a build, turning build failures into a CLI error exit."""
    reporter = BuildProgressReporter(console, verbose=verbose) if show_progress else None
    try:
        graph = asyncio.run(
            build_graph_data(
                str(root),
                include_external_links=include_external_links,
                max_nodes=max_nodes,
                offset=offset,
                on_progress=reporter,
            )
        )
    except DocGraphError as e:
        print_error(f"[red]Could not load document graph:[/red] {e}")
        raise typer.Exit(1)

    if reporter is not None:
        reporter.complete(graph)
    return graph


def _summary_table(graph: GraphData) -> Table:
    table = Table(title="Document Graph", show_header=True)
    table.add_column("Metric", style="cyan", width=24)
    table.add_column("Value", style="green")

    internal = sum(1 for e in graph.edges if e.type == EdgeType.INTERNAL)
    broken = sum(
        len(n.data.broken_links or [])
        for n in graph.nodes
        if n.type == NodeType.DOCUMENT and is_document_node(n.data)
    )
    large = sum(
        1 for n in graph.nodes if is_document_node(n.data) and n.data.is_large_file
    )
    cache = graph.cached_external_data

    table.add_row("Documents discovered", f"{graph.total_documents:,}")
    table.add_row("Documents loaded", f"{graph.loaded_documents:,}")
    table.add_row("Internal links", f"{internal:,}")
    table.add_row("Broken links", f"{broken:,}")
    table.add_row("Large files (truncated)", f"{large:,}")
    table.add_row("External domains", f"{cache.domain_count:,}")
    table.add_row("External links", f"{cache.total_link_count:,}")
    table.add_row("More available", "yes" if graph.has_more else "no")
    return table


def main(
    ctx: typer.Context,
    root: Path = typer.Argument(
        ...,
        help="Root directory of the document tree",
        exists=True,
        file_okay=False,
        dir_okay=True,
        readable=True,
    ),
    external: bool | None = typer.Option(
        None, "--external/--no-external", help="Include external-domain nodes"
    ),
    max_nodes: int | None = typer.Option(
        None, "--max-nodes", "-n", min=1, help="Load at most this many documents"
    ),
    offset: int = typer.Option(0, "--offset", min=0, help="Skip this many documents"),
    json_output: bool = typer.Option(False, "--json", help="Print the full graph as JSON"),
) -> None:
    """📄 Build the link graph of a markdown tree and print a summary.

    [bold cyan]Examples:[/bold cyan]

    [green]Summarise a docs folder:[/green]
        $ docgraph build ./docs

    [green]Second page of 25 documents, as JSON:[/green]
        $ docgraph build ./docs --max-nodes 25 --offset 25 --json
    """
    settings: DocGraphSettings = ctx.obj["settings"]
    graph = load_graph(
        root,
        include_external_links=settings.include_external_links if external is None else external,
        max_nodes=max_nodes or settings.max_nodes,
        offset=offset,
        show_progress=not json_output,
        verbose=ctx.obj["verbose"],
    )

    if json_output:
        print_json(graph.to_dict())
    else:
        console.print(_summary_table(graph))
