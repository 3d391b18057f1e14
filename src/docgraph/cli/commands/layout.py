"""Layout command: build a graph and print positioned nodes as JSON."""

from pathlib import Path
from typing import Any

import typer

from ...config.settings import DocGraphSettings
from ...core.exceptions import LayoutError
from ...core.models import GraphData, is_document_node
from ...layout import (
    LayoutOptions,
    apply_force_layout,
    apply_hierarchical_layout,
    calculate_mind_map_layout,
    convert_to_mind_map_data,
)
from ..output import print_error, print_json
from .build import load_graph


def _mind_map_output(
    graph: GraphData,
    center: str | None,
    depth: int,
    settings: DocGraphSettings,
    external: bool,
) -> dict[str, Any]:
    if center is None:
        documents = [n.data.file_path for n in graph.nodes if is_document_node(n.data)]
        if not documents:
            return {"nodes": [], "links": []}
        center = sorted(documents)[0]

    nodes, links = convert_to_mind_map_data(graph.nodes, graph.edges)
    result = calculate_mind_map_layout(
        nodes,
        links,
        center,
        max_depth=depth,
        canvas_width=settings.canvas_width,
        canvas_height=settings.canvas_height,
        show_external_links=external,
    )
    return {
        "center": center,
        "bounds": {
            "min_x": result.bounds.min_x,
            "max_x": result.bounds.max_x,
            "min_y": result.bounds.min_y,
            "max_y": result.bounds.max_y,
        },
        "nodes": [
            {
                "id": n.id,
                "label": n.label,
                "x": n.x,
                "y": n.y,
                "width": n.width,
                "height": n.height,
                "depth": n.depth,
                "side": n.side,
            }
            for n in result.nodes
        ],
        "links": [
            {"source": link.source, "target": link.target, "type": link.type}
            for link in result.links
        ],
    }


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
    algorithm: str | None = typer.Option(
        None, "--algorithm", "-a", help="mindmap, force or hierarchical"
    ),
    center: str | None = typer.Option(
        None, "--center", "-c", help="Center document for the mind map (relative path)"
    ),
    depth: int | None = typer.Option(
        None, "--depth", "-d", min=1, max=5, help="Mind map depth"
    ),
    external: bool | None = typer.Option(
        None, "--external/--no-external", help="Include external-domain nodes"
    ),
    direction: str | None = typer.Option(
        None, "--direction", help="Hierarchical rank direction: TB or LR"
    ),
    max_nodes: int | None = typer.Option(
        None, "--max-nodes", "-n", min=1, help="Load at most this many documents"
    ),
    seed: int | None = typer.Option(None, "--seed", help="Seed for the force layout"),
) -> None:
    """📐 Lay out a document graph and print node positions as JSON."""
    settings: DocGraphSettings = ctx.obj["settings"]
    algorithm = algorithm or settings.layout_algorithm
    include_external = settings.include_external_links if external is None else external

    graph = load_graph(
        root,
        include_external_links=include_external,
        max_nodes=max_nodes or settings.max_nodes,
        offset=0,
        show_progress=False,
    )

    try:
        if algorithm == "mindmap":
            output = _mind_map_output(
                graph, center, depth or settings.max_depth, settings, include_external
            )
        elif algorithm in ("force", "hierarchical"):
            options = LayoutOptions(
                rank_direction=direction or settings.rank_direction,
                center_x=settings.canvas_width / 2,
                center_y=settings.canvas_height / 2,
            )
            if algorithm == "force":
                nodes = apply_force_layout(graph.nodes, graph.edges, options, seed=seed)
            else:
                nodes = apply_hierarchical_layout(graph.nodes, graph.edges, options)
            output = {
                "nodes": [
                    {"id": n.id, "type": n.type, "x": n.position.x, "y": n.position.y}
                    for n in nodes
                ],
                "edges": [
                    {"source": e.source, "target": e.target, "type": e.type}
                    for e in graph.edges
                ],
            }
        else:
            raise LayoutError(f"Unknown layout algorithm: {algorithm}")
    except LayoutError as e:
        print_error(str(e))
        raise typer.Exit(1)

    print_json(output)
