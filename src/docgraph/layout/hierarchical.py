"""Hierarchical (layered) layout.

Sugiyama-style pipeline on a networkx DiGraph:

  1. Cycle removal   greedy feedback-arc-set ordering, back-edges reversed
  2. Rank assignment longest path honouring each edge's ``minlen``
  3. Ordering        dummy nodes for long edges, barycenter sweeps
  4. Coordinates     ranks stacked along the rank axis, nodes packed along the other

Coordinates are computed for node centers and converted to top-left on
return. Disconnected nodes land on rank 0.
"""

from __future__ import annotations

from dataclasses import dataclass

import networkx as nx
from loguru import logger

from ..config.defaults import HIERARCHICAL_MARGIN
from ..core.exceptions import LayoutError
from ..core.models import EdgeType, GraphEdge, GraphNode
from .options import LayoutOptions, node_size

RANK_DIRECTIONS = ("TB", "LR")
ORDERING_SWEEPS = 4


@dataclass(frozen=True)
class _Dummy:
    """Virtual node on a long edge, one per intermediate rank."""

    source: str
    target: str
    rank: int


# ─── Cycle Removal ──────────────────────────────────────────────────────────


def greedy_fas_ordering(graph: nx.DiGraph) -> list[str]:
    """Order nodes so that few edges point backwards (Eades, Lin, Smyth).

    Sinks are peeled to the tail, sources to the head; when only cycles
    remain the node with the largest out/in surplus goes to the head.
    Ties are broken by insertion order so the result is stable.
    """
    rank_of = {node: i for i, node in enumerate(graph.nodes)}
    active = set(graph.nodes)
    out_deg = {node: graph.out_degree(node) for node in graph.nodes}
    in_deg = {node: graph.in_degree(node) for node in graph.nodes}
    head: list[str] = []
    tail: list[str] = []

    def take(node: str) -> None:
        active.discard(node)
        for succ in graph.successors(node):
            if succ in active:
                in_deg[succ] -= 1
        for pred in graph.predecessors(node):
            if pred in active:
                out_deg[pred] -= 1

    while active:
        sinks = sorted((n for n in active if out_deg[n] == 0), key=rank_of.get)
        while sinks:
            for sink in sinks:
                take(sink)
                tail.append(sink)
            sinks = sorted((n for n in active if out_deg[n] == 0), key=rank_of.get)

        sources = sorted((n for n in active if in_deg[n] == 0), key=rank_of.get)
        while sources:
            for source in sources:
                take(source)
                head.append(source)
            sources = sorted((n for n in active if in_deg[n] == 0), key=rank_of.get)

        if active:
            best = max(
                sorted(active, key=rank_of.get),
                key=lambda n: out_deg[n] - in_deg[n],
            )
            take(best)
            head.append(best)

    return head + tail[::-1]


def remove_cycles(graph: nx.DiGraph) -> nx.DiGraph:
    """Copy of ``graph`` with back-edges reversed so it is acyclic."""
    position = {node: i for i, node in enumerate(greedy_fas_ordering(graph))}
    dag = nx.DiGraph()
    dag.add_nodes_from(graph.nodes(data=True))
    for src, tgt, attrs in graph.edges(data=True):
        if position[src] > position[tgt]:
            src, tgt = tgt, src
        if dag.has_edge(src, tgt):
            attrs = {"minlen": max(attrs["minlen"], dag.edges[src, tgt]["minlen"])}
        dag.add_edge(src, tgt, **attrs)
    return dag


# ─── Rank Assignment ────────────────────────────────────────────────────────


def assign_ranks(dag: nx.DiGraph) -> dict[str, int]:
    """Longest-path ranking: rank(v) = max(rank(u) + minlen(u, v))."""
    ranks: dict[str, int] = {}
    for node in nx.topological_sort(dag):
        ranks[node] = max(
            (ranks[pred] + dag.edges[pred, node]["minlen"] for pred in dag.predecessors(node)),
            default=0,
        )
    return ranks


# ─── Ordering ───────────────────────────────────────────────────────────────


def _build_layers(
    dag: nx.DiGraph, ranks: dict[str, int]
) -> tuple[list[list[str | _Dummy]], nx.DiGraph]:
    """Split long edges with dummy nodes and group nodes per rank."""
    layered = nx.DiGraph()
    layered.add_nodes_from(dag.nodes)
    for src, tgt in dag.edges:
        chain: list[str | _Dummy] = [src]
        chain.extend(_Dummy(src, tgt, r) for r in range(ranks[src] + 1, ranks[tgt]))
        chain.append(tgt)
        nx.add_path(layered, chain)

    layer_count = max(ranks.values()) + 1
    layers: list[list[str | _Dummy]] = [[] for _ in range(layer_count)]
    for node in layered.nodes:
        rank = node.rank if isinstance(node, _Dummy) else ranks[node]
        layers[rank].append(node)
    return layers, layered


def _barycenter_sweep(
    layers: list[list[str | _Dummy]], layered: nx.DiGraph, downward: bool
) -> None:
    indices = range(1, len(layers)) if downward else range(len(layers) - 2, -1, -1)
    for i in indices:
        fixed = layers[i - 1] if downward else layers[i + 1]
        fixed_pos = {node: p for p, node in enumerate(fixed)}
        neighbours = layered.predecessors if downward else layered.successors

        def barycenter(item: tuple[int, str | _Dummy]) -> float:
            current, node = item
            adjacent = [fixed_pos[n] for n in neighbours(node) if n in fixed_pos]
            return sum(adjacent) / len(adjacent) if adjacent else float(current)

        layers[i] = [node for _, node in sorted(enumerate(layers[i]), key=barycenter)]


def order_layers(
    layers: list[list[str | _Dummy]], layered: nx.DiGraph
) -> list[list[str | _Dummy]]:
    """Reduce edge crossings with alternating barycenter sweeps."""
    ordered = [list(layer) for layer in layers]
    for sweep in range(ORDERING_SWEEPS):
        _barycenter_sweep(ordered, layered, downward=sweep % 2 == 0)
    return ordered


# ─── Entry Point ────────────────────────────────────────────────────────────


def apply_hierarchical_layout(
    nodes: list[GraphNode],
    edges: list[GraphEdge],
    options: LayoutOptions | None = None,
) -> list[GraphNode]:
    """Position nodes in ranks.

    Args:
        nodes: Nodes to position
        edges: Directed edges; those with a missing endpoint are dropped
        options: Rank direction and node/rank separation

    Returns:
        New node list with top-left positions (inputs are not mutated)

    Raises:
        LayoutError: If the rank direction is not "TB" or "LR"
    """
    opts = options or LayoutOptions()
    if opts.rank_direction not in RANK_DIRECTIONS:
        raise LayoutError(
            f"Unsupported rank direction: {opts.rank_direction}",
            context={"rank_direction": opts.rank_direction},
        )
    if not nodes:
        return []

    sizes = {node.id: node_size(node, opts) for node in nodes}
    graph = nx.DiGraph()
    graph.add_nodes_from(sizes)
    for edge in edges:
        if edge.source not in sizes or edge.target not in sizes:
            continue
        if edge.source == edge.target:
            continue
        minlen = 2 if edge.type == EdgeType.EXTERNAL else 1
        if graph.has_edge(edge.source, edge.target):
            minlen = max(minlen, graph.edges[edge.source, edge.target]["minlen"])
        graph.add_edge(edge.source, edge.target, minlen=minlen)

    dag = remove_cycles(graph)
    ranks = assign_ranks(dag)
    layers, layered = _build_layers(dag, ranks)
    layers = order_layers(layers, layered)

    # Breadth runs along a rank, depth across ranks
    horizontal = opts.rank_direction == "TB"

    def breadth(node: str | _Dummy) -> float:
        if isinstance(node, _Dummy):
            return 0.0
        width, height = sizes[node]
        return width if horizontal else height

    def depth(node: str | _Dummy) -> float:
        if isinstance(node, _Dummy):
            return 0.0
        width, height = sizes[node]
        return height if horizontal else width

    centers: dict[str, tuple[float, float]] = {}
    rank_offset = 0.0
    for layer in layers:
        rank_depth = max((depth(node) for node in layer), default=0.0)
        span = sum(breadth(node) for node in layer) + opts.node_separation * (len(layer) - 1)
        cursor = -span / 2
        for node in layer:
            size = breadth(node)
            if not isinstance(node, _Dummy):
                along = cursor + size / 2
                across = rank_offset + rank_depth / 2
                centers[node] = (along, across) if horizontal else (across, along)
            cursor += size + opts.node_separation
        rank_offset += rank_depth + opts.rank_separation

    # Shift so the top-left corner of the drawing sits on the margin
    min_x = min(cx - sizes[nid][0] / 2 for nid, (cx, _) in centers.items())
    min_y = min(cy - sizes[nid][1] / 2 for nid, (_, cy) in centers.items())
    shift_x = HIERARCHICAL_MARGIN - min_x
    shift_y = HIERARCHICAL_MARGIN - min_y

    logger.debug(
        f"Hierarchical layout: {len(nodes)} nodes, {dag.number_of_edges()} edges, "
        f"{len(layers)} ranks ({opts.rank_direction})"
    )

    positioned = []
    for node in nodes:
        cx, cy = centers[node.id]
        width, height = sizes[node.id]
        positioned.append(
            node.with_position(cx + shift_x - width / 2, cy + shift_y - height / 2)
        )
    return positioned
