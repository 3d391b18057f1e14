"""In-memory node position store.

One instance is owned by the host application and passed to whatever needs
to save or restore positions; entries live for the lifetime of that
instance. Keys (typically the graph's root path) are fully independent.
"""

from __future__ import annotations

from ..core.models import GraphNode, Position


class PositionStore:
    """Keyed map of node id to last-known position."""

    def __init__(self) -> None:
        self._positions: dict[str, dict[str, Position]] = {}

    def save(self, graph_id: str, nodes: list[GraphNode]) -> None:
        """Replace the stored positions for ``graph_id`` with those of ``nodes``."""
        self._positions[graph_id] = {node.id: node.position for node in nodes}

    def restore(self, graph_id: str, nodes: list[GraphNode]) -> list[GraphNode]:
        """Return ``nodes`` with stored positions applied where present.

        Nodes without a stored position keep their own; an unknown key
        returns the input unchanged.
        """
        saved = self._positions.get(graph_id)
        if saved is None:
            return nodes
        return [
            node.with_position(saved[node.id].x, saved[node.id].y) if node.id in saved else node
            for node in nodes
        ]

    def clear(self, graph_id: str) -> None:
        self._positions.pop(graph_id, None)

    def has(self, graph_id: str) -> bool:
        return graph_id in self._positions

    def __len__(self) -> int:
        return len(self._positions)
