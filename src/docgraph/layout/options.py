"""Shared options for the force and hierarchical layouts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from ..config.defaults import (
    DEFAULT_NODE_HEIGHT,
    DEFAULT_NODE_SEPARATION,
    DEFAULT_NODE_WIDTH,
    DEFAULT_RANK_SEPARATION,
    EXTERNAL_NODE_LAYOUT_HEIGHT,
    EXTERNAL_NODE_LAYOUT_WIDTH,
)
from ..core.models import GraphNode, NodeType


@dataclass(frozen=True)
class LayoutOptions:
    """Layout configuration.

    Attributes:
        node_width: Document node width
        node_height: Document node height
        rank_direction: "TB" (top to bottom) or "LR" (left to right), hierarchical only
        node_separation: Gap between nodes (hierarchical) or base edge length (force)
        rank_separation: Gap between ranks, hierarchical only
        center_x: Force layout center
        center_y: Force layout center
    """

    node_width: float = DEFAULT_NODE_WIDTH
    node_height: float = DEFAULT_NODE_HEIGHT
    rank_direction: Literal["TB", "LR"] = "TB"
    node_separation: float = DEFAULT_NODE_SEPARATION
    rank_separation: float = DEFAULT_RANK_SEPARATION
    center_x: float = 0.0
    center_y: float = 0.0


def node_size(node: GraphNode, options: LayoutOptions) -> tuple[float, float]:
    """Footprint (width, height) of a node; external nodes are smaller."""
    if node.type == NodeType.EXTERNAL:
        return EXTERNAL_NODE_LAYOUT_WIDTH, EXTERNAL_NODE_LAYOUT_HEIGHT
    return options.node_width, options.node_height
