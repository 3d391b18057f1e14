"""Layout engines for document graphs."""

from .force import apply_force_layout
from .hierarchical import apply_hierarchical_layout
from .mind_map import (
    Bounds,
    InteractionAction,
    InteractionResult,
    MindMapLayout,
    MindMapLink,
    MindMapNavigator,
    MindMapNode,
    calculate_mind_map_layout,
    convert_to_mind_map_data,
    node_matches_search,
)
from .options import LayoutOptions
from .positions import PositionStore
from .transitions import create_layout_transition_frames, interpolate_position

__all__ = [
    "Bounds",
    "InteractionAction",
    "InteractionResult",
    "LayoutOptions",
    "MindMapLayout",
    "MindMapLink",
    "MindMapNavigator",
    "MindMapNode",
    "PositionStore",
    "apply_force_layout",
    "apply_hierarchical_layout",
    "calculate_mind_map_layout",
    "convert_to_mind_map_data",
    "create_layout_transition_frames",
    "interpolate_position",
    "node_matches_search",
]
