"""Animated transitions between two layouts of the same nodes."""

from __future__ import annotations

from ..core.models import GraphNode, Position

DEFAULT_FRAME_COUNT = 30


def interpolate_position(start: Position, end: Position, t: float) -> Position:
    """Ease-out cubic interpolation; ``t`` is clamped to [0, 1]."""
    clamped = max(0.0, min(1.0, t))
    eased = 1 - (1 - clamped) ** 3
    return Position(
        start.x + (end.x - start.x) * eased,
        start.y + (end.y - start.y) * eased,
    )


def create_layout_transition_frames(
    start_nodes: list[GraphNode],
    end_nodes: list[GraphNode],
    frame_count: int = DEFAULT_FRAME_COUNT,
) -> list[list[GraphNode]]:
    """Frames animating ``start_nodes`` toward the positions in ``end_nodes``.

    Returns ``frame_count + 1`` frames, the first at the start positions and
    the last at the end positions. Nodes absent from ``end_nodes`` stay put.
    With an empty side or fewer than two frames, only ``[end_nodes]`` is
    returned.
    """
    if not start_nodes or not end_nodes or frame_count <= 1:
        return [end_nodes]

    end_positions = {node.id: node.position for node in end_nodes}
    frames = []
    for i in range(frame_count + 1):
        t = i / frame_count
        frame = []
        for node in start_nodes:
            end = end_positions.get(node.id)
            if end is None:
                frame.append(node)
                continue
            pos = interpolate_position(node.position, end, t)
            frame.append(node.with_position(pos.x, pos.y))
        frames.append(frame)
    return frames
