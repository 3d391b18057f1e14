"""Mind-map layout: a deterministic, column-per-tier radial layout.

One document sits at the canvas center. Documents reached by a
breadth-first walk are placed in tiers by depth; each tier is sorted by
label and split into a left and a right column. External domains, when
shown, form a single row below the lowest document.

Node coordinates are centers, unlike the force and hierarchical layouts
which return top-left corners.

``MindMapNavigator`` carries the interaction state (pan, zoom, selection,
keyboard focus) that goes with a computed layout.
"""

from __future__ import annotations

import math
import time
from collections import deque
from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Literal

from loguru import logger

from ..config.defaults import (
    COLUMN_TOLERANCE,
    DOUBLE_CLICK_THRESHOLD_MS,
    FOCUS_PAN_PADDING,
    MAX_ZOOM,
    MIN_ZOOM,
    MINDMAP_CANVAS_PADDING,
    MINDMAP_CENTER_NODE_SCALE,
    MINDMAP_EXTERNAL_CENTER_LIFT,
    MINDMAP_EXTERNAL_CLUSTER_OFFSET,
    MINDMAP_EXTERNAL_NODE_GAP,
    MINDMAP_EXTERNAL_NODE_HEIGHT,
    MINDMAP_EXTERNAL_NODE_WIDTH,
    MINDMAP_HORIZONTAL_SPACING,
    MINDMAP_NODE_HEIGHT_BASE,
    MINDMAP_NODE_HEIGHT_WITH_DESC,
    MINDMAP_NODE_WIDTH,
    MINDMAP_OPEN_ICON_PADDING,
    MINDMAP_OPEN_ICON_SIZE,
    MINDMAP_VERTICAL_SPACING,
)
from ..core.exceptions import LayoutError
from ..core.models import (
    EdgeType,
    GraphEdge,
    GraphNode,
    document_node_id,
    is_document_node,
)

Side = Literal["left", "right", "center", "external"]
MindMapNodeType = Literal["document", "external"]


@dataclass
class MindMapNode:
    """A node as placed by the mind-map layout."""

    id: str
    label: str
    node_type: MindMapNodeType
    x: float = 0.0
    y: float = 0.0
    width: float = MINDMAP_NODE_WIDTH
    height: float = MINDMAP_NODE_HEIGHT_BASE
    depth: int = 0
    side: Side = "center"
    file_path: str | None = None
    description: str | None = None
    domain: str | None = None
    urls: list[str] = field(default_factory=list)
    line_count: int | None = None
    word_count: int | None = None
    size: str | None = None
    broken_links: list[str] | None = None
    is_large_file: bool | None = None
    is_selected: bool = False
    is_focused: bool = False
    connection_count: int = 0
    neighbors: frozenset[str] = frozenset()


@dataclass(frozen=True)
class MindMapLink:
    source: str
    target: str
    type: EdgeType = EdgeType.INTERNAL


@dataclass(frozen=True)
class Bounds:
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y


@dataclass
class MindMapLayout:
    nodes: list[MindMapNode]
    links: list[MindMapLink]
    bounds: Bounds

    def find(self, node_id: str) -> MindMapNode | None:
        return next((n for n in self.nodes if n.id == node_id), None)

    @property
    def center_node(self) -> MindMapNode | None:
        return next((n for n in self.nodes if n.side == "center"), None)


def _document_height(node: MindMapNode) -> float:
    return MINDMAP_NODE_HEIGHT_WITH_DESC if node.description else MINDMAP_NODE_HEIGHT_BASE


def _label_key(label: str) -> tuple[str, str]:
    return label.casefold(), label


def convert_to_mind_map_data(
    nodes: list[GraphNode], edges: list[GraphEdge]
) -> tuple[list[MindMapNode], list[MindMapLink]]:
    """Convert builder output into unplaced mind-map nodes and links.

    Each node carries its undirected neighbor set and connection count.
    """
    neighbor_map: dict[str, set[str]] = {}
    for edge in edges:
        neighbor_map.setdefault(edge.source, set()).add(edge.target)
        neighbor_map.setdefault(edge.target, set()).add(edge.source)

    converted: list[MindMapNode] = []
    for node in nodes:
        neighbors = frozenset(neighbor_map.get(node.id, ()))
        data = node.data
        if is_document_node(data):
            converted.append(
                MindMapNode(
                    id=node.id,
                    label=data.title,
                    node_type="document",
                    height=(
                        MINDMAP_NODE_HEIGHT_WITH_DESC
                        if data.description
                        else MINDMAP_NODE_HEIGHT_BASE
                    ),
                    file_path=data.file_path,
                    description=data.description,
                    line_count=data.line_count,
                    word_count=data.word_count,
                    size=data.size,
                    broken_links=data.broken_links,
                    is_large_file=data.is_large_file,
                    neighbors=neighbors,
                    connection_count=len(neighbors),
                )
            )
        else:
            converted.append(
                MindMapNode(
                    id=node.id,
                    label=data.domain,
                    node_type="external",
                    width=MINDMAP_EXTERNAL_NODE_WIDTH,
                    height=MINDMAP_EXTERNAL_NODE_HEIGHT,
                    side="external",
                    domain=data.domain,
                    urls=list(data.urls),
                    neighbors=neighbors,
                    connection_count=len(neighbors),
                )
            )

    links = [
        MindMapLink(
            edge.source,
            edge.target,
            EdgeType.EXTERNAL if edge.type == EdgeType.EXTERNAL else EdgeType.INTERNAL,
        )
        for edge in edges
    ]
    return converted, links


def find_center_node(nodes: list[MindMapNode], center_file_path: str) -> MindMapNode | None:
    """Resolve the center document by id, then by stored file path.

    Leading slashes on either side are ignored.
    """
    stripped = center_file_path.lstrip("/")
    by_id = {n.id: n for n in nodes}
    for candidate in (document_node_id(center_file_path), document_node_id(stripped)):
        if candidate in by_id:
            return by_id[candidate]

    for node in nodes:
        if node.node_type != "document" or node.file_path is None:
            continue
        if node.file_path in (center_file_path, stripped) or node.file_path.lstrip("/") == stripped:
            return node
    return None


def _neighborhood(
    links: list[MindMapLink], center_id: str, max_depth: int
) -> dict[str, int]:
    """Breadth-first depth of every node within ``max_depth`` of the center."""
    adjacency: dict[str, set[str]] = {}
    for link in links:
        adjacency.setdefault(link.source, set()).add(link.target)
        adjacency.setdefault(link.target, set()).add(link.source)

    visited = {center_id: 0}
    queue = deque([center_id])
    while queue:
        current = queue.popleft()
        depth = visited[current]
        if depth >= max_depth:
            continue
        # Sorted so the visit order does not depend on set iteration
        for neighbor in sorted(adjacency.get(current, ())):
            if neighbor not in visited:
                visited[neighbor] = depth + 1
                queue.append(neighbor)
    return visited


def _place_column(
    column: list[MindMapNode], x: float, center_y: float, depth: int, side: Side
) -> list[MindMapNode]:
    start_y = center_y - len(column) * MINDMAP_VERTICAL_SPACING / 2 + MINDMAP_VERTICAL_SPACING / 2
    return [
        replace(
            node,
            x=x,
            y=start_y + index * MINDMAP_VERTICAL_SPACING,
            width=MINDMAP_NODE_WIDTH,
            height=_document_height(node),
            depth=depth,
            side=side,
        )
        for index, node in enumerate(column)
    ]


def calculate_mind_map_layout(
    nodes: list[MindMapNode],
    links: list[MindMapLink],
    center_file_path: str,
    max_depth: int = 2,
    canvas_width: float = 1200,
    canvas_height: float = 800,
    show_external_links: bool = False,
) -> MindMapLayout:
    """Place nodes around a center document.

    Args:
        nodes: Nodes from ``convert_to_mind_map_data``
        links: Links from ``convert_to_mind_map_data``
        center_file_path: Relative path of the center document
        max_depth: Breadth-first depth limit
        canvas_width: Canvas width; the center sits at its midpoint
        canvas_height: Canvas height
        show_external_links: Whether in-range external domains are placed

    Returns:
        The placed layout. If the center cannot be found the layout is empty
        with bounds covering the canvas.

    Raises:
        LayoutError: If ``max_depth`` is negative
    """
    if max_depth < 0:
        raise LayoutError(f"max_depth must be >= 0, got {max_depth}", {"max_depth": max_depth})

    center = find_center_node(nodes, center_file_path)
    if center is None:
        available = [n.file_path for n in nodes if n.node_type == "document"]
        more = f" ... and {len(available) - 10} more" if len(available) > 10 else ""
        logger.warning(
            f"Mind map center not found for path: {center_file_path!r}. "
            f"Available document nodes: {available[:10]}{more}"
        )
        return MindMapLayout([], [], Bounds(0, canvas_width, 0, canvas_height))

    visited = _neighborhood(links, center.id, max_depth)
    in_range = [
        n
        for n in nodes
        if n.id in visited and (n.node_type == "document" or show_external_links)
    ]
    externals = sorted(
        (n for n in in_range if n.node_type == "external"),
        key=lambda n: _label_key(n.domain or ""),
    )

    center_x = canvas_width / 2
    center_y = canvas_height / 2 - (MINDMAP_EXTERNAL_CENTER_LIFT if externals else 0)

    placed: list[MindMapNode] = [
        replace(
            center,
            x=center_x,
            y=center_y,
            width=MINDMAP_NODE_WIDTH * MINDMAP_CENTER_NODE_SCALE,
            height=_document_height(center) * MINDMAP_CENTER_NODE_SCALE,
            depth=0,
            side="center",
            is_focused=True,
        )
    ]

    tiers: dict[int, list[MindMapNode]] = {}
    for node in in_range:
        if node.node_type == "document" and node.id != center.id:
            tiers.setdefault(visited[node.id], []).append(node)

    for depth in range(1, max_depth + 1):
        tier = sorted(tiers.get(depth, []), key=lambda n: _label_key(n.label))
        if not tier:
            continue
        midpoint = math.ceil(len(tier) / 2)
        offset = MINDMAP_HORIZONTAL_SPACING * depth
        placed.extend(_place_column(tier[:midpoint], center_x - offset, center_y, depth, "left"))
        placed.extend(_place_column(tier[midpoint:], center_x + offset, center_y, depth, "right"))

    if externals:
        lowest = max(abs(n.y - center_y) for n in placed)
        external_y = center_y + lowest + MINDMAP_EXTERNAL_CLUSTER_OFFSET
        step = MINDMAP_EXTERNAL_NODE_WIDTH + MINDMAP_EXTERNAL_NODE_GAP
        start_x = center_x - len(externals) * step / 2 + MINDMAP_EXTERNAL_NODE_WIDTH / 2
        placed.extend(
            replace(
                node,
                x=start_x + index * step,
                y=external_y,
                width=MINDMAP_EXTERNAL_NODE_WIDTH,
                height=MINDMAP_EXTERNAL_NODE_HEIGHT,
                depth=1,
                side="external",
            )
            for index, node in enumerate(externals)
        )

    placed_ids = {n.id for n in placed}
    used_links = [
        link for link in links if link.source in placed_ids and link.target in placed_ids
    ]

    xs = [n.x for n in placed]
    ys = [n.y for n in placed]
    half_w = MINDMAP_NODE_WIDTH / 2 + MINDMAP_CANVAS_PADDING
    half_h = MINDMAP_NODE_HEIGHT_WITH_DESC / 2 + MINDMAP_CANVAS_PADDING
    bounds = Bounds(min(xs) - half_w, max(xs) + half_w, min(ys) - half_h, max(ys) + half_h)

    return MindMapLayout(placed, used_links, bounds)


def node_matches_search(node: MindMapNode, query: str) -> bool:
    """Case-insensitive substring match; a blank query matches everything.

    Documents match on label, file path or description; external nodes on
    domain or any URL.
    """
    if not query.strip():
        return True
    needle = query.lower()
    if node.node_type == "document":
        fields = (node.label, node.file_path, node.description)
    else:
        fields = (node.domain, *node.urls)
    return any(needle in value.lower() for value in fields if value)


# ─── Interaction ────────────────────────────────────────────────────────────


class InteractionAction(StrEnum):
    SELECT = "select"
    CLEAR = "clear"
    RECENTER = "recenter"
    OPEN_FILE = "open_file"
    OPEN_URL = "open_url"
    FOCUS = "focus"
    NONE = "none"


@dataclass(frozen=True)
class InteractionResult:
    """What the host should do in response to an input event.

    ``target`` is a file path for OPEN_FILE/RECENTER and a URL for OPEN_URL.
    """

    action: InteractionAction
    node: MindMapNode | None = None
    target: str | None = None


ARROW_KEYS = ("ArrowUp", "ArrowDown", "ArrowLeft", "ArrowRight")


class MindMapNavigator:
    """Pan, zoom, selection and keyboard focus over a mind-map layout.

    Pointer coordinates passed to the ``handle_*`` methods are canvas
    coordinates; use ``screen_to_canvas`` to translate raw pointer events.
    """

    def __init__(
        self,
        layout: MindMapLayout,
        viewport_width: float,
        viewport_height: float,
        zoom: float = 1.0,
    ) -> None:
        self.layout = layout
        self.viewport_width = viewport_width
        self.viewport_height = viewport_height
        self.zoom = zoom
        self.pan_x = 0.0
        self.pan_y = 0.0
        self.selected_node_id: str | None = None
        self.focused_node_id: str | None = None
        self.hovered_node_id: str | None = None
        self._last_click: tuple[str, float] | None = None
        self.center_on_center_node()

    @property
    def nodes(self) -> list[MindMapNode]:
        """Layout nodes with the current selection applied."""
        return [
            replace(n, is_selected=n.id == self.selected_node_id) for n in self.layout.nodes
        ]

    def screen_to_canvas(
        self, screen_x: float, screen_y: float, origin_x: float = 0.0, origin_y: float = 0.0
    ) -> tuple[float, float]:
        """Translate a pointer position to canvas space.

        ``origin_x``/``origin_y`` are the viewport's top-left on screen.
        """
        return (
            (screen_x - origin_x - self.pan_x) / self.zoom,
            (screen_y - origin_y - self.pan_y) / self.zoom,
        )

    def center_on_center_node(self) -> None:
        center = self.layout.center_node
        if center is None:
            return
        self.pan_x = self.viewport_width / 2 - center.x * self.zoom
        self.pan_y = self.viewport_height / 2 - center.y * self.zoom

    def find_node_at_point(self, x: float, y: float) -> MindMapNode | None:
        """Top-most node whose footprint contains the point."""
        for node in reversed(self.layout.nodes):
            if (
                node.x - node.width / 2 <= x <= node.x + node.width / 2
                and node.y - node.height / 2 <= y <= node.y + node.height / 2
            ):
                return node
        return None

    @staticmethod
    def is_point_on_open_icon(node: MindMapNode, x: float, y: float) -> bool:
        """Hit-test the open affordance in a document node's top-right corner."""
        if node.node_type != "document":
            return False
        icon_x = node.x + node.width / 2 - MINDMAP_OPEN_ICON_SIZE - MINDMAP_OPEN_ICON_PADDING
        icon_y = node.y - node.height / 2 + MINDMAP_OPEN_ICON_PADDING
        return (
            icon_x <= x <= icon_x + MINDMAP_OPEN_ICON_SIZE
            and icon_y <= y <= icon_y + MINDMAP_OPEN_ICON_SIZE
        )

    def handle_hover(self, x: float, y: float) -> MindMapNode | None:
        node = self.find_node_at_point(x, y)
        self.hovered_node_id = node.id if node else None
        return node

    def handle_click(self, x: float, y: float, now_ms: float | None = None) -> InteractionResult:
        """Single click selects, a second click on the same node within the
        double-click window recenters on it, the open icon opens the file and
        a background click clears the selection.
        """
        now = time.monotonic() * 1000 if now_ms is None else now_ms
        node = self.find_node_at_point(x, y)

        if node is None:
            self.selected_node_id = None
            self.focused_node_id = None
            self._last_click = None
            return InteractionResult(InteractionAction.CLEAR)

        if node.file_path and self.is_point_on_open_icon(node, x, y):
            return InteractionResult(InteractionAction.OPEN_FILE, node, node.file_path)

        last = self._last_click
        if last and last[0] == node.id and now - last[1] < DOUBLE_CLICK_THRESHOLD_MS:
            self._last_click = None
            return self._activate(node)

        self.selected_node_id = node.id
        self.focused_node_id = node.id
        self._last_click = (node.id, now)
        return InteractionResult(InteractionAction.SELECT, node)

    def _activate(self, node: MindMapNode) -> InteractionResult:
        if node.node_type == "document":
            return InteractionResult(InteractionAction.RECENTER, node, node.file_path)
        if node.urls:
            return InteractionResult(InteractionAction.OPEN_URL, node, node.urls[0])
        return InteractionResult(InteractionAction.NONE, node)

    def handle_key(self, key: str) -> InteractionResult:
        """Keyboard navigation.

        Arrows move focus (the first arrow press focuses the center), Enter
        recenters on a document or opens an external node's first URL and
        ``o`` opens the focused document.
        """
        focused = self.layout.find(self.focused_node_id) if self.focused_node_id else None
        if focused is None:
            if key in ARROW_KEYS and (center := self.layout.center_node) is not None:
                self._focus(center)
                return InteractionResult(InteractionAction.FOCUS, center)
            return InteractionResult(InteractionAction.NONE)

        if key in ARROW_KEYS:
            target = self._next_node(focused, key)
            if target is None:
                return InteractionResult(InteractionAction.NONE, focused)
            self._focus(target)
            self._keep_visible(target)
            return InteractionResult(InteractionAction.FOCUS, target)

        if key == "Enter":
            return self._activate(focused)

        if key in ("o", "O") and focused.node_type == "document" and focused.file_path:
            return InteractionResult(InteractionAction.OPEN_FILE, focused, focused.file_path)

        return InteractionResult(InteractionAction.NONE, focused)

    def _focus(self, node: MindMapNode) -> None:
        self.focused_node_id = node.id
        self.selected_node_id = node.id

    def _next_node(self, focused: MindMapNode, key: str) -> MindMapNode | None:
        others = [n for n in self.layout.nodes if n.id != focused.id]
        if key == "ArrowUp":
            above = [n for n in others if n.side == focused.side and n.y < focused.y]
            return max(above, key=lambda n: n.y, default=None)
        if key == "ArrowDown":
            below = [n for n in others if n.side == focused.side and n.y > focused.y]
            return min(below, key=lambda n: n.y, default=None)
        if key == "ArrowLeft":
            candidates = [n for n in others if n.x < focused.x - COLUMN_TOLERANCE]
        else:
            candidates = [n for n in others if n.x > focused.x + COLUMN_TOLERANCE]
        return min(candidates, key=lambda n: abs(n.y - focused.y), default=None)

    def _keep_visible(self, node: MindMapNode) -> None:
        """Pan just enough to keep the node inside the padded viewport."""
        screen_x = node.x * self.zoom + self.pan_x
        screen_y = node.y * self.zoom + self.pan_y
        padding = FOCUS_PAN_PADDING

        if screen_x < padding:
            self.pan_x = padding - node.x * self.zoom
        elif screen_x > self.viewport_width - padding:
            self.pan_x = self.viewport_width - padding - node.x * self.zoom

        if screen_y < padding:
            self.pan_y = padding - node.y * self.zoom
        elif screen_y > self.viewport_height - padding:
            self.pan_y = self.viewport_height - padding - node.y * self.zoom

    def pan_by(self, dx: float, dy: float) -> None:
        self.pan_x += dx
        self.pan_y += dy

    def zoom_at(self, x: float, y: float, delta_y: float) -> None:
        """Wheel zoom toward the pointer at viewport position (x, y)."""
        delta = -delta_y * 0.001
        new_zoom = min(max(self.zoom + delta * self.zoom, MIN_ZOOM), MAX_ZOOM)
        ratio = new_zoom / self.zoom
        self.pan_x = x - (x - self.pan_x) * ratio
        self.pan_y = y - (y - self.pan_y) * ratio
        self.zoom = new_zoom
