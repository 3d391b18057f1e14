"""Data models for document graphs.

Node payloads are a tagged union discriminated by ``node_type``: a
``DocumentNodeData`` describes one parsed markdown file, an
``ExternalLinkNodeData`` one aggregated external domain. Use
``is_document_node`` / ``is_external_link_node`` at component boundaries
instead of ``isinstance`` checks on the payload.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from enum import StrEnum
from typing import Any, Literal, TypeGuard


class NodeType(StrEnum):
    DOCUMENT = "documentNode"
    EXTERNAL = "externalLinkNode"


class EdgeType(StrEnum):
    INTERNAL = "internal"
    EXTERNAL = "external"


class ProgressPhase(StrEnum):
    SCANNING = "scanning"
    PARSING = "parsing"


DOCUMENT_ID_PREFIX = "doc-"
EXTERNAL_ID_PREFIX = "ext-"


def document_node_id(relative_path: str) -> str:
    """Node id for a document, derived 1:1 from its normalized relative path."""
    return f"{DOCUMENT_ID_PREFIX}{relative_path}"


def external_node_id(domain: str) -> str:
    return f"{EXTERNAL_ID_PREFIX}{domain}"


@dataclass(frozen=True)
class Position:
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class ExternalLink:
    """An external URL and the domain it points at."""

    url: str
    domain: str


@dataclass(frozen=True)
class DocumentStats:
    """Display metadata computed from a markdown document."""

    title: str
    line_count: int
    word_count: int
    size: str
    file_path: str
    description: str | None = None


@dataclass(frozen=True)
class DocumentNodeData:
    """Payload of a document node."""

    title: str
    line_count: int
    word_count: int
    size: str
    file_path: str
    description: str | None = None
    broken_links: list[str] | None = None
    is_large_file: bool | None = None
    node_type: Literal["document"] = "document"

    @classmethod
    def from_stats(
        cls,
        stats: DocumentStats,
        broken_links: list[str] | None = None,
        is_large_file: bool | None = None,
    ) -> DocumentNodeData:
        return cls(
            title=stats.title,
            line_count=stats.line_count,
            word_count=stats.word_count,
            size=stats.size,
            file_path=stats.file_path,
            description=stats.description,
            broken_links=broken_links,
            is_large_file=is_large_file,
        )


@dataclass(frozen=True)
class ExternalLinkNodeData:
    """Payload of an external-domain node."""

    domain: str
    link_count: int
    urls: list[str]
    node_type: Literal["external"] = "external"


GraphNodeData = DocumentNodeData | ExternalLinkNodeData


def is_document_node(data: GraphNodeData) -> TypeGuard[DocumentNodeData]:
    return data.node_type == "document"


def is_external_link_node(data: GraphNodeData) -> TypeGuard[ExternalLinkNodeData]:
    return data.node_type == "external"


@dataclass(frozen=True)
class GraphNode:
    """A positioned graph vertex.

    Layout engines never mutate a node; they return copies via
    ``with_position``.
    """

    id: str
    type: NodeType
    data: GraphNodeData
    position: Position = field(default_factory=Position)

    def with_position(self, x: float, y: float) -> GraphNode:
        return replace(self, position=Position(x, y))


@dataclass(frozen=True)
class GraphEdge:
    id: str
    source: str
    target: str
    type: EdgeType = EdgeType.INTERNAL


@dataclass
class ExternalLinkCache:
    """External-link data assembled on every build.

    Kept alongside the result so toggling external links on or off does not
    require a rescan.
    """

    external_nodes: list[GraphNode] = field(default_factory=list)
    external_edges: list[GraphEdge] = field(default_factory=list)
    domain_count: int = 0
    total_link_count: int = 0


@dataclass
class GraphData:
    """Result of a graph build."""

    nodes: list[GraphNode]
    edges: list[GraphEdge]
    total_documents: int
    loaded_documents: int
    has_more: bool
    cached_external_data: ExternalLinkCache = field(default_factory=ExternalLinkCache)

    def with_external_links(self, include: bool) -> GraphData:
        """Return a copy showing or hiding external nodes, without rescanning."""
        nodes = [n for n in self.nodes if n.type == NodeType.DOCUMENT]
        edges = [e for e in self.edges if e.type == EdgeType.INTERNAL]
        if include:
            nodes.extend(self.cached_external_data.external_nodes)
            edges.extend(self.cached_external_data.external_edges)
        return replace(self, nodes=nodes, edges=edges)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class BuildProgress:
    """Progress event emitted while a graph is built.

    During ``scanning`` ``total`` is always 0 and ``current`` counts visited
    directories. During ``parsing`` ``current`` is 1-indexed over the slice.
    """

    phase: ProgressPhase
    current: int
    total: int
    current_file: str | None = None
    internal_links_found: int | None = None
    external_links_found: int | None = None
