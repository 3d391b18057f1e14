"""Graph data construction for document trees.

Scans a root directory for markdown documents, parses a (possibly paginated)
slice of them, and assembles document nodes, external-domain nodes and the
edges between them.

Link classification against the scan:
    - target never discovered            -> recorded in the node's broken links
    - target discovered but not loaded   -> no edge, not broken (next page)
    - target discovered and loaded       -> internal edge
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from ..config.defaults import (
    BATCH_SIZE_BEFORE_YIELD,
    LARGE_FILE_PARSE_LIMIT,
    LARGE_FILE_THRESHOLD,
)
from .document_stats import compute_document_stats
from .exceptions import ParsingError
from .file_discovery import TreeScanner
from .filesystem import FileSystem, LocalFileSystem
from .link_parser import parse_markdown_links
from .models import (
    BuildProgress,
    DocumentNodeData,
    DocumentStats,
    EdgeType,
    ExternalLink,
    ExternalLinkCache,
    ExternalLinkNodeData,
    GraphData,
    GraphEdge,
    GraphNode,
    NodeType,
    ProgressPhase,
    document_node_id,
    external_node_id,
)

ProgressCallback = Callable[[BuildProgress], None]
YieldPoint = Callable[[], Awaitable[None]]


async def yield_to_event_loop() -> None:
    """Default yield point: let other tasks on the loop run."""
    await asyncio.sleep(0)


@dataclass
class ParsedFile:
    """A successfully parsed document (content itself is not retained)."""

    relative_path: str
    full_path: str
    file_size: int
    internal_links: list[str]
    external_links: list[ExternalLink]
    stats: DocumentStats
    is_large_file: bool


async def parse_file(fs: FileSystem, root_path: str, relative_path: str) -> ParsedFile | None:
    """Read and parse one document.

    Files larger than ``LARGE_FILE_THRESHOLD`` are parsed from their first
    ``LARGE_FILE_PARSE_LIMIT`` characters only; the displayed size still
    reflects the full file.

    Args:
        fs: Filesystem to read through
        root_path: Scan root
        relative_path: Document path relative to the root

    Returns:
        ParsedFile, or None when the filesystem returns no content

    Raises:
        ParsingError: If stat, read or parsing fails
    """
    full_path = str(Path(root_path) / relative_path)

    try:
        stat = await fs.stat(full_path)
        file_size = stat.size if stat else 0
        is_large_file = file_size > LARGE_FILE_THRESHOLD

        content = await fs.read_file(full_path)
        if content is None:
            return None

        if is_large_file:
            content = content[:LARGE_FILE_PARSE_LIMIT]

        links = parse_markdown_links(content, relative_path)
        stats = compute_document_stats(content, relative_path, file_size)
    except Exception as e:
        raise ParsingError(
            f"Failed to parse file {full_path}: {e}",
            context={"relative_path": relative_path},
        ) from e

    return ParsedFile(
        relative_path=relative_path,
        full_path=full_path,
        file_size=file_size,
        internal_links=links.internal_links,
        external_links=links.external_links,
        stats=stats,
        is_large_file=is_large_file,
    )


def _unique_edge_id(base_id: str, seen: dict[str, int]) -> str:
    count = seen.get(base_id, 0)
    seen[base_id] = count + 1
    return base_id if count == 0 else f"{base_id}-{count}"


async def build_graph_data(
    root_path: str,
    include_external_links: bool = False,
    max_nodes: int | None = None,
    offset: int = 0,
    on_progress: ProgressCallback | None = None,
    fs: FileSystem | None = None,
    yield_point: YieldPoint | None = None,
) -> GraphData:
    """Build graph data from the markdown documents under ``root_path``.

    Args:
        root_path: Root directory to scan
        include_external_links: Include external-domain nodes and edges in the
            returned node/edge lists (they are always built and cached)
        max_nodes: Maximum documents to load; None loads everything
        offset: Index into the scan result where loading starts (pagination)
        on_progress: Optional progress callback
        fs: Filesystem collaborator (defaults to the local disk)
        yield_point: Awaitable called every ``BATCH_SIZE_BEFORE_YIELD`` files
            to hand control back to the host loop

    Returns:
        GraphData with nodes, edges, pagination counters and cached external data

    Raises:
        GraphBuildError: If the root directory cannot be scanned
    """
    fs = fs or LocalFileSystem()
    yield_point = yield_point or yield_to_event_loop
    start_time = time.time()

    def report_scan(directories_visited: int) -> None:
        if on_progress:
            on_progress(
                BuildProgress(
                    phase=ProgressPhase.SCANNING, current=directories_visited, total=0
                )
            )

    # Step 1: scan everything so totals and link validation see the whole tree
    all_paths = await TreeScanner(fs).scan(root_path, on_directory=report_scan)
    total_documents = len(all_paths)

    # Step 2: paginate
    offset = max(0, offset)
    if max_nodes is not None:
        selected_paths = all_paths[offset : offset + max_nodes]
    else:
        selected_paths = all_paths

    # Step 3: parse sequentially, yielding between batches
    parsed_files: list[ParsedFile] = []
    internal_links_found = 0
    external_links_found = 0
    for index, relative_path in enumerate(selected_paths):
        try:
            parsed = await parse_file(fs, root_path, relative_path)
        except ParsingError as e:
            logger.warning(str(e))
            parsed = None

        if parsed:
            parsed_files.append(parsed)
            internal_links_found += len(parsed.internal_links)
            external_links_found += len(parsed.external_links)

        if on_progress:
            on_progress(
                BuildProgress(
                    phase=ProgressPhase.PARSING,
                    current=index + 1,
                    total=len(selected_paths),
                    current_file=relative_path,
                    internal_links_found=internal_links_found,
                    external_links_found=external_links_found,
                )
            )

        if (index + 1) % BATCH_SIZE_BEFORE_YIELD == 0:
            await yield_point()

    # Step 4: link validation sets
    known_paths = set(all_paths)
    loaded_paths = {f.relative_path for f in parsed_files}

    # Steps 5-6: document nodes, internal edges, external aggregation
    document_nodes: list[GraphNode] = []
    internal_edges: list[GraphEdge] = []
    external_edges: list[GraphEdge] = []
    external_domains: dict[str, tuple[int, list[str]]] = {}
    seen_edge_ids: dict[str, int] = {}

    for parsed in parsed_files:
        node_id = document_node_id(parsed.relative_path)
        broken_links: list[str] = []

        for target in parsed.internal_links:
            if target not in known_paths:
                broken_links.append(target)
                continue
            if target not in loaded_paths:
                continue
            target_id = document_node_id(target)
            internal_edges.append(
                GraphEdge(
                    id=_unique_edge_id(f"edge-{node_id}-{target_id}", seen_edge_ids),
                    source=node_id,
                    target=target_id,
                    type=EdgeType.INTERNAL,
                )
            )

        document_nodes.append(
            GraphNode(
                id=node_id,
                type=NodeType.DOCUMENT,
                data=DocumentNodeData.from_stats(
                    parsed.stats,
                    broken_links=broken_links or None,
                    is_large_file=True if parsed.is_large_file else None,
                ),
            )
        )

        for link in parsed.external_links:
            count, urls = external_domains.get(link.domain, (0, []))
            if link.url not in urls:
                urls.append(link.url)
            external_domains[link.domain] = (count + 1, urls)

            target_id = external_node_id(link.domain)
            external_edges.append(
                GraphEdge(
                    id=_unique_edge_id(f"edge-{node_id}-{target_id}", seen_edge_ids),
                    source=node_id,
                    target=target_id,
                    type=EdgeType.EXTERNAL,
                )
            )

    external_nodes = [
        GraphNode(
            id=external_node_id(domain),
            type=NodeType.EXTERNAL,
            data=ExternalLinkNodeData(domain=domain, link_count=count, urls=urls),
        )
        for domain, (count, urls) in external_domains.items()
    ]
    cached_external_data = ExternalLinkCache(
        external_nodes=external_nodes,
        external_edges=external_edges,
        domain_count=len(external_nodes),
        total_link_count=len(external_edges),
    )

    # Step 7: assemble
    nodes = list(document_nodes)
    edges = list(internal_edges)
    if include_external_links:
        nodes.extend(external_nodes)
        edges.extend(external_edges)

    # Step 8: pagination state
    loaded_documents = len(parsed_files)
    has_more = max_nodes is not None and offset + loaded_documents < total_documents

    logger.debug(
        f"Built document graph for {root_path}: {loaded_documents}/{total_documents} "
        f"documents, {len(internal_edges)} internal edges, "
        f"{len(external_nodes)} external domains in {time.time() - start_time:.2f}s"
    )

    return GraphData(
        nodes=nodes,
        edges=edges,
        total_documents=total_documents,
        loaded_documents=loaded_documents,
        has_more=has_more,
        cached_external_data=cached_external_data,
    )
