"""Watch command: rebuild the graph whenever markdown files change."""

import asyncio
from pathlib import Path

import typer
from loguru import logger

from ...config.settings import DocGraphSettings
from ...core.exceptions import DocGraphError
from ...core.graph_builder import build_graph_data
from ...core.watcher import DocumentChangeBatch, DocumentGraphWatcher
from ..output import console, print_error, print_info, print_success


async def _watch(root: Path, settings: DocGraphSettings) -> None:
    async def rebuild() -> None:
        graph = await build_graph_data(
            str(root),
            include_external_links=settings.include_external_links,
            max_nodes=settings.max_nodes,
        )
        print_success(
            f"Graph rebuilt: {graph.loaded_documents:,} documents, {len(graph.edges):,} edges"
        )

    async def on_changes(batch: DocumentChangeBatch) -> None:
        for change in batch.changes:
            console.print(f"  [dim]{change.event_type:<6}[/dim] {change.file_path}")
        try:
            await rebuild()
        except DocGraphError as e:
            logger.error(f"Rebuild failed: {e}")
            print_error(f"Could not load document graph: {e}")

    await rebuild()
    async with DocumentGraphWatcher(on_changes) as watcher:
        await watcher.watch(root)
        print_info(f"Watching {root} (Ctrl+C to stop)")
        await asyncio.Event().wait()


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
) -> None:
    """👀 Watch a document tree and rebuild its graph on every change."""
    settings: DocGraphSettings = ctx.obj["settings"]
    try:
        asyncio.run(_watch(root.resolve(), settings))
    except KeyboardInterrupt:
        print_info("Stopped watching")
    except DocGraphError as e:
        print_error(f"Could not load document graph: {e}")
        raise typer.Exit(1)
