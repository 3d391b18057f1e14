"""Shared fixtures for docgraph tests."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from docgraph.core.filesystem import DirEntry, FileStat
from docgraph.core.models import (
    DocumentNodeData,
    EdgeType,
    ExternalLinkNodeData,
    GraphEdge,
    GraphNode,
    NodeType,
    document_node_id,
    external_node_id,
)

FAKE_ROOT = "/docs"


class FakeFileSystem:
    """In-memory FileSystem rooted at ``/docs``.

    Files are given as relative path -> content; listing order follows the
    insertion order of ``files``. Failures can be injected per full path.
    """

    def __init__(
        self,
        files: dict[str, str | None],
        sizes: dict[str, int] | None = None,
        unlistable: set[str] | None = None,
        unreadable: set[str] | None = None,
        root: str = FAKE_ROOT,
    ) -> None:
        self.root = root
        self.files = {f"{root}/{rel}": content for rel, content in files.items()}
        self.sizes = {f"{root}/{rel}": size for rel, size in (sizes or {}).items()}
        self.unlistable = unlistable or set()
        self.unreadable = unreadable or set()
        self.listed: list[str] = []
        self.read: list[str] = []

    def _is_dir(self, path: str) -> bool:
        return path == self.root or any(p.startswith(path + "/") for p in self.files)

    async def list_dir(self, path: str) -> list[DirEntry]:
        self.listed.append(path)
        if path in self.unlistable:
            raise PermissionError(f"EACCES: permission denied, scandir '{path}'")
        if not self._is_dir(path):
            raise FileNotFoundError(f"ENOENT: no such directory '{path}'")

        entries: dict[str, DirEntry] = {}
        for full_path in self.files:
            if not full_path.startswith(path + "/"):
                continue
            remainder = full_path[len(path) + 1 :]
            name = remainder.split("/")[0]
            if name not in entries:
                entries[name] = DirEntry(
                    name=name, is_directory="/" in remainder, path=f"{path}/{name}"
                )
        return list(entries.values())

    async def read_file(self, path: str) -> str | None:
        self.read.append(path)
        if path in self.unreadable:
            raise OSError(f"EIO: i/o error, read '{path}'")
        return self.files[path]

    async def stat(self, path: str) -> FileStat:
        content = self.files.get(path) or ""
        now = datetime.now(timezone.utc)
        return FileStat(
            size=self.sizes.get(path, len(content.encode())),
            created_at=now,
            modified_at=now,
        )


@pytest.fixture
def four_document_fs() -> FakeFileSystem:
    """Alpha -> Beta -> Gamma (in a subfolder); Delta has no links."""
    return FakeFileSystem(
        {
            "alpha.md": "# Alpha\n\nSee [[beta]] for details.\n",
            "beta.md": "# Beta\n\nContinues in [Gamma](sub/gamma.md).\n",
            "sub/gamma.md": "# Gamma\n\nLeaf document.\n",
            "delta.md": "# Delta\n\nStands alone.\n",
        }
    )


@pytest.fixture
def make_fs():
    """Factory for FakeFileSystem instances."""
    return FakeFileSystem


def document_node(path: str, title: str | None = None, description: str | None = None):
    return GraphNode(
        id=document_node_id(path),
        type=NodeType.DOCUMENT,
        data=DocumentNodeData(
            title=title or path.rsplit("/", 1)[-1].removesuffix(".md"),
            line_count=1,
            word_count=1,
            size="1 B",
            file_path=path,
            description=description,
        ),
    )


def external_node(domain: str, urls: list[str] | None = None):
    urls = urls or [f"https://{domain}/"]
    return GraphNode(
        id=external_node_id(domain),
        type=NodeType.EXTERNAL,
        data=ExternalLinkNodeData(domain=domain, link_count=len(urls), urls=urls),
    )


def edge(source, target, external: bool = False):
    return GraphEdge(
        id=f"edge-{source.id}-{target.id}",
        source=source.id,
        target=target.id,
        type=EdgeType.EXTERNAL if external else EdgeType.INTERNAL,
    )


@pytest.fixture
def graph_parts():
    """Helpers for building GraphNode/GraphEdge fixtures by hand."""
    return document_node, external_node, edge
