"""Document discovery for graph builds."""

from __future__ import annotations

from collections.abc import Callable, Iterator

from loguru import logger

from ..config.defaults import DOCUMENT_EXTENSION, HIDDEN_PREFIX, IGNORED_DIRECTORIES
from .exceptions import ScanError
from .filesystem import DirEntry, FileSystem


class TreeScanner:
    """Walks a document tree and collects markdown paths relative to the root.

    Traversal is depth-first in directory-listing order and uses an explicit
    stack of listing iterators, so arbitrarily deep trees do not hit the
    recursion limit. Results are not sorted.
    """

    def __init__(
        self,
        fs: FileSystem,
        ignored_directories: frozenset[str] | set[str] = IGNORED_DIRECTORIES,
        extension: str = DOCUMENT_EXTENSION,
    ) -> None:
        """Initialize the scanner.

        Args:
            fs: Filesystem to list directories through
            ignored_directories: Directory names skipped without descending
            extension: Document extension, matched case-insensitively
        """
        self.fs = fs
        self.ignored_directories = frozenset(ignored_directories)
        self.extension = extension.lower()

    def _is_document(self, entry: DirEntry) -> bool:
        return entry.name.lower().endswith(self.extension)

    async def scan(
        self,
        root_path: str,
        on_directory: Callable[[int], None] | None = None,
    ) -> list[str]:
        """Collect all document paths below ``root_path``.

        Args:
            root_path: Directory to scan
            on_directory: Optional callback(directories_visited) invoked after
                each directory listing, root included

        Returns:
            Relative paths (``/`` separated) of every document found

        Raises:
            ScanError: If the root directory itself cannot be listed. Failures
                below the root are logged and that subtree is skipped.
        """
        try:
            root_entries = await self.fs.list_dir(root_path)
        except Exception as e:
            raise ScanError(
                f"Failed to scan directory {root_path}: {e}",
                cause=e,
                context={"root_path": root_path},
            ) from e

        documents: list[str] = []
        visited: set[str] = {root_path}
        directories_visited = 1
        if on_directory:
            on_directory(directories_visited)

        stack: list[tuple[Iterator[DirEntry], str]] = [(iter(root_entries), "")]
        while stack:
            entries, relative_dir = stack[-1]
            entry = next(entries, None)
            if entry is None:
                stack.pop()
                continue

            if entry.name.startswith(HIDDEN_PREFIX):
                continue

            relative_path = (
                f"{relative_dir}/{entry.name}" if relative_dir else entry.name
            )

            if not entry.is_directory:
                if self._is_document(entry):
                    documents.append(relative_path)
                continue

            if entry.name in self.ignored_directories or entry.path in visited:
                continue
            visited.add(entry.path)

            try:
                child_entries = await self.fs.list_dir(entry.path)
            except Exception as e:
                logger.warning(f"Failed to scan directory {entry.path}: {e}")
                continue

            directories_visited += 1
            if on_directory:
                on_directory(directories_visited)
            stack.append((iter(child_entries), relative_path))

        logger.debug(
            f"Scanned {directories_visited} directories under {root_path}, "
            f"found {len(documents)} documents"
        )
        return documents
