"""Filesystem access used by the scanner and graph builder.

The builder only talks to the three operations of ``FileSystem``. The local
implementation is backed by aiofiles; tests and embedders can supply their
own (in-memory trees, remote stores, failure injection).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Protocol

import aiofiles
import aiofiles.os


@dataclass(frozen=True)
class DirEntry:
    """One entry of a directory listing."""

    name: str
    is_directory: bool
    path: str


@dataclass(frozen=True)
class FileStat:
    size: int
    created_at: datetime | None = None
    modified_at: datetime | None = None


class FileSystem(Protocol):
    """Async filesystem collaborator.

    Every operation may raise; the scanner and builder decide which failures
    are fatal.
    """

    async def list_dir(self, path: str) -> list[DirEntry]: ...

    async def read_file(self, path: str) -> str | None: ...

    async def stat(self, path: str) -> FileStat: ...


class LocalFileSystem:
    """FileSystem backed by the local disk."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    async def list_dir(self, path: str) -> list[DirEntry]:
        entries = await aiofiles.os.scandir(path)
        with entries:
            return [
                DirEntry(
                    name=entry.name,
                    # Symlinked directories are not followed
                    is_directory=entry.is_dir(follow_symlinks=False),
                    path=entry.path,
                )
                for entry in entries
            ]

    async def read_file(self, path: str) -> str | None:
        async with aiofiles.open(path, encoding=self.encoding, errors="replace") as f:
            return await f.read()

    async def stat(self, path: str) -> FileStat:
        result = await aiofiles.os.stat(path)
        return FileStat(
            size=result.st_size,
            created_at=datetime.fromtimestamp(result.st_ctime, tz=timezone.utc),
            modified_at=datetime.fromtimestamp(result.st_mtime, tz=timezone.utc),
        )
