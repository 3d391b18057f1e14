"""Markdown change watcher for live graph rebuilds."""

import asyncio
import os
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path, PurePath

from loguru import logger
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from ..config.defaults import (
    DOCUMENT_EXTENSION,
    HIDDEN_PREFIX,
    IGNORED_DIRECTORIES,
    WATCH_DEBOUNCE_DELAY,
)


class ChangeType(StrEnum):
    ADD = "add"
    CHANGE = "change"
    UNLINK = "unlink"


@dataclass(frozen=True)
class FileChange:
    file_path: str
    event_type: ChangeType


@dataclass(frozen=True)
class DocumentChangeBatch:
    """Changes under one watched root, collected over one debounce window."""

    root_path: str
    changes: list[FileChange] = field(default_factory=list)


ChangeCallback = Callable[[DocumentChangeBatch], Awaitable[None]]


class MarkdownFileHandler(FileSystemEventHandler):
    """Collects markdown file events for one root and delivers them in batches.

    Watchdog calls the ``on_*`` methods from its observer thread; pending
    changes are only touched on the event loop. Repeated events for the same
    file within a window collapse to the most recent event type.
    """

    def __init__(
        self,
        root_path: str,
        callback: ChangeCallback,
        loop: asyncio.AbstractEventLoop,
        debounce_delay: float = WATCH_DEBOUNCE_DELAY,
    ):
        super().__init__()
        self.root_path = root_path
        self.callback = callback
        self.loop = loop
        self.debounce_delay = debounce_delay
        self.pending_changes: dict[str, ChangeType] = {}
        self._timer: asyncio.TimerHandle | None = None

    def should_process_file(self, file_path: str) -> bool:
        """Markdown files outside hidden and ignored directories."""
        path = PurePath(file_path)
        if path.suffix.lower() != DOCUMENT_EXTENSION:
            return False

        try:
            parts = path.relative_to(self.root_path).parts
        except ValueError:
            parts = path.parts
        return not any(
            part.startswith(HIDDEN_PREFIX) or part in IGNORED_DIRECTORIES for part in parts
        )

    def on_created(self, event: FileSystemEvent) -> None:
        self._dispatch(event.src_path, event.is_directory, ChangeType.ADD)

    def on_modified(self, event: FileSystemEvent) -> None:
        self._dispatch(event.src_path, event.is_directory, ChangeType.CHANGE)

    def on_deleted(self, event: FileSystemEvent) -> None:
        self._dispatch(event.src_path, event.is_directory, ChangeType.UNLINK)

    def on_moved(self, event: FileSystemEvent) -> None:
        self._dispatch(event.src_path, event.is_directory, ChangeType.UNLINK)
        self._dispatch(event.dest_path, event.is_directory, ChangeType.ADD)

    def _dispatch(self, raw_path: str | bytes, is_directory: bool, change: ChangeType) -> None:
        file_path = os.fsdecode(raw_path)
        if is_directory or not self.should_process_file(file_path):
            return
        self.loop.call_soon_threadsafe(self._schedule_change, file_path, change)

    def _schedule_change(self, file_path: str, change: ChangeType) -> None:
        """Record a change and restart the debounce timer (event loop only)."""
        self.pending_changes[file_path] = change
        if self._timer is not None:
            self._timer.cancel()
        self._timer = self.loop.call_later(self.debounce_delay, self._flush)

    def _flush(self) -> None:
        self._timer = None
        if not self.pending_changes:
            return
        batch = DocumentChangeBatch(
            root_path=self.root_path,
            changes=[FileChange(path, kind) for path, kind in self.pending_changes.items()],
        )
        self.pending_changes.clear()
        self.loop.create_task(self._deliver(batch))

    async def _deliver(self, batch: DocumentChangeBatch) -> None:
        logger.debug(f"Delivering {len(batch.changes)} change(s) for {batch.root_path}")
        try:
            await self.callback(batch)
        except Exception as e:
            logger.error(f"Error processing document changes in {batch.root_path}: {e}")

    def cancel(self) -> None:
        """Drop pending changes without delivering them."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self.pending_changes.clear()


class DocumentGraphWatcher:
    """Watches document roots and reports debounced markdown changes."""

    def __init__(
        self,
        callback: ChangeCallback,
        debounce_delay: float = WATCH_DEBOUNCE_DELAY,
    ):
        """Initialize watcher.

        Args:
            callback: Async callback receiving one batch per root per window
            debounce_delay: Quiet period in seconds before a batch is delivered
        """
        self.callback = callback
        self.debounce_delay = debounce_delay
        self._observers: dict[str, Observer] = {}
        self._handlers: dict[str, MarkdownFileHandler] = {}

    async def watch(self, root_path: str | Path) -> None:
        """Start watching a root; a second call for the same root is a no-op."""
        key = str(root_path)
        if key in self._observers:
            logger.warning(f"Already watching {key}")
            return

        handler = MarkdownFileHandler(
            root_path=key,
            callback=self.callback,
            loop=asyncio.get_running_loop(),
            debounce_delay=self.debounce_delay,
        )
        observer = Observer()
        observer.schedule(handler, key, recursive=True)
        observer.start()

        self._handlers[key] = handler
        self._observers[key] = observer
        logger.info(f"Watching {key} for document changes")

    async def unwatch(self, root_path: str | Path) -> None:
        key = str(root_path)
        observer = self._observers.pop(key, None)
        handler = self._handlers.pop(key, None)
        if observer is None:
            logger.warning(f"No watcher found for {key}")
            return

        if handler is not None:
            handler.cancel()
        observer.stop()
        await asyncio.to_thread(observer.join)
        logger.info(f"Stopped watching {key}")

    async def stop_all(self) -> None:
        for key in list(self._observers):
            await self.unwatch(key)

    def is_watching(self, root_path: str | Path) -> bool:
        return str(root_path) in self._observers

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.stop_all()
