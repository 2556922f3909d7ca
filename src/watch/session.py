# src/watch/session.py — v1
"""Long-lived watch session on top of watchdog.

Observer threads never touch build state: every notification is handed to
the event loop with call_soon_threadsafe and processed there in order.
A dead observer thread is reported and raised, never silently ignored.
"""

from __future__ import annotations

import asyncio
import logging
import shutil
from pathlib import Path
from typing import Any, Callable

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from lingosite.core.errors import WatchSessionError
from lingosite.watch.models import EventKind, FileEvent
from lingosite.watch.orchestrator import WatchOrchestrator

logger = logging.getLogger(__name__)

LIVENESS_INTERVAL_S = 1.0


class LoopBridgeHandler(FileSystemEventHandler):
    """Forward watchdog events into an asyncio queue owned by the loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop, queue: asyncio.Queue[FileEvent]) -> None:
        super().__init__()
        self._loop = loop
        self._queue = queue

    def _put(self, kind: EventKind, path: str | bytes) -> None:
        if isinstance(path, bytes):
            path = path.decode()
        self._loop.call_soon_threadsafe(self._queue.put_nowait, FileEvent(kind=kind, path=Path(path)))

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._put(EventKind.ADDED, event.src_path)

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._put(EventKind.CHANGED, event.src_path)

    def on_deleted(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._put(EventKind.DELETED, event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._put(EventKind.DELETED, event.src_path)
            self._put(EventKind.ADDED, event.dest_path)


class WatchSession:
    """Run the watch loop until stopped or the transport fails."""

    def __init__(
        self,
        orchestrator: WatchOrchestrator,
        observer_factory: Callable[[], Any] = Observer,
        liveness_interval: float = LIVENESS_INTERVAL_S,
    ) -> None:
        self._orchestrator = orchestrator
        self._builder = orchestrator.builder
        self._observer_factory = observer_factory
        self._interval = liveness_interval

    def watch_roots(self) -> list[tuple[Path, bool]]:
        """(directory, recursive) pairs; nested recursive roots are dropped."""
        lay = self._builder.layout
        candidates = [
            lay.pages, lay.layouts, lay.partials, lay.data,
            lay.css_src, lay.js_src, lay.images_src, lay.public,
        ]
        existing = sorted({p.resolve() for p in candidates if p.is_dir()}, key=lambda p: len(p.parts))
        roots: list[Path] = []
        for p in existing:
            if not any(p == r or r in p.parents for r in roots):
                roots.append(p)

        pairs = [(r, True) for r in roots]
        routes_dir = lay.routes_file.resolve().parent
        if not any(routes_dir == r or r in routes_dir.parents for r in roots):
            pairs.append((routes_dir, False))
        return pairs

    async def run(self, stop: asyncio.Event | None = None) -> None:
        """Watch until stop is set.

        Raises:
            WatchSessionError: If the observer thread dies.
        """
        loop = asyncio.get_running_loop()
        queue: asyncio.Queue[FileEvent] = asyncio.Queue()
        handler = LoopBridgeHandler(loop, queue)
        observer = self._observer_factory()
        stop = stop or asyncio.Event()

        for path, recursive in self.watch_roots():
            observer.schedule(handler, str(path), recursive=recursive)
            logger.info("Watching %s%s", path, "" if recursive else " (top level)")

        observer.start()
        try:
            while not stop.is_set():
                try:
                    event = await asyncio.wait_for(queue.get(), timeout=self._interval)
                except asyncio.TimeoutError:
                    self._check_alive(observer)
                    continue
                self._orchestrator.handle_event(event)
        finally:
            observer.stop()
            if observer.is_alive():
                observer.join(timeout=5)
            await self._orchestrator.drain()
            self._cleanup()

    def _check_alive(self, observer: Any) -> None:
        if observer.is_alive():
            return
        message = "file watcher stopped unexpectedly; outputs will go stale"
        logger.error(message)
        self._builder.issues.record("watch", "observer", message, severity="error")
        raise WatchSessionError(message)

    def _cleanup(self) -> None:
        s = self._builder.settings
        if s.clean_dev_output and not s.production:
            out = s.active_output_dir
            shutil.rmtree(out, ignore_errors=True)
            logger.info("Removed development output %s", out)
