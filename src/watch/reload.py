# src/watch/reload.py — v1
"""Reload signal fan-out to development clients.

notify() is fire-and-forget: listeners carry no payload, async listeners run
as tasks, and a failing listener is logged without affecting the others.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)

ReloadListener = Callable[[], Awaitable[None] | None]


class ReloadNotifier:
    """Broadcast "something changed, re-fetch" to subscribed listeners."""

    def __init__(self) -> None:
        self._listeners: list[ReloadListener] = []
        self._tasks: set[asyncio.Task[Any]] = set()
        self.signals_sent = 0

    def subscribe(self, listener: ReloadListener) -> Callable[[], None]:
        """Add a listener; returns a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def notify(self) -> None:
        self.signals_sent += 1
        for listener in list(self._listeners):
            try:
                result = listener()
            except Exception as e:
                logger.warning("Reload listener %r failed: %s", listener, e)
                continue
            if inspect.isawaitable(result):
                task = asyncio.ensure_future(result)
                self._tasks.add(task)
                task.add_done_callback(self._finished)

    def _finished(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.warning("Reload listener failed: %s", task.exception())

    async def wait_idle(self) -> None:
        """Wait for in-flight async listeners (tests, shutdown)."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
