# src/watch/single_flight.py — v1
"""Per-scope single-flight execution with generation counters.

request(scope) is called synchronously when a change is observed and returns
a generation token. run() then serialises jobs per scope:

- a job whose token was superseded while it waited is skipped; the newer
  request will do the work against newer sources;
- a running job receives is_current() and must not commit when it returns
  False;
- the full scope runs exclusively; scoped jobs for different base routes
  may overlap each other.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable, TypeVar

from lingosite.watch.models import FULL_SCOPE

logger = logging.getLogger(__name__)

T = TypeVar("T")
IsCurrent = Callable[[], bool]


class ScopeGate:
    """Shared/exclusive gate: the full scope excludes every scoped job."""

    def __init__(self) -> None:
        self._cond = asyncio.Condition()
        self._shared = 0
        self._exclusive = False
        self._exclusive_waiting = 0

    @asynccontextmanager
    async def hold(self, exclusive: bool) -> AsyncIterator[None]:
        async with self._cond:
            if exclusive:
                self._exclusive_waiting += 1
                try:
                    await self._cond.wait_for(lambda: not self._exclusive and self._shared == 0)
                finally:
                    self._exclusive_waiting -= 1
                self._exclusive = True
            else:
                await self._cond.wait_for(
                    lambda: not self._exclusive and self._exclusive_waiting == 0
                )
                self._shared += 1
        try:
            yield
        finally:
            async with self._cond:
                if exclusive:
                    self._exclusive = False
                else:
                    self._shared -= 1
                self._cond.notify_all()


class SingleFlight:
    """Serialise rebuilds per scope; the latest request for a scope wins."""

    def __init__(self) -> None:
        self._generations: dict[str, int] = defaultdict(int)
        self._locks: dict[str, asyncio.Lock] = {}
        self._gate = ScopeGate()
        self.skipped = 0

    def request(self, scope: str) -> int:
        """Register a new request for scope; returns its generation token."""
        self._generations[scope] += 1
        return self._generations[scope]

    def is_latest(self, scope: str, token: int) -> bool:
        return self._generations[scope] == token

    async def run(
        self,
        scope: str,
        token: int,
        job: Callable[[IsCurrent], Awaitable[T]],
    ) -> T | None:
        """Run job for scope unless a newer request superseded it.

        Returns:
            The job's result, or None when the request was skipped.
        """
        lock = self._locks.setdefault(scope, asyncio.Lock())
        async with lock:
            if not self.is_latest(scope, token):
                self.skipped += 1
                logger.debug("Skipping superseded request %d for scope %s", token, scope)
                return None
            async with self._gate.hold(exclusive=scope == FULL_SCOPE):
                return await job(lambda: self.is_latest(scope, token))
