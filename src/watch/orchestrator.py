# src/watch/orchestrator.py — v1
"""Watch orchestrator: classify → dispatch → notify.

handle_event() runs synchronously on the event loop: it debounces the event
by modification time, classifies it, plans the rebuild and registers a
single-flight request before any await, so request order is event order.
The rebuild itself runs as a task; the loop keeps accepting events while
rebuilds are in flight.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

from lingosite.pipeline.models import BuildReport
from lingosite.pipeline.site_builder import SiteBuilder
from lingosite.watch.classifier import ChangeClassifier, ModTimeTracker
from lingosite.watch.dispatcher import plan_rebuild
from lingosite.watch.models import (
    FULL_SCOPE,
    EventKind,
    FileEvent,
    OrchestratorState,
    PendingChange,
    RebuildPlan,
)
from lingosite.watch.reload import ReloadNotifier
from lingosite.watch.single_flight import IsCurrent, SingleFlight

logger = logging.getLogger(__name__)


class WatchOrchestrator:
    """Turn file events into minimal rebuilds and reload signals."""

    def __init__(
        self,
        builder: SiteBuilder,
        notifier: ReloadNotifier | None = None,
        classifier: ChangeClassifier | None = None,
    ) -> None:
        self._builder = builder
        self._notifier = notifier or ReloadNotifier()
        self._classifier = classifier or ChangeClassifier(
            builder.layout, builder.settings.image_extensions_list
        )
        self._mtimes = ModTimeTracker()
        self._flight = SingleFlight()
        self._tasks: set[asyncio.Task[Any]] = set()
        # Asset work owed by full-scope requests; a superseded request hands
        # its share to the one that replaces it.
        self._owed_assets: set[Path] = set()
        self._owe_full_asset_pass = False
        self.state = OrchestratorState.IDLE
        self.dispatched = 0

    @property
    def builder(self) -> SiteBuilder:
        return self._builder

    @property
    def notifier(self) -> ReloadNotifier:
        return self._notifier

    @property
    def single_flight(self) -> SingleFlight:
        return self._flight

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def handle_event(self, event: FileEvent) -> PendingChange | None:
        """Classify one event and schedule its rebuild.

        Returns:
            The pending change, or None when the event was debounced or
            needs no rebuild.
        """
        self.state = OrchestratorState.CLASSIFYING
        change = self._classify(event)
        if change is None:
            self._settle()
            return None

        plan = plan_rebuild(change, self._builder.layout)
        if plan.is_noop:
            logger.debug("Ignoring %s (%s)", change.file_path, change.category.value)
            self._settle()
            return None

        logger.info(
            "%s %s → %s", change.kind.value, change.file_path.name, self._describe(plan)
        )
        if plan.assets == "all":
            self._owe_full_asset_pass = True
        elif plan.assets == "one" and plan.asset_path is not None:
            self._owed_assets.add(plan.asset_path)
        token = self._flight.request(plan.scope)
        self.state = OrchestratorState.DISPATCHING
        task = asyncio.ensure_future(self._dispatch(plan, token))
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return change

    def _classify(self, event: FileEvent) -> PendingChange | None:
        path = Path(event.path)
        modified_at = event.modified_at
        previous = None

        if event.kind == EventKind.DELETED:
            previous = self._mtimes.forget(path)
        else:
            if modified_at is None:
                try:
                    modified_at = path.stat().st_mtime
                except OSError:
                    # Vanished between notification and classification.
                    return None
            is_new, previous = self._mtimes.observe(path, modified_at)
            if not is_new:
                logger.debug("Debounced duplicate event for %s", path)
                return None

        return PendingChange(
            file_path=path,
            kind=event.kind,
            category=self._classifier.classify(path),
            modified_at=modified_at,
            previous_modified_at=previous,
        )

    async def _dispatch(self, plan: RebuildPlan, token: int) -> None:
        try:
            report = await self._flight.run(
                plan.scope, token, lambda is_current: self._execute(plan, is_current)
            )
        except Exception as e:
            logger.exception("Rebuild for %s failed", plan.scope)
            self._builder.issues.record("watch", plan.scope, str(e), severity="error")
            return
        if report is None or not report.committed:
            return
        self.dispatched += 1
        self.state = OrchestratorState.NOTIFYING
        self._notifier.notify()

    async def _execute(self, plan: RebuildPlan, is_current: IsCurrent) -> BuildReport | None:
        b = self._builder
        asset_report = None
        if plan.scope == FULL_SCOPE and (self._owed_assets or self._owe_full_asset_pass):
            owed, full_pass = self._owed_assets, self._owe_full_asset_pass
            self._owed_assets, self._owe_full_asset_pass = set(), False
            if full_pass or len(owed) > 1:
                asset_report = await b.process_assets()
            elif owed:
                asset_report = await b.process_asset(next(iter(owed)))

        if plan.pages == "scoped" and plan.base_id is not None:
            report = await b.rebuild_base(plan.base_id, is_current=is_current)
        elif plan.pages == "full":
            report = await b.regenerate_all(is_current=is_current)
        else:
            return None
        report.assets = asset_report
        return report

    def _task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        self._settle()

    def _settle(self) -> None:
        if not self._tasks:
            self.state = OrchestratorState.IDLE

    @staticmethod
    def _describe(plan: RebuildPlan) -> str:
        if plan.pages == "scoped":
            return f"rebuild {plan.base_id!r} (all locales)"
        if plan.assets == "none":
            return "full regeneration"
        return f"assets ({plan.assets}) + full regeneration"

    async def drain(self) -> None:
        """Wait until every scheduled rebuild has settled."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
        await self._notifier.wait_idle()
