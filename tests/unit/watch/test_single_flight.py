# tests/unit/watch/test_single_flight.py — v1
"""Tests for watch/single_flight.py — per-scope serialisation and supersession."""

from __future__ import annotations

import asyncio

import pytest

from lingosite.watch.models import FULL_SCOPE
from lingosite.watch.single_flight import SingleFlight


class TestSingleFlight:
    @pytest.mark.asyncio
    async def test_runs_latest(self):
        flight = SingleFlight()
        token = flight.request("page:about")

        async def job(is_current):
            return is_current()

        assert await flight.run("page:about", token, job) is True

    @pytest.mark.asyncio
    async def test_superseded_waiting_request_skipped(self):
        flight = SingleFlight()
        release = asyncio.Event()
        ran: list[int] = []

        def job_for(n):
            async def job(is_current):
                ran.append(n)
                if n == 1:
                    await release.wait()
                return n
            return job

        t1 = flight.request("page:about")
        first = asyncio.ensure_future(flight.run("page:about", t1, job_for(1)))
        await asyncio.sleep(0)
        t2 = flight.request("page:about")
        t3 = flight.request("page:about")
        second = asyncio.ensure_future(flight.run("page:about", t2, job_for(2)))
        third = asyncio.ensure_future(flight.run("page:about", t3, job_for(3)))
        release.set()

        assert await asyncio.gather(first, second, third) == [1, None, 3]
        assert ran == [1, 3]
        assert flight.skipped == 1

    @pytest.mark.asyncio
    async def test_running_job_sees_supersession(self):
        flight = SingleFlight()
        started = asyncio.Event()
        release = asyncio.Event()

        async def job(is_current):
            started.set()
            await release.wait()
            return is_current()

        token = flight.request(FULL_SCOPE)
        task = asyncio.ensure_future(flight.run(FULL_SCOPE, token, job))
        await started.wait()
        flight.request(FULL_SCOPE)
        release.set()
        assert await task is False

    @pytest.mark.asyncio
    async def test_full_scope_excludes_scoped_jobs(self):
        flight = SingleFlight()
        events: list[str] = []
        release = asyncio.Event()

        async def full(is_current):
            events.append("full:start")
            await release.wait()
            events.append("full:end")

        async def scoped(is_current):
            events.append("scoped")

        full_task = asyncio.ensure_future(flight.run(FULL_SCOPE, flight.request(FULL_SCOPE), full))
        await asyncio.sleep(0)
        scoped_task = asyncio.ensure_future(
            flight.run("page:about", flight.request("page:about"), scoped)
        )
        await asyncio.sleep(0.01)
        assert events == ["full:start"]
        release.set()
        await asyncio.gather(full_task, scoped_task)
        assert events == ["full:start", "full:end", "scoped"]

    @pytest.mark.asyncio
    async def test_different_scopes_overlap(self):
        flight = SingleFlight()
        both_running = asyncio.Event()
        active = 0

        async def job(is_current):
            nonlocal active
            active += 1
            if active == 2:
                both_running.set()
            await asyncio.wait_for(both_running.wait(), timeout=1)
            active -= 1
            return True

        results = await asyncio.gather(
            flight.run("page:a", flight.request("page:a"), job),
            flight.run("page:b", flight.request("page:b"), job),
        )
        assert results == [True, True]
