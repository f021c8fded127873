"""
Test suite for the detached task runner.

System role: Verification of fire-and-forget error reporting
"""

import asyncio
import logging

from askmynotes.core.background import drain_detached, pending_count, spawn_detached
from askmynotes.observability.correlation import get_correlation_id, set_correlation_id


class TestSpawnDetached:
    """Test suite for spawn_detached() and drain_detached()."""

    async def test_should_run_and_release_task(self) -> None:
        results = []

        async def work() -> None:
            results.append("done")

        spawn_detached(work(), name="work")
        await drain_detached()

        assert results == ["done"]
        assert pending_count() == 0

    async def test_failure_should_be_logged_not_raised(self, caplog) -> None:
        async def fail() -> None:
            raise RuntimeError("write failed")

        with caplog.at_level(logging.ERROR, logger="askmynotes.core.background"):
            spawn_detached(fail(), name="chat-log")
            await drain_detached()
            await asyncio.sleep(0)

        assert "Detached task failed" in caplog.text

    async def test_task_should_inherit_correlation_id(self) -> None:
        seen = []

        async def work() -> None:
            seen.append(get_correlation_id())

        set_correlation_id("trace-42")
        spawn_detached(work())
        await drain_detached()

        assert seen == ["trace-42"]

    async def test_drain_with_nothing_pending_should_return(self) -> None:
        await drain_detached(timeout=0.01)

        assert pending_count() == 0
