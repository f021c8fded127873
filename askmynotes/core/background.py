"""
Detached task runner.

Fire-and-forget work such as chat log writes runs as
tracked asyncio tasks. A strong reference is held until each task finishes,
failures are reported through logging only, and shutdown can wait for
whatever is still pending.

Dependencies: asyncio (stdlib)
System role: Error channel for work that outlives the request
"""

import asyncio
import logging
from typing import Coroutine

logger = logging.getLogger(__name__)

_pending: set[asyncio.Task] = set()


def _on_done(task: asyncio.Task) -> None:
    _pending.discard(task)
    if task.cancelled():
        logger.warning(f"{__name__}:_on_done - Detached task cancelled", extra={"task": task.get_name()})
        return
    exc = task.exception()
    if exc is not None:
        logger.error(
            f"{__name__}:_on_done - Detached task failed",
            exc_info=(type(exc), exc, exc.__traceback__),
            extra={"task": task.get_name(), "error": str(exc), "error_type": type(exc).__name__},
        )


def spawn_detached(coro: Coroutine, name: str | None = None) -> asyncio.Task:
    """
    Schedule a coroutine without awaiting it.

    Must be called from a running event loop. The task inherits the current
    context (correlation ID included).

    Args:
        coro: Coroutine to run
        name: Task name used in logs

    Returns:
        asyncio.Task: The scheduled task
    """
    task = asyncio.create_task(coro, name=name)
    _pending.add(task)
    task.add_done_callback(_on_done)
    return task


def pending_count() -> int:
    """Number of detached tasks still running."""
    return len(_pending)


async def drain_detached(timeout: float | None = 10.0) -> None:
    """
    Wait for pending detached tasks to finish.

    Tasks still running after `timeout` seconds are left alone and logged.

    Args:
        timeout: Maximum seconds to wait (None waits indefinitely)
    """
    tasks = [task for task in _pending if not task.done()]
    if not tasks:
        return
    done, not_done = await asyncio.wait(tasks, timeout=timeout)
    if not_done:
        logger.warning(
            f"{__name__}:drain_detached - Detached tasks still running after timeout",
            extra={"finished": len(done), "still_running": len(not_done)},
        )
