"""Fire-and-forget scheduling of operator coroutines.

The HTTP layer never waits for a backend call: each operation is spawned
as a task and its outcome reaches the operation log when it settles.
References are held until then so tasks are not garbage-collected mid-flight.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

from fireprobe.core.log import OperationLog

logger = logging.getLogger(__name__)


class OperationDispatcher:
    """Runs operator coroutines in the background and tracks them until settled."""

    def __init__(self, log: OperationLog) -> None:
        self._log = log
        self._tasks: set[asyncio.Task[Any]] = set()

    @property
    def pending(self) -> int:
        """Number of operations not yet settled."""
        return len(self._tasks)

    def spawn(self, operation: Coroutine[Any, Any, Any], *, name: str | None = None) -> asyncio.Task[Any]:
        """Schedule an operation; returns immediately."""
        task = asyncio.create_task(self._run(operation), name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run(self, operation: Coroutine[Any, Any, Any]) -> None:
        try:
            await operation
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.exception("Operation crashed")
            self._log.error(f"Error: {exc}")

    async def drain(self) -> None:
        """Wait for every in-flight operation, including ones spawned while waiting."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def shutdown(self) -> None:
        """Cancel whatever is still running (process shutdown only)."""
        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
