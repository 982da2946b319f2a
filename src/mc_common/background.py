"""Detached best-effort tasks.

Used for work whose outcome must not affect the response: the task runs on
the event loop independently of the request task that spawned it, so
cancelling the request does not cancel the task. Each task is bounded by the
runner's own timeout, and any exception it raises is logged and dropped.

The runner keeps a strong reference to every pending task (the event loop
only keeps weak ones) and can drain them on shutdown.
"""

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

logger = logging.getLogger(__name__)


class BackgroundTaskRunner:
    def __init__(self, timeout: float, name: str = "background") -> None:
        self._timeout = timeout
        self._name = name
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def spawn(
        self,
        operation: str,
        coin_id: int,
        coro: Coroutine[Any, Any, Any],
    ) -> asyncio.Task[None]:
        """Schedule ``coro`` as a detached task and return immediately."""
        task = asyncio.create_task(
            self._run(operation, coin_id, coro),
            name=f"{self._name}:{operation}:{coin_id}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run(
        self,
        operation: str,
        coin_id: int,
        coro: Coroutine[Any, Any, Any],
    ) -> None:
        try:
            async with asyncio.timeout(self._timeout):
                await coro
        except TimeoutError:
            logger.warning(
                "%s: %s timed out after %.0fms coin_id=%s",
                self._name,
                operation,
                self._timeout * 1000,
                coin_id,
                extra={"operation": operation, "coin_id": coin_id},
            )
        except Exception:
            logger.warning(
                "%s: %s failed coin_id=%s",
                self._name,
                operation,
                coin_id,
                exc_info=True,
                extra={"operation": operation, "coin_id": coin_id},
            )

    async def drain(self, timeout: float | None = None) -> None:
        """Wait for pending tasks; cancel whatever is still running after ``timeout``."""
        if not self._tasks:
            return
        _, still_pending = await asyncio.wait(set(self._tasks), timeout=timeout)
        for task in still_pending:
            task.cancel()
        if still_pending:
            logger.warning(
                "%s: cancelled %d task(s) still pending at drain",
                self._name,
                len(still_pending),
            )
