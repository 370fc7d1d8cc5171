"""Pool de tasks de background do relay.

Hoje só a gravação do cache de migração de chat roda fora da
requisição. O pool limita quantas executam ao mesmo tempo e guarda
referência às pendentes para o shutdown poder aguardá-las.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Awaitable

logger = logging.getLogger(__name__)

MAX_CONCURRENT_TASKS = 100


class BackgroundTaskPool:
    """Tasks fire-and-forget com limite de concorrência.

    Exceções das tasks são logadas e descartadas.
    """

    def __init__(self, limit: int = MAX_CONCURRENT_TASKS) -> None:
        self._limit = asyncio.Semaphore(limit)
        self._tasks: set[asyncio.Task[Any]] = set()

    def __len__(self) -> int:
        return len(self._tasks)

    def spawn(self, coroutine: Awaitable[None]) -> None:
        task = asyncio.create_task(self._run(coroutine))
        self._tasks.add(task)
        task.add_done_callback(self._forget)

    async def _run(self, coroutine: Awaitable[None]) -> None:
        async with self._limit:
            await coroutine

    def _forget(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "relay_background_task_failed",
                extra={"error_type": type(exc).__name__, "pending_tasks": len(self._tasks)},
            )

    async def drain(self, timeout_seconds: float) -> None:
        """Aguarda as pendentes; cancela o que passar do timeout."""
        if not self._tasks:
            return

        logger.info(
            "relay_background_drain",
            extra={"pending_tasks": len(self._tasks), "timeout_seconds": timeout_seconds},
        )
        _, overdue = await asyncio.wait(list(self._tasks), timeout=timeout_seconds)
        if not overdue:
            return

        for task in overdue:
            task.cancel()
        await asyncio.gather(*overdue, return_exceptions=True)
        logger.warning("relay_background_tasks_cancelled", extra={"cancelled_tasks": len(overdue)})


_pool = BackgroundTaskPool()


def schedule_background_task(coroutine: Awaitable[None]) -> None:
    _pool.spawn(coroutine)


def active_task_count() -> int:
    return len(_pool)


async def drain_background_tasks(timeout_seconds: float = 30.0) -> None:
    await _pool.drain(timeout_seconds)
