"""Supervised single-task worker.

State machine:
    NOT_STARTED --start()--> RUNNING --stop()/handler returns--> STOPPED
                                     --handler raises---------> CRASHED

STOPPED and CRASHED are terminal. There is no automatic restart: construct a
new Worker to run again.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import final

from tally.core.errors import IllegalTransitionError
from tally.core.result import Err, Ok
from tally.core.types import UtcDatetime

logger = logging.getLogger(__name__)

type FailureHook = Callable[[Exception], None]


class WorkerState(Enum):
    NOT_STARTED = "NOT_STARTED"
    RUNNING = "RUNNING"
    STOPPED = "STOPPED"
    CRASHED = "CRASHED"


@final
class Worker:
    """Runs ``handler`` in exactly one asyncio task and isolates its faults.

    A fault inside the handler marks the worker CRASHED and is passed to
    ``on_failure``; it never escapes into the event loop. A fault raised
    by ``on_failure`` itself is logged and dropped.
    """

    def __init__(
        self,
        name: str,
        handler: Callable[[], Awaitable[None]],
        on_failure: FailureHook | None = None,
    ) -> None:
        self.name = name
        self._handler = handler
        self._on_failure = on_failure
        self._state = WorkerState.NOT_STARTED
        self._task: asyncio.Task[None] | None = None
        self._stopping = False
        self.failure: Exception | None = None

    @property
    def state(self) -> WorkerState:
        return self._state

    def is_alive(self) -> bool:
        return self._state is WorkerState.RUNNING

    def start(self) -> Ok[None] | Err[IllegalTransitionError]:
        """Spawn the task. Must be called from inside a running event loop."""
        if self._state is not WorkerState.NOT_STARTED:
            return Err(IllegalTransitionError(
                message=f"worker '{self.name}' cannot start from {self._state.value}",
                code="ILLEGAL_TRANSITION",
                timestamp=UtcDatetime.now(),
                source="worker.supervisor.Worker.start",
                from_state=self._state.value,
                to_state=WorkerState.RUNNING.value,
            ))
        loop = asyncio.get_running_loop()
        self._state = WorkerState.RUNNING
        self._task = loop.create_task(self._run(), name=f"worker:{self.name}")
        self._task.add_done_callback(self._on_done)
        return Ok(None)

    def stop(self) -> None:
        """Request cancellation. The handler exits at its next await point."""
        if self._state is WorkerState.NOT_STARTED:
            self._state = WorkerState.STOPPED
            return
        if self._task is not None and not self._task.done():
            self._stopping = True
            self._task.cancel()

    async def join(self) -> None:
        """Wait for the task to finish. Never raises the handler's fault."""
        if self._task is not None:
            await asyncio.wait({self._task})

    def _on_done(self, task: asyncio.Task[None]) -> None:
        # a task cancelled before its first step never enters _run
        if self._state is WorkerState.RUNNING:
            self._state = WorkerState.STOPPED

    async def _run(self) -> None:
        logger.info("[worker:%s] starting", self.name)
        try:
            await self._handler()
        except asyncio.CancelledError:
            self._state = WorkerState.STOPPED
            if not self._stopping:
                raise
        except Exception as exc:
            self._state = WorkerState.CRASHED
            self.failure = exc
            logger.exception("[worker:%s] crashed", self.name)
            if self._on_failure is not None:
                try:
                    self._on_failure(exc)
                except Exception:
                    logger.exception("[worker:%s] failure hook raised", self.name)
            return
        self._state = WorkerState.STOPPED
        logger.info("[worker:%s] stopped", self.name)
