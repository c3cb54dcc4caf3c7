"""Queued execution path: one consumer applies ledger commands in FIFO order.

Callers ``await submit(request)``. Submission blocks while the bounded queue
is full, then until the single reply for that command arrives. The reply is
the Ledger's outcome, forwarded verbatim.

Every accepted command gets exactly one reply. If the loop exits, by stop()
or by a fault, the in-flight command and everything still queued are answered
with Err(WorkerUnavailableError) instead of being left waiting.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from typing import final

from tally.core.errors import LedgerError, WorkerUnavailableError
from tally.core.result import Err, Ok
from tally.core.types import UtcDatetime
from tally.infra.config import WorkerConfig
from tally.infra.health import HealthStatus
from tally.ledger.engine import Ledger
from tally.ledger.transactions import (
    DepositRequest,
    LedgerOutcome,
    LedgerRequest,
    TransferRequest,
    WithdrawRequest,
)
from tally.worker.commands import Command, dispatch
from tally.worker.supervisor import FailureHook, Worker, WorkerState

logger = logging.getLogger(__name__)


@final
class LedgerWorker:
    """Serializes ledger mutations through a single supervised consumer."""

    def __init__(
        self,
        ledger: Ledger,
        config: WorkerConfig | None = None,
        *,
        on_failure: FailureHook | None = None,
    ) -> None:
        self._ledger = ledger
        self._config = config if config is not None else WorkerConfig()
        self._queue: asyncio.Queue[Command] = asyncio.Queue(
            maxsize=self._config.queue_capacity,
        )
        self._submit_lock = asyncio.Lock()
        self._sequence = itertools.count()
        self._in_flight: Command | None = None
        self._worker = Worker(
            name=self._config.name, handler=self._loop, on_failure=on_failure,
        )

    @property
    def name(self) -> str:
        return self._config.name

    @property
    def state(self) -> WorkerState:
        return self._worker.state

    @property
    def failure(self) -> Exception | None:
        return self._worker.failure

    def is_alive(self) -> bool:
        return self._worker.is_alive()

    def pending(self) -> int:
        """Commands accepted but not yet dispatched."""
        return self._queue.qsize()

    def start(self) -> Ok[None] | Err[LedgerError]:
        return self._worker.start()

    async def stop(self) -> None:
        """Cancel the loop, wait for it, and fail anything left unanswered."""
        self._worker.stop()
        await self._worker.join()
        self._abandon_pending()

    async def submit(self, request: LedgerRequest) -> LedgerOutcome:
        """Enqueue request and wait for its outcome."""
        if not self.is_alive():
            return Err(self._unavailable())
        reply: asyncio.Future[LedgerOutcome] = asyncio.get_running_loop().create_future()
        # one producer at a time, so sequence order is queue order
        async with self._submit_lock:
            command = Command(request=request, reply=reply, sequence=next(self._sequence))
            await self._queue.put(command)
        if not self.is_alive():
            self._abandon_pending()
        return await reply

    async def deposit(self, request: DepositRequest) -> LedgerOutcome:
        return await self.submit(request)

    async def withdraw(self, request: WithdrawRequest) -> LedgerOutcome:
        return await self.submit(request)

    async def transfer(self, request: TransferRequest) -> LedgerOutcome:
        return await self.submit(request)

    def health_check(self) -> Ok[HealthStatus] | Err[LedgerError]:
        return Ok(HealthStatus(
            healthy=self.is_alive(),
            component=f"worker:{self.name}",
            message=f"{self.state.value}, {self.pending()} queued",
            checked_at=UtcDatetime.now().value,
        ))

    async def _loop(self) -> None:
        try:
            while True:
                command = await self._queue.get()
                self._in_flight = command
                command.resolve(dispatch(self._ledger, command.request))
                self._in_flight = None
                self._queue.task_done()
        # the supervisor records the final state only after this loop unwinds
        except asyncio.CancelledError:
            self._abandon_pending(WorkerState.STOPPED)
            raise
        except Exception:
            self._abandon_pending(WorkerState.CRASHED)
            raise

    def _abandon_pending(self, state: WorkerState | None = None) -> None:
        abandoned: list[Command] = []
        if self._in_flight is not None:
            abandoned.append(self._in_flight)
            self._in_flight = None
        while not self._queue.empty():
            abandoned.append(self._queue.get_nowait())
            self._queue.task_done()
        error = self._unavailable(state)
        answered = sum(1 for c in abandoned if c.resolve(Err(error)))
        if answered:
            logger.warning(
                "[worker:%s] exited with %d unanswered command(s), replied unavailable",
                self.name, answered,
            )

    def _unavailable(self, state: WorkerState | None = None) -> WorkerUnavailableError:
        state = state if state is not None else self.state
        return WorkerUnavailableError(
            message=f"ledger worker '{self.name}' is not running ({state.value})",
            code="WORKER_UNAVAILABLE",
            timestamp=UtcDatetime.now(),
            source="worker.ledger_worker.LedgerWorker.submit",
            worker=self.name,
            state=state.value,
        )
