"""Tests for tally.worker.supervisor — lifecycle and failure isolation."""

from __future__ import annotations

import asyncio

import pytest

from tally.core.errors import IllegalTransitionError
from tally.core.result import Err, Ok
from tally.worker.supervisor import Worker, WorkerState


async def _forever() -> None:
    await asyncio.Event().wait()


async def _returns() -> None:
    await asyncio.sleep(0)


async def _boom() -> None:
    await asyncio.sleep(0)
    raise RuntimeError("boom")


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_not_started(self) -> None:
        worker = Worker("w", _forever)
        assert worker.state is WorkerState.NOT_STARTED
        assert not worker.is_alive()

    @pytest.mark.asyncio
    async def test_start_runs(self) -> None:
        worker = Worker("w", _forever)
        assert worker.start() == Ok(None)
        assert worker.state is WorkerState.RUNNING
        assert worker.is_alive()
        worker.stop()
        await worker.join()

    @pytest.mark.asyncio
    async def test_stop_is_clean(self) -> None:
        worker = Worker("w", _forever)
        worker.start()
        await asyncio.sleep(0)
        worker.stop()
        await worker.join()
        assert worker.state is WorkerState.STOPPED
        assert worker.failure is None

    @pytest.mark.asyncio
    async def test_handler_return_is_stopped(self) -> None:
        worker = Worker("w", _returns)
        worker.start()
        await worker.join()
        assert worker.state is WorkerState.STOPPED

    @pytest.mark.asyncio
    async def test_stop_before_start(self) -> None:
        worker = Worker("w", _forever)
        worker.stop()
        assert worker.state is WorkerState.STOPPED
        await worker.join()

    @pytest.mark.asyncio
    async def test_start_twice_is_illegal(self) -> None:
        worker = Worker("w", _forever)
        worker.start()
        result = worker.start()
        assert isinstance(result, Err)
        assert isinstance(result.error, IllegalTransitionError)
        assert result.error.from_state == "RUNNING"
        assert result.error.to_state == "RUNNING"
        worker.stop()
        await worker.join()

    @pytest.mark.asyncio
    async def test_no_restart_after_stop(self) -> None:
        worker = Worker("w", _returns)
        worker.start()
        await worker.join()
        result = worker.start()
        assert isinstance(result, Err)
        assert result.error.from_state == "STOPPED"

    def test_start_requires_running_loop(self) -> None:
        worker = Worker("w", _forever)
        with pytest.raises(RuntimeError):
            worker.start()


class TestFailureIsolation:
    @pytest.mark.asyncio
    async def test_fault_marks_crashed(self) -> None:
        worker = Worker("w", _boom)
        worker.start()
        await worker.join()
        assert worker.state is WorkerState.CRASHED
        assert not worker.is_alive()
        assert isinstance(worker.failure, RuntimeError)

    @pytest.mark.asyncio
    async def test_failure_hook_called_once(self) -> None:
        seen: list[Exception] = []
        worker = Worker("w", _boom, on_failure=seen.append)
        worker.start()
        await worker.join()
        assert len(seen) == 1
        assert str(seen[0]) == "boom"

    @pytest.mark.asyncio
    async def test_hook_not_called_on_stop(self) -> None:
        seen: list[Exception] = []
        worker = Worker("w", _forever, on_failure=seen.append)
        worker.start()
        await asyncio.sleep(0)
        worker.stop()
        await worker.join()
        assert seen == []

    @pytest.mark.asyncio
    async def test_crashed_is_terminal(self) -> None:
        worker = Worker("w", _boom)
        worker.start()
        await worker.join()
        assert isinstance(worker.start(), Err)
        worker.stop()
        assert worker.state is WorkerState.CRASHED

    @pytest.mark.asyncio
    async def test_fault_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        worker = Worker("audit", _boom)
        with caplog.at_level("ERROR", logger="tally.worker.supervisor"):
            worker.start()
            await worker.join()
        assert any("[worker:audit] crashed" in r.getMessage() for r in caplog.records)

    @pytest.mark.asyncio
    async def test_raising_hook_is_contained(self, caplog: pytest.LogCaptureFixture) -> None:
        def bad_hook(exc: Exception) -> None:
            raise ValueError("hook failed")

        worker = Worker("audit", _boom, on_failure=bad_hook)
        with caplog.at_level("ERROR", logger="tally.worker.supervisor"):
            worker.start()
            await worker.join()
        assert worker.state is WorkerState.CRASHED
        assert isinstance(worker.failure, RuntimeError)
        assert worker._task is not None
        assert worker._task.exception() is None
        assert any(
            "[worker:audit] failure hook raised" in r.getMessage() for r in caplog.records
        )
