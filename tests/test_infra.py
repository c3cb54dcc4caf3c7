"""Tests for tally.infra — configuration validation and health probes."""

from __future__ import annotations

from decimal import Decimal

import pytest

from tally.core.errors import LedgerError
from tally.core.result import Err, Ok, unwrap
from tally.core.types import FrozenMap, UtcDatetime
from tally.infra.config import (
    DEFAULT_QUEUE_CAPACITY,
    DEFAULT_SYSTEM_ACCOUNT_ID,
    DEFAULT_TASK_QUEUE,
    LedgerConfig,
    TemporalWorkerConfig,
    WorkerConfig,
)
from tally.infra.health import HealthStatus, liveness_check, readiness_check
from tally.ledger.engine import Ledger
from tally.worker.ledger_worker import LedgerWorker


def _balances(d: dict[str, Decimal]) -> FrozenMap[str, Decimal]:
    return unwrap(FrozenMap.create(d))


class TestLedgerConfig:
    def test_defaults(self) -> None:
        cfg = LedgerConfig()
        assert cfg.system_account_id == DEFAULT_SYSTEM_ACCOUNT_ID
        assert len(cfg.opening_balances) == 0

    def test_empty_system_account_rejected(self) -> None:
        with pytest.raises(TypeError):
            LedgerConfig(system_account_id="")

    def test_seeding_system_account_rejected(self) -> None:
        with pytest.raises(TypeError):
            LedgerConfig(opening_balances=_balances({"system": Decimal("1")}))

    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-5"), Decimal("NaN"), 5])
    def test_bad_opening_amount_rejected(self, amount: object) -> None:
        with pytest.raises(TypeError):
            LedgerConfig(opening_balances=_balances({"A": amount}))  # type: ignore[dict-item]

    def test_empty_account_rejected(self) -> None:
        with pytest.raises(TypeError):
            LedgerConfig(opening_balances=_balances({"": Decimal("1")}))


class TestWorkerConfig:
    def test_defaults(self) -> None:
        cfg = WorkerConfig()
        assert cfg.name == "ledger"
        assert cfg.queue_capacity == DEFAULT_QUEUE_CAPACITY

    def test_zero_capacity_rejected(self) -> None:
        with pytest.raises(TypeError):
            WorkerConfig(queue_capacity=0)

    def test_empty_name_rejected(self) -> None:
        with pytest.raises(TypeError):
            WorkerConfig(name="")

    def test_temporal_defaults(self) -> None:
        cfg = TemporalWorkerConfig()
        assert cfg.task_queue == DEFAULT_TASK_QUEUE
        assert cfg.namespace == "default"


class _Failing:
    def health_check(self) -> Ok[HealthStatus] | Err[LedgerError]:
        return Err(LedgerError(
            message="store unreachable", code="PROBE", timestamp=UtcDatetime.now(), source="test",
        ))


class TestHealth:
    def test_liveness(self) -> None:
        status = liveness_check()
        assert status.healthy
        assert status.component == "process"

    def test_ledger_is_ready(self) -> None:
        ledger = Ledger(LedgerConfig(opening_balances=_balances({"A": Decimal("10")})))
        status = unwrap(ledger.health_check())
        assert status.healthy
        assert status.component == "ledger"

    def test_unbalanced_ledger_not_ready(self) -> None:
        ledger = Ledger()
        ledger._balances["A"] = Decimal("1")
        status = unwrap(ledger.health_check())
        assert not status.healthy
        assert "expected 0" in status.message

    @pytest.mark.asyncio
    async def test_readiness_aggregates(self) -> None:
        ledger = Ledger()
        worker = LedgerWorker(ledger)
        assert readiness_check((ledger, worker)).failing == ("worker:ledger",)
        worker.start()
        health = readiness_check((ledger, worker))
        assert health.overall_healthy
        assert [c.component for c in health.checks] == ["ledger", "worker:ledger"]
        await worker.stop()

    def test_readiness_with_failing_probe(self) -> None:
        health = readiness_check((Ledger(), _Failing()))
        assert not health.overall_healthy
        assert health.checks[1].component == "_Failing"
        assert health.failing == ("_Failing",)
        assert health.checks[1].message == "probe failed [PROBE]: store unreachable"
