"""Liveness and readiness probes.

The Ledger is ready while its balances sum to zero; a LedgerWorker is ready
while its consumer task is running. readiness_check((ledger, worker)) folds
both into one SystemHealth.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol, final

from tally.core.errors import LedgerError
from tally.core.result import Err, Ok


@final
@dataclass(frozen=True, slots=True)
class HealthStatus:
    """One component's answer to a probe."""

    healthy: bool
    component: str
    message: str
    checked_at: datetime


@final
@dataclass(frozen=True, slots=True)
class SystemHealth:
    overall_healthy: bool
    checks: tuple[HealthStatus, ...]
    checked_at: datetime

    @property
    def failing(self) -> tuple[str, ...]:
        """Components whose probe came back unhealthy."""
        return tuple(c.component for c in self.checks if not c.healthy)


class HealthCheckable(Protocol):
    def health_check(self) -> Ok[HealthStatus] | Err[LedgerError]: ...


def liveness_check() -> HealthStatus:
    return HealthStatus(
        healthy=True, component="process", message="alive",
        checked_at=datetime.now(tz=UTC),
    )


def _probe(dep: HealthCheckable) -> HealthStatus:
    match dep.health_check():
        case Ok(status):
            return status
        case Err(error):
            return HealthStatus(
                healthy=False,
                component=type(dep).__name__,
                message=f"probe failed [{error.code}]: {error.message}",
                checked_at=error.timestamp.value,
            )
    raise TypeError(f"{type(dep).__name__}.health_check must return Ok or Err")


def readiness_check(dependencies: tuple[HealthCheckable, ...]) -> SystemHealth:
    """Probe each dependency in order. Ready only if all of them are."""
    checks = tuple(_probe(dep) for dep in dependencies)
    return SystemHealth(
        overall_healthy=all(c.healthy for c in checks),
        checks=checks,
        checked_at=datetime.now(tz=UTC),
    )
