"""Ledger, command-worker and Temporal configuration.

No config-file library is imported. Pure configuration data: callers build
these at process start and pass them to the components they construct.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import final

from tally.core.money import validate_amount
from tally.core.result import Err
from tally.core.types import FrozenMap

DEFAULT_SYSTEM_ACCOUNT_ID: str = "system"
DEFAULT_QUEUE_CAPACITY: int = 1024
DEFAULT_TASK_QUEUE: str = "tally-ledger"


@final
@dataclass(frozen=True, slots=True)
class LedgerConfig:
    """Configuration for a Ledger instance.

    opening_balances seed accounts at construction. Each one is booked as a
    deposit from the system account, so seeded ledgers keep the
    entries-reconstruct-balance invariant.
    """

    system_account_id: str = DEFAULT_SYSTEM_ACCOUNT_ID
    opening_balances: FrozenMap[str, Decimal] = field(
        default_factory=lambda: FrozenMap.EMPTY,
    )

    def __post_init__(self) -> None:
        if not self.system_account_id:
            raise TypeError("LedgerConfig.system_account_id must be non-empty")
        for account_id, amount in self.opening_balances.items():
            if not account_id:
                raise TypeError("LedgerConfig.opening_balances has an empty account id")
            if account_id == self.system_account_id:
                raise TypeError(
                    f"LedgerConfig.opening_balances cannot seed the system account "
                    f"'{account_id}'"
                )
            if isinstance(checked := validate_amount(amount), Err):
                raise TypeError(
                    f"LedgerConfig.opening_balances[{account_id!r}]: {checked.error}"
                )


@final
@dataclass(frozen=True, slots=True)
class WorkerConfig:
    """Configuration for the single-consumer command worker."""

    name: str = "ledger"
    queue_capacity: int = DEFAULT_QUEUE_CAPACITY  # submit() blocks when full

    def __post_init__(self) -> None:
        if not self.name:
            raise TypeError("WorkerConfig.name must be non-empty")
        if self.queue_capacity < 1:
            raise TypeError(
                f"WorkerConfig.queue_capacity must be >= 1, got {self.queue_capacity}"
            )


@final
@dataclass(frozen=True, slots=True)
class TemporalWorkerConfig:
    """Where the ledger activities are hosted."""

    target_host: str = "localhost:7233"
    namespace: str = "default"
    task_queue: str = DEFAULT_TASK_QUEUE
