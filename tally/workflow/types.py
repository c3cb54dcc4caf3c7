"""Activity input/output types for the ledger's Temporal surface.

Each activity takes at most one frozen-dataclass input and returns a
frozen-dataclass output. Rejections travel as data (error_code/error), never
as activity failures, so Temporal does not retry them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import final

from tally.core.result import Err, Ok
from tally.ledger.transactions import (
    ExecuteResult,
    JournalRow,
    LedgerOutcome,
    Transaction,
)


@final
@dataclass(frozen=True, slots=True)
class CommandOutput:
    """Wire form of a LedgerOutcome."""

    result: ExecuteResult | None = None
    error_code: str | None = None
    error: str | None = None

    @property
    def applied(self) -> bool:
        return self.result is ExecuteResult.APPLIED

    @staticmethod
    def from_outcome(outcome: LedgerOutcome) -> CommandOutput:
        match outcome:
            case Ok(result):
                return CommandOutput(result=result)
            case Err(error):
                return CommandOutput(error_code=error.code, error=error.message)


@final
@dataclass(frozen=True, slots=True)
class BalancesOutput:
    balances: dict[str, Decimal] = field(default_factory=dict)


@final
@dataclass(frozen=True, slots=True)
class TransactionsOutput:
    transactions: tuple[Transaction, ...] = ()


@final
@dataclass(frozen=True, slots=True)
class JournalInput:
    account_id: str
    consistent: bool = True


@final
@dataclass(frozen=True, slots=True)
class JournalOutput:
    account_id: str
    rows: tuple[JournalRow, ...] = ()

    @property
    def found(self) -> bool:
        """An unknown account has no rows; the surface maps that to not-found."""
        return bool(self.rows)
