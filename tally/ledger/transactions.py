"""Ledger domain types: Entry, Transaction, JournalRow, requests, ExecuteResult.

Sign convention: an account's balance is the sum of its credits minus the sum
of its debits. Every Transaction has exactly two entries of equal magnitude
and opposite role.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import final

from tally.core.errors import LedgerError
from tally.core.money import ZERO
from tally.core.result import Err, Ok
from tally.core.types import UtcDatetime
from tally.infra.config import DEFAULT_SYSTEM_ACCOUNT_ID

SYSTEM_ACCOUNT_ID: str = DEFAULT_SYSTEM_ACCOUNT_ID


class ExecuteResult(Enum):
    APPLIED = "APPLIED"
    ALREADY_APPLIED = "ALREADY_APPLIED"


# ---------------------------------------------------------------------------
# Entry, Transaction, JournalRow
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class Entry:
    """One leg of a transaction. At most one of debit/credit is nonzero."""

    account_id: str
    debit: Decimal = ZERO
    credit: Decimal = ZERO

    @property
    def signed_amount(self) -> Decimal:
        """Effect of this leg on the account balance."""
        return self.credit - self.debit


@final
@dataclass(frozen=True, slots=True)
class Transaction:
    """Immutable record of one applied money movement.

    tx_id is the caller's idempotency key; timestamp is the ledger's clock.
    """

    tx_id: str
    timestamp: UtcDatetime
    entries: tuple[Entry, ...]

    def is_balanced(self) -> bool:
        return sum((e.debit for e in self.entries), ZERO) == sum(
            (e.credit for e in self.entries), ZERO,
        )

    def involves(self, account_id: str) -> bool:
        return any(e.account_id == account_id for e in self.entries)


@final
@dataclass(frozen=True, slots=True)
class JournalRow:
    """One account's view of one transaction. Derived, never stored."""

    tx_id: str
    account_id: str
    counterparty_id: str
    timestamp: UtcDatetime
    debit: Decimal = ZERO
    credit: Decimal = ZERO


# ---------------------------------------------------------------------------
# Requests: a closed union
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class DepositRequest:
    tx_id: str
    account_id: str
    amount: Decimal
    timestamp: UtcDatetime | None = None  # client clock, informational only


@final
@dataclass(frozen=True, slots=True)
class WithdrawRequest:
    tx_id: str
    account_id: str
    amount: Decimal
    timestamp: UtcDatetime | None = None


@final
@dataclass(frozen=True, slots=True)
class TransferRequest:
    tx_id: str
    debit_account_id: str
    credit_account_id: str
    amount: Decimal
    timestamp: UtcDatetime | None = None


type LedgerRequest = DepositRequest | WithdrawRequest | TransferRequest

type LedgerOutcome = Ok[ExecuteResult] | Err[LedgerError]


def is_applied(outcome: LedgerOutcome) -> bool:
    """True only when the outcome changed ledger state."""
    return isinstance(outcome, Ok) and outcome.value is ExecuteResult.APPLIED
