"""Double-entry ledger with idempotent, lock-protected mutations.

Core invariants:
  - every Transaction has two entries of equal magnitude, opposite role;
  - an account's balance equals the sum of its entries' signed amounts;
  - a tx_id, once applied, is never applied again;
  - a rejected request leaves balances, log and idempotency set untouched.

Ledger is @final but not a dataclass: it holds mutable internal state.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from decimal import Decimal, Inexact, Overflow, localcontext
from typing import final

from tally.core.errors import (
    InsufficientFundsError,
    InvalidAmountError,
    LedgerError,
    SameAccountError,
)
from tally.core.money import (
    AGGREGATE_DECIMAL_CONTEXT,
    LEDGER_DECIMAL_CONTEXT,
    ZERO,
    validate_amount,
)
from tally.core.result import Err, Ok
from tally.core.types import UtcDatetime
from tally.infra.config import LedgerConfig
from tally.infra.health import HealthStatus
from tally.ledger._locking import ReadWriteLock
from tally.ledger.journal import derive_journal
from tally.ledger.transactions import (
    DepositRequest,
    Entry,
    ExecuteResult,
    JournalRow,
    LedgerOutcome,
    Transaction,
    TransferRequest,
    WithdrawRequest,
)

logger = logging.getLogger(__name__)

OPENING_TX_PREFIX = "opening:"


@final
class Ledger:
    """Balances, append-only transaction log, and idempotency set.

    All three are guarded by one ReadWriteLock. Mutations hold the exclusive
    side for validate + update + append + mark-seen. Reads with
    ``consistent=True`` hold the shared side; ``consistent=False`` reads take
    no lock and may observe a stale view.
    """

    def __init__(
        self,
        config: LedgerConfig | None = None,
        *,
        clock: Callable[[], UtcDatetime] = UtcDatetime.now,
    ) -> None:
        self._config = config if config is not None else LedgerConfig()
        self._clock = clock
        self._lock = ReadWriteLock()
        self._balances: dict[str, Decimal] = {}
        self._transactions: list[Transaction] = []
        self._applied_tx_ids: set[str] = set()

        for account_id, amount in self._config.opening_balances.items():
            opened = self.deposit(DepositRequest(
                tx_id=f"{OPENING_TX_PREFIX}{account_id}",
                account_id=account_id,
                amount=amount,
            ))
            if isinstance(opened, Err):
                raise TypeError(
                    f"opening balance for {account_id!r} rejected: {opened.error.message}"
                )

    @property
    def system_account_id(self) -> str:
        return self._config.system_account_id

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def deposit(self, req: DepositRequest) -> LedgerOutcome:
        """Credit req.account_id, debit the system account."""
        with self._lock.exclusive():
            if req.tx_id in self._applied_tx_ids:
                return self._already_applied("deposit", req.tx_id)
            if (err := self._check_amount("deposit", req.amount)) is not None:
                return Err(err)
            if (err := self._post("deposit", req.tx_id, (
                Entry(account_id=req.account_id, credit=req.amount),
                Entry(account_id=self.system_account_id, debit=req.amount),
            ))) is not None:
                return Err(err)
            return Ok(ExecuteResult.APPLIED)

    def withdraw(self, req: WithdrawRequest) -> LedgerOutcome:
        """Debit req.account_id, credit the system account."""
        with self._lock.exclusive():
            if req.tx_id in self._applied_tx_ids:
                return self._already_applied("withdraw", req.tx_id)
            if (err := self._check_amount("withdraw", req.amount)) is not None:
                return Err(err)
            if (err := self._check_funds("withdraw", req.account_id, req.amount)) is not None:
                return Err(err)
            if (err := self._post("withdraw", req.tx_id, (
                Entry(account_id=req.account_id, debit=req.amount),
                Entry(account_id=self.system_account_id, credit=req.amount),
            ))) is not None:
                return Err(err)
            return Ok(ExecuteResult.APPLIED)

    def transfer(self, req: TransferRequest) -> LedgerOutcome:
        """Move req.amount from the debit account to the credit account."""
        with self._lock.exclusive():
            if req.tx_id in self._applied_tx_ids:
                return self._already_applied("transfer", req.tx_id)
            if (err := self._check_amount("transfer", req.amount)) is not None:
                return Err(err)
            if req.debit_account_id == req.credit_account_id:
                return Err(SameAccountError(
                    message=(
                        f"debit and credit account must differ, both are "
                        f"'{req.debit_account_id}'"
                    ),
                    code="SAME_ACCOUNT",
                    timestamp=self._clock(),
                    source="ledger.engine.Ledger.transfer",
                    account_id=req.debit_account_id,
                ))
            if (err := self._check_funds("transfer", req.debit_account_id, req.amount)) is not None:
                return Err(err)
            if (err := self._post("transfer", req.tx_id, (
                Entry(account_id=req.debit_account_id, debit=req.amount),
                Entry(account_id=req.credit_account_id, credit=req.amount),
            ))) is not None:
                return Err(err)
            return Ok(ExecuteResult.APPLIED)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def balances(self, consistent: bool = True) -> dict[str, Decimal]:
        """Copy of every known account's balance."""
        if not consistent:
            return self._balances.copy()
        with self._lock.shared():
            return self._balances.copy()

    def balance(self, account_id: str, consistent: bool = True) -> Decimal:
        """Balance of one account; zero if the account was never touched."""
        if not consistent:
            return self._balances.get(account_id, ZERO)
        with self._lock.shared():
            return self._balances.get(account_id, ZERO)

    def transactions(self, consistent: bool = True) -> tuple[Transaction, ...]:
        """All applied transactions in append order."""
        if not consistent:
            return tuple(self._transactions)
        with self._lock.shared():
            return tuple(self._transactions)

    def journal(self, account_id: str, consistent: bool = True) -> tuple[JournalRow, ...]:
        """Journal rows for account_id; empty for an unknown account."""
        return derive_journal(self.transactions(consistent), account_id)

    def is_applied(self, tx_id: str) -> bool:
        with self._lock.shared():
            return tx_id in self._applied_tx_ids

    def transaction_count(self) -> int:
        with self._lock.shared():
            return len(self._transactions)

    def total_supply(self) -> Decimal:
        """Sum of all balances, system account included. Zero when conserved."""
        with self._lock.shared(), localcontext(AGGREGATE_DECIMAL_CONTEXT):
            return sum(self._balances.values(), ZERO)

    def health_check(self) -> Ok[HealthStatus] | Err[LedgerError]:
        total = self.total_supply()
        return Ok(HealthStatus(
            healthy=total == ZERO,
            component="ledger",
            message="balanced" if total == ZERO else f"total supply is {total}, expected 0",
            checked_at=self._clock().value,
        ))

    # ------------------------------------------------------------------
    # Internals: caller holds the exclusive lock
    # ------------------------------------------------------------------

    def _post(
        self, operation: str, tx_id: str, entries: tuple[Entry, Entry],
    ) -> InvalidAmountError | None:
        amount = entries[0].debit or entries[0].credit
        updated: dict[str, Decimal] = {}
        try:
            with localcontext(LEDGER_DECIMAL_CONTEXT):
                for entry in entries:
                    current = updated.get(entry.account_id, self._balances.get(entry.account_id, ZERO))
                    updated[entry.account_id] = current + entry.signed_amount
        except (Inexact, Overflow):
            # nothing mutated yet
            return InvalidAmountError(
                message=(
                    f"amount {amount} cannot be booked exactly against the balance "
                    f"of '{entry.account_id}'"
                ),
                code="INVALID_AMOUNT",
                timestamp=self._clock(),
                source=f"ledger.engine.Ledger.{operation}",
                amount=str(amount),
            )
        tx = Transaction(tx_id=tx_id, timestamp=self._clock(), entries=entries)
        self._balances.update(updated)
        self._transactions.append(tx)
        self._applied_tx_ids.add(tx_id)
        logger.debug(
            "applied %s: %s -> %s %s",
            tx_id, entries[0].account_id, entries[1].account_id,
            amount,
        )
        return None

    def _already_applied(self, operation: str, tx_id: str) -> LedgerOutcome:
        logger.debug("%s %s already applied, ignoring", operation, tx_id)
        return Ok(ExecuteResult.ALREADY_APPLIED)

    def _check_amount(self, operation: str, amount: object) -> InvalidAmountError | None:
        match validate_amount(amount):
            case Err(reason):
                return InvalidAmountError(
                    message=reason,
                    code="INVALID_AMOUNT",
                    timestamp=self._clock(),
                    source=f"ledger.engine.Ledger.{operation}",
                    amount=str(amount),
                )
        return None

    def _check_funds(
        self, operation: str, account_id: str, amount: Decimal,
    ) -> InsufficientFundsError | None:
        available = self._balances.get(account_id, ZERO)
        if available >= amount:
            return None
        return InsufficientFundsError(
            message=f"insufficient funds in '{account_id}': {available} < {amount}",
            code="INSUFFICIENT_FUNDS",
            timestamp=self._clock(),
            source=f"ledger.engine.Ledger.{operation}",
            account_id=account_id,
            available=str(available),
            requested=str(amount),
        )
