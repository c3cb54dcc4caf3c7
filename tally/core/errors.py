"""Rejection values. Ledger operations return these inside Err, never raise them.

Errors are frozen dataclass values. Callers match on the class, and the
worker forwards them unchanged across the command queue. Base class
LedgerError, five @final subclasses.

Taxonomy:
  validation       InvalidAmountError, SameAccountError
  business rule    InsufficientFundsError
  worker           WorkerUnavailableError, IllegalTransitionError
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import final

from tally.core.types import UtcDatetime


@dataclass(frozen=True, slots=True)
class LedgerError:
    """Fields every rejection carries. Subclassed, so not @final."""

    message: str
    code: str
    timestamp: UtcDatetime
    source: str  # "module.function" that produced this error

    def with_context(self, context: str) -> LedgerError:
        """Return a copy with context prepended to message."""
        return replace(self, message=f"{context}: {self.message}")

    def to_dict(self) -> dict[str, object]:
        """Serialize to dict with stable keys."""
        return {
            "message": self.message,
            "code": self.code,
            "timestamp": self.timestamp.isoformat(),
            "source": self.source,
        }


@final
@dataclass(frozen=True, slots=True)
class InvalidAmountError(LedgerError):
    """Amount is not a finite Decimal > 0."""

    amount: str

    def to_dict(self) -> dict[str, object]:
        return {**LedgerError.to_dict(self), "amount": self.amount}


@final
@dataclass(frozen=True, slots=True)
class SameAccountError(LedgerError):
    """Transfer whose debit and credit accounts are the same."""

    account_id: str

    def to_dict(self) -> dict[str, object]:
        return {**LedgerError.to_dict(self), "account_id": self.account_id}


@final
@dataclass(frozen=True, slots=True)
class InsufficientFundsError(LedgerError):
    """Debited account balance is below the requested amount."""

    account_id: str
    available: str
    requested: str

    def to_dict(self) -> dict[str, object]:
        return {
            **LedgerError.to_dict(self),
            "account_id": self.account_id,
            "available": self.available,
            "requested": self.requested,
        }


@final
@dataclass(frozen=True, slots=True)
class WorkerUnavailableError(LedgerError):
    """The command worker is not running, or exited before replying."""

    worker: str
    state: str

    def to_dict(self) -> dict[str, object]:
        return {**LedgerError.to_dict(self), "worker": self.worker, "state": self.state}


@final
@dataclass(frozen=True, slots=True)
class IllegalTransitionError(LedgerError):
    """Worker lifecycle transition is not allowed."""

    from_state: str
    to_state: str

    def to_dict(self) -> dict[str, object]:
        return {
            **LedgerError.to_dict(self),
            "from_state": self.from_state,
            "to_state": self.to_state,
        }
