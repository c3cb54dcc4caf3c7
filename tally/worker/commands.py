"""Commands carried over the ledger worker's queue."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import final

from tally.ledger.engine import Ledger
from tally.ledger.transactions import (
    DepositRequest,
    LedgerOutcome,
    LedgerRequest,
    TransferRequest,
    WithdrawRequest,
)


class CommandType(Enum):
    DEPOSIT = "DEPOSIT"
    WITHDRAW = "WITHDRAW"
    TRANSFER = "TRANSFER"

    @staticmethod
    def of(request: LedgerRequest) -> CommandType:
        match request:
            case DepositRequest():
                return CommandType.DEPOSIT
            case WithdrawRequest():
                return CommandType.WITHDRAW
            case TransferRequest():
                return CommandType.TRANSFER
        raise TypeError(f"unsupported ledger request: {type(request).__name__}")


@final
@dataclass(frozen=True, slots=True)
class Command:
    """A request plus the future its single reply is delivered on.

    sequence is assigned in queue-acceptance order.
    """

    request: LedgerRequest
    reply: asyncio.Future[LedgerOutcome]
    sequence: int

    @property
    def kind(self) -> CommandType:
        return CommandType.of(self.request)

    def resolve(self, outcome: LedgerOutcome) -> bool:
        """Deliver the reply. False if the caller already gave up waiting."""
        if self.reply.done():
            return False
        self.reply.set_result(outcome)
        return True


def dispatch(ledger: Ledger, request: LedgerRequest) -> LedgerOutcome:
    """Apply request to ledger. An unknown variant is a programming fault."""
    match request:
        case DepositRequest():
            return ledger.deposit(request)
        case WithdrawRequest():
            return ledger.withdraw(request)
        case TransferRequest():
            return ledger.transfer(request)
    raise TypeError(f"unsupported ledger request: {type(request).__name__}")
