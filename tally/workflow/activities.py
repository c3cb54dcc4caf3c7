"""Temporal activities exposing the ledger.

Activities are thin IO wrappers. Mutations go through the LedgerWorker so
they are applied in queue order; reads go straight to the Ledger.

Each mutating activity is idempotent by construction: the request's tx_id is
the ledger's idempotency key, so a Temporal retry of an activity that already
applied reports ALREADY_APPLIED instead of booking twice.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, final

from temporalio import activity

from tally.ledger.engine import Ledger
from tally.ledger.transactions import DepositRequest, TransferRequest, WithdrawRequest
from tally.worker.ledger_worker import LedgerWorker
from tally.workflow.types import (
    BalancesOutput,
    CommandOutput,
    JournalInput,
    JournalOutput,
    TransactionsOutput,
)


@final
class LedgerActivities:
    """Activity implementations bound to one Ledger and its worker."""

    def __init__(self, ledger: Ledger, worker: LedgerWorker) -> None:
        self._ledger = ledger
        self._worker = worker

    def all(self) -> Sequence[Callable[..., Any]]:
        """Every activity, for ``temporalio.worker.Worker(activities=...)``."""
        return (
            self.deposit,
            self.withdraw,
            self.transfer,
            self.balances,
            self.transactions,
            self.journal,
        )

    @activity.defn(name="ledger_deposit")
    async def deposit(self, request: DepositRequest) -> CommandOutput:
        activity.logger.info("Deposit %s into %s", request.tx_id, request.account_id)
        return CommandOutput.from_outcome(await self._worker.deposit(request))

    @activity.defn(name="ledger_withdraw")
    async def withdraw(self, request: WithdrawRequest) -> CommandOutput:
        activity.logger.info("Withdraw %s from %s", request.tx_id, request.account_id)
        return CommandOutput.from_outcome(await self._worker.withdraw(request))

    @activity.defn(name="ledger_transfer")
    async def transfer(self, request: TransferRequest) -> CommandOutput:
        activity.logger.info(
            "Transfer %s from %s to %s",
            request.tx_id, request.debit_account_id, request.credit_account_id,
        )
        return CommandOutput.from_outcome(await self._worker.transfer(request))

    @activity.defn(name="ledger_balances")
    async def balances(self) -> BalancesOutput:
        return BalancesOutput(balances=self._ledger.balances(consistent=True))

    @activity.defn(name="ledger_transactions")
    async def transactions(self) -> TransactionsOutput:
        return TransactionsOutput(transactions=self._ledger.transactions(consistent=True))

    @activity.defn(name="ledger_journal")
    async def journal(self, inp: JournalInput) -> JournalOutput:
        return JournalOutput(
            account_id=inp.account_id,
            rows=self._ledger.journal(inp.account_id, consistent=inp.consistent),
        )
