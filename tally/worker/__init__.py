"""tally.worker — supervised command queue in front of the Ledger."""

from tally.worker.commands import Command as Command
from tally.worker.commands import CommandType as CommandType
from tally.worker.commands import dispatch as dispatch
from tally.worker.ledger_worker import LedgerWorker as LedgerWorker
from tally.worker.supervisor import FailureHook as FailureHook
from tally.worker.supervisor import Worker as Worker
from tally.worker.supervisor import WorkerState as WorkerState
