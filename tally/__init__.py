"""tally — in-memory double-entry ledger with idempotent requests.

Direct path: call ``Ledger`` methods from any thread.
Queued path: ``await LedgerWorker.submit(request)`` for a total order of effects.
"""

from tally.core.result import Err as Err
from tally.core.result import Ok as Ok
from tally.infra.config import LedgerConfig as LedgerConfig
from tally.infra.config import WorkerConfig as WorkerConfig
from tally.ledger.engine import Ledger as Ledger
from tally.ledger.transactions import DepositRequest as DepositRequest
from tally.ledger.transactions import ExecuteResult as ExecuteResult
from tally.ledger.transactions import TransferRequest as TransferRequest
from tally.ledger.transactions import WithdrawRequest as WithdrawRequest
from tally.worker.ledger_worker import LedgerWorker as LedgerWorker
