"""tally.ledger — ledger domain types and engine."""

from tally.ledger.engine import OPENING_TX_PREFIX as OPENING_TX_PREFIX
from tally.ledger.engine import Ledger as Ledger
from tally.ledger.journal import derive_journal as derive_journal
from tally.ledger.transactions import SYSTEM_ACCOUNT_ID as SYSTEM_ACCOUNT_ID
from tally.ledger.transactions import DepositRequest as DepositRequest
from tally.ledger.transactions import Entry as Entry
from tally.ledger.transactions import ExecuteResult as ExecuteResult
from tally.ledger.transactions import JournalRow as JournalRow
from tally.ledger.transactions import LedgerOutcome as LedgerOutcome
from tally.ledger.transactions import LedgerRequest as LedgerRequest
from tally.ledger.transactions import Transaction as Transaction
from tally.ledger.transactions import TransferRequest as TransferRequest
from tally.ledger.transactions import WithdrawRequest as WithdrawRequest
from tally.ledger.transactions import is_applied as is_applied
