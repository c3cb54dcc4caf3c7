"""tally.workflow — Temporal activities over the ledger's queued path.

Import ``tally.workflow.worker.run_worker`` directly to host them.
"""

from tally.workflow.activities import LedgerActivities as LedgerActivities
from tally.workflow.converter import TALLY_DATA_CONVERTER as TALLY_DATA_CONVERTER
from tally.workflow.types import BalancesOutput as BalancesOutput
from tally.workflow.types import CommandOutput as CommandOutput
from tally.workflow.types import JournalInput as JournalInput
from tally.workflow.types import JournalOutput as JournalOutput
from tally.workflow.types import TransactionsOutput as TransactionsOutput
