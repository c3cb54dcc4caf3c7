"""tally.core — result values, errors, and primitive types."""

from tally.core.errors import IllegalTransitionError as IllegalTransitionError
from tally.core.errors import InsufficientFundsError as InsufficientFundsError
from tally.core.errors import InvalidAmountError as InvalidAmountError
from tally.core.errors import LedgerError as LedgerError
from tally.core.errors import SameAccountError as SameAccountError
from tally.core.errors import WorkerUnavailableError as WorkerUnavailableError
from tally.core.money import LEDGER_DECIMAL_CONTEXT as LEDGER_DECIMAL_CONTEXT
from tally.core.money import validate_amount as validate_amount
from tally.core.result import Err as Err
from tally.core.result import Ok as Ok
from tally.core.result import Result as Result
from tally.core.result import unwrap as unwrap
from tally.core.types import FrozenMap as FrozenMap
from tally.core.types import UtcDatetime as UtcDatetime
