"""Hypothesis strategies and pytest fixtures for tally.

Strategies are composable: requests are built from account ids and amounts.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest
from hypothesis import HealthCheck, settings
from hypothesis import strategies as st
from hypothesis.strategies import SearchStrategy

from tally.core.types import UtcDatetime
from tally.ledger.engine import Ledger
from tally.ledger.transactions import DepositRequest, TransferRequest, WithdrawRequest

# ---------------------------------------------------------------------------
# Hypothesis global settings
# ---------------------------------------------------------------------------

settings.register_profile(
    "ci",
    max_examples=200,
    suppress_health_check=[HealthCheck.too_slow],
    deadline=None,
)
settings.register_profile(
    "dev",
    max_examples=50,
    suppress_health_check=[HealthCheck.too_slow],
    deadline=None,
)
settings.load_profile("dev")


# ===================================================================
# PRIMITIVE STRATEGIES
# ===================================================================

ACCOUNTS = ("alice", "bob", "carol", "dave")


def account_ids() -> SearchStrategy[str]:
    """Customer account ids (never the system account)."""
    return st.sampled_from(ACCOUNTS)


def positive_amounts(
    min_value: str = "0.01",
    max_value: str = "10000",
    places: int = 2,
) -> SearchStrategy[Decimal]:
    """Strictly positive Decimal amounts."""
    return st.decimals(
        min_value=Decimal(min_value),
        max_value=Decimal(max_value),
        places=places,
        allow_nan=False,
        allow_infinity=False,
    )


def non_positive_amounts() -> SearchStrategy[Decimal]:
    """Amounts every mutation must reject."""
    return st.one_of(
        st.decimals(
            min_value=Decimal("-10000"), max_value=Decimal("0"),
            places=2, allow_nan=False, allow_infinity=False,
        ),
        st.sampled_from([Decimal("NaN"), Decimal("Infinity"), Decimal("-Infinity")]),
    )


# ===================================================================
# REQUEST STRATEGIES
# ===================================================================


@st.composite
def deposit_requests(draw: st.DrawFn, tx_id: str | None = None) -> DepositRequest:
    return DepositRequest(
        tx_id=tx_id if tx_id is not None else draw(st.uuids()).hex,
        account_id=draw(account_ids()),
        amount=draw(positive_amounts()),
    )


@st.composite
def withdraw_requests(draw: st.DrawFn, tx_id: str | None = None) -> WithdrawRequest:
    return WithdrawRequest(
        tx_id=tx_id if tx_id is not None else draw(st.uuids()).hex,
        account_id=draw(account_ids()),
        amount=draw(positive_amounts()),
    )


@st.composite
def transfer_requests(draw: st.DrawFn, tx_id: str | None = None) -> TransferRequest:
    debit = draw(account_ids())
    credit = draw(account_ids().filter(lambda a: a != debit))
    return TransferRequest(
        tx_id=tx_id if tx_id is not None else draw(st.uuids()).hex,
        debit_account_id=debit,
        credit_account_id=credit,
        amount=draw(positive_amounts()),
    )


def ledger_requests() -> SearchStrategy[DepositRequest | WithdrawRequest | TransferRequest]:
    """Exactly one request variant, with a fresh tx_id."""
    return st.one_of(deposit_requests(), withdraw_requests(), transfer_requests())


# ===================================================================
# FIXTURES
# ===================================================================


class FakeClock:
    """Deterministic ledger clock: advances one second per reading."""

    def __init__(self, start: datetime = datetime(2025, 6, 15, 10, 0, tzinfo=UTC)) -> None:
        self._now = start

    def __call__(self) -> UtcDatetime:
        current = self._now
        self._now += timedelta(seconds=1)
        return UtcDatetime(value=current)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def ledger(clock: Callable[[], UtcDatetime]) -> Ledger:
    return Ledger(clock=clock)
