"""Decimal context and amount validation.

All balance arithmetic runs under LEDGER_DECIMAL_CONTEXT: prec=28,
ROUND_HALF_EVEN, traps for InvalidOperation/DivisionByZero/Overflow/Inexact.
A posting that cannot be computed exactly is refused, never rounded.
Amounts are Decimal only; floats never enter the ledger.
"""

from __future__ import annotations

from decimal import ROUND_HALF_EVEN as _ROUND_HALF_EVEN
from decimal import (
    MAX_PREC,
    Context,
    Decimal,
    DivisionByZero,
    Inexact,
    InvalidOperation,
    Overflow,
)

from tally.core.result import Err, Ok

LEDGER_DECIMAL_CONTEXT = Context(
    prec=28,
    rounding=_ROUND_HALF_EVEN,
    Emin=-999999,
    Emax=999999,
    capitals=1,
    clamp=0,
    flags=[],
    traps=[InvalidOperation, DivisionByZero, Overflow, Inexact],
)

# Sums over many balances; exact at any width.
AGGREGATE_DECIMAL_CONTEXT = LEDGER_DECIMAL_CONTEXT.copy()
AGGREGATE_DECIMAL_CONTEXT.prec = MAX_PREC

ZERO = Decimal(0)


def validate_amount(raw: object) -> Ok[Decimal] | Err[str]:
    """Accept a finite Decimal strictly greater than zero that the ledger
    context holds exactly: at most prec significant digits, exponent in range.
    """
    if not isinstance(raw, Decimal):
        return Err(f"amount must be Decimal, got {type(raw).__name__}")
    if not raw.is_finite():
        return Err(f"amount must be finite, got {raw}")
    if raw <= 0:
        return Err(f"amount must be > 0, got {raw}")
    ctx = LEDGER_DECIMAL_CONTEXT
    digits = len(raw.as_tuple().digits)
    if digits > ctx.prec:
        return Err(f"amount must have at most {ctx.prec} significant digits, got {digits}")
    if raw.adjusted() > ctx.Emax or raw.as_tuple().exponent < ctx.Etiny():
        return Err(f"amount out of range, got {raw}")
    return Ok(raw)
