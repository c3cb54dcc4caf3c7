"""Per-account journal derived from the transaction log by a linear scan."""

from __future__ import annotations

from collections.abc import Iterable

from tally.ledger.transactions import JournalRow, Transaction


def derive_journal(
    transactions: Iterable[Transaction], account_id: str,
) -> tuple[JournalRow, ...]:
    """One row per transaction touching account_id, in log order.

    Transactions without exactly two entries are skipped.
    """
    rows: list[JournalRow] = []
    for tx in transactions:
        if len(tx.entries) != 2 or not tx.involves(account_id):
            continue
        first, second = tx.entries
        entry, counter = (first, second) if first.account_id == account_id else (second, first)
        rows.append(JournalRow(
            tx_id=tx.tx_id,
            account_id=account_id,
            counterparty_id=counter.account_id,
            timestamp=tx.timestamp,
            debit=entry.debit,
            credit=entry.credit,
        ))
    return tuple(rows)
