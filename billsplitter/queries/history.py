"""
Bill History Queries

Search and ordering for the history list. Deterministic filters over a
loaded snapshot; nothing here touches storage.
"""

from enum import Enum
from typing import Iterable, Optional

from billsplitter.currency.converter import CurrencyConverter
from billsplitter.models.bill import Bill, as_utc
from billsplitter.splitting.summary import BillSummaryBuilder


class HistorySort(str, Enum):
    """Orderings offered by the history screen."""
    DATE = "date"      # newest first
    AMOUNT = "amount"  # largest item subtotal first
    NAME = "name"      # alphabetical


def search_bills(bills: Iterable[Bill], query: str) -> list[Bill]:
    """
    Bills whose name, or any participant's name, contains the query.

    Case-insensitive. An empty query matches everything.
    """
    needle = query.strip().lower()
    if not needle:
        return list(bills)
    return [
        bill for bill in bills
        if needle in bill.name.lower()
        or any(needle in person.name.lower() for person in bill.people)
    ]


def sort_bills(
    bills: Iterable[Bill],
    by: HistorySort = HistorySort.DATE,
    converter: Optional[CurrencyConverter] = None,
) -> list[Bill]:
    """
    Order bills for display.

    AMOUNT compares each bill's item subtotal in its own base currency,
    the same figure the history list shows next to each bill.
    """
    bills = list(bills)

    if by == HistorySort.DATE:
        return sorted(bills, key=lambda bill: as_utc(bill.created_at), reverse=True)

    if by == HistorySort.AMOUNT:
        builder = BillSummaryBuilder(converter)
        return sorted(bills, key=builder.bill_subtotal, reverse=True)

    return sorted(bills, key=lambda bill: bill.name.lower())

