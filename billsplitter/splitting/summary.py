"""
Bill Summary Builder

Turns a bill into the per-person breakdown shown on the summary screen:
which items each person pays for, in the item's currency and in the
bill's base currency, and their total with tax and tip.
"""

from decimal import Decimal
from typing import Optional

from billsplitter.currency.converter import ZERO, CurrencyConverter, round_money
from billsplitter.models.bill import Bill, ItemShare, PersonSummary
from billsplitter.splitting.allocator import SplitAllocator


class BillSummaryBuilder:
    """
    Builds PersonSummary lists and bill totals.

    A pure function of the bill: calling summarize() twice on the same
    bill yields equal results.
    """

    def __init__(
        self,
        converter: Optional[CurrencyConverter] = None,
        allocator: Optional[SplitAllocator] = None,
    ):
        self._converter = converter or (allocator.converter if allocator else CurrencyConverter())
        self._allocator = allocator or SplitAllocator(self._converter)

    def summarize(self, bill: Bill) -> list[PersonSummary]:
        """One summary per person on the bill, in the same order."""
        allocations = self._allocator.allocate_all(bill)

        summaries = []
        for person, allocation in zip(bill.people, allocations):
            shares = [
                ItemShare(
                    item_name=item.name,
                    amount=round_money(raw),
                    currency=item.currency_code,
                    converted_amount=converted,
                )
                for item, raw, converted in self._allocator.item_shares(bill, person.id)
            ]
            summaries.append(
                PersonSummary(
                    person_id=person.id,
                    name=person.name,
                    total_amount=allocation.total,
                    subtotal=allocation.subtotal,
                    tax_share=allocation.tax_share,
                    tip_share=allocation.tip_share,
                    items=shares,
                )
            )
        return summaries

    def bill_subtotal(self, bill: Bill) -> Decimal:
        """Every item's price in the base currency, assigned or not."""
        return sum(
            (
                self._converter.convert(item.price, item.currency_code, bill.base_currency_code)
                for item in bill.items
            ),
            ZERO,
        )

    def bill_total(self, bill: Bill) -> Decimal:
        """Item subtotal plus converted tax and tip."""
        tax, tip = self._allocator.converted_extras(bill)
        return self.bill_subtotal(bill) + tax + tip

    def share_text(self, bill: Bill) -> str:
        """
        Plain-text summary for sharing through messaging apps.

        Tax and tip are listed in their own currencies and only when
        positive.
        """
        base = bill.base_currency_code
        fmt = self._converter.format

        lines = [
            f"Bill Split Summary: {bill.name}",
            "",
            f"Total Bill: {fmt(self.bill_total(bill), base)}",
            f"Subtotal: {fmt(self.bill_subtotal(bill), base)}",
        ]
        if bill.tax > 0:
            lines.append(f"Tax: {fmt(bill.tax, bill.effective_tax_currency)}")
        if bill.tip > 0:
            lines.append(f"Tip: {fmt(bill.tip, bill.effective_tip_currency)}")

        lines.append("")
        lines.append("Individual Amounts:")
        for summary in self.summarize(bill):
            lines.append(f"- {summary.name}: {fmt(summary.total_amount, base)}")

        return "\n".join(lines)


def summarize(bill: Bill, converter: Optional[CurrencyConverter] = None) -> list[PersonSummary]:
    """Summarize a bill with the given (or built-in) currency table."""
    return BillSummaryBuilder(converter).summarize(bill)
