"""
Split Allocator

Works out what each person owes for each item, converts it into the
bill's base currency, and spreads tax and tip in proportion to each
person's item subtotal.

GUARANTEES:
- Never divides by zero: an item nobody is assigned to costs nobody
  anything, and a bill with no assigned item subtotal distributes no
  tax or tip.
- Missing custom split entries count as 0. Custom splits are not
  checked against the item price here.
- Inputs are never mutated; every method is a pure function of its
  arguments and the injected currency table.
"""

from decimal import Decimal
from typing import Iterator, Optional

from pydantic import BaseModel, ConfigDict

from billsplitter.currency.converter import ZERO, CurrencyConverter, round_money
from billsplitter.models.bill import Bill, Item, SplitType


class PersonAllocation(BaseModel):
    """A person's share of a bill in the reporting currency."""
    model_config = ConfigDict(frozen=True)

    person_id: str
    subtotal: Decimal
    tax_share: Decimal
    tip_share: Decimal
    total: Decimal


class SplitAllocator:
    """Per-person allocation of item costs, tax and tip."""

    def __init__(self, converter: Optional[CurrencyConverter] = None):
        self._converter = converter or CurrencyConverter()

    @property
    def converter(self) -> CurrencyConverter:
        return self._converter

    # -------------------------------------------------------------------------
    # Item level
    # -------------------------------------------------------------------------

    def raw_share(self, item: Item, person_id: str) -> Decimal:
        """
        The person's share of an item in the item's own currency.

        Full precision; rounding happens at conversion.
        """
        if person_id not in item.assigned_to:
            return Decimal("0")

        if item.split_type == SplitType.EQUAL:
            return item.price / len(item.assigned_to)

        return item.custom_splits.get(person_id, Decimal("0"))

    def converted_share(self, item: Item, person_id: str, base_code: str) -> Decimal:
        """The person's share of an item in base_code, rounded to cents."""
        return self._converter.convert(
            self.raw_share(item, person_id), item.currency_code, base_code
        )

    def item_shares(
        self,
        bill: Bill,
        person_id: str,
        base_code: Optional[str] = None,
    ) -> Iterator[tuple[Item, Decimal, Decimal]]:
        """
        Yield (item, raw_share, converted_share) for every item the
        person actually pays something towards, in bill order.
        """
        base_code = base_code or bill.base_currency_code
        for item in bill.items:
            raw = self.raw_share(item, person_id)
            if raw > 0:
                converted = self._converter.convert(raw, item.currency_code, base_code)
                yield item, raw, converted

    # -------------------------------------------------------------------------
    # Bill level
    # -------------------------------------------------------------------------

    def person_subtotal(
        self,
        bill: Bill,
        person_id: str,
        base_code: Optional[str] = None,
    ) -> Decimal:
        """Sum of the person's converted item shares."""
        return sum(
            (converted for _, _, converted in self.item_shares(bill, person_id, base_code)),
            ZERO,
        )

    def bill_subtotal(self, bill: Bill, base_code: Optional[str] = None) -> Decimal:
        """
        Converted price of every item that is assigned to someone.

        This is the denominator for tax and tip proportions. Unassigned
        items are left out so that tax and tip are always fully
        distributed among the people who actually ordered something.

        Do not switch this to the price of every item, as earlier
        versions of the app did: with unassigned items in the
        denominator part of the tax and tip goes to nobody, and a bill
        whose items are all unassigned would not hit the zero guard.
        BillSummaryBuilder.bill_subtotal is the all-items figure shown
        to users.
        """
        base_code = base_code or bill.base_currency_code
        return sum(
            (
                self._converter.convert(item.price, item.currency_code, base_code)
                for item in bill.items
                if item.assigned_to
            ),
            ZERO,
        )

    def converted_extras(
        self,
        bill: Bill,
        base_code: Optional[str] = None,
    ) -> tuple[Decimal, Decimal]:
        """(tax, tip) converted into base_code."""
        base_code = base_code or bill.base_currency_code
        tax = self._converter.convert(bill.tax, bill.effective_tax_currency, base_code)
        tip = self._converter.convert(bill.tip, bill.effective_tip_currency, base_code)
        return tax, tip

    def allocate(
        self,
        bill: Bill,
        person_id: str,
        base_code: Optional[str] = None,
    ) -> PersonAllocation:
        """Full allocation for one person."""
        base_code = base_code or bill.base_currency_code
        return self._allocate(
            bill,
            person_id,
            base_code,
            self.bill_subtotal(bill, base_code),
            self.converted_extras(bill, base_code),
        )

    def allocate_all(
        self,
        bill: Bill,
        base_code: Optional[str] = None,
    ) -> list[PersonAllocation]:
        """Allocations for every person on the bill, in bill order."""
        base_code = base_code or bill.base_currency_code
        bill_subtotal = self.bill_subtotal(bill, base_code)
        extras = self.converted_extras(bill, base_code)
        return [
            self._allocate(bill, person.id, base_code, bill_subtotal, extras)
            for person in bill.people
        ]

    def person_total(
        self,
        bill: Bill,
        person_id: str,
        base_code: Optional[str] = None,
    ) -> Decimal:
        """What the person owes in total, tax and tip included."""
        return self.allocate(bill, person_id, base_code).total

    def _allocate(
        self,
        bill: Bill,
        person_id: str,
        base_code: str,
        bill_subtotal: Decimal,
        extras: tuple[Decimal, Decimal],
    ) -> PersonAllocation:
        subtotal = self.person_subtotal(bill, person_id, base_code)
        tax, tip = extras

        tax_share = Decimal("0")
        tip_share = Decimal("0")
        if bill_subtotal > 0:
            proportion = subtotal / bill_subtotal
            tax_share = tax * proportion
            tip_share = tip * proportion

        return PersonAllocation(
            person_id=person_id,
            subtotal=round_money(subtotal),
            tax_share=round_money(tax_share),
            tip_share=round_money(tip_share),
            total=round_money(subtotal + tax_share + tip_share),
        )
