"""
Analytics Aggregator

DESIGN DECISION: Analytics are computed DETERMINISTICALLY from a snapshot
of archived bills. Nothing is cached or persisted; the dashboard calls
aggregate() every time it is shown. Callers may run it in parallel over
independent bill sets since no input is ever mutated.

Everything is reported in a single base currency chosen by the caller.
"""

from collections import Counter
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional

from billsplitter.analytics.categories import categorize_item
from billsplitter.config import get_settings
from billsplitter.currency.converter import ZERO, CurrencyConverter, round_money
from billsplitter.models.analytics import (
    FrequentItem,
    PersonAnalytics,
    SpendingAnalytics,
    TrendPoint,
)
from billsplitter.models.bill import Bill, as_utc
from billsplitter.splitting.allocator import SplitAllocator


class AnalyticsAggregator:
    """
    Spending analytics over a list of bills.

    GUARANTEES:
    - An empty list gives a zero-valued SpendingAnalytics, never None
    - Most/least expensive bill ties go to the first bill encountered
    - Item names are grouped case-insensitively
    """

    def __init__(
        self,
        converter: Optional[CurrencyConverter] = None,
        allocator: Optional[SplitAllocator] = None,
        frequent_items_limit: Optional[int] = None,
        favorite_items_limit: Optional[int] = None,
    ):
        settings = get_settings().app
        self._converter = converter or (allocator.converter if allocator else CurrencyConverter())
        self._allocator = allocator or SplitAllocator(self._converter)
        self._base_currency = settings.default_base_currency
        self._frequent_limit = (
            frequent_items_limit if frequent_items_limit is not None
            else settings.frequent_items_limit
        )
        self._favorite_limit = (
            favorite_items_limit if favorite_items_limit is not None
            else settings.favorite_items_limit
        )

    def bill_total(self, bill: Bill, base_currency: str) -> Decimal:
        """Every item plus tax and tip, converted into base_currency."""
        items_total = sum(
            (
                self._converter.convert(item.price, item.currency_code, base_currency)
                for item in bill.items
            ),
            ZERO,
        )
        tax, tip = self._allocator.converted_extras(bill, base_currency)
        return items_total + tax + tip

    def aggregate(
        self,
        bills: Iterable[Bill],
        base_currency: Optional[str] = None,
    ) -> SpendingAnalytics:
        """Spending statistics across all bills."""
        bills = list(bills)
        base_currency = base_currency or self._base_currency

        if not bills:
            return SpendingAnalytics()

        total_spent = ZERO
        total_items = 0
        total_people = 0
        most_expensive: Optional[tuple[Decimal, Bill]] = None
        cheapest: Optional[tuple[Decimal, Bill]] = None
        currency_distribution: dict[str, int] = {}
        monthly_spending: dict[str, Decimal] = {}
        item_frequency: dict[str, list] = {}
        trends: list[tuple[datetime, TrendPoint]] = []

        for bill in bills:
            bill_total = self.bill_total(bill, base_currency)

            total_spent += bill_total
            total_items += len(bill.items)
            total_people += len(bill.people)

            # Strict comparisons: the first bill wins a tie
            if most_expensive is None or bill_total > most_expensive[0]:
                most_expensive = (bill_total, bill)
            if cheapest is None or bill_total < cheapest[0]:
                cheapest = (bill_total, bill)

            for item in bill.items:
                currency_distribution[item.currency_code] = (
                    currency_distribution.get(item.currency_code, 0) + 1
                )

                key = item.name.lower()
                entry = item_frequency.setdefault(key, [0, ZERO])
                entry[0] += 1
                entry[1] += self._converter.convert(item.price, item.currency_code, base_currency)

            created = as_utc(bill.created_at)
            month = created.strftime("%Y-%m")
            monthly_spending[month] = monthly_spending.get(month, ZERO) + bill_total

            trends.append(
                (created, TrendPoint(date=created.strftime("%Y-%m-%d"), amount=bill_total))
            )

        # sorted() is stable, so equal counts keep first-seen order
        ranked = sorted(item_frequency.items(), key=lambda kv: kv[1][0], reverse=True)
        frequent_items = [
            FrequentItem(name=name, count=count, total_spent=spent)
            for name, (count, spent) in ranked[: self._frequent_limit]
        ]

        trends.sort(key=lambda pair: pair[0])
        bill_count = len(bills)

        return SpendingAnalytics(
            total_spent=total_spent,
            average_bill_amount=round_money(total_spent / bill_count),
            most_expensive_bill=most_expensive[1],
            cheapest_bill=cheapest[1],
            bill_count=bill_count,
            average_items_per_bill=round_money(Decimal(total_items) / bill_count),
            average_people_per_bill=round_money(Decimal(total_people) / bill_count),
            currency_distribution=currency_distribution,
            monthly_spending=monthly_spending,
            frequent_items=frequent_items,
            spending_trends=[point for _, point in trends],
        )

    def aggregate_for_person(
        self,
        bills: Iterable[Bill],
        person_id: str,
        base_currency: Optional[str] = None,
    ) -> Optional[PersonAnalytics]:
        """
        Spending statistics for one person.

        Only bills the person takes part in count. Returns None when the
        person is on no bill at all.
        """
        base_currency = base_currency or self._base_currency
        person_bills = [bill for bill in bills if bill.has_person(person_id)]
        if not person_bills:
            return None

        person = person_bills[0].get_person(person_id)
        amounts: list[Decimal] = []
        item_frequency: Counter[str] = Counter()

        for bill in person_bills:
            amounts.append(self._allocator.person_total(bill, person_id, base_currency))
            for item in bill.items:
                if person_id in item.assigned_to:
                    item_frequency[item.name.lower()] += 1

        total_spent = sum(amounts, ZERO)
        # most_common() orders equal counts by first insertion
        favorite_items = [name for name, _ in item_frequency.most_common(self._favorite_limit)]

        return PersonAnalytics(
            person=person,
            total_spent=total_spent,
            bill_count=len(person_bills),
            average_per_bill=round_money(total_spent / len(person_bills)),
            most_expensive_bill=max(amounts),
            cheapest_bill=min(amounts),
            favorite_items=favorite_items,
        )

    def category_spending(
        self,
        bills: Iterable[Bill],
        base_currency: Optional[str] = None,
    ) -> dict[str, Decimal]:
        """
        Converted item spend per category.

        An item's own category wins over keyword detection. Tax and tip
        are not attributed to any category.
        """
        base_currency = base_currency or self._base_currency
        spending: dict[str, Decimal] = {}
        for bill in bills:
            for item in bill.items:
                category = item.category or categorize_item(item.name).value
                spending[category] = spending.get(category, ZERO) + self._converter.convert(
                    item.price, item.currency_code, base_currency
                )
        return spending


def aggregate(bills: Iterable[Bill], base_currency: Optional[str] = None) -> SpendingAnalytics:
    """Spending analytics with the built-in currency table."""
    return AnalyticsAggregator().aggregate(bills, base_currency)


def aggregate_for_person(
    bills: Iterable[Bill],
    person_id: str,
    base_currency: Optional[str] = None,
) -> Optional[PersonAnalytics]:
    """Person analytics with the built-in currency table."""
    return AnalyticsAggregator().aggregate_for_person(bills, person_id, base_currency)
