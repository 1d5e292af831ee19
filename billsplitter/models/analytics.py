"""
Analytics Models for Bill Splitter

Aggregate statistics computed from a list of archived bills.

DESIGN DECISION: These are recomputed on every analytics view and never
persisted. An empty bill list still produces a fully populated model
(zeros and empty collections) so callers never special-case None.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from billsplitter.models.bill import Bill, Person


class FrequentItem(BaseModel):
    """An item name (lowercased) with how often it was ordered."""

    name: str
    count: int = Field(ge=0)
    total_spent: Decimal = Field(
        default=Decimal("0.00"),
        description="Converted spend on this item across all bills"
    )


class TrendPoint(BaseModel):
    """A single bill total on a given day."""

    date: str = Field(
        ...,
        pattern=r"^\d{4}-\d{2}-\d{2}$",
        description="YYYY-MM-DD"
    )
    amount: Decimal


class SpendingAnalytics(BaseModel):
    """Spending statistics across a list of bills."""

    total_spent: Decimal = Decimal("0.00")
    average_bill_amount: Decimal = Decimal("0.00")
    most_expensive_bill: Optional[Bill] = None
    cheapest_bill: Optional[Bill] = None
    bill_count: int = 0
    average_items_per_bill: Decimal = Decimal("0.00")
    average_people_per_bill: Decimal = Decimal("0.00")

    currency_distribution: dict[str, int] = Field(
        default_factory=dict,
        description="Number of items per currency code"
    )
    monthly_spending: dict[str, Decimal] = Field(
        default_factory=dict,
        description="Total spend keyed by YYYY-MM"
    )
    frequent_items: list[FrequentItem] = Field(default_factory=list)
    spending_trends: list[TrendPoint] = Field(
        default_factory=list,
        description="Bill totals in ascending date order"
    )

    @property
    def has_data(self) -> bool:
        return self.bill_count > 0


class PersonAnalytics(BaseModel):
    """Spending statistics for a single person across their bills."""

    person: Person
    total_spent: Decimal
    bill_count: int = Field(ge=1)
    average_per_bill: Decimal
    most_expensive_bill: Decimal = Field(
        ...,
        description="The person's largest share of a single bill"
    )
    cheapest_bill: Decimal = Field(
        ...,
        description="The person's smallest share of a single bill"
    )
    favorite_items: list[str] = Field(default_factory=list)
