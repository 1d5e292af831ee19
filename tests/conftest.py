"""Shared fixtures for the Bill Splitter tests."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from billsplitter.config import get_settings
from billsplitter.currency import CurrencyConverter
from billsplitter.models.bill import Bill, Item, Person, SplitType
from billsplitter.splitting import BillSummaryBuilder, SplitAllocator


@pytest.fixture(autouse=True)
def fresh_settings():
    """Settings are cached; start and end every test with a clean cache."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def converter() -> CurrencyConverter:
    return CurrencyConverter()


@pytest.fixture
def allocator(converter) -> SplitAllocator:
    return SplitAllocator(converter)


@pytest.fixture
def summary_builder(converter) -> BillSummaryBuilder:
    return BillSummaryBuilder(converter)


@pytest.fixture
def people() -> list[Person]:
    return [
        Person(id="p1", name="Alice"),
        Person(id="p2", name="Bob"),
        Person(id="p3", name="Carol"),
    ]


def _make_item(
    name: str,
    price: str,
    currency: str = "USD",
    assigned_to=(),
    custom_splits=None,
) -> Item:
    return Item(
        name=name,
        price=Decimal(price),
        currency_code=currency,
        assigned_to=list(assigned_to),
        split_type=SplitType.CUSTOM if custom_splits is not None else SplitType.EQUAL,
        custom_splits={k: Decimal(v) for k, v in (custom_splits or {}).items()},
    )


def _make_bill(
    people,
    items,
    base: str = "USD",
    tax: str = "0",
    tip: str = "0",
    created_at=None,
    **kwargs,
) -> Bill:
    return Bill(
        base_currency_code=base,
        people=people,
        items=items,
        tax=Decimal(tax),
        tip=Decimal(tip),
        created_at=created_at or datetime(2024, 3, 10, 19, 30, tzinfo=timezone.utc),
        **kwargs,
    )


@pytest.fixture
def make_item():
    """Factory for items; passing custom_splits makes it a custom split."""
    return _make_item


@pytest.fixture
def make_bill():
    """Factory for bills dated 2024-03-10 unless created_at is given."""
    return _make_bill
