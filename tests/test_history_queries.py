"""Tests for searching and sorting the bill history."""

from datetime import datetime, timezone

import pytest

from billsplitter.models.bill import Person
from billsplitter.queries import HistorySort, search_bills, sort_bills


@pytest.fixture
def history(make_bill, make_item, people):
    return [
        make_bill(
            people[:2],
            [make_item("Pizza", "30")],
            name="Pizza night",
            created_at=datetime(2024, 1, 5, tzinfo=timezone.utc),
        ),
        make_bill(
            [Person(id="d1", name="Dave")],
            [make_item("Room", "100", currency="EUR")],
            name="hotel",
            created_at=datetime(2024, 3, 1, tzinfo=timezone.utc),
        ),
        make_bill(
            people[2:],
            [make_item("Sushi", "4000", currency="JPY")],
            base="JPY",
            name="Airport snacks",
            created_at=datetime(2024, 2, 10),
        ),
    ]


class TestSearchBills:
    """Tests for search_bills."""

    def test_matches_bill_name(self, history):
        assert [b.name for b in search_bills(history, "PIZZA")] == ["Pizza night"]

    def test_matches_person_name(self, history):
        assert [b.name for b in search_bills(history, "dave")] == ["hotel"]

    def test_empty_query_returns_everything(self, history):
        assert search_bills(history, "   ") == history

    def test_no_match(self, history):
        assert search_bills(history, "zebra") == []


class TestSortBills:
    """Tests for sort_bills."""

    def test_newest_first_by_default(self, history):
        """Test naive and aware timestamps sort together."""
        assert [b.name for b in sort_bills(history)] == ["hotel", "Airport snacks", "Pizza night"]

    def test_by_amount_in_own_currency(self, history):
        """Test amounts compare each bill's subtotal in its own base currency."""
        # 4000 JPY > 117.65 USD > 30 USD
        ordered = sort_bills(history, HistorySort.AMOUNT)
        assert [b.name for b in ordered] == ["Airport snacks", "hotel", "Pizza night"]

    def test_by_name_case_insensitive(self, history):
        ordered = sort_bills(history, HistorySort.NAME)
        assert [b.name for b in ordered] == ["Airport snacks", "hotel", "Pizza night"]

    def test_input_order_untouched(self, history):
        names = [b.name for b in history]
        sort_bills(history, HistorySort.NAME)
        assert [b.name for b in history] == names
