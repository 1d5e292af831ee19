"""Tests for the currency table and converter."""

from decimal import Decimal
from itertools import product

import pytest

from billsplitter.currency import (
    DEFAULT_CURRENCY_TABLE,
    SUPPORTED_CURRENCIES,
    CurrencyConverter,
    CurrencyTable,
    convert,
    format_amount,
    round_money,
)
from billsplitter.models.bill import Bill, Currency, Item


class TestCurrencyTable:
    """Tests for the static currency registry."""

    def test_default_table_has_sixteen_currencies(self):
        """Test the built-in table matches the supported list."""
        assert len(DEFAULT_CURRENCY_TABLE) == 16
        assert len(SUPPORTED_CURRENCIES) == 16

    def test_lookup_is_case_insensitive(self):
        """Test codes are looked up regardless of case."""
        assert DEFAULT_CURRENCY_TABLE.get("eur").symbol == "€"
        assert "jpy" in DEFAULT_CURRENCY_TABLE

    def test_unknown_code_returns_none(self):
        """Test unsupported codes are absent, not an error."""
        assert DEFAULT_CURRENCY_TABLE.get("XYZ") is None
        assert DEFAULT_CURRENCY_TABLE.get(None) is None

    def test_duplicate_codes_rejected(self):
        """Test a table cannot hold the same code twice."""
        usd = Currency(code="USD", symbol="$", name="US Dollar", rate_to_usd=Decimal("1"))
        with pytest.raises(ValueError, match="Duplicate currency code"):
            CurrencyTable([usd, usd])


class TestConvert:
    """Tests for pivot conversion."""

    def test_eur_to_usd(self):
        """Test 100 EUR at 0.85/USD converts to 117.65 USD."""
        assert convert(Decimal("100"), "EUR", "USD") == Decimal("117.65")

    def test_usd_to_jpy(self):
        """Test conversion into a high-rate currency."""
        assert convert(10, "USD", "JPY") == Decimal("1100.00")

    def test_cross_rate_through_usd(self):
        """Test GBP to EUR pivots through USD."""
        # 73 GBP -> 100 USD -> 85 EUR
        assert convert(73, "GBP", "EUR") == Decimal("85.00")

    def test_result_rounded_half_up(self):
        """Test results are rounded to cents, half up."""
        assert convert("12.345", "USD", "USD") == Decimal("12.35")
        assert convert(12.345, "USD", "USD") == Decimal("12.35")

    def test_identity(self):
        """Test converting to the same currency keeps the (rounded) value."""
        for currency in SUPPORTED_CURRENCIES:
            assert convert(Decimal("42.10"), currency.code, currency.code) == Decimal("42.10")

    def test_unknown_code_is_usd_parity(self):
        """Test unknown codes fall back to rate 1 without raising."""
        assert convert(50, "XYZ", "USD") == Decimal("50.00")
        assert convert(10, "XYZ", "EUR") == Decimal("8.50")
        assert convert(10, "EUR", "???") == Decimal("11.76")

    def test_round_trip_within_rounding_tolerance(self):
        """Test convert(convert(x, A, B), B, A) stays close to x for all pairs."""
        amount = Decimal("123.45")
        for a, b in product(SUPPORTED_CURRENCIES, repeat=2):
            back = convert(convert(amount, a.code, b.code), b.code, a.code)
            # One cent of rounding in B is worth rate_a / rate_b cents in A
            tolerance = Decimal("0.01") * max(Decimal("1"), a.rate_to_usd / b.rate_to_usd)
            assert abs(back - amount) <= tolerance, (a.code, b.code, back)

    def test_injected_table(self):
        """Test the converter uses the table it is given."""
        table = CurrencyTable([
            Currency(code="USD", symbol="$", name="US Dollar", rate_to_usd=Decimal("1")),
            Currency(code="ABC", symbol="A", name="Alphabet", rate_to_usd=Decimal("2")),
        ])
        converter = CurrencyConverter(table)
        assert converter.convert(10, "USD", "ABC") == Decimal("20.00")
        # EUR is unknown to this table
        assert converter.convert(10, "EUR", "USD") == Decimal("10.00")

    def test_empty_table_is_kept(self):
        """Test an empty table is not swapped for the built-in one."""
        converter = CurrencyConverter(CurrencyTable([]))
        assert len(converter.table) == 0
        assert converter.convert(10, "EUR", "JPY") == Decimal("10.00")

    def test_round_money(self):
        """Test the shared rounding helper."""
        assert round_money(Decimal("2.675")) == Decimal("2.68")
        assert round_money(Decimal("-2.675")) == Decimal("-2.68")


class TestFormat:
    """Tests for display formatting."""

    def test_two_decimal_currency(self):
        assert format_amount(Decimal("1234.5"), "USD") == "$1234.50"
        assert format_amount(Decimal("3"), "EUR") == "€3.00"

    def test_zero_decimal_currencies(self):
        """Test JPY and KRW are shown without minor units."""
        assert format_amount(Decimal("1234.5"), "JPY") == "¥1235"
        assert format_amount(Decimal("15000"), "KRW") == "₩15000"

    def test_unknown_currency_has_no_symbol(self):
        assert format_amount(Decimal("3.5"), "XYZ") == "3.50"

    def test_multi_character_symbol(self):
        assert format_amount(Decimal("7"), "CAD") == "C$7.00"


class TestExchangeRateText:
    """Tests for exchange rate hints."""

    def test_rate_text(self, converter):
        assert converter.exchange_rate_text("EUR", "USD") == "1 € = $1.18"

    def test_same_currency_is_empty(self, converter):
        assert converter.exchange_rate_text("USD", "USD") == ""

    def test_unknown_currency_is_empty(self, converter):
        assert converter.exchange_rate_text("XYZ", "USD") == ""
        assert converter.exchange_rate_text("USD", "XYZ") == ""


class TestUnknownCodes:
    """Tests for detecting currency codes outside the table."""

    def test_bill_with_unknown_codes(self, converter):
        bill = Bill(
            base_currency_code="USD",
            tip=Decimal("2"),
            tip_currency_code="ZZZ",
            items=[
                Item(name="Tea", price=Decimal("3"), currency_code="XYZ"),
                Item(name="Cake", price=Decimal("4"), currency_code="EUR"),
            ],
        )
        assert converter.unknown_codes(bill) == ["XYZ", "ZZZ"]

    def test_bill_with_known_codes(self, converter):
        bill = Bill(items=[Item(name="Tea", price=Decimal("3"), currency_code="GBP")])
        assert converter.unknown_codes(bill) == []
