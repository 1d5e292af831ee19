"""
Currency Table

A static registry of supported currencies with fixed USD-relative rates.

DESIGN DECISION: Rates are constants. There is no live exchange-rate feed;
the table is built once and injected wherever conversion happens, so tests
can swap in their own rates.
"""

from decimal import Decimal
from typing import Iterable, Iterator, Optional

from billsplitter.models.bill import Currency


class CurrencyTable:
    """
    Immutable lookup of currencies by code.

    Codes are unique; building a table with a repeated code fails.
    """

    def __init__(self, currencies: Iterable[Currency]):
        by_code: dict[str, Currency] = {}
        for currency in currencies:
            if currency.code in by_code:
                raise ValueError(f"Duplicate currency code: {currency.code}")
            by_code[currency.code] = currency
        self._by_code = by_code

    def get(self, code: Optional[str]) -> Optional[Currency]:
        """Find a currency by code, None if unsupported."""
        if not code:
            return None
        return self._by_code.get(code.upper())

    def codes(self) -> list[str]:
        return list(self._by_code)

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and code.upper() in self._by_code

    def __iter__(self) -> Iterator[Currency]:
        return iter(self._by_code.values())

    def __len__(self) -> int:
        return len(self._by_code)


def _currency(code: str, symbol: str, name: str, rate: str) -> Currency:
    return Currency(code=code, symbol=symbol, name=name, rate_to_usd=Decimal(rate))


SUPPORTED_CURRENCIES: tuple[Currency, ...] = (
    _currency("USD", "$", "US Dollar", "1.0"),
    _currency("EUR", "€", "Euro", "0.85"),
    _currency("GBP", "£", "British Pound", "0.73"),
    _currency("JPY", "¥", "Japanese Yen", "110.0"),
    _currency("CAD", "C$", "Canadian Dollar", "1.25"),
    _currency("AUD", "A$", "Australian Dollar", "1.35"),
    _currency("CHF", "CHF", "Swiss Franc", "0.92"),
    _currency("CNY", "¥", "Chinese Yuan", "6.45"),
    _currency("INR", "₹", "Indian Rupee", "74.5"),
    _currency("KRW", "₩", "South Korean Won", "1180.0"),
    _currency("SGD", "S$", "Singapore Dollar", "1.35"),
    _currency("HKD", "HK$", "Hong Kong Dollar", "7.8"),
    _currency("SEK", "kr", "Swedish Krona", "8.5"),
    _currency("NOK", "kr", "Norwegian Krone", "8.7"),
    _currency("MXN", "$", "Mexican Peso", "20.0"),
    _currency("BRL", "R$", "Brazilian Real", "5.2"),
)

DEFAULT_CURRENCY_TABLE = CurrencyTable(SUPPORTED_CURRENCIES)
