"""
Currency Converter

Pivot conversion through USD using the fixed rates of a CurrencyTable,
plus display formatting.

Unknown currency codes are not an error: they fall back to a rate of 1
(USD parity). Existing bills depend on that, so it is kept, but every
fallback is logged as a warning so bad data can be traced.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

import structlog

from billsplitter.currency.table import DEFAULT_CURRENCY_TABLE, CurrencyTable
from billsplitter.models.bill import Bill

Amount = Union[Decimal, int, float, str]

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

# Currencies displayed without minor units
ZERO_DECIMAL_CURRENCIES = frozenset({"JPY", "KRW"})

logger = structlog.get_logger(__name__)


def to_decimal(value: Amount) -> Decimal:
    """Coerce a numeric value to Decimal without binary float artefacts."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_money(value: Amount) -> Decimal:
    """Round to cents, half-up."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


class CurrencyConverter:
    """
    Converts and formats amounts using an injected currency table.

    Stateless apart from remembering which unknown codes were already
    reported, so the warning is logged once per code.
    """

    def __init__(self, table: Optional[CurrencyTable] = None):
        self._table = table if table is not None else DEFAULT_CURRENCY_TABLE
        self._reported_unknown: set[str] = set()

    @property
    def table(self) -> CurrencyTable:
        return self._table

    def rate(self, code: Optional[str]) -> Decimal:
        """Rate to USD for a code, 1 when the code is unknown."""
        currency = self._table.get(code)
        if currency is None:
            self._report_unknown(code)
            return Decimal("1")
        return currency.rate_to_usd

    def convert(self, amount: Amount, from_code: str, to_code: str) -> Decimal:
        """
        Convert amount from one currency to another via USD.

        amount' = (amount / rate_from) * rate_to, rounded to cents.
        """
        usd_amount = to_decimal(amount) / self.rate(from_code)
        return round_money(usd_amount * self.rate(to_code))

    def format(self, amount: Amount, code: str) -> str:
        """
        Render an amount for display, e.g. "$12.50" or "¥1200".

        Unknown codes render as a bare 2-decimal number.
        """
        value = to_decimal(amount)
        currency = self._table.get(code)
        if currency is None:
            return f"{round_money(value):f}"

        if currency.code in ZERO_DECIMAL_CURRENCIES:
            shown = value.quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        else:
            shown = round_money(value)
        return f"{currency.symbol}{shown:f}"

    def exchange_rate_text(self, from_code: str, to_code: str) -> str:
        """
        Hint text such as "1 € = $1.18".

        Empty when the codes match or either one is unsupported.
        """
        if from_code == to_code:
            return ""

        from_currency = self._table.get(from_code)
        to_currency = self._table.get(to_code)
        if from_currency is None or to_currency is None:
            return ""

        rate = self.convert(1, from_currency.code, to_currency.code)
        return f"1 {from_currency.symbol} = {self.format(rate, to_currency.code)}"

    def unknown_codes(self, bill: Bill) -> list[str]:
        """Currency codes used by a bill that the table does not know."""
        codes = [bill.base_currency_code, bill.effective_tax_currency, bill.effective_tip_currency]
        codes.extend(item.currency_code for item in bill.items)
        return sorted({code for code in codes if code not in self._table})

    def _report_unknown(self, code: Optional[str]) -> None:
        key = code or ""
        if key in self._reported_unknown:
            return
        self._reported_unknown.add(key)
        logger.warning(
            "unknown_currency_code",
            code=code,
            fallback_rate="1",
        )


_default_converter = CurrencyConverter()


def convert(amount: Amount, from_code: str, to_code: str) -> Decimal:
    """Convert with the built-in currency table."""
    return _default_converter.convert(amount, from_code, to_code)


def format_amount(amount: Amount, code: str) -> str:
    """Format with the built-in currency table."""
    return _default_converter.format(amount, code)
