"""
Currency Package

Static currency registry and USD-pivot conversion.
"""

from billsplitter.currency.converter import (
    CurrencyConverter,
    convert,
    format_amount,
    round_money,
    to_decimal,
)
from billsplitter.currency.table import (
    DEFAULT_CURRENCY_TABLE,
    SUPPORTED_CURRENCIES,
    CurrencyTable,
)

__all__ = [
    "CurrencyConverter",
    "CurrencyTable",
    "DEFAULT_CURRENCY_TABLE",
    "SUPPORTED_CURRENCIES",
    "convert",
    "format_amount",
    "round_money",
    "to_decimal",
]
