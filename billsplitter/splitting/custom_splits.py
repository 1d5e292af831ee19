"""
Custom Split Builders

Turn the split editor's input (equal, percentages, or explicit amounts)
into an item's custom_splits map.

These builders are the one place where custom splits ARE checked: the
percentages must add up to 100 and the amounts to the item price, each
within a cent. The allocator itself stays tolerant of whatever map it
is given.
"""

from decimal import Decimal
from enum import Enum
from typing import Mapping, Optional

from billsplitter.currency.converter import Amount, to_decimal
from billsplitter.models.bill import Item, SplitType

SPLIT_TOLERANCE = Decimal("0.01")


class SplitMode(str, Enum):
    """Input modes of the split editor."""
    EQUAL = "equal"
    PERCENTAGE = "percentage"
    AMOUNT = "amount"


class InvalidSplitError(ValueError):
    """Custom split input does not add up."""

    def __init__(self, message: str, expected: Decimal, actual: Decimal):
        super().__init__(message)
        self.expected = expected
        self.actual = actual


def equal_custom_splits(item: Item) -> dict[str, Decimal]:
    """Everyone assigned pays the same amount, expressed as a custom map."""
    if not item.assigned_to:
        return {}
    share = item.price / len(item.assigned_to)
    return {person_id: share for person_id in item.assigned_to}


def percentage_splits(item: Item, percentages: Mapping[str, Amount]) -> dict[str, Decimal]:
    """
    Convert per-person percentages into amounts of the item price.

    Only assigned people are considered; a missing percentage is 0.
    Raises InvalidSplitError unless the percentages total 100.
    """
    values = {
        person_id: to_decimal(percentages.get(person_id, 0))
        for person_id in item.assigned_to
    }
    total = sum(values.values(), Decimal("0"))
    if abs(total - 100) > SPLIT_TOLERANCE:
        raise InvalidSplitError(
            f"Percentages must add up to 100%. Current total: {total:.1f}%",
            expected=Decimal("100"),
            actual=total,
        )
    return {person_id: item.price * pct / 100 for person_id, pct in values.items()}


def amount_splits(item: Item, amounts: Mapping[str, Amount]) -> dict[str, Decimal]:
    """
    Validate explicit per-person amounts against the item price.

    Only assigned people are considered; a missing amount is 0.
    Raises InvalidSplitError unless the amounts total the item price.
    """
    values = {
        person_id: to_decimal(amounts.get(person_id, 0))
        for person_id in item.assigned_to
    }
    total = sum(values.values(), Decimal("0"))
    if abs(total - item.price) > SPLIT_TOLERANCE:
        raise InvalidSplitError(
            f"Amounts must add up to {item.price} {item.currency_code}. "
            f"Current total: {total} {item.currency_code}",
            expected=item.price,
            actual=total,
        )
    return values


def apply_split(
    item: Item,
    mode: SplitMode,
    values: Optional[Mapping[str, Amount]] = None,
) -> Item:
    """
    Return a copy of the item switched to a custom split built from
    the editor input.
    """
    if mode == SplitMode.EQUAL:
        splits = equal_custom_splits(item)
    elif mode == SplitMode.PERCENTAGE:
        splits = percentage_splits(item, values or {})
    else:
        splits = amount_splits(item, values or {})

    return item.model_copy(
        update={"split_type": SplitType.CUSTOM, "custom_splits": splits}
    )
