"""
Bill history (de)serialization shared by the storage backends.

History is a JSON array of bills. Decimals are written as strings and
timestamps as ISO 8601, so created_at comes back as a datetime on read.
"""

from typing import Iterable, Optional

from pydantic import TypeAdapter, ValidationError

from billsplitter.models.bill import Bill
from billsplitter.services.storage.interface import CorruptHistoryError

_BILL_LIST = TypeAdapter(list[Bill])


def bills_to_json(bills: list[Bill]) -> str:
    return _BILL_LIST.dump_json(bills, indent=2).decode("utf-8")


def bills_from_json(data: str) -> list[Bill]:
    """
    Parse a JSON array of bills.

    Raises:
        CorruptHistoryError: If the text is not valid JSON or any bill
                             fails validation
    """
    if not data.strip():
        return []
    try:
        return _BILL_LIST.validate_json(data)
    except ValidationError as e:
        raise CorruptHistoryError(f"Invalid bill history: {e.error_count()} errors") from e


def merge_history(
    first: Iterable[Bill],
    rest: Iterable[Bill],
    limit: Optional[int] = None,
) -> list[Bill]:
    """
    Concatenate two bill lists dropping repeated ids.

    The first occurrence of an id wins, then the result is cut to limit.
    """
    seen: set[str] = set()
    merged = []
    for bill in [*first, *rest]:
        if bill.id in seen:
            continue
        seen.add(bill.id)
        merged.append(bill)
    if limit is not None:
        merged = merged[:limit]
    return merged
