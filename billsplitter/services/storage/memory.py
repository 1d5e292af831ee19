"""
In-Memory Storage Implementation

Same semantics as the JSON file store without touching disk. Used by the
tests and by callers that only need a history for the lifetime of the
process.
"""

from typing import Optional

from billsplitter.config import get_settings
from billsplitter.models.audit import AuditEvent
from billsplitter.models.bill import Bill
from billsplitter.services.storage.interface import (
    AuditStorageInterface,
    BillHistoryStorage,
)
from billsplitter.services.storage.serialization import (
    bills_from_json,
    bills_to_json,
    merge_history,
)


class InMemoryBillStorage(BillHistoryStorage):
    """Bill history held in a list, newest first."""

    def __init__(
        self,
        bills: Optional[list[Bill]] = None,
        history_limit: Optional[int] = None,
    ):
        self._limit = (
            history_limit if history_limit is not None else get_settings().app.history_limit
        )
        self._bills: list[Bill] = merge_history(bills or [], [], self._limit)

    async def save_bill(self, bill: Bill) -> bool:
        self._bills = merge_history([bill], self._bills, self._limit)
        return True

    async def load_history(self, limit: Optional[int] = None) -> list[Bill]:
        return list(self._bills[: limit if limit is not None else self._limit])

    async def get_bill(self, bill_id: str) -> Optional[Bill]:
        for bill in self._bills:
            if bill.id == bill_id:
                return bill
        return None

    async def delete_bill(self, bill_id: str) -> bool:
        remaining = [bill for bill in self._bills if bill.id != bill_id]
        removed = len(remaining) != len(self._bills)
        self._bills = remaining
        return removed

    async def export_json(self) -> str:
        return bills_to_json(self._bills)

    async def import_json(self, data: str) -> int:
        before = len(self._bills)
        self._bills = merge_history(bills_from_json(data), self._bills)
        return len(self._bills) - before

    async def count_bills(self) -> int:
        return len(self._bills)


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only audit log in a list."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    @property
    def events(self) -> list[AuditEvent]:
        return list(self._events)

    async def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    async def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]
