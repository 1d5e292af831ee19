"""
JSON File Storage Implementation

DESIGN DECISION: Bill history is a single JSON file because:
1. The app only keeps a bounded window of recent bills
2. No database setup required
3. The file doubles as the export format

TRADEOFFS:
- Every save rewrites the whole file (fine for ~100 bills)
- No concurrent writers (one app instance owns the file)

Writes go to a temporary file that replaces the history in one step, so
a crash mid-write leaves the previous history intact. Transient OS
errors are retried before being surfaced as StorageError.
"""

import os
from pathlib import Path
from typing import Optional, Union

import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from billsplitter.config import get_settings
from billsplitter.models.bill import Bill
from billsplitter.services.storage.interface import (
    BillHistoryStorage,
    StorageError,
)
from billsplitter.services.storage.serialization import (
    bills_from_json,
    bills_to_json,
    merge_history,
)

logger = structlog.get_logger(__name__)

_io_retry = retry(
    retry=retry_if_exception_type(OSError),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.1, min=0.1, max=2),
    reraise=True,
)


class JsonFileBillStorage(BillHistoryStorage):
    """Bill history kept in one JSON file on disk."""

    def __init__(
        self,
        path: Optional[Union[str, Path]] = None,
        history_limit: Optional[int] = None,
    ):
        settings = get_settings()
        self._path = Path(path or settings.storage.history_path)
        self._encoding = settings.storage.encoding
        self._limit = (
            history_limit if history_limit is not None else settings.app.history_limit
        )

    @property
    def path(self) -> Path:
        return self._path

    @_io_retry
    def _read_text(self) -> str:
        try:
            return self._path.read_text(encoding=self._encoding)
        except FileNotFoundError:
            return ""

    @_io_retry
    def _write_text(self, text: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        tmp_path.write_text(text, encoding=self._encoding)
        os.replace(tmp_path, self._path)

    def _read_bills(self) -> list[Bill]:
        try:
            text = self._read_text()
        except OSError as e:
            raise StorageError(f"Could not read bill history at {self._path}: {e}") from e
        return bills_from_json(text)

    def _write_bills(self, bills: list[Bill]) -> None:
        try:
            self._write_text(bills_to_json(bills))
        except OSError as e:
            raise StorageError(f"Could not write bill history at {self._path}: {e}") from e

    async def save_bill(self, bill: Bill) -> bool:
        """Archive a bill at the front of the history."""
        bills = merge_history([bill], self._read_bills(), self._limit)
        self._write_bills(bills)
        logger.debug("bill_saved", bill_id=bill.id, history_size=len(bills))
        return True

    async def load_history(self, limit: Optional[int] = None) -> list[Bill]:
        bills = self._read_bills()
        logger.debug("bill_history_loaded", path=str(self._path), bill_count=len(bills))
        return bills[: limit if limit is not None else self._limit]

    async def get_bill(self, bill_id: str) -> Optional[Bill]:
        for bill in self._read_bills():
            if bill.id == bill_id:
                return bill
        return None

    async def delete_bill(self, bill_id: str) -> bool:
        bills = self._read_bills()
        remaining = [bill for bill in bills if bill.id != bill_id]
        if len(remaining) == len(bills):
            return False
        self._write_bills(remaining)
        return True

    async def export_json(self) -> str:
        return bills_to_json(self._read_bills())

    async def import_json(self, data: str) -> int:
        imported = bills_from_json(data)
        existing = self._read_bills()
        bills = merge_history(imported, existing)
        self._write_bills(bills)
        return len(bills) - len(existing)

    async def count_bills(self) -> int:
        return len(self._read_bills())
