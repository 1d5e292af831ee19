"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for bill history storage.
This allows us to:
1. Keep the engine free of I/O
2. Use in-memory storage for testing
3. Swap the JSON file for a real database later

The interface is intentionally small: the app keeps a bounded window of
archived bills and reads it back whole.
"""

from abc import ABC, abstractmethod
from typing import Optional

from billsplitter.models.audit import AuditEvent
from billsplitter.models.bill import Bill


class BillHistoryStorage(ABC):
    """
    Abstract interface for the archive of past bills.

    Bills are stored newest first. Saving a bill whose id is already
    present replaces the old snapshot and moves it to the front.
    """

    @abstractmethod
    async def save_bill(self, bill: Bill) -> bool:
        """
        Archive a bill snapshot.

        Returns:
            True if saved successfully

        Raises:
            StorageError: If save fails
        """
        pass

    @abstractmethod
    async def load_history(self, limit: Optional[int] = None) -> list[Bill]:
        """
        Load archived bills, newest first.

        Args:
            limit: Maximum number of bills. Defaults to the configured
                   history window.

        Raises:
            StorageError: If the history cannot be read
        """
        pass

    @abstractmethod
    async def get_bill(self, bill_id: str) -> Optional[Bill]:
        """
        Retrieve an archived bill by id.

        Returns:
            The bill if found, None otherwise
        """
        pass

    @abstractmethod
    async def delete_bill(self, bill_id: str) -> bool:
        """
        Remove a bill from history.

        Returns:
            True if a bill was removed, False if it was not there
        """
        pass

    @abstractmethod
    async def export_json(self) -> str:
        """Serialize the whole history as a JSON array."""
        pass

    @abstractmethod
    async def import_json(self, data: str) -> int:
        """
        Merge bills from a JSON array into the history.

        Imported bills go first; when an id appears twice the first
        occurrence is kept.

        Returns:
            Number of bills whose id was not stored before the import

        Raises:
            CorruptHistoryError: If the data is not a valid bill list
        """
        pass

    @abstractmethod
    async def count_bills(self) -> int:
        """
        Number of stored bills, including any beyond the history window.

        An import is not trimmed to the window, so this can exceed what
        load_history() returns.
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """Append an audit event. Returns True if logged successfully."""
        pass

    @abstractmethod
    async def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        """Most recent events, newest first."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class CorruptHistoryError(StorageError):
    """Stored or imported history could not be parsed."""
    pass
