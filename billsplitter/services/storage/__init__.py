"""
Storage Services Package

Provides abstract interfaces and concrete implementations for bill history.
Ships a JSON file backend and an in-memory backend; designed to be swappable.
"""

from billsplitter.services.storage.interface import (
    AuditStorageInterface,
    BillHistoryStorage,
    CorruptHistoryError,
    NotFoundError,
    StorageError,
)
from billsplitter.services.storage.json_file import JsonFileBillStorage
from billsplitter.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryBillStorage,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "BillHistoryStorage",
    # Exceptions
    "CorruptHistoryError",
    "NotFoundError",
    "StorageError",
    # Implementations
    "InMemoryAuditStorage",
    "InMemoryBillStorage",
    "JsonFileBillStorage",
]
