"""Services package."""

from billsplitter.services.storage import (
    AuditStorageInterface,
    BillHistoryStorage,
    CorruptHistoryError,
    InMemoryAuditStorage,
    InMemoryBillStorage,
    JsonFileBillStorage,
    NotFoundError,
    StorageError,
)

__all__ = [
    "AuditStorageInterface",
    "BillHistoryStorage",
    "CorruptHistoryError",
    "InMemoryAuditStorage",
    "InMemoryBillStorage",
    "JsonFileBillStorage",
    "NotFoundError",
    "StorageError",
]
