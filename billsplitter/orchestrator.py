"""
Main Orchestrator for Bill Splitter

Ties the pure engine to the bill history storage and the audit trail:
1. Archive (bill being edited -> snapshot in history)
2. Load (history -> editable copy, or -> analytics)
3. Maintain (delete, export, import)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Archived snapshots are never edited in place
- The engine never performs I/O; this layer awaits storage first and
  then hands an immutable snapshot to the engine
- Every history change is audited
"""

from typing import Optional
from uuid import UUID

from billsplitter.analytics import AnalyticsAggregator
from billsplitter.audit import AuditLogger, create_correlation_id
from billsplitter.currency import CurrencyConverter, CurrencyTable
from billsplitter.models.analytics import PersonAnalytics, SpendingAnalytics
from billsplitter.models.bill import Bill, PersonSummary
from billsplitter.services.storage import (
    BillHistoryStorage,
    InMemoryAuditStorage,
    JsonFileBillStorage,
    NotFoundError,
    StorageError,
)
from billsplitter.splitting import BillSummaryBuilder, SplitAllocator
from billsplitter.splitting.editing import copy_for_editing


class BillHistoryService:
    """
    Orchestrates the bill history flows.

    Storage failures are audited and then re-raised to the caller; the
    presentation layer decides how to show them.
    """

    def __init__(
        self,
        storage: BillHistoryStorage,
        audit_logger: Optional[AuditLogger] = None,
        converter: Optional[CurrencyConverter] = None,
    ):
        self._storage = storage
        self._audit_logger = audit_logger
        self._converter = converter or CurrencyConverter()
        allocator = SplitAllocator(self._converter)
        self._summary_builder = BillSummaryBuilder(self._converter, allocator)
        self._aggregator = AnalyticsAggregator(self._converter, allocator)

    @property
    def summary_builder(self) -> BillSummaryBuilder:
        return self._summary_builder

    def summarize(self, bill: Bill) -> list[PersonSummary]:
        """Per-person breakdown of the bill being edited."""
        return self._summary_builder.summarize(bill)

    async def archive_bill(
        self,
        bill: Bill,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        """Save a snapshot of the bill to history."""
        correlation_id = correlation_id or create_correlation_id()

        unknown = self._converter.unknown_codes(bill)
        if unknown and self._audit_logger:
            await self._audit_logger.log_unknown_currency(
                codes=unknown,
                bill_id=bill.id,
                correlation_id=correlation_id,
            )

        try:
            saved = await self._storage.save_bill(bill)
        except StorageError as e:
            if self._audit_logger:
                await self._audit_logger.log_save_failed(
                    bill_id=bill.id,
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            raise

        if self._audit_logger:
            await self._audit_logger.log_bill_archived(
                bill_id=bill.id,
                name=bill.name,
                total=str(self._summary_builder.bill_total(bill)),
                currency=bill.base_currency_code,
                correlation_id=correlation_id,
            )
        return saved

    async def load_history(self, limit: Optional[int] = None) -> list[Bill]:
        try:
            bills = await self._storage.load_history(limit)
        except StorageError as e:
            await self._audit_storage_error("load_history", e)
            raise
        if self._audit_logger:
            await self._audit_logger.log_history_loaded(bill_count=len(bills))
        return bills

    async def load_for_editing(
        self,
        bill_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> Bill:
        """
        Editable copy of an archived bill.

        Raises:
            NotFoundError: If no bill with that id is in history
        """
        archived = await self._storage.get_bill(bill_id)
        if archived is None:
            raise NotFoundError(f"Bill not found in history: {bill_id}")

        copy = copy_for_editing(archived)
        if self._audit_logger:
            await self._audit_logger.log_bill_loaded_for_editing(
                source_bill_id=archived.id,
                new_bill_id=copy.id,
                correlation_id=correlation_id,
            )
        return copy

    async def delete_bill(
        self,
        bill_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        try:
            deleted = await self._storage.delete_bill(bill_id)
        except StorageError as e:
            await self._audit_storage_error(
                "delete_bill", e, bill_id=bill_id, correlation_id=correlation_id
            )
            raise
        if deleted and self._audit_logger:
            await self._audit_logger.log_bill_deleted(
                bill_id=bill_id,
                correlation_id=correlation_id,
            )
        return deleted

    async def export_history(self) -> str:
        data = await self._storage.export_json()
        if self._audit_logger:
            await self._audit_logger.log_history_exported(
                bill_count=await self._storage.count_bills()
            )
        return data

    async def import_history(
        self,
        data: str,
        correlation_id: Optional[UUID] = None,
    ) -> int:
        """
        Merge an exported history into the stored one.

        Returns the number of bills that were not stored before.
        """
        imported = await self._storage.import_json(data)
        if self._audit_logger:
            await self._audit_logger.log_history_imported(
                imported_count=imported,
                total_count=await self._storage.count_bills(),
                correlation_id=correlation_id,
            )
        return imported

    async def analytics(self, base_currency: Optional[str] = None) -> SpendingAnalytics:
        """Spending analytics over the current history window."""
        bills = await self._storage.load_history()
        return self._aggregator.aggregate(bills, base_currency)

    async def person_analytics(
        self,
        person_id: str,
        base_currency: Optional[str] = None,
    ) -> Optional[PersonAnalytics]:
        bills = await self._storage.load_history()
        return self._aggregator.aggregate_for_person(bills, person_id, base_currency)

    async def _audit_storage_error(
        self,
        operation: str,
        error: StorageError,
        bill_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        if not self._audit_logger:
            return
        details = {"operation": operation}
        if bill_id:
            details["bill_id"] = bill_id
        await self._audit_logger.log_error(
            error_type=type(error).__name__,
            error_message=str(error),
            details=details,
            correlation_id=correlation_id,
        )


def create_app_components(
    history_path: Optional[str] = None,
    currency_table: Optional[CurrencyTable] = None,
) -> BillHistoryService:
    """
    Wire up the default components: JSON file history, in-memory audit
    trail, and the built-in currency table unless one is given.
    """
    storage = JsonFileBillStorage(history_path)
    audit_logger = AuditLogger(storage=InMemoryAuditStorage())
    converter = CurrencyConverter(currency_table)
    return BillHistoryService(
        storage=storage,
        audit_logger=audit_logger,
        converter=converter,
    )
