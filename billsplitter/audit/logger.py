"""
Audit Logger

DESIGN DECISION: Every change to the bill history is logged.
This provides:
1. Traceability of what was archived, deleted and imported
2. Debugging capability when storage fails
3. A trail of bills that relied on the unknown-currency fallback

The audit logger:
- Is async so it fits next to the async storage calls
- Gracefully handles failures (never crashes the app if its sink fails)
- Supports correlation IDs to trace related events
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from billsplitter.config import get_settings
from billsplitter.models.audit import AuditEvent, AuditEventBuilder
from billsplitter.services.storage import AuditStorageInterface


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure structlog on top of stdlib logging.

    The level comes from AppSettings unless given: DEBUG when debug_mode
    is on, log_level otherwise.
    """
    if level is None:
        app_settings = get_settings().app
        level = "DEBUG" if app_settings.debug_mode else app_settings.log_level
    logging.basicConfig(format="%(message)s", level=level)
    logging.getLogger().setLevel(level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging()


class AuditLogger:
    """
    Audit trail for the bill history.

    Every event goes to the structured log; when a sink is configured it
    is appended there as well.
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Args:
            storage: Audit sink. If None, events only reach the log.
        """
        self._storage = storage
        self._logger = structlog.get_logger(__name__)

    async def log(self, event: AuditEvent) -> bool:
        """
        Record one event at the log level matching its severity.

        Returns False only when the sink rejected the event.
        """
        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        elif event.severity.value == "debug":
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_bill_archived(
        self,
        bill_id: str,
        name: str,
        total: str,
        currency: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a bill being archived to history."""
        event = AuditEventBuilder.bill_archived(
            bill_id=bill_id,
            name=name,
            total=total,
            currency=currency,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_bill_deleted(
        self,
        bill_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.bill_deleted(
            bill_id=bill_id,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_bill_loaded_for_editing(
        self,
        source_bill_id: str,
        new_bill_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.bill_loaded_for_editing(
            source_bill_id=source_bill_id,
            new_bill_id=new_bill_id,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_history_loaded(
        self,
        bill_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.history_loaded(
            bill_count=bill_count,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_history_exported(
        self,
        bill_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.history_exported(
            bill_count=bill_count,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_history_imported(
        self,
        imported_count: int,
        total_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.history_imported(
            imported_count=imported_count,
            total_count=total_count,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_save_failed(
        self,
        bill_id: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.save_failed(
            bill_id=bill_id,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_unknown_currency(
        self,
        codes: list[str],
        bill_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log currency codes that fell back to USD parity."""
        event = AuditEventBuilder.unknown_currency(
            codes=codes,
            bill_id=bill_id,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        event = AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )
        await self.log(event)


def create_correlation_id() -> UUID:
    """
    New correlation ID for one user action, e.g. archiving a bill, shared
    by every event that action produces.
    """
    return uuid4()
