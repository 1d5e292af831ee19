"""
Audit Models for Bill Splitter

Every change to the bill history is logged for audit purposes.
This provides:
1. Traceability of archived, deleted and imported bills
2. Debugging information when storage fails
3. A record of data that hit a fallback path (unknown currency codes)

DESIGN DECISION: Events describe what happened to the history, never the
bill contents themselves. A bill is identified by id; the totals shown in
an event are the ones computed at the moment of archiving.
"""

import json
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # History persistence
    BILL_ARCHIVED = "bill_archived"
    BILL_DELETED = "bill_deleted"
    BILL_LOADED_FOR_EDITING = "bill_loaded_for_editing"
    HISTORY_LOADED = "history_loaded"
    HISTORY_EXPORTED = "history_exported"
    HISTORY_IMPORTED = "history_imported"
    SAVE_FAILED = "save_failed"

    # Data quality
    UNKNOWN_CURRENCY = "unknown_currency"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    One entry in the audit trail of the bill history.

    entity_id is a bill id for bill events and None for whole-history events.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'bill', 'history')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }

    def to_record(self) -> list[str]:
        """
        Flatten to a row of strings for line-oriented sinks.

        Columns: [event_id, timestamp, event_type, severity, entity_type,
        entity_id, correlation_id, description, details_json,
        error_message, is_user_action]
        """
        return [
            str(self.event_id),
            self.timestamp.isoformat(),
            self.event_type.value,
            self.severity.value,
            self.entity_type or "",
            self.entity_id or "",
            str(self.correlation_id) if self.correlation_id else "",
            self.description,
            json.dumps(self.details, default=str) if self.details else "",
            self.error_message or "",
            str(self.is_user_action),
        ]


class AuditEventBuilder:
    """
    Factories for the audit events the history service emits.

    Usage:
        event = AuditEventBuilder.bill_archived(bill_id, name, total, currency)
        event = AuditEventBuilder.bill_deleted(bill_id, correlation_id)
    """

    @staticmethod
    def bill_archived(
        bill_id: str,
        name: str,
        total: str,
        currency: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BILL_ARCHIVED,
            entity_type="bill",
            entity_id=bill_id,
            correlation_id=correlation_id,
            description=f"Bill archived: {name} - {total} {currency}",
            details={
                "name": name,
                "total": total,
                "currency": currency,
            },
            is_user_action=True,
        )

    @staticmethod
    def bill_deleted(
        bill_id: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BILL_DELETED,
            entity_type="bill",
            entity_id=bill_id,
            correlation_id=correlation_id,
            description=f"Bill deleted from history: {bill_id}",
            is_user_action=True,
        )

    @staticmethod
    def bill_loaded_for_editing(
        source_bill_id: str,
        new_bill_id: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BILL_LOADED_FOR_EDITING,
            entity_type="bill",
            entity_id=new_bill_id,
            correlation_id=correlation_id,
            description="Archived bill copied for editing",
            details={
                "source_bill_id": source_bill_id,
            },
            is_user_action=True,
        )

    @staticmethod
    def history_loaded(
        bill_count: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.HISTORY_LOADED,
            severity=AuditSeverity.DEBUG,
            entity_type="history",
            correlation_id=correlation_id,
            description=f"Bill history loaded: {bill_count} bills",
            details={
                "bill_count": bill_count,
            },
        )

    @staticmethod
    def history_exported(
        bill_count: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.HISTORY_EXPORTED,
            entity_type="history",
            correlation_id=correlation_id,
            description=f"Bill history exported: {bill_count} bills",
            details={
                "bill_count": bill_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def history_imported(
        imported_count: int,
        total_count: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.HISTORY_IMPORTED,
            entity_type="history",
            correlation_id=correlation_id,
            description=f"Imported {imported_count} bills, history now holds {total_count}",
            details={
                "imported_count": imported_count,
                "total_count": total_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def save_failed(
        bill_id: str,
        error_message: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="bill",
            entity_id=bill_id,
            correlation_id=correlation_id,
            description="Failed to archive bill",
            error_message=error_message,
        )

    @staticmethod
    def unknown_currency(
        codes: list[str],
        bill_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.UNKNOWN_CURRENCY,
            severity=AuditSeverity.WARNING,
            entity_type="bill",
            entity_id=bill_id,
            correlation_id=correlation_id,
            description=f"Unknown currency codes treated as USD: {', '.join(codes)}",
            details={
                "codes": codes,
            },
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
