"""
Data Models Package

This package contains all Pydantic models used in the Bill Splitter engine.
All data flowing through the system must conform to these schemas.
"""

from billsplitter.models.bill import (
    Bill,
    Currency,
    Item,
    ItemShare,
    Person,
    PersonSummary,
    SplitType,
    generate_id,
)
from billsplitter.models.analytics import (
    FrequentItem,
    PersonAnalytics,
    SpendingAnalytics,
    TrendPoint,
)
from billsplitter.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Bill models
    "Bill",
    "Currency",
    "Item",
    "ItemShare",
    "Person",
    "PersonSummary",
    "SplitType",
    "generate_id",
    # Analytics models
    "FrequentItem",
    "PersonAnalytics",
    "SpendingAnalytics",
    "TrendPoint",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
