"""
Audit Models for Flow Ledger

Every mutation of the ledger is logged for audit purposes.
This provides:
1. Traceability of what changed and when
2. Debugging information when persistence fails
3. A history the UI can show

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Startup
    LEDGER_LOADED = "ledger_loaded"
    LEDGER_SEEDED = "ledger_seeded"

    # Transactions
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_DELETED = "transaction_deleted"

    # Budgets
    BUDGET_SET = "budget_set"

    # Validation
    VALIDATION_FAILED = "validation_failed"

    # Persistence
    SAVE_FAILED = "save_failed"
    RECORD_SKIPPED = "record_skipped"

    # Export
    EXPORT_GENERATED = "export_generated"

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
    A single audit event.

    Every significant action creates one of these.
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
        description="Type of entity (e.g., 'transaction', 'budget', 'ledger')"
    )
    entity_id: Optional[UUID] = Field(
        default=None,
        description="ID of the entity this event relates to"
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

    # Error information (if applicable)
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
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.transaction_added(tx_id, "Coffee", "$4.50", "expense")
        event = AuditEventBuilder.save_failed("flow_budgets", "disk full")
    """

    @staticmethod
    def ledger_loaded(transaction_count: int, budget_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_LOADED,
            entity_type="ledger",
            description=f"Ledger loaded with {transaction_count} transactions",
            details={
                "transaction_count": transaction_count,
                "budget_count": budget_count,
            },
        )

    @staticmethod
    def ledger_seeded(key: str, record_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_SEEDED,
            entity_type="ledger",
            description=f"No saved state under '{key}', seeded defaults",
            details={
                "key": key,
                "record_count": record_count,
            },
        )

    @staticmethod
    def transaction_added(
        transaction_id: UUID,
        description: str,
        amount: str,
        tx_type: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Added {tx_type}: {description} ({amount})",
            details={
                "amount": amount,
                "type": tx_type,
            },
            is_user_action=True,
        )

    @staticmethod
    def transaction_updated(
        transaction_id: UUID,
        changed_fields: list[str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_UPDATED,
            entity_type="transaction",
            entity_id=transaction_id,
            description="Transaction edited",
            details={
                "changed_fields": changed_fields,
            },
            is_user_action=True,
        )

    @staticmethod
    def transaction_deleted(transaction_id: Optional[UUID], existed: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_DELETED,
            entity_type="transaction",
            entity_id=transaction_id,
            description="Transaction deleted" if existed else "Delete of unknown transaction ignored",
            details={
                "existed": existed,
            },
            is_user_action=True,
        )

    @staticmethod
    def budget_set(category: str, amount: str, previous: Optional[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_SET,
            entity_type="budget",
            description=f"Budget for {category} set to {amount}",
            details={
                "category": category,
                "amount": amount,
                "previous": previous,
            },
            is_user_action=True,
        )

    @staticmethod
    def validation_failed(operation: str, issues: list[dict]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            description=f"Validation failed for {operation}",
            details={
                "operation": operation,
                "issues": issues,
            },
            is_user_action=True,
        )

    @staticmethod
    def save_failed(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="ledger",
            description=f"Failed to persist '{key}'",
            error_message=error_message,
            details={
                "key": key,
            },
        )

    @staticmethod
    def record_skipped(key: str, entry: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_SKIPPED,
            severity=AuditSeverity.WARNING,
            entity_type="ledger",
            description=f"Skipped malformed entry {entry} under '{key}'",
            error_message=error_message,
            details={
                "key": key,
                "entry": entry,
            },
        )

    @staticmethod
    def export_generated(path: str, row_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_GENERATED,
            entity_type="export",
            description=f"Exported {row_count} transactions",
            details={
                "path": path,
                "row_count": row_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
        )
