"""
Audit Logger

DESIGN DECISION: Every mutation of the ledger is logged.
This provides:
1. Traceability of what changed
2. Debugging capability when persistence fails
3. A recent-activity history the UI can show

The audit logger:
- Writes one structured JSON line per event through structlog
- Keeps a bounded in-memory history of recent events
"""

from collections import deque
from typing import Optional
from uuid import UUID

import structlog

from flow_ledger.models.audit import AuditEvent, AuditEventBuilder


# Configure structlog for local logging
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


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An in-memory history (for the activity view)
    """

    def __init__(self, history_size: int = 500):
        """
        Initialize audit logger.

        Args:
            history_size: How many recent events to keep. 0 keeps none.
        """
        self._history: deque[AuditEvent] = deque(maxlen=history_size)
        self._logger = structlog.get_logger("flow_ledger.audit")

    def log(self, event: AuditEvent) -> None:
        """
        Log an audit event.

        Severity picks the log level; warnings and errors stand out in
        the local log.
        """
        self._history.append(event)

        log_dict = event.to_log_dict()
        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

    def recent_events(self, limit: int = 100) -> list[AuditEvent]:
        """Most recent events, newest first."""
        events = list(self._history)
        events.reverse()
        return events[:limit]

    def clear(self) -> None:
        self._history.clear()

    def log_ledger_loaded(self, transaction_count: int, budget_count: int) -> None:
        """Log a successful load from storage."""
        self.log(AuditEventBuilder.ledger_loaded(
            transaction_count=transaction_count,
            budget_count=budget_count,
        ))

    def log_ledger_seeded(self, key: str, record_count: int) -> None:
        """Log first-run seeding."""
        self.log(AuditEventBuilder.ledger_seeded(key=key, record_count=record_count))

    def log_transaction_added(
        self,
        transaction_id: UUID,
        description: str,
        amount: str,
        tx_type: str,
    ) -> None:
        self.log(AuditEventBuilder.transaction_added(
            transaction_id=transaction_id,
            description=description,
            amount=amount,
            tx_type=tx_type,
        ))

    def log_transaction_updated(
        self,
        transaction_id: UUID,
        changed_fields: list[str],
    ) -> None:
        self.log(AuditEventBuilder.transaction_updated(
            transaction_id=transaction_id,
            changed_fields=changed_fields,
        ))

    def log_transaction_deleted(self, transaction_id: Optional[UUID], existed: bool) -> None:
        self.log(AuditEventBuilder.transaction_deleted(
            transaction_id=transaction_id,
            existed=existed,
        ))

    def log_budget_set(self, category: str, amount: str, previous: Optional[str]) -> None:
        self.log(AuditEventBuilder.budget_set(
            category=category,
            amount=amount,
            previous=previous,
        ))

    def log_validation_failed(self, operation: str, issues: list[dict]) -> None:
        """Log rejected form input."""
        self.log(AuditEventBuilder.validation_failed(operation=operation, issues=issues))

    def log_save_failed(self, key: str, error_message: str) -> None:
        """Log a persistence failure. The in-memory ledger is still correct."""
        self.log(AuditEventBuilder.save_failed(key=key, error_message=error_message))

    def log_record_skipped(self, key: str, entry: str, error_message: str) -> None:
        self.log(AuditEventBuilder.record_skipped(
            key=key,
            entry=entry,
            error_message=error_message,
        ))

    def log_export_generated(self, path: str, row_count: int) -> None:
        self.log(AuditEventBuilder.export_generated(path=path, row_count=row_count))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        """Log an error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
        ))
