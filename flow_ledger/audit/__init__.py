"""Audit logging package."""

from flow_ledger.audit.logger import AuditLogger

__all__ = ["AuditLogger"]
