"""Audit trail for signing runs."""

from winsign.audit.ledger import AuditEntry, AuditLedger

__all__ = ["AuditEntry", "AuditLedger"]
