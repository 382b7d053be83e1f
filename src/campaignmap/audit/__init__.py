"""Audit trail: sinks and the background delivery queue."""

from campaignmap.audit.log import AuditLog
from campaignmap.audit.sinks import GitAuditSink, LoggingAuditSink, NullAuditSink, create_audit_sink

__all__ = ["AuditLog", "GitAuditSink", "LoggingAuditSink", "NullAuditSink", "create_audit_sink"]
