"""Shared Pydantic models."""

from orchestr8_common.models.audit_event import AuditEvent
from orchestr8_common.models.proxy import ApplyResult, DesiredState, ReconcileResult, ServerBlock

__all__ = ["ApplyResult", "AuditEvent", "DesiredState", "ReconcileResult", "ServerBlock"]
