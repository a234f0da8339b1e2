"""Orchestr8 Common — shared models and constants for the Orchestr8 CLI and API."""

from orchestr8_common.constants import (
    AUDIT_DB_PATH,
    AUDIT_JSONL_PATH,
    BACKUP_DIR,
    BASE_DOMAIN,
    BODY_SIZE_NOT_SET,
    COMMAND_TIMEOUT,
    DEFAULT_CLIENT_MAX_BODY_SIZE,
    LOG_DIR,
    MANAGED_TAG,
    NGINX_CONFIG_PATH,
    NGINX_RELOAD_COMMAND,
    NGINX_SSL_SNIPPET,
    NGINX_TEST_COMMAND,
)
from orchestr8_common.config import Orchestr8Config
from orchestr8_common.models.audit_event import AuditEvent
from orchestr8_common.models.proxy import ApplyResult, DesiredState, ReconcileResult, ServerBlock

__all__ = [
    "AUDIT_DB_PATH",
    "AUDIT_JSONL_PATH",
    "ApplyResult",
    "AuditEvent",
    "BACKUP_DIR",
    "BASE_DOMAIN",
    "BODY_SIZE_NOT_SET",
    "COMMAND_TIMEOUT",
    "DEFAULT_CLIENT_MAX_BODY_SIZE",
    "DesiredState",
    "LOG_DIR",
    "MANAGED_TAG",
    "NGINX_CONFIG_PATH",
    "NGINX_RELOAD_COMMAND",
    "NGINX_SSL_SNIPPET",
    "NGINX_TEST_COMMAND",
    "Orchestr8Config",
    "ReconcileResult",
    "ServerBlock",
]
