"""Reverse-proxy models: parsed server blocks, desired state and outcomes."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from orchestr8_common.constants import BODY_SIZE_NOT_SET, DEFAULT_CLIENT_MAX_BODY_SIZE

_SUBDOMAIN_PATTERN = r"^[a-z0-9]([a-z0-9-]{0,61}[a-z0-9])?(\.[a-z0-9]([a-z0-9-]{0,61}[a-z0-9])?)*$"
_PORT_PATTERN = r"^([1-9][0-9]{0,3}|[1-5][0-9]{4}|6[0-4][0-9]{3}|65[0-4][0-9]{2}|655[0-2][0-9]|6553[0-5])$"
_BODY_SIZE_PATTERN = r"^[0-9]+[kKmMgG]?$"


class ServerBlock(BaseModel):
    """One ``server { ... }`` reverse-proxy entry parsed from the managed file.

    ``raw_text`` is the verbatim span of the block in the source text;
    ``start``/``end`` locate that span and anchor in-place replacement and
    removal, so an identical commented-out copy earlier in the file is
    never touched.
    """

    server_name: str
    proxy_port: str
    client_max_body_size: str = BODY_SIZE_NOT_SET
    raw_text: str
    managed_service: str | None = None
    start: int = Field(default=0, exclude=True)
    end: int = Field(default=0, exclude=True)


class DesiredState(BaseModel):
    """Target domain/port/body-size for one service at the moment of a call."""

    subdomain: str = Field(pattern=_SUBDOMAIN_PATTERN, max_length=253)
    port: str = Field(pattern=_PORT_PATTERN)
    client_max_body_size: str = Field(default=DEFAULT_CLIENT_MAX_BODY_SIZE, pattern=_BODY_SIZE_PATTERN)


class ReconcileResult(BaseModel):
    new_content: str
    changed: bool
    action: Literal["added", "replaced", "removed", "noop"]


class ApplyResult(BaseModel):
    """Outcome of pushing new content through the apply pipeline."""

    status: Literal["applied", "rejected", "reload_failed", "unchanged"]
    reason: str | None = None
    backup_path: Path | None = None

    @property
    def ok(self) -> bool:
        return self.status in ("applied", "unchanged")
