"""Central configuration for Orchestr8 tools."""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field

from orchestr8_common.constants import (
    AUDIT_DB_PATH,
    AUDIT_JSONL_PATH,
    BACKUP_DIR,
    BASE_DOMAIN,
    COMMAND_TIMEOUT,
    DEFAULT_CLIENT_MAX_BODY_SIZE,
    LOG_DIR,
    NGINX_CONFIG_PATH,
    NGINX_RELOAD_COMMAND,
    NGINX_SSL_SNIPPET,
    NGINX_TEST_COMMAND,
)


def _env_path(name: str, default: Path) -> Path:
    env = os.environ.get(name)
    return Path(env) if env else default


class Orchestr8Config(BaseModel):
    """Runtime configuration resolved once at startup."""

    host_id: str = Field(default_factory=lambda: os.environ.get("ORCHESTR8_HOST_ID", "host-01"))
    base_domain: str = Field(default_factory=lambda: os.environ.get("ORCHESTR8_BASE_DOMAIN", BASE_DOMAIN))
    nginx_config_path: Path = Field(
        default_factory=lambda: _env_path("ORCHESTR8_NGINX_CONFIG", NGINX_CONFIG_PATH)
    )
    backup_dir: Path = Field(default_factory=lambda: _env_path("ORCHESTR8_BACKUP_DIR", BACKUP_DIR))
    ssl_snippet: str = Field(default_factory=lambda: os.environ.get("ORCHESTR8_SSL_SNIPPET", NGINX_SSL_SNIPPET))
    default_client_max_body_size: str = Field(default=DEFAULT_CLIENT_MAX_BODY_SIZE)
    nginx_test_command: list[str] = Field(default_factory=lambda: list(NGINX_TEST_COMMAND))
    nginx_reload_command: list[str] = Field(default_factory=lambda: list(NGINX_RELOAD_COMMAND))
    command_timeout: float = Field(
        default_factory=lambda: float(os.environ.get("ORCHESTR8_COMMAND_TIMEOUT", COMMAND_TIMEOUT))
    )
    log_dir: Path = Field(default=LOG_DIR)
    audit_jsonl_path: Path = Field(default=AUDIT_JSONL_PATH)
    audit_db_path: Path = Field(default=AUDIT_DB_PATH)

    def full_domain(self, subdomain: str) -> str:
        return f"{subdomain}.{self.base_domain}"
