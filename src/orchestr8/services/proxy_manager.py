"""Reverse-proxy operations exposed to the CLI and the dashboard API.

Every mutation runs read → reconcile → backup → write → test → reload under
one lock per managed file, so concurrent requests are serialized.
"""

from __future__ import annotations

import logging
import re
import threading
from pathlib import Path

from orchestr8_common import ApplyResult, DesiredState, Orchestr8Config, ServerBlock

from orchestr8.audit import audit
from orchestr8.errors import ConfigReadError, Orchestr8Error
from orchestr8.services import apply_pipeline, block_parser, reconciler

log = logging.getLogger(__name__)

_SERVICE_NAME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]{0,127}$")

_locks: dict[Path, threading.Lock] = {}
_locks_guard = threading.Lock()


def file_lock(path: Path) -> threading.Lock:
    """Return the process-wide lock guarding ``path``."""
    key = path.resolve()
    with _locks_guard:
        return _locks.setdefault(key, threading.Lock())


class ProxyManager:
    """Keeps the managed NGINX site file in step with service domain/port settings."""

    def __init__(self, cfg: Orchestr8Config):
        self.cfg = cfg

    @property
    def config_path(self) -> Path:
        return self.cfg.nginx_config_path

    def get_current_config(self) -> str:
        """Return the managed file's text; a missing file reads as empty."""
        try:
            return self.config_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return ""
        except OSError as exc:
            raise ConfigReadError(f"Could not read {self.config_path}: {exc}") from exc

    def list_blocks(self) -> list[ServerBlock]:
        return block_parser.parse(self.get_current_config())

    def list_backups(self) -> list[Path]:
        return apply_pipeline.list_backups(self.config_path, self.cfg.backup_dir)

    def reconcile_and_apply(
        self,
        service_name: str,
        subdomain: str | None,
        port: str,
        client_max_body_size: str | None = None,
        *,
        previous_port: str | None = None,
    ) -> ApplyResult:
        """Add, replace or remove ``service_name``'s server block and apply it.

        ``subdomain=None`` clears the service's domain. The existing block is
        located by ``previous_port`` when the service is moving ports,
        otherwise by ``port``. The pipeline only runs when the content changes.
        """
        if not _SERVICE_NAME_RE.match(service_name):
            raise Orchestr8Error(f"Invalid service name: {service_name!r}", exit_code=2)

        desired = None
        if subdomain is not None:
            desired = DesiredState(
                subdomain=subdomain,
                port=port,
                client_max_body_size=client_max_body_size or self.cfg.default_client_max_body_size,
            )
        lookup_port = previous_port or port

        with audit(
            "proxy.reconcile",
            target=service_name,
            cfg=self.cfg,
            subdomain=subdomain,
            port=port,
            previous_port=previous_port,
        ) as event:
            with file_lock(self.config_path):
                current = self.get_current_config()
                outcome = reconciler.reconcile(self.cfg, current, service_name, lookup_port, desired)
                event.params["action"] = outcome.action
                if not outcome.changed:
                    log.info("Proxy config for %s already up to date", service_name)
                    result = ApplyResult(status="unchanged")
                else:
                    result = apply_pipeline.apply(self.cfg, outcome.new_content)
            event.result = "success" if result.ok else result.status
            event.error = result.reason if not result.ok else None
            return result

    def apply_raw_config(self, new_content: str) -> ApplyResult:
        """Apply an operator's hand-edited file through the same pipeline."""
        with audit("proxy.apply_raw", target=str(self.config_path), cfg=self.cfg) as event:
            with file_lock(self.config_path):
                result = apply_pipeline.apply(self.cfg, new_content)
            event.result = "success" if result.ok else result.status
            event.error = result.reason if not result.ok else None
            return result
