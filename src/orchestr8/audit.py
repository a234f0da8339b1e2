"""Proxy change history, dual-written to a JSONL file and a SQLite table."""

from __future__ import annotations

import getpass
import logging
import os
import sqlite3
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator

from orchestr8_common import AuditEvent, Orchestr8Config

from orchestr8.config import get_config

log = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS audit_logs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    timestamp TEXT NOT NULL,
    host_id TEXT NOT NULL,
    actor TEXT NOT NULL,
    action TEXT NOT NULL,
    target TEXT NOT NULL DEFAULT '',
    params TEXT NOT NULL DEFAULT '{}',
    result TEXT NOT NULL DEFAULT 'success',
    error TEXT,
    duration_ms INTEGER
);
CREATE INDEX IF NOT EXISTS idx_audit_timestamp ON audit_logs(timestamp);
CREATE INDEX IF NOT EXISTS idx_audit_target ON audit_logs(target);
"""


def _get_actor() -> str:
    actor = os.environ.get("ORCHESTR8_ACTOR")
    if actor:
        return actor
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        # No passwd entry for the uid (common inside containers)
        return f"uid:{os.getuid()}"


def _init_db(db_path: Path) -> sqlite3.Connection:
    conn = sqlite3.connect(str(db_path))
    conn.executescript(_SCHEMA)
    return conn


def _write_jsonl(path: Path, event: AuditEvent) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "a") as f:
        f.write(event.to_jsonl() + "\n")


def _write_sqlite(db_path: Path, event: AuditEvent) -> None:
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = _init_db(db_path)
    try:
        conn.execute(
            """INSERT INTO audit_logs
               (timestamp, host_id, actor, action, target, params, result, error, duration_ms)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                event.timestamp.isoformat(),
                event.host_id,
                event.actor,
                event.action,
                event.target,
                event.model_dump_json(include={"params"}),
                event.result,
                event.error,
                event.duration_ms,
            ),
        )
        conn.commit()
    finally:
        conn.close()


def log_event(event: AuditEvent, cfg: Orchestr8Config | None = None) -> None:
    """Write an audit event to both JSONL and SQLite."""
    cfg = cfg or get_config()
    _write_jsonl(cfg.audit_jsonl_path, event)
    _write_sqlite(cfg.audit_db_path, event)


@contextmanager
def audit(
    action: str,
    target: str = "",
    *,
    cfg: Orchestr8Config | None = None,
    **params: Any,
) -> Generator[AuditEvent, None, None]:
    """Record timing and outcome of a proxy change.

    The body may set ``event.result`` to a more specific outcome (for
    example ``"rejected"``); it is kept unless the body raises. Failing to
    write the record is logged, never raised.
    """
    cfg = cfg or get_config()
    event = AuditEvent(
        host_id=cfg.host_id,
        actor=_get_actor(),
        action=action,
        target=target,
        params=params,
    )
    start = time.monotonic()
    try:
        yield event
    except Exception as exc:
        event.result = "failure"
        event.error = str(exc)
        raise
    finally:
        event.duration_ms = int((time.monotonic() - start) * 1000)
        log.debug("audit %s target=%s result=%s", action, target, event.result)
        try:
            log_event(event, cfg)
        except (OSError, sqlite3.Error):
            # Never masks the body's outcome or exception.
            log.exception("Could not record audit event %s for %s", action, target)
