"""Tests for audit logging."""

from __future__ import annotations

import json
import sqlite3
from pathlib import Path

import pytest

from orchestr8_common import AuditEvent, Orchestr8Config
from orchestr8.audit import _write_jsonl, _write_sqlite, audit


class TestAuditJSONL:
    def test_write_creates_parent(self, tmp_path: Path):
        path = tmp_path / "nested" / "audit.jsonl"
        _write_jsonl(path, AuditEvent(action="proxy.reconcile", target="svc1", actor="tester"))

        (line,) = path.read_text().strip().splitlines()
        data = json.loads(line)
        assert data["action"] == "proxy.reconcile"
        assert data["target"] == "svc1"


class TestAuditSQLite:
    def test_write_sqlite(self, tmp_path: Path):
        db_path = tmp_path / "lib" / "audit.db"
        _write_sqlite(db_path, AuditEvent(action="proxy.apply_raw", target="site.conf", host_id="h1"))

        conn = sqlite3.connect(str(db_path))
        rows = conn.execute("SELECT action, target, host_id FROM audit_logs").fetchall()
        conn.close()
        assert rows == [("proxy.apply_raw", "site.conf", "h1")]


class TestAuditContextManager:
    def test_success(self, tmp_config: Orchestr8Config, monkeypatch):
        monkeypatch.setenv("ORCHESTR8_ACTOR", "operator")
        with audit("proxy.reconcile", target="svc1", cfg=tmp_config, port="3000") as event:
            pass

        assert event.result == "success"
        assert event.actor == "operator"
        assert event.host_id == "test-host"
        assert event.duration_ms is not None
        data = json.loads(tmp_config.audit_jsonl_path.read_text().strip())
        assert data["params"] == {"port": "3000"}

    def test_body_sets_outcome(self, tmp_config: Orchestr8Config):
        with audit("proxy.apply_raw", cfg=tmp_config) as event:
            event.result = "rejected"
            event.error = "nginx: [emerg]"

        data = json.loads(tmp_config.audit_jsonl_path.read_text().strip())
        assert data["result"] == "rejected"
        assert data["error"] == "nginx: [emerg]"

    def test_failure(self, tmp_config: Orchestr8Config):
        with pytest.raises(ValueError):
            with audit("proxy.reconcile", target="svc1", cfg=tmp_config) as event:
                raise ValueError("something broke")

        assert event.result == "failure"
        assert event.error == "something broke"
        conn = sqlite3.connect(str(tmp_config.audit_db_path))
        (row,) = conn.execute("SELECT result, error FROM audit_logs").fetchall()
        conn.close()
        assert row == ("failure", "something broke")


class TestAuditWriteFailure:
    def _unwritable(self, tmp_config: Orchestr8Config, tmp_path: Path) -> Orchestr8Config:
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        return tmp_config.model_copy(
            update={
                "audit_jsonl_path": blocker / "audit.jsonl",
                "audit_db_path": blocker / "audit.db",
            }
        )

    def test_body_outcome_survives(self, tmp_config: Orchestr8Config, tmp_path: Path):
        cfg = self._unwritable(tmp_config, tmp_path)
        with audit("proxy.reconcile", target="svc1", cfg=cfg) as event:
            event.result = "rejected"
        assert event.result == "rejected"

    def test_original_exception_not_masked(self, tmp_config: Orchestr8Config, tmp_path: Path):
        cfg = self._unwritable(tmp_config, tmp_path)
        with pytest.raises(ValueError, match="original"):
            with audit("proxy.reconcile", cfg=cfg):
                raise ValueError("original")
