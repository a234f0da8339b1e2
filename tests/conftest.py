"""Shared test fixtures."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from orchestr8_common import Orchestr8Config

OK_COMMAND = [sys.executable, "-c", "print('nginx: configuration file test is successful')"]
FAIL_COMMAND = [
    sys.executable,
    "-c",
    "import sys; sys.stderr.write('nginx: [emerg] unexpected end of file\\n'); sys.exit(1)",
]


def counting_command(counter: Path, exit_code: int = 0) -> list[str]:
    """A command that appends one line to ``counter`` per invocation."""
    return [
        sys.executable,
        "-c",
        f"import sys; open({str(counter)!r}, 'a').write('x\\n'); print('reload'); sys.exit({exit_code})",
    ]


@pytest.fixture
def tmp_config(tmp_path: Path) -> Orchestr8Config:
    """Return an Orchestr8Config pointing at temp paths with harmless commands."""
    (tmp_path / "nginx").mkdir()
    return Orchestr8Config(
        host_id="test-host",
        base_domain="iiitkota.ac.in",
        nginx_config_path=tmp_path / "nginx" / "api-managed.conf",
        backup_dir=tmp_path / "backups",
        ssl_snippet="snippets/ssl-test.conf",
        nginx_test_command=OK_COMMAND,
        nginx_reload_command=counting_command(tmp_path / "reloads.txt"),
        command_timeout=10,
        log_dir=tmp_path / "log",
        audit_jsonl_path=tmp_path / "log" / "audit.jsonl",
        audit_db_path=tmp_path / "lib" / "audit.db",
    )


def reload_count(cfg: Orchestr8Config) -> int:
    counter = cfg.nginx_config_path.parent.parent / "reloads.txt"
    if not counter.exists():
        return 0
    return len(counter.read_text().splitlines())
