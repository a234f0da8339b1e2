"""Backup → write → test → reload, restoring the backup when the test fails."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import tempfile
from datetime import datetime, timezone
from pathlib import Path

from orchestr8_common import ApplyResult, Orchestr8Config

from orchestr8.errors import BackupError, ConfigWriteError

log = logging.getLogger(__name__)

BACKUP_SUFFIX = ".bak"


def _run(cmd: list[str], timeout: float) -> tuple[int, str]:
    """Run ``cmd`` and return its exit code with combined stdout+stderr.

    A timeout or a missing executable is reported as a non-zero exit.
    """
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        return 124, f"Command timed out after {timeout:g}s: {' '.join(cmd)}"
    except OSError as exc:
        return 127, f"Command could not be started: {' '.join(cmd)}\n{exc}"
    return result.returncode, (result.stdout or "") + (result.stderr or "")


def backup_name(config_path: Path, now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    return f"{config_path.name}.{now.strftime('%Y%m%dT%H%M%S%fZ')}{BACKUP_SUFFIX}"


def create_backup(config_path: Path, backup_dir: Path) -> Path:
    """Copy the current config verbatim to a new timestamped file.

    A missing config is backed up as an empty file. Backups are created
    exclusively and never overwrite an existing one.
    """
    try:
        data = config_path.read_bytes() if config_path.exists() else b""
        backup_dir.mkdir(parents=True, exist_ok=True)
        base = backup_name(config_path)
        candidate = backup_dir / base
        attempt = 0
        while True:
            try:
                with open(candidate, "xb") as f:
                    f.write(data)
                return candidate
            except FileExistsError:
                attempt += 1
                candidate = backup_dir / f"{base[: -len(BACKUP_SUFFIX)]}_{attempt}{BACKUP_SUFFIX}"
    except OSError as exc:
        raise BackupError(f"Could not back up {config_path} to {backup_dir}: {exc}") from exc


def list_backups(config_path: Path, backup_dir: Path) -> list[Path]:
    """Return backups of ``config_path``, oldest first."""
    if not backup_dir.is_dir():
        return []
    return sorted(backup_dir.glob(f"{config_path.name}.*{BACKUP_SUFFIX}"))


def _replace_atomically(config_path: Path, data: bytes) -> None:
    """Write ``data`` to a sibling temp file, then rename it over ``config_path``."""
    fd, tmp_name = tempfile.mkstemp(prefix=f".{config_path.name}.", suffix=".tmp", dir=config_path.parent)
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        if config_path.exists():
            shutil.copymode(config_path, tmp_path)
        os.replace(tmp_path, config_path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


def _write(config_path: Path, content: str) -> None:
    try:
        _replace_atomically(config_path, content.encode("utf-8"))
    except OSError as exc:
        raise ConfigWriteError(f"Could not write {config_path}: {exc}") from exc


def _restore(config_path: Path, backup_path: Path, existed: bool) -> None:
    try:
        if existed:
            _replace_atomically(config_path, backup_path.read_bytes())
        else:
            config_path.unlink(missing_ok=True)
    except OSError as exc:
        raise ConfigWriteError(
            f"Config test failed and restoring {config_path} from {backup_path} also failed: {exc}"
        ) from exc


def apply(cfg: Orchestr8Config, new_content: str) -> ApplyResult:
    """Commit ``new_content`` to the managed config and reload NGINX.

    Returns ``rejected`` (backup restored) when the syntax test fails and
    ``reload_failed`` (new content kept) when only the reload fails. Raises
    BackupError before touching the file if no backup could be made.
    """
    config_path = cfg.nginx_config_path
    existed = config_path.exists()

    backup_path = create_backup(config_path, cfg.backup_dir)
    log.info("Backed up %s to %s", config_path, backup_path)

    _write(config_path, new_content)

    code, output = _run(cfg.nginx_test_command, cfg.command_timeout)
    if code != 0:
        log.warning("NGINX config test failed (exit %s), restoring %s", code, backup_path)
        _restore(config_path, backup_path, existed)
        return ApplyResult(status="rejected", reason=output, backup_path=backup_path)

    code, output = _run(cfg.nginx_reload_command, cfg.command_timeout)
    if code != 0:
        log.error("NGINX reload failed (exit %s); new config left in place", code)
        return ApplyResult(status="reload_failed", reason=output, backup_path=backup_path)

    log.info("NGINX config applied and reloaded")
    return ApplyResult(status="applied", backup_path=backup_path)
