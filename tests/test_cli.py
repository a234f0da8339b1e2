"""Tests for the proxy CLI commands."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from orchestr8_common import Orchestr8Config
from orchestr8.cli import app

from conftest import FAIL_COMMAND

runner = CliRunner()


@pytest.fixture
def cli_config(tmp_config: Orchestr8Config):
    with patch("orchestr8.commands.proxy.get_config", return_value=tmp_config):
        yield tmp_config


class TestProxyCli:
    def test_set_and_blocks(self, cli_config: Orchestr8Config):
        result = runner.invoke(
            app, ["proxy", "set", "--service", "svc1", "--subdomain", "myapp", "--port", "3000", "--body-size", "20M"]
        )
        assert result.exit_code == 0, result.output
        assert "applied" in result.output
        assert "myapp.iiitkota.ac.in" in cli_config.nginx_config_path.read_text()

        result = runner.invoke(app, ["proxy", "blocks"])
        assert result.exit_code == 0
        assert "myapp.iiitkota.ac.in" in result.output
        assert "svc1" in result.output

    def test_clear(self, cli_config: Orchestr8Config):
        runner.invoke(app, ["proxy", "set", "--service", "svc1", "--subdomain", "myapp", "--port", "3000"])
        result = runner.invoke(app, ["proxy", "clear", "--service", "svc1", "--port", "3000"])
        assert result.exit_code == 0, result.output
        assert cli_config.nginx_config_path.read_text() == ""

    def test_invalid_subdomain(self, cli_config: Orchestr8Config):
        result = runner.invoke(app, ["proxy", "set", "--service", "svc1", "--subdomain", "a;b", "--port", "3000"])
        assert result.exit_code == 2
        assert "Invalid input" in result.output

    def test_apply_rejected(self, cli_config: Orchestr8Config, tmp_path: Path):
        cli_config.nginx_config_path.write_text("# original\n")
        edited = tmp_path / "edited.conf"
        edited.write_text("server {\n")
        failing = cli_config.model_copy(update={"nginx_test_command": FAIL_COMMAND})

        with patch("orchestr8.commands.proxy.get_config", return_value=failing):
            result = runner.invoke(app, ["proxy", "apply", str(edited)])

        assert result.exit_code == 1
        assert "rejected" in result.output
        assert "unexpected end of file" in result.output
        assert cli_config.nginx_config_path.read_text() == "# original\n"

    def test_show_and_backups(self, cli_config: Orchestr8Config):
        result = runner.invoke(app, ["proxy", "show"])
        assert "Managed config is empty." in result.output
        result = runner.invoke(app, ["proxy", "backups"])
        assert "No backups yet." in result.output

        runner.invoke(app, ["proxy", "set", "--service", "svc1", "--subdomain", "myapp", "--port", "3000"])
        result = runner.invoke(app, ["proxy", "backups"])
        assert "api-managed.conf." in result.output
