"""Tests for the reverse-proxy pydantic models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from orchestr8_common import ApplyResult, DesiredState, ServerBlock


class TestDesiredState:
    def test_defaults(self):
        state = DesiredState(subdomain="app", port="8080")
        assert state.client_max_body_size == "10M"

    @pytest.mark.parametrize("subdomain", ["app", "my-app", "a.b", "x1"])
    def test_valid_subdomains(self, subdomain: str):
        assert DesiredState(subdomain=subdomain, port="80").subdomain == subdomain

    @pytest.mark.parametrize("subdomain", ["", "-app", "app;", "a b", "app}", "App", "a\nb"])
    def test_rejects_injection(self, subdomain: str):
        with pytest.raises(ValidationError):
            DesiredState(subdomain=subdomain, port="80")

    @pytest.mark.parametrize("port", ["0", "65536", "80a", "08", "", "3000;"])
    def test_rejects_bad_port(self, port: str):
        with pytest.raises(ValidationError):
            DesiredState(subdomain="app", port=port)

    def test_accepts_port_bounds(self):
        assert DesiredState(subdomain="app", port="1").port == "1"
        assert DesiredState(subdomain="app", port="65535").port == "65535"

    def test_rejects_bad_body_size(self):
        with pytest.raises(ValidationError):
            DesiredState(subdomain="app", port="80", client_max_body_size="10M; return 200")


class TestServerBlock:
    def test_sentinel_default(self):
        block = ServerBlock(server_name="a.example.org", proxy_port="80", raw_text="server {}")
        assert block.client_max_body_size == "N/A"
        assert block.managed_service is None


class TestApplyResult:
    def test_ok(self):
        assert ApplyResult(status="applied").ok
        assert ApplyResult(status="unchanged").ok
        assert not ApplyResult(status="rejected", reason="x").ok
        assert not ApplyResult(status="reload_failed", reason="x").ok
