"""Jinja2-based renderer for managed reverse-proxy server blocks."""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from orchestr8_common import MANAGED_TAG, DesiredState, Orchestr8Config

_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"


def _get_env() -> Environment:
    # The rendered block must end at its closing brace so that it can be
    # swapped in for a parsed ``raw_text`` span without adding newlines.
    return Environment(
        loader=FileSystemLoader(str(_TEMPLATE_DIR)),
        autoescape=select_autoescape([]),
        undefined=StrictUndefined,
        keep_trailing_newline=False,
    )


def render(
    cfg: Orchestr8Config,
    service_name: str,
    subdomain: str,
    port: str,
    client_max_body_size: str,
) -> str:
    """Render a canonical server block proxying ``subdomain`` to ``localhost:port``."""
    template = _get_env().get_template("server_block.conf.j2")
    return template.render(
        managed_tag=MANAGED_TAG,
        service_name=service_name,
        server_name=cfg.full_domain(subdomain),
        ssl_snippet=cfg.ssl_snippet,
        client_max_body_size=client_max_body_size,
        port=port,
    )


def render_desired(cfg: Orchestr8Config, service_name: str, desired: DesiredState) -> str:
    return render(cfg, service_name, desired.subdomain, desired.port, desired.client_max_body_size)
