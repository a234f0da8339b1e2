"""Reverse-proxy configuration commands."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from orchestr8_common import ApplyResult
from orchestr8.config import get_config
from orchestr8.errors import Orchestr8Error
from orchestr8.services.proxy_manager import ProxyManager

app = typer.Typer(no_args_is_help=True)
console = Console()

_STATUS_STYLE = {
    "applied": "green",
    "unchanged": "cyan",
    "rejected": "red",
    "reload_failed": "yellow",
}


def _manager() -> ProxyManager:
    return ProxyManager(get_config())


def _report(result: ApplyResult) -> None:
    style = _STATUS_STYLE[result.status]
    console.print(f"[{style} bold]{result.status}[/{style} bold]")
    if result.backup_path:
        console.print(f"  Backup: {result.backup_path}", soft_wrap=True)
    if result.reason:
        console.print(result.reason.rstrip(), markup=False, highlight=False, soft_wrap=True)
    if not result.ok:
        raise typer.Exit(1)


def _run(action) -> None:
    try:
        _report(action())
    except ValidationError as exc:
        console.print("[red]Invalid input:[/red]")
        console.print(str(exc), markup=False, soft_wrap=True)
        raise typer.Exit(2)
    except Orchestr8Error as exc:
        console.print(str(exc), style="red", markup=False)
        raise typer.Exit(exc.exit_code)


@app.command()
def show() -> None:
    """Display the managed NGINX config file."""
    content = _manager().get_current_config()
    if not content:
        console.print("Managed config is empty.")
        return
    console.print(Syntax(content, "nginx", theme="monokai"))


@app.command()
def blocks() -> None:
    """List the reverse-proxy server blocks found in the managed file."""
    table = Table(title="Proxied Domains")
    table.add_column("Domain", style="cyan")
    table.add_column("Port", style="magenta")
    table.add_column("Body size")
    table.add_column("Service", style="yellow")

    for block in _manager().list_blocks():
        table.add_row(block.server_name, block.proxy_port, block.client_max_body_size, block.managed_service or "-")

    console.print(table)


@app.command(name="set")
def set_domain(
    service: str = typer.Option(..., help="Service name"),
    subdomain: str = typer.Option(..., help="Subdomain under the base domain"),
    port: str = typer.Option(..., help="Host port the service listens on"),
    body_size: Optional[str] = typer.Option(None, help="client_max_body_size (e.g. 20M)"),
    previous_port: Optional[str] = typer.Option(None, help="Port the existing block forwards to, when moving ports"),
) -> None:
    """Point a subdomain at a service's port, adding or replacing its block."""
    _run(
        lambda: _manager().reconcile_and_apply(
            service, subdomain, port, body_size, previous_port=previous_port
        )
    )


@app.command()
def clear(
    service: str = typer.Option(..., help="Service name"),
    port: str = typer.Option(..., help="Host port the service's block forwards to"),
) -> None:
    """Remove a service's server block."""
    _run(lambda: _manager().reconcile_and_apply(service, None, port))


@app.command(name="apply")
def apply_file(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="File holding the full new config"),
) -> None:
    """Replace the whole managed config with a hand-edited file."""
    content = path.read_text(encoding="utf-8")
    _run(lambda: _manager().apply_raw_config(content))


@app.command()
def backups() -> None:
    """List config backups, oldest first."""
    found = _manager().list_backups()
    if not found:
        console.print("No backups yet.")
        return
    for backup in found:
        console.print(f"  {backup}", soft_wrap=True)
