"""Root Typer application for the Orchestr8 CLI."""

from __future__ import annotations

import logging

import typer

from orchestr8.commands import proxy

app = typer.Typer(
    name="orchestr8",
    help="Manage the NGINX reverse proxy in front of your containers.",
    no_args_is_help=True,
)

app.add_typer(proxy.app, name="proxy", help="Reverse-proxy server block management.")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log pipeline steps to stderr"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


if __name__ == "__main__":
    app()
