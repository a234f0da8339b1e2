"""Decide how the managed config must change to match one service's desired state.

Pure string-in/string-out: no filesystem or process access happens here.
"""

from __future__ import annotations

import logging
import re

from orchestr8_common import DesiredState, Orchestr8Config, ReconcileResult, ServerBlock

from orchestr8.errors import PortConflictError
from orchestr8.services import block_parser, block_renderer

log = logging.getLogger(__name__)

_LEADING_BLANK_RE = re.compile(r"\A\s*\n")


def _check_owner(block: ServerBlock, service_name: str) -> None:
    if block.managed_service and block.managed_service != service_name:
        raise PortConflictError(
            f"Port {block.proxy_port} is proxied for service '{block.managed_service}' "
            f"({block.server_name}), refusing to modify it for '{service_name}'"
        )


def _append(content: str, rendered: str) -> str:
    if not content.strip():
        return rendered + "\n"
    return content.rstrip("\n") + "\n\n" + rendered + "\n"


def _splice(content: str, block: ServerBlock, replacement: str) -> str:
    return content[: block.start] + replacement + content[block.end :]


def _remove(content: str, block: ServerBlock) -> str:
    before = content[: block.start].rstrip()
    after = _LEADING_BLANK_RE.sub("", content[block.end :])
    if before and after:
        return before + "\n" + after
    if before:
        return before + "\n"
    return after


def reconcile(
    cfg: Orchestr8Config,
    current_content: str,
    service_name: str,
    port: str,
    desired: DesiredState | None,
) -> ReconcileResult:
    """Compute the new file content for ``service_name``.

    ``port`` is the port the service's existing block (if any) forwards to;
    blocks are correlated to services by port, so a domain rename replaces
    the block instead of duplicating it. ``desired=None`` clears the domain.
    """
    blocks = block_parser.parse(current_content)
    existing = block_parser.find_by_port(blocks, port)
    if existing is not None:
        _check_owner(existing, service_name)

    if desired is None:
        if existing is None:
            return ReconcileResult(new_content=current_content, changed=False, action="noop")
        log.info("Removing server block %s (port %s)", existing.server_name, port)
        return ReconcileResult(
            new_content=_remove(current_content, existing),
            changed=True,
            action="removed",
        )

    if desired.port != port:
        occupant = block_parser.find_by_port(blocks, desired.port)
        if occupant is not None and existing is None and occupant.managed_service == service_name:
            # The move already happened; update the block in place.
            existing = occupant
        elif occupant is not None:
            raise PortConflictError(
                f"Port {desired.port} is already proxied for {occupant.server_name}, "
                f"cannot move service '{service_name}' onto it"
            )

    rendered = block_renderer.render_desired(cfg, service_name, desired)
    if existing is None:
        log.info("Adding server block %s -> localhost:%s", cfg.full_domain(desired.subdomain), desired.port)
        return ReconcileResult(new_content=_append(current_content, rendered), changed=True, action="added")

    if existing.raw_text == rendered:
        return ReconcileResult(new_content=current_content, changed=False, action="noop")

    log.info(
        "Replacing server block %s with %s -> localhost:%s",
        existing.server_name,
        cfg.full_domain(desired.subdomain),
        desired.port,
    )
    return ReconcileResult(
        new_content=_splice(current_content, existing, rendered),
        changed=True,
        action="replaced",
    )
