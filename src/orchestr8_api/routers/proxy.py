"""Reverse-proxy endpoints: raw config editing and per-service domains.

Handlers are plain ``def`` because the apply pipeline blocks on the NGINX
test and reload commands; FastAPI runs them in its threadpool.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException
from pydantic import BaseModel, ValidationError

from orchestr8_common import ApplyResult, ServerBlock
from orchestr8.config import get_config
from orchestr8.errors import BackupError, ConfigReadError, ConfigWriteError, Orchestr8Error, PortConflictError
from orchestr8.services.proxy_manager import ProxyManager
from orchestr8_api.config import settings

router = APIRouter(prefix="/proxy", tags=["proxy"])

log = logging.getLogger(__name__)


def _verify_token(authorization: str = Header("")):
    if not settings.api_token:
        return  # No token configured = open (dev mode)
    if authorization != f"Bearer {settings.api_token}":
        raise HTTPException(status_code=401, detail="Invalid API token")


def get_manager() -> ProxyManager:
    return ProxyManager(get_config())


class RawConfig(BaseModel):
    content: str


class ServiceDomain(BaseModel):
    subdomain: str
    port: str
    client_max_body_size: Optional[str] = None
    previous_port: Optional[str] = None


def _raise_for(exc: Orchestr8Error) -> None:
    if isinstance(exc, PortConflictError):
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    if isinstance(exc, (BackupError, ConfigWriteError, ConfigReadError)):
        log.error("Proxy config I/O failure: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.get("/config")
def get_config_text(
    manager: ProxyManager = Depends(get_manager),
    _: None = Depends(_verify_token),
):
    """Return the raw managed NGINX file."""
    try:
        return {"path": str(manager.config_path), "content": manager.get_current_config()}
    except Orchestr8Error as exc:
        _raise_for(exc)


@router.put("/config", response_model=ApplyResult)
def put_config_text(
    body: RawConfig,
    manager: ProxyManager = Depends(get_manager),
    _: None = Depends(_verify_token),
):
    """Replace the whole managed file (hand edit), validated before reload."""
    try:
        return manager.apply_raw_config(body.content)
    except Orchestr8Error as exc:
        _raise_for(exc)


@router.get("/blocks", response_model=list[ServerBlock])
def list_blocks(
    manager: ProxyManager = Depends(get_manager),
    _: None = Depends(_verify_token),
):
    try:
        return manager.list_blocks()
    except Orchestr8Error as exc:
        _raise_for(exc)


@router.put("/services/{service}", response_model=ApplyResult)
def set_service_domain(
    service: str,
    body: ServiceDomain,
    manager: ProxyManager = Depends(get_manager),
    _: None = Depends(_verify_token),
):
    """Point a subdomain at the service's port."""
    try:
        return manager.reconcile_and_apply(
            service,
            body.subdomain,
            body.port,
            body.client_max_body_size,
            previous_port=body.previous_port,
        )
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False)) from exc
    except Orchestr8Error as exc:
        _raise_for(exc)


@router.delete("/services/{service}", response_model=ApplyResult)
def clear_service_domain(
    service: str,
    port: str,
    manager: ProxyManager = Depends(get_manager),
    _: None = Depends(_verify_token),
):
    """Remove the server block proxying to ``port`` for this service."""
    try:
        return manager.reconcile_and_apply(service, None, port)
    except Orchestr8Error as exc:
        _raise_for(exc)
