"""FastAPI application entry point."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from orchestr8 import __version__
from orchestr8_api.config import settings
from orchestr8_api.routers import proxy

app = FastAPI(
    title="Orchestr8 Dashboard API",
    description="Container dashboard reverse-proxy management",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(proxy.router, prefix="/api")


@app.get("/api/health")
async def health():
    return {"status": "ok"}


def run():
    import uvicorn
    uvicorn.run("orchestr8_api.main:app", host="0.0.0.0", port=8080)
