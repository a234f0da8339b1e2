"""API configuration via environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    cors_origins: list[str] = ["http://localhost:5173"]
    api_token: str = ""  # Pre-shared bearer token; empty = open (dev mode)

    model_config = {"env_prefix": "ORCHESTR8_"}


settings = Settings()
