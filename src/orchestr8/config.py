"""CLI configuration — singleton Orchestr8Config resolved at startup."""

from __future__ import annotations

from functools import lru_cache

from orchestr8_common import Orchestr8Config


@lru_cache(maxsize=1)
def get_config() -> Orchestr8Config:
    """Return the global Orchestr8Config (resolved once, cached)."""
    return Orchestr8Config()
