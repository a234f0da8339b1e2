"""Orchestr8 container dashboard tooling: NGINX reverse-proxy reconciliation."""

__version__ = "0.1.0"
