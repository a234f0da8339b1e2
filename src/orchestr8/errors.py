"""Custom exceptions for Orchestr8."""

from __future__ import annotations


class Orchestr8Error(Exception):
    """Base exception for all Orchestr8 operations."""

    def __init__(self, message: str, *, exit_code: int = 1):
        super().__init__(message)
        self.exit_code = exit_code


class BackupError(Orchestr8Error):
    """The managed config could not be backed up; nothing was written."""


class ConfigWriteError(Orchestr8Error):
    """Writing or restoring the managed config file failed."""


class ConfigReadError(Orchestr8Error):
    """The managed config file exists but could not be read."""


class PortConflictError(Orchestr8Error):
    """The block bound to the requested port belongs to another service."""
