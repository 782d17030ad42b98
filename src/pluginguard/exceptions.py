"""PluginGuard exception hierarchy.

All public exceptions inherit from PluginGuardError, giving callers a single
base class to catch when they want to handle any PluginGuard-specific failure
without swallowing unrelated errors.
"""

from __future__ import annotations


class PluginGuardError(Exception):
    """Base exception for all PluginGuard errors."""


class FetchError(PluginGuardError):
    """Raised when an authoritative checksum manifest cannot be retrieved.

    Covers network failures, TLS failures, non-200 responses, and response
    bodies that are not valid checksum documents. The verification engine
    does not distinguish between these causes: a manifest is either
    available or it is not.
    """

    def __init__(
        self,
        message: str,
        *,
        url: str = "",
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class InventoryError(PluginGuardError):
    """Raised when the local installation cannot be inventoried.

    Covers missing plugin directories and an unreadable core version file.
    """


class NoArtifactsSpecifiedError(PluginGuardError):
    """Raised when a run names no plugins and does not request ``--all``."""
