# src/parcel_tracking_proxy/errors.py
from __future__ import annotations

from typing import Any, Dict, Optional


class TrackingError(RuntimeError):
    """Base for every error that can reach the caller as a JSON body."""

    status: int = 500

    def __init__(self, message: str, *, status: Optional[int] = None, hint: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status
        self.hint = hint

    def to_payload(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        if self.hint:
            body["hint"] = self.hint
        return body


class ValidationError(TrackingError):
    """Missing or malformed input. Never triggers fallback."""
    status = 400


class ConfigurationError(TrackingError):
    """No usable credentials; raised before any network call."""
    status = 500


class ProviderNotConfiguredError(ConfigurationError):
    """An explicitly requested provider has no credentials."""


class ProviderFatalError(TrackingError):
    """Terminal provider failure surfaced to the caller."""
    status = 502


class ProviderUnavailableError(ProviderFatalError):
    """Every candidate was tried and none produced a result."""


# --- Adapter-internal signals --------------------------------------------------
# These never leave the adapter layer; the base adapter turns them into outcomes.

class ProviderRecoverableError(Exception):
    """This provider failed, but another one may still succeed."""

    def __init__(self, reason: str, *, upstream_status: Optional[int] = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.upstream_status = upstream_status


class UpstreamTimeout(ProviderRecoverableError):
    """A provider call hit the per-call timeout."""


__all__ = [
    "TrackingError",
    "ValidationError",
    "ConfigurationError",
    "ProviderNotConfiguredError",
    "ProviderFatalError",
    "ProviderUnavailableError",
    "ProviderRecoverableError",
    "UpstreamTimeout",
]
