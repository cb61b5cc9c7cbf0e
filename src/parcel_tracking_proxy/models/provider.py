from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

# Provider identifiers as they appear in TRACKING_PROVIDER and in _meta.provider.
PARCELSAPP = "parcelsapp"
TRACKINGMORE = "trackingmore"
UPS = "ups"
TRACK17 = "17track"
AUTO = "auto"

# Static policy order for auto mode (free-tier generosity, not a score).
PROVIDER_PRIORITY = (PARCELSAPP, TRACKINGMORE, UPS, TRACK17)

KNOWN_PROVIDERS = frozenset(PROVIDER_PRIORITY)


@dataclass(frozen=True)
class ProviderConfig:
    """One supported provider, as seen from the environment at startup."""

    name: str
    credentials_present: bool
    base_url: str
    priority: int
    # raw secrets for the adapter; kept out of repr so they never hit logs
    credentials: Dict[str, str] = field(default_factory=dict, repr=False, compare=False)

    def credential(self, key: str) -> str:
        return self.credentials.get(key, "")


@dataclass(frozen=True)
class TrackingRequest:
    tracking_id: str
    destination_country: Optional[str] = None
    language: str = "en"
    requested_provider: str = AUTO

    @property
    def explicit(self) -> bool:
        return self.requested_provider != AUTO
