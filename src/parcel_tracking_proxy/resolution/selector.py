# src/parcel_tracking_proxy/resolution/selector.py
from __future__ import annotations

from typing import Iterable, List

from parcel_tracking_proxy.config.env import missing_credentials_hint
from parcel_tracking_proxy.errors import ConfigurationError, ProviderNotConfiguredError
from parcel_tracking_proxy.models import AUTO, KNOWN_PROVIDERS, PROVIDER_PRIORITY, ProviderConfig


def select_order(configs: Iterable[ProviderConfig], requested: str = AUTO) -> List[ProviderConfig]:
    """
    Ordered providers to attempt for one lookup.

    - A named provider yields exactly that provider (no fallback). Without
      credentials this fails outright; there is no silent reroute.
    - `auto` yields every credentialed provider in the fixed policy order
      (ParcelsApp, TrackingMore, UPS, 17Track). The order is policy, not a score.
    - An empty result is a configuration error, raised before any network call.
    """
    configs = list(configs)
    name = (requested or AUTO).strip().lower()

    if name != AUTO:
        if name not in KNOWN_PROVIDERS:
            raise ConfigurationError(
                f"Unknown tracking provider: {requested}",
                hint="TRACKING_PROVIDER must be one of: auto, " + ", ".join(PROVIDER_PRIORITY),
            )
        chosen = next((c for c in configs if c.name == name), None)
        if chosen is None or not chosen.credentials_present:
            raise ProviderNotConfiguredError(
                f"Provider not configured: {name}",
                hint=missing_credentials_hint((name,)),
            )
        return [chosen]

    rank = {n: i for i, n in enumerate(PROVIDER_PRIORITY)}
    order = sorted(
        (c for c in configs if c.credentials_present and c.name in rank),
        key=lambda c: rank[c.name],
    )
    if not order:
        raise ConfigurationError(
            "No API keys configured", hint=missing_credentials_hint())
    return order
