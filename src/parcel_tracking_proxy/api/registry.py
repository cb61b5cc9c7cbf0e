from __future__ import annotations

from typing import Dict, Optional, Type

from .base import ProviderAdapter
from .parcelsapp import ParcelsAppAdapter
from .track17 import Track17Adapter
from .trackingmore import TrackingMoreAdapter
from .transport import RequestsTransport
from .ups import UPSAdapter

# Adding a provider = one adapter class here + one entry in PROVIDER_PRIORITY.
ADAPTER_TYPES: Dict[str, Type[ProviderAdapter]] = {
    cls.name: cls
    for cls in (ParcelsAppAdapter, TrackingMoreAdapter, UPSAdapter, Track17Adapter)
}


def build_adapters(transport: Optional[RequestsTransport] = None) -> Dict[str, ProviderAdapter]:
    """One adapter per known provider, all sharing a single transport."""
    transport = transport or RequestsTransport()
    return {name: cls(transport) for name, cls in ADAPTER_TYPES.items()}
