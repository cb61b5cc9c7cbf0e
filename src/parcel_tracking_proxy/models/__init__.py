from .env_cfg import ProxyEnv
from .normalized import ShipmentResult, TrackingEvent
from .outcome import AttemptOutcome, FatalError, RecoverableError, Success
from .provider import (
    AUTO,
    KNOWN_PROVIDERS,
    PARCELSAPP,
    PROVIDER_PRIORITY,
    TRACK17,
    TRACKINGMORE,
    UPS,
    ProviderConfig,
    TrackingRequest,
)

__all__ = [
    "AUTO",
    "AttemptOutcome",
    "FatalError",
    "KNOWN_PROVIDERS",
    "PARCELSAPP",
    "PROVIDER_PRIORITY",
    "ProviderConfig",
    "ProxyEnv",
    "RecoverableError",
    "ShipmentResult",
    "Success",
    "TRACK17",
    "TRACKINGMORE",
    "TrackingEvent",
    "TrackingRequest",
    "UPS",
]
