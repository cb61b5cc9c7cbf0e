from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Any


@dataclass(frozen=True)
class TrackingEvent:
    # every field is a plain string; missing values are "" so the UI never sees null
    id: str = ""
    status: str = ""
    description: str = ""
    timestamp: str = ""               # ISO-8601, as supplied by the provider
    location: str = ""

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


@dataclass(frozen=True)
class ShipmentResult:
    # identity/context
    tracking_id: str
    carrier_name: str
    carrier_slug: str

    # summary
    status: str
    origin: str
    destination: str

    # provider order is preserved, never re-sorted
    events: tuple[TrackingEvent, ...]

    # advisory: False means "ask again later"; nothing re-polls on its own
    done: bool = True
    # what the provider says about its own cache; this proxy caches nothing
    from_cache: bool = False
    provider: str = ""

    def meta(self) -> dict[str, Any]:
        return {
            "done": self.done,
            "fromCache": self.from_cache,
            "provider": self.provider,
        }

    def to_payload(self) -> dict[str, Any]:
        """JSON body returned to the front-end (camelCase keys plus `_meta`)."""
        return {
            "trackingId": self.tracking_id,
            "carrier": {"name": self.carrier_name, "slug": self.carrier_slug},
            "status": self.status,
            "origin": self.origin,
            "destination": self.destination,
            "events": [ev.to_dict() for ev in self.events],
            "_meta": self.meta(),
        }
