"""Canned shipment for local development (USE_MOCK_DATA outside production)."""
from __future__ import annotations

from parcel_tracking_proxy.models import ShipmentResult, TrackingEvent

MOCK_PROVIDER = "mock"

_MOCK_EVENTS = (
    TrackingEvent(
        id="mock-1",
        status="info_received",
        description="Shipment information received",
        timestamp="2024-01-10T08:00:00Z",
        location="Milano, IT",
    ),
    TrackingEvent(
        id="mock-2",
        status="in_transit",
        description="Departed sorting facility",
        timestamp="2024-01-11T12:30:00Z",
        location="Bologna, IT",
    ),
    TrackingEvent(
        id="mock-3",
        status="out_for_delivery",
        description="Out for delivery",
        timestamp="2024-01-12T07:45:00Z",
        location="Roma, IT",
    ),
)


def mock_shipment(tracking_id: str) -> ShipmentResult:
    # fixed values only: the same code always yields the same body
    return ShipmentResult(
        tracking_id=tracking_id,
        carrier_name="Mock Carrier",
        carrier_slug="mock",
        status="in_transit",
        origin="IT",
        destination="IT",
        events=_MOCK_EVENTS,
        done=True,
        from_cache=False,
        provider=MOCK_PROVIDER,
    )
