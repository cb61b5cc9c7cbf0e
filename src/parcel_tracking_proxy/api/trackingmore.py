from __future__ import annotations

from typing import Any, Dict

from parcel_tracking_proxy.errors import ProviderRecoverableError
from parcel_tracking_proxy.models import (
    TRACKINGMORE,
    ProviderConfig,
    ShipmentResult,
    TrackingEvent,
    TrackingRequest,
)

from .base import ProviderAdapter
from .normalize import dict_list, dig, first_str, join_location


class TrackingMoreAdapter(ProviderAdapter):
    """TrackingMore v4: one GET against /trackings/get."""

    name = TRACKINGMORE

    def track(self, request: TrackingRequest, config: ProviderConfig, *, has_fallback: bool = False) -> ShipmentResult:
        headers = {
            "Tracking-Api-Key": config.credential("TRACKINGMORE_API_KEY"),
            "Content-Type": "application/json",
        }
        params = {"tracking_numbers": request.tracking_id}
        if request.language:
            params["lang"] = request.language

        body = self._request(
            "GET",
            f"{config.base_url}/trackings/get",
            has_fallback=has_fallback,
            headers=headers,
            params=params,
        )
        return normalize_trackingmore(body.data, tracking_id=request.tracking_id)


def _event(cp: Dict[str, Any]) -> TrackingEvent:
    return TrackingEvent(
        id=first_str(cp, "id"),
        status=first_str(cp, "checkpoint_delivery_status", "checkpoint_delivery_substatus"),
        description=first_str(cp, "tracking_detail", "details", "StatusDescription"),
        timestamp=first_str(cp, "checkpoint_date", "Date"),
        location=first_str(cp, "location", "Details")
        or join_location(first_str(cp, "city"), first_str(cp, "state"), first_str(cp, "country_iso2")),
    )


def normalize_trackingmore(payload: Any, *, tracking_id: str) -> ShipmentResult:
    """
    Expected shape: {"meta": {...}, "data": [ {tracking_number, courier_code,
    delivery_status, origin_info: {trackinfo: [...]}, destination_info: {...}} ]}.
    Anything else counts as "no data".
    """
    items = dict_list(dig(payload, "data"))
    if not items and isinstance(dig(payload, "data"), dict):
        items = [payload["data"]]

    match = None
    for item in items:
        if first_str(item, "tracking_number").upper() == tracking_id.upper():
            match = item
            break
    if match is None and items:
        match = items[0]
    if match is None:
        raise ProviderRecoverableError("trackingmore returned no data")

    checkpoints = dict_list(dig(match, "origin_info", "trackinfo")) + \
        dict_list(dig(match, "destination_info", "trackinfo"))

    slug = first_str(match, "courier_code")
    return ShipmentResult(
        tracking_id=first_str(match, "tracking_number") or tracking_id,
        carrier_name=first_str(match, "courier_name") or slug.upper(),
        carrier_slug=slug,
        status=first_str(match, "delivery_status", "latest_event"),
        origin=first_str(match, "origin_country", "origin_city"),
        destination=first_str(match, "destination_country", "destination_city"),
        events=tuple(_event(cp) for cp in checkpoints),
        done=True,
        from_cache=False,
        provider=TRACKINGMORE,
    )
