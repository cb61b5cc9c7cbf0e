from __future__ import annotations

from typing import Any, Dict, List

from parcel_tracking_proxy.errors import ProviderRecoverableError
from parcel_tracking_proxy.models import (
    TRACK17,
    ProviderConfig,
    ShipmentResult,
    TrackingEvent,
    TrackingRequest,
)

from .base import ProviderAdapter
from .normalize import as_str, dict_list, dig, first_str, location_from


class Track17Adapter(ProviderAdapter):
    """17Track v2.2: one POST against /gettrackinfo."""

    name = TRACK17

    def track(self, request: TrackingRequest, config: ProviderConfig, *, has_fallback: bool = False) -> ShipmentResult:
        headers = {
            "17token": config.credential("TRACK17_API_KEY"),
            "Content-Type": "application/json",
        }
        body = self._request(
            "POST",
            f"{config.base_url}/gettrackinfo",
            has_fallback=has_fallback,
            headers=headers,
            json=[{"number": request.tracking_id}],
        )
        return normalize_track17(body.data, tracking_id=request.tracking_id)


def _provider_events(track_info: Dict[str, Any]) -> tuple[Dict[str, Any], List[Dict[str, Any]]]:
    """First provider block that carries events (17Track lists them per carrier)."""
    providers = dict_list(dig(track_info, "tracking", "providers"))
    for block in providers:
        events = dict_list(block.get("events"))
        if events:
            return block, events
    return (providers[0] if providers else {}), []


def _event(ev: Dict[str, Any]) -> TrackingEvent:
    return TrackingEvent(
        id=first_str(ev, "id"),
        status=first_str(ev, "stage", "sub_status"),
        description=first_str(ev, "description"),
        timestamp=first_str(ev, "time_iso", "time_utc", "time_raw"),
        location=location_from(ev.get("address")) or first_str(ev, "location"),
    )


def normalize_track17(payload: Any, *, tracking_id: str) -> ShipmentResult:
    """
    Expected shape: {"code": 0, "data": {"accepted": [{number, track_info}],
    "rejected": [...]}}. A non-zero code or a rejected-only answer is "no data".
    """
    code = dig(payload, "code")
    if code not in (0, "0"):
        raise ProviderRecoverableError(f"17track answered with code {as_str(code) or 'missing'}")

    accepted = dict_list(dig(payload, "data", "accepted"))
    match = None
    for item in accepted:
        if first_str(item, "number").upper() == tracking_id.upper():
            match = item
            break
    if match is None:
        rejected = dict_list(dig(payload, "data", "rejected"))
        reason = first_str(dig(rejected, 0, "error"), "message") if rejected else ""
        raise ProviderRecoverableError(f"17track returned no data{': ' + reason if reason else ''}")

    track_info = match.get("track_info") if isinstance(match.get("track_info"), dict) else {}
    block, events = _provider_events(track_info)
    carrier = block.get("provider") if isinstance(block.get("provider"), dict) else {}

    return ShipmentResult(
        tracking_id=first_str(match, "number") or tracking_id,
        carrier_name=first_str(carrier, "name"),
        carrier_slug=first_str(carrier, "alias", "key"),
        status=first_str(dig(track_info, "latest_status"), "status"),
        origin=first_str(dig(track_info, "shipping_info", "shipper_address"), "country"),
        destination=first_str(dig(track_info, "shipping_info", "recipient_address"), "country"),
        events=tuple(_event(ev) for ev in events),
        done=True,
        from_cache=False,
        provider=TRACK17,
    )
