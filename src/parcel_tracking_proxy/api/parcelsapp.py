from __future__ import annotations

from typing import Any, Dict, List

from parcel_tracking_proxy.errors import ProviderFatalError, ProviderRecoverableError
from parcel_tracking_proxy.models import (
    PARCELSAPP,
    ProviderConfig,
    ShipmentResult,
    TrackingEvent,
    TrackingRequest,
)

from .base import ProviderAdapter
from .decode import DecodedBody
from .normalize import as_str, dict_list, first_str, location_from

# Accepted correlation-id field names, highest priority first
CORRELATION_KEYS = ("uuid", "id", "trackingId", "requestId")

SUBSCRIPTION_LIMIT = "SUBSCRIPTION_LIMIT_REACHED"
_CREDENTIAL_ERRORS = ("INVALID_API_KEY", "UNAUTHORIZED")
INVALID_TRACKING_ID = "INVALID_TRACKING_ID"


def classify_error(code: str) -> None:
    """Raise the adapter signal matching a ParcelsApp `error` value."""
    if code == SUBSCRIPTION_LIMIT:
        raise ProviderRecoverableError("parcelsapp subscription limit reached")
    if code in _CREDENTIAL_ERRORS:
        raise ProviderFatalError(
            "invalid credentials", status=400, hint="Check PARCELS_API_TOKEN")
    if code == INVALID_TRACKING_ID:
        raise ProviderFatalError("invalid tracking id", status=400)
    raise ProviderFatalError(code, status=400)


def _declared_error(data: Dict[str, Any]) -> str:
    err = data.get("error")
    if isinstance(err, dict):
        return first_str(err, "code", "message", "error")
    return as_str(err)


class ParcelsAppAdapter(ProviderAdapter):
    """ParcelsApp: create a tracking request, then fetch it by correlation id.

    POST <base>/shipments/tracking  -> {"uuid": ...}  (or an `error` field)
    GET  <base>/shipments/tracking?uuid=...&apiKey=...  -> {"shipments": [...], "done": ...}
    """

    name = PARCELSAPP

    def track(self, request: TrackingRequest, config: ProviderConfig, *, has_fallback: bool = False) -> ShipmentResult:
        api_key = config.credential("PARCELS_API_TOKEN")
        endpoint = f"{config.base_url}/shipments/tracking"

        correlation_id = self._create(request, api_key, endpoint, has_fallback=has_fallback)
        body = self._send(
            "GET", endpoint, params={"uuid": correlation_id, "apiKey": api_key})

        if not body.ok:
            raise ProviderFatalError(
                f"parcelsapp returned HTTP {body.status}", status=body.status or 502)
        if not isinstance(body.data, dict):
            raise ProviderFatalError("invalid upstream payload", status=500)

        declared = _declared_error(body.data)
        if declared:
            classify_error(declared)

        return normalize_parcelsapp(body.data, tracking_id=request.tracking_id)

    def _create(self, request: TrackingRequest, api_key: str, endpoint: str, *, has_fallback: bool) -> str:
        shipment: Dict[str, Any] = {"trackingId": request.tracking_id}
        if request.destination_country:
            shipment["destinationCountry"] = request.destination_country
        payload = {
            "apiKey": api_key,
            "shipments": [shipment],
            "language": request.language or "en",
        }

        body = self._send("POST", endpoint, json=payload)

        # the provider reports errors in the body, sometimes with HTTP 200
        data = body.as_dict()
        declared = _declared_error(data)
        if declared:
            self.logger.info("parcelsapp declared error on create: %s", declared)
            classify_error(declared)

        if not body.ok:
            self._upstream_failure(body, has_fallback=has_fallback)

        correlation_id = first_str(data, *CORRELATION_KEYS)
        if not correlation_id:
            raise ProviderRecoverableError("parcelsapp returned no correlation id")
        return correlation_id

    def _upstream_failure(self, body: DecodedBody, *, has_fallback: bool) -> None:
        reason = f"parcelsapp returned HTTP {body.status}"
        if has_fallback:
            raise ProviderRecoverableError(reason, upstream_status=body.status)
        raise ProviderFatalError(reason, status=body.status or 502)


def _events_from_states(states: List[Dict[str, Any]]) -> tuple[TrackingEvent, ...]:
    events = []
    for st in states:
        description = first_str(st, "status", "description", "message")
        events.append(
            TrackingEvent(
                id=first_str(st, "id", "eventId"),
                status=first_str(st, "state", "status", "description"),
                description=description,
                timestamp=first_str(st, "date", "time", "timestamp"),
                location=location_from(st.get("location")),
            )
        )
    return tuple(events)


def normalize_parcelsapp(payload: Dict[str, Any], *, tracking_id: str) -> ShipmentResult:
    """Map a ParcelsApp results payload onto ShipmentResult."""
    done = bool(payload.get("done", True))
    shipments = dict_list(payload.get("shipments"))
    if not shipments:
        if done:
            raise ProviderRecoverableError("parcelsapp returned no shipments")
        # still being collected upstream; the caller may ask again
        return ShipmentResult(
            tracking_id=tracking_id,
            carrier_name="",
            carrier_slug="",
            status="",
            origin="",
            destination="",
            events=(),
            done=False,
            from_cache=bool(payload.get("fromCache", False)),
            provider=PARCELSAPP,
        )

    shipment = shipments[0]
    carrier = shipment.get("detectedCarrier") if isinstance(shipment.get("detectedCarrier"), dict) else {}
    carrier_name = first_str(carrier, "name") or first_str(shipment, "carrier")
    carriers = shipment.get("carriers")
    if not carrier_name and isinstance(carriers, list) and carriers:
        carrier_name = as_str(carriers[0])

    return ShipmentResult(
        tracking_id=first_str(shipment, "trackingId") or tracking_id,
        carrier_name=carrier_name,
        carrier_slug=first_str(carrier, "slug"),
        status=first_str(shipment, "status"),
        origin=first_str(shipment, "origin"),
        destination=first_str(shipment, "destination"),
        events=_events_from_states(dict_list(shipment.get("states"))),
        done=done,
        from_cache=bool(payload.get("fromCache", False)),
        provider=PARCELSAPP,
    )
