from __future__ import annotations

from typing import Any, Dict, Optional

from requests.auth import HTTPBasicAuth

from parcel_tracking_proxy.errors import ProviderFatalError, ProviderRecoverableError
from parcel_tracking_proxy.models import (
    UPS,
    ProviderConfig,
    ShipmentResult,
    TrackingEvent,
    TrackingRequest,
)

from .base import ProviderAdapter
from .normalize import dict_list, dig, first_str, iso_from_compact, location_from

CARRIER_NAME = "UPS"
DEFAULT_LOCALE = "en_US"

# languages whose usual country code differs from the language code
LANGUAGE_LOCALES: Dict[str, str] = {
    "en": DEFAULT_LOCALE,
    "zh": "zh_CN",
    "ja": "ja_JP",
    "ko": "ko_KR",
    "sv": "sv_SE",
    "da": "da_DK",
    "cs": "cs_CZ",
    "el": "el_GR",
    "uk": "uk_UA",
    "he": "he_IL",
}


class UPSAdapter(ProviderAdapter):
    """UPS Track API.

    Responsibilities:
    - authenticate(): exchange UPS_USER_ID/UPS_PASSWORD (HTTP basic) for an
      OAuth bearer token; UPS_ACCESS_KEY goes along as the merchant id.
    - track(): GET /api/track/v1/details/<tracking id> with that token.

    The token lives for one lookup only; nothing is kept between requests.
    """

    name = UPS

    def authenticate(self, config: ProviderConfig, *, has_fallback: bool = False) -> str:
        headers = {
            "Content-Type": "application/x-www-form-urlencoded",
            "x-merchant-id": config.credential("UPS_ACCESS_KEY"),
        }
        body = self._request(
            "POST",
            f"{config.base_url}/security/v1/oauth/token",
            has_fallback=has_fallback,
            headers=headers,
            data={"grant_type": "client_credentials"},
            auth=HTTPBasicAuth(config.credential("UPS_USER_ID"), config.credential("UPS_PASSWORD")),
        )
        token = first_str(body.as_dict(), "access_token")
        if not token:
            if has_fallback:
                raise ProviderRecoverableError("ups token response carried no access_token")
            raise ProviderFatalError(
                "ups token response carried no access_token",
                status=502,
                hint="Check UPS_ACCESS_KEY, UPS_USER_ID and UPS_PASSWORD",
            )
        self.logger.debug("UPS token acquired (expires_in=%s)", body.as_dict().get("expires_in"))
        return token

    def track(self, request: TrackingRequest, config: ProviderConfig, *, has_fallback: bool = False) -> ShipmentResult:
        token = self.authenticate(config, has_fallback=has_fallback)
        headers = {
            "Authorization": f"Bearer {token}",
            "transId": request.tracking_id,
            "transactionSrc": "parcel-tracking-proxy",
            "Accept": "application/json",
        }
        params: Dict[str, Any] = {"locale": _locale(request.language)}
        body = self._request(
            "GET",
            f"{config.base_url}/api/track/v1/details/{request.tracking_id}",
            has_fallback=has_fallback,
            headers=headers,
            params=params,
        )
        return normalize_ups(body.data, tracking_id=request.tracking_id)


def _locale(language: Optional[str]) -> str:
    """`it` -> `it_IT`, `zh` -> `zh_CN`, `en-GB` -> `en_GB`; anything else -> `en_US`."""
    lang = (language or "").strip().replace("-", "_")
    parts = lang.split("_")
    if len(parts) == 2 and all(len(p) == 2 and p.isalpha() for p in parts):
        return f"{parts[0].lower()}_{parts[1].upper()}"
    if len(lang) == 2 and lang.isalpha():
        lang = lang.lower()
        return LANGUAGE_LOCALES.get(lang, f"{lang}_{lang.upper()}")
    return DEFAULT_LOCALE


def _event(act: Dict[str, Any]) -> TrackingEvent:
    status = act.get("status") if isinstance(act.get("status"), dict) else {}
    return TrackingEvent(
        id=first_str(status, "code"),
        status=first_str(status, "type", "statusCode"),
        description=first_str(status, "description"),
        timestamp=iso_from_compact(first_str(act, "date"), first_str(act, "time")),
        location=location_from(act.get("location")),
    )


def normalize_ups(payload: Any, *, tracking_id: str) -> ShipmentResult:
    """
    Expected shape: trackResponse.shipment[0].package[0] with `activity`
    (newest first, as UPS returns it) and `currentStatus`.
    """
    package = dig(payload, "trackResponse", "shipment", 0, "package", 0)
    if not isinstance(package, dict):
        raise ProviderRecoverableError("ups returned no package data")

    current = package.get("currentStatus") if isinstance(package.get("currentStatus"), dict) else {}
    origin = ""
    destination = ""
    for addr in dict_list(package.get("packageAddress")):
        kind = first_str(addr, "type").upper()
        if kind == "ORIGIN":
            origin = location_from(addr)
        elif kind == "DESTINATION":
            destination = location_from(addr)

    return ShipmentResult(
        tracking_id=first_str(package, "trackingNumber") or tracking_id,
        carrier_name=CARRIER_NAME,
        carrier_slug=UPS,
        status=first_str(current, "description", "code"),
        origin=origin,
        destination=destination,
        events=tuple(_event(a) for a in dict_list(package.get("activity"))),
        done=True,
        from_cache=False,
        provider=UPS,
    )
