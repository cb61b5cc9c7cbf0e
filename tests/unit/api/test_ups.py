import pytest
import requests

from parcel_tracking_proxy.api.ups import UPSAdapter, normalize_ups
from parcel_tracking_proxy.errors import ProviderRecoverableError
from parcel_tracking_proxy.models import FatalError, RecoverableError, Success, TrackingRequest

UPS_ENV = {"UPS_ACCESS_KEY": "ak", "UPS_USER_ID": "uid", "UPS_PASSWORD": "pw"}
TN = "1Z999AA10123456784"


def test_token_exchange_then_details(provider_config, fake_transport, fake_response, payloads):
    cfg = provider_config("ups", **UPS_ENV)
    t = fake_transport(
        fake_response(200, {"access_token": "bearer-xyz", "expires_in": "14399"}),
        fake_response(200, payloads.ups_details(TN)),
    )

    out = UPSAdapter(t).call(TrackingRequest(TN), cfg)

    assert isinstance(out, Success)
    res = out.result
    assert res.carrier_name == "UPS" and res.carrier_slug == "ups"
    assert res.provider == "ups"
    assert res.status == "Delivered"
    assert res.origin == "ATLANTA, GA, US"
    assert res.destination == "NEW YORK, NY, US"
    assert res.events[0].timestamp == "2024-01-12T14:30:00"
    assert res.events[0].location == "NEW YORK, NY, US"
    assert res.events[1].description == "Shipper created a label"

    token_call, details_call = t.calls
    assert token_call["url"] == "https://onlinetools.ups.com/security/v1/oauth/token"
    assert token_call["data"] == {"grant_type": "client_credentials"}
    assert token_call["headers"]["x-merchant-id"] == "ak"
    assert token_call["auth"].username == "uid"
    assert details_call["url"] == f"https://onlinetools.ups.com/api/track/v1/details/{TN}"
    assert details_call["headers"]["Authorization"] == "Bearer bearer-xyz"


def test_token_rejected_is_recoverable_with_fallback(provider_config, fake_transport, fake_response):
    cfg = provider_config("ups", **UPS_ENV)
    t = fake_transport(fake_response(401, {"response": {"errors": []}}))
    out = UPSAdapter(t).call(TrackingRequest(TN), cfg, has_fallback=True)
    assert isinstance(out, RecoverableError)
    assert len(t.calls) == 1


def test_token_rejected_is_fatal_as_last_candidate(provider_config, fake_transport, fake_response):
    cfg = provider_config("ups", **UPS_ENV)
    t = fake_transport(fake_response(401, {"error": "unauthorized"}))
    out = UPSAdapter(t).call(TrackingRequest(TN), cfg, has_fallback=False)
    assert isinstance(out, FatalError)
    assert out.http_status == 401


def test_network_failure_last_candidate_is_502(provider_config, fake_transport):
    cfg = provider_config("ups", **UPS_ENV)
    t = fake_transport(requests.ConnectionError("refused"))
    out = UPSAdapter(t).call(TrackingRequest(TN), cfg)
    assert isinstance(out, FatalError)
    assert out.http_status == 502


def test_missing_package_is_no_data():
    with pytest.raises(ProviderRecoverableError):
        normalize_ups({"trackResponse": {"shipment": [{"warnings": [{"code": "TW0001"}]}]}}, tracking_id=TN)


@pytest.mark.parametrize("language, locale", [
    ("en", "en_US"),
    ("it", "it_IT"),
    ("en-GB", "en_GB"),
    ("en-us", "en_US"),
    ("zh", "zh_CN"),
    ("zh-Hant-TW", "en_US"),
    ("", "en_US"),
])
def test_details_locale_from_language(language, locale, provider_config, fake_transport, fake_response, payloads):
    cfg = provider_config("ups", **UPS_ENV)
    t = fake_transport(
        fake_response(200, {"access_token": "tok"}),
        fake_response(200, payloads.ups_details(TN)),
    )
    UPSAdapter(t).call(TrackingRequest(TN, language=language), cfg)
    assert t.calls[1]["params"] == {"locale": locale}
