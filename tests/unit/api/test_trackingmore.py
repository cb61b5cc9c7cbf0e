import pytest

from parcel_tracking_proxy.api.trackingmore import TrackingMoreAdapter, normalize_trackingmore
from parcel_tracking_proxy.errors import ProviderRecoverableError
from parcel_tracking_proxy.models import RecoverableError, Success, TrackingRequest

TN = "RB123456785CN"


def test_get_trackings_is_normalized(provider_config, fake_transport, fake_response, payloads):
    cfg = provider_config("trackingmore", TRACKINGMORE_API_KEY="tmk")
    t = fake_transport(fake_response(200, payloads.trackingmore(TN)))

    out = TrackingMoreAdapter(t).call(TrackingRequest(TN), cfg)

    assert isinstance(out, Success)
    res = out.result
    assert res.provider == "trackingmore"
    assert res.carrier_slug == "china-post"
    assert res.carrier_name == "CHINA-POST"
    assert res.status == "transit"
    # origin checkpoints first, then destination checkpoints
    assert [e.location for e in res.events] == ["Shenzhen", "Roma"]

    call = t.calls[0]
    assert call["url"] == "https://api.trackingmore.com/v4/trackings/get"
    assert call["headers"]["Tracking-Api-Key"] == "tmk"
    assert call["params"]["tracking_numbers"] == TN


def test_empty_data_is_no_data():
    with pytest.raises(ProviderRecoverableError):
        normalize_trackingmore({"meta": {"code": 200}, "data": []}, tracking_id=TN)


def test_server_error_with_fallback_is_recoverable(provider_config, fake_transport, fake_response):
    cfg = provider_config("trackingmore", TRACKINGMORE_API_KEY="tmk")
    t = fake_transport(fake_response(500, "Internal Server Error"))
    out = TrackingMoreAdapter(t).call(TrackingRequest(TN), cfg, has_fallback=True)
    assert isinstance(out, RecoverableError)
    assert "HTTP 500" in out.reason
