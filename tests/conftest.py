import json
import logging
from typing import Any, List

import pytest

from parcel_tracking_proxy.config.env import build_provider_configs
from parcel_tracking_proxy.config.logging_config import ROOT_LOGGER_NAME
from parcel_tracking_proxy.models import ProxyEnv

PROVIDER_ENV_KEYS = (
    "PARCELS_API_TOKEN", "PARCELS_API_BASE",
    "TRACKINGMORE_API_KEY", "TRACKINGMORE_API_BASE",
    "UPS_ACCESS_KEY", "UPS_USER_ID", "UPS_PASSWORD", "UPS_API_BASE",
    "TRACK17_API_KEY", "TRACK17_API_BASE",
    "TRACKING_PROVIDER", "USE_MOCK_DATA", "APP_ENV", "HTTP_TIMEOUT",
    "LOG_LEVEL", "LOG_FILE",
)


class FakeResponse:
    """Just enough of requests.Response for the adapters."""

    def __init__(self, status_code: int = 200, body: Any = None) -> None:
        self.status_code = status_code
        if body is None:
            self.text = ""
        elif isinstance(body, str):
            self.text = body
        else:
            self.text = json.dumps(body)

    def json(self):
        return json.loads(self.text)


class FakeTransport:
    """
    Replays queued responses in call order and records every call.
    Queue an Exception instance to have that call raise it.
    """

    def __init__(self, *responses: Any) -> None:
        self.queue: List[Any] = list(responses)
        self.calls: List[dict] = []

    def _next(self, method: str, url: str, kwargs: dict):
        self.calls.append({"method": method, "url": url, **kwargs})
        if not self.queue:
            raise AssertionError(f"unexpected {method} {url}: no response queued")
        item = self.queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def post(self, url, **kwargs):
        return self._next("POST", url, kwargs)

    def get(self, url, **kwargs):
        return self._next("GET", url, kwargs)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    # setenv first so teardown also removes anything a test loads from a .env file
    for key in PROVIDER_ENV_KEYS:
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)


@pytest.fixture
def bare_package_logger():
    """The package logger with no handlers or level, restored afterwards."""
    lg = logging.getLogger(ROOT_LOGGER_NAME)
    saved = (list(lg.handlers), lg.level, lg.propagate)
    lg.handlers = []
    lg.setLevel(logging.NOTSET)
    yield lg
    lg.handlers, lg.propagate = saved[0], saved[2]
    lg.setLevel(saved[1])


@pytest.fixture
def make_env():
    def _make(app_env: str = "test", **environ: str) -> ProxyEnv:
        return ProxyEnv(
            providers=build_provider_configs(environ),
            tracking_provider=environ.get("TRACKING_PROVIDER", "auto"),
            use_mock_data=environ.get("USE_MOCK_DATA", "") == "true",
            app_env=app_env,
        )
    return _make


@pytest.fixture
def provider_config(make_env):
    def _config(name: str, **environ: str):
        env = make_env(**environ)
        cfg = env.provider(name)
        assert cfg is not None
        return cfg
    return _config


@pytest.fixture
def fake_response():
    return FakeResponse


@pytest.fixture
def fake_transport():
    return FakeTransport


# --- canned provider payloads ---------------------------------------------------

def parcels_result_body(tracking_id: str = "ABC123") -> dict:
    return {
        "done": True,
        "fromCache": True,
        "shipments": [
            {
                "trackingId": tracking_id,
                "status": "transit",
                "origin": "China",
                "destination": "Italy",
                "detectedCarrier": {"name": "China Post", "slug": "china-post"},
                "states": [
                    {"date": "2024-01-12T09:00:00Z", "status": "Arrived at sorting center", "location": "Milano"},
                    {"date": "2024-01-10T08:00:00Z", "status": "Accepted", "location": "Shenzhen"},
                ],
            }
        ],
    }


def ups_details_body(tracking_id: str = "1Z999AA10123456784") -> dict:
    return {
        "trackResponse": {
            "shipment": [
                {
                    "package": [
                        {
                            "trackingNumber": tracking_id,
                            "currentStatus": {"description": "Delivered", "code": "011"},
                            "packageAddress": [
                                {"type": "ORIGIN", "address": {"city": "ATLANTA", "stateProvince": "GA", "countryCode": "US"}},
                                {"type": "DESTINATION", "address": {"city": "NEW YORK", "stateProvince": "NY", "countryCode": "US"}},
                            ],
                            "activity": [
                                {
                                    "date": "20240112",
                                    "time": "143000",
                                    "status": {"type": "D", "description": "Delivered", "code": "KB"},
                                    "location": {"address": {"city": "NEW YORK", "stateProvince": "NY", "countryCode": "US"}},
                                },
                                {
                                    "date": "20240110",
                                    "time": "080000",
                                    "status": {"type": "M", "description": "Shipper created a label", "code": "MP"},
                                    "location": {"address": {"countryCode": "US"}},
                                },
                            ],
                        }
                    ]
                }
            ]
        }
    }


def track17_body(number: str = "ABC123") -> dict:
    return {
        "code": 0,
        "data": {
            "accepted": [
                {
                    "number": number,
                    "track_info": {
                        "latest_status": {"status": "InTransit"},
                        "shipping_info": {
                            "shipper_address": {"country": "CN"},
                            "recipient_address": {"country": "IT"},
                        },
                        "tracking": {
                            "providers": [
                                {
                                    "provider": {"key": 3011, "name": "China Post", "alias": "china-post"},
                                    "events": [
                                        {"time_iso": "2024-01-11T10:00:00+08:00", "description": "Departed", "location": "Shenzhen", "stage": "InTransit"},
                                        {"time_iso": "2024-01-10T09:00:00+08:00", "description": "Posted", "location": "Shenzhen", "stage": "InfoReceived"},
                                    ],
                                }
                            ]
                        },
                    },
                }
            ],
            "rejected": [],
        },
    }


def trackingmore_body(number: str = "RB123456785CN") -> dict:
    return {
        "meta": {"code": 200, "message": "Request response is successful"},
        "data": [
            {
                "tracking_number": number,
                "courier_code": "china-post",
                "delivery_status": "transit",
                "origin_country": "CN",
                "destination_country": "IT",
                "origin_info": {
                    "trackinfo": [
                        {"checkpoint_date": "2024-01-11T10:00:00+08:00", "tracking_detail": "Departed", "location": "Shenzhen", "checkpoint_delivery_status": "transit"},
                    ]
                },
                "destination_info": {
                    "trackinfo": [
                        {"checkpoint_date": "2024-01-15T08:00:00+01:00", "tracking_detail": "Arrived", "location": "Roma", "checkpoint_delivery_status": "transit"},
                    ]
                },
            }
        ],
    }


@pytest.fixture
def payloads():
    class _Payloads:
        parcels_result = staticmethod(parcels_result_body)
        ups_details = staticmethod(ups_details_body)
        track17 = staticmethod(track17_body)
        trackingmore = staticmethod(trackingmore_body)
    return _Payloads
