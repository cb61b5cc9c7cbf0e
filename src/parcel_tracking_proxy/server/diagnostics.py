from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from parcel_tracking_proxy.api.transport import RequestsTransport
from parcel_tracking_proxy.config.env import CREDENTIAL_KEYS
from parcel_tracking_proxy.models import ProviderConfig, ProxyEnv

PROBE_TIMEOUT = 5.0

_logger = logging.getLogger("parcel_tracking_proxy.diagnostics")


def probe(config: ProviderConfig, transport: RequestsTransport, *, timeout: float = PROBE_TIMEOUT) -> Dict[str, Any]:
    """
    Reachability of the provider's base URL. Any HTTP answer (even 401/404)
    counts as reachable; only a transport failure does not.
    """
    try:
        resp = transport.get(config.base_url, timeout=timeout)
    except requests.RequestException as ex:
        _logger.info("probe %s failed: %s", config.name, ex)
        return {"reachable": False, "error": type(ex).__name__}
    return {"reachable": True, "httpStatus": resp.status_code}


def diagnostic_report(
    proxy_env: ProxyEnv,
    transport: Optional[RequestsTransport] = None,
) -> Dict[str, Any]:
    """Configuration/connectivity status. Never looks up a tracking code."""
    providers = []
    for cfg in proxy_env.providers:
        entry: Dict[str, Any] = {
            "name": cfg.name,
            "credentialsPresent": cfg.credentials_present,
            "baseUrl": cfg.base_url,
            "priority": cfg.priority,
        }
        if cfg.credentials_present and transport is not None:
            entry.update(probe(cfg, transport))
        else:
            entry["reachable"] = None
            if not cfg.credentials_present:
                entry["missing"] = [k for k in CREDENTIAL_KEYS.get(cfg.name, ()) if not cfg.credential(k)]
        providers.append(entry)

    return {
        "mode": "test",
        "trackingProvider": proxy_env.tracking_provider,
        "mockData": proxy_env.mock_enabled,
        "environment": proxy_env.app_env,
        "configured": [c.name for c in proxy_env.configured()],
        "providers": providers,
    }
