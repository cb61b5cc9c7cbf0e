from __future__ import annotations

import logging
from typing import Dict, Optional

from parcel_tracking_proxy.api.base import ProviderAdapter
from parcel_tracking_proxy.api.registry import build_adapters
from parcel_tracking_proxy.api.transport import RequestsTransport
from parcel_tracking_proxy.errors import ValidationError
from parcel_tracking_proxy.models import ProxyEnv, ShipmentResult, TrackingRequest

from .orchestrator import FallbackOrchestrator
from .selector import select_order


def build_request(
    tracking: Optional[str],
    *,
    destination_country: Optional[str] = None,
    language: Optional[str] = None,
    provider: Optional[str] = None,
) -> TrackingRequest:
    """Validate raw inputs into a TrackingRequest (blank tracking -> ValidationError)."""
    tracking_id = (tracking or "").strip()
    if not tracking_id:
        raise ValidationError("tracking query parameter required")
    return TrackingRequest(
        tracking_id=tracking_id,
        destination_country=(destination_country or "").strip() or None,
        language=(language or "").strip() or "en",
        requested_provider=(provider or "auto").strip().lower() or "auto",
    )


class TrackingService:
    """Selector + orchestrator over the process-wide provider configuration."""

    def __init__(
        self,
        proxy_env: ProxyEnv,
        adapters: Optional[Dict[str, ProviderAdapter]] = None,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.env = proxy_env
        self.logger = logger or logging.getLogger("parcel_tracking_proxy.service")
        self.adapters = adapters if adapters is not None else build_adapters(
            RequestsTransport(timeout=proxy_env.http_timeout))
        self.orchestrator = FallbackOrchestrator(self.adapters, logger=self.logger)

    def lookup(self, request: TrackingRequest) -> ShipmentResult:
        order = select_order(self.env.providers, request.requested_provider)
        self.logger.info(
            "lookup tracking=%s mode=%s order=%s",
            request.tracking_id,
            request.requested_provider,
            ",".join(c.name for c in order),
        )
        return self.orchestrator.resolve(request, order)
