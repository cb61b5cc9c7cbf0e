from __future__ import annotations

import logging
from typing import Mapping, Optional, Sequence

from parcel_tracking_proxy.api.base import ProviderAdapter
from parcel_tracking_proxy.errors import ProviderFatalError, ProviderUnavailableError
from parcel_tracking_proxy.models import (
    FatalError,
    ProviderConfig,
    RecoverableError,
    ShipmentResult,
    Success,
    TrackingRequest,
)

UNAVAILABLE_HINT = (
    "Every configured provider failed for this tracking code; "
    "check provider quotas and credentials, or configure another provider"
)


class FallbackOrchestrator:
    """Try providers one after another until one returns a shipment.

    - Success: returned at once; later candidates are never contacted and
      results are never merged.
    - RecoverableError: move on; on the last candidate the chain is exhausted
      (502 "No tracking provider available").
    - FatalError: returned at once for an explicitly requested provider;
      in auto mode the chain moves on while candidates remain and the last
      candidate's fatal error is what the caller sees.

    Attempts are strictly sequential. Each `resolve` call keeps its state
    local, so one orchestrator can serve any number of requests.
    """

    def __init__(self, adapters: Mapping[str, ProviderAdapter], *, logger: Optional[logging.Logger] = None) -> None:
        self.adapters = adapters
        self.logger = logger or logging.getLogger("parcel_tracking_proxy.resolution")

    def resolve(self, request: TrackingRequest, order: Sequence[ProviderConfig]) -> ShipmentResult:
        if not order:
            raise ProviderUnavailableError(
                "No tracking provider available", status=502, hint=UNAVAILABLE_HINT)

        last_index = len(order) - 1
        for idx, config in enumerate(order):
            is_last = idx == last_index
            adapter = self.adapters.get(config.name)
            if adapter is None:
                # a config without adapter can only come from a wiring mistake
                raise KeyError(f"no adapter registered for provider {config.name!r}")

            outcome = adapter.call(request, config, has_fallback=not is_last)

            if isinstance(outcome, Success):
                self.logger.info(
                    "provider=%s outcome=success tracking=%s events=%d",
                    config.name, request.tracking_id, len(outcome.result.events),
                )
                return outcome.result

            if isinstance(outcome, RecoverableError):
                self.logger.warning(
                    "provider=%s outcome=recoverable upstream_status=%s reason=%s",
                    config.name, outcome.upstream_status or "-", outcome.reason,
                )
                if is_last:
                    raise ProviderUnavailableError(
                        "No tracking provider available", status=502, hint=UNAVAILABLE_HINT)
                continue

            if isinstance(outcome, FatalError):
                self.logger.warning(
                    "provider=%s outcome=fatal status=%s message=%s",
                    config.name, outcome.http_status, outcome.message,
                )
                if request.explicit or is_last:
                    raise ProviderFatalError(
                        outcome.message, status=outcome.http_status, hint=outcome.hint)
                continue

            raise TypeError(f"unexpected attempt outcome: {outcome!r}")

        # unreachable: the last candidate always returns or raises above
        raise ProviderUnavailableError(
            "No tracking provider available", status=502, hint=UNAVAILABLE_HINT)
