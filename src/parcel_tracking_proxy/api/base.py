from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from parcel_tracking_proxy.errors import (
    ProviderFatalError,
    ProviderRecoverableError,
    UpstreamTimeout,
)
from parcel_tracking_proxy.models import (
    AttemptOutcome,
    FatalError,
    ProviderConfig,
    RecoverableError,
    ShipmentResult,
    Success,
    TrackingRequest,
)

from .decode import DecodedBody, decode_body, preview
from .transport import RequestsTransport


class ProviderAdapter:
    """Base for one tracking provider.

    Subclasses implement `track()`, which either returns a ShipmentResult or
    raises one of the adapter signals:

    - ProviderRecoverableError / UpstreamTimeout: this provider can't help,
      try the next one.
    - ProviderFatalError: stop here with the given status.

    `call()` turns those into an AttemptOutcome for the orchestrator. When no
    other candidate remains, a timeout becomes FatalError(504).
    """

    name: str = ""

    def __init__(
        self,
        transport: Optional[RequestsTransport] = None,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.transport = transport or RequestsTransport()
        self.logger: logging.Logger = logger or logging.getLogger(
            f"parcel_tracking_proxy.api.{self.name or 'provider'}"
        )

    # --- contract ---------------------------------------------------------------

    def call(self, request: TrackingRequest, config: ProviderConfig, *, has_fallback: bool = False) -> AttemptOutcome:
        try:
            result = self.track(request, config, has_fallback=has_fallback)
        except UpstreamTimeout as ex:
            if has_fallback:
                return RecoverableError(ex.reason)
            return FatalError(504, "upstream timeout")
        except ProviderRecoverableError as ex:
            return RecoverableError(ex.reason, ex.upstream_status)
        except ProviderFatalError as ex:
            return FatalError(ex.status, ex.message, ex.hint)
        return Success(result)

    def track(self, request: TrackingRequest, config: ProviderConfig, *, has_fallback: bool = False) -> ShipmentResult:
        raise NotImplementedError

    # --- helpers for subclasses -------------------------------------------------

    def _send(self, method: str, url: str, **kwargs: Any) -> DecodedBody:
        """Perform one HTTP call and decode the body; network trouble becomes a signal."""
        self.logger.debug("%s %s %s", self.name, method, url)
        try:
            if method == "POST":
                resp = self.transport.post(url, **kwargs)
            else:
                resp = self.transport.get(url, **kwargs)
        except requests.Timeout as ex:
            self.logger.warning("%s request timed out: %s", self.name, url)
            raise UpstreamTimeout(f"{self.name} timed out") from ex
        except requests.RequestException as ex:
            self.logger.warning("%s transport failure for %s: %s", self.name, url, ex)
            raise ProviderRecoverableError(f"{self.name} unreachable: {ex}") from ex

        body = decode_body(resp)
        self.logger.debug(
            "%s %s %s status=%s response_body=%s",
            self.name, method, url, body.status, preview(body.text),
        )
        return body

    def _request(self, method: str, url: str, *, has_fallback: bool, **kwargs: Any) -> DecodedBody:
        """
        Single-call semantics: a network failure or non-2xx is recoverable while
        another candidate remains, fatal (with the upstream status) otherwise.
        """
        try:
            body = self._send(method, url, **kwargs)
        except UpstreamTimeout:
            raise
        except ProviderRecoverableError as ex:
            if has_fallback:
                raise
            raise ProviderFatalError(ex.reason, status=502) from ex

        if not body.ok:
            reason = f"{self.name} returned HTTP {body.status}"
            detail = _error_text(body)
            if detail:
                reason = f"{reason}: {detail}"
            if has_fallback:
                raise ProviderRecoverableError(reason, upstream_status=body.status)
            raise ProviderFatalError(reason, status=body.status or 502)
        return body


def _error_text(body: DecodedBody) -> str:
    data: Dict[str, Any] = body.as_dict()
    for key in ("error", "message", "detail", "error_description"):
        val = data.get(key)
        if isinstance(val, str) and val.strip():
            return val.strip()
    if not body.is_json and body.text:
        return preview(body.text, 200)
    return ""
