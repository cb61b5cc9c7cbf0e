# src/parcel_tracking_proxy/server/app.py
from __future__ import annotations

import logging
import traceback
import typing

import flask
from werkzeug.exceptions import HTTPException

from parcel_tracking_proxy.api.transport import RequestsTransport
from parcel_tracking_proxy.config.env import get_proxy_env, is_truthy
from parcel_tracking_proxy.config.logging_config import ensure_package_logger
from parcel_tracking_proxy.errors import TrackingError
from parcel_tracking_proxy.models import ProxyEnv
from parcel_tracking_proxy.resolution.service import TrackingService, build_request

from .diagnostics import diagnostic_report
from .mock import mock_shipment

EXTENSION_KEY = "parcel_tracking_proxy"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def create_app(
    proxy_env: typing.Optional[ProxyEnv] = None,
    *,
    service: typing.Optional[TrackingService] = None,
    probe_transport: typing.Optional[RequestsTransport] = None,
    logger: typing.Optional[logging.Logger] = None,
) -> flask.Flask:
    """
    Build the proxy app. Configuration is read once here and shared read-only
    by every request; nothing else is kept between requests.
    """
    proxy_env = proxy_env or get_proxy_env()
    log = logger or ensure_package_logger().getChild("server")
    service = service or TrackingService(proxy_env, logger=log)
    probe_transport = probe_transport or RequestsTransport()

    if proxy_env.use_mock_data and proxy_env.is_production:
        log.warning("USE_MOCK_DATA is set but APP_ENV=%s; mock data disabled", proxy_env.app_env)

    app = flask.Flask(__name__)
    app.extensions[EXTENSION_KEY] = {
        "env": proxy_env,
        "service": service,
        "probe_transport": probe_transport,
    }

    @app.after_request
    def add_cors_headers(response: flask.Response) -> flask.Response:
        for key, value in CORS_HEADERS.items():
            response.headers[key] = value
        return response

    @app.errorhandler(TrackingError)
    def handle_tracking_error(err: TrackingError) -> typing.Tuple[flask.Response, int]:
        log.info("request failed status=%s error=%s", err.status, err.message)
        return flask.jsonify(err.to_payload()), err.status

    @app.errorhandler(Exception)
    def handle_unexpected(err: Exception):
        if isinstance(err, HTTPException):
            return err
        log.exception("Unhandled error while tracking: %s", err)
        body: typing.Dict[str, typing.Any] = {"error": str(err) or type(err).__name__}
        if not proxy_env.is_production:
            body["trace"] = traceback.format_exc()
        return flask.jsonify(body), 500

    @app.route("/api/track", methods=["GET", "OPTIONS"])
    def api_track() -> typing.Tuple[typing.Any, int]:
        if flask.request.method == "OPTIONS":
            return "", 200

        args = flask.request.args
        if is_truthy(args.get("test")):
            return flask.jsonify(diagnostic_report(proxy_env, probe_transport)), 200

        request = build_request(
            args.get("tracking"),
            destination_country=args.get("destinationCountry"),
            language=args.get("language"),
            provider=proxy_env.tracking_provider,
        )

        if proxy_env.mock_enabled:
            log.info("mock data for tracking=%s", request.tracking_id)
            return flask.jsonify(mock_shipment(request.tracking_id).to_payload()), 200

        result = service.lookup(request)
        return flask.jsonify(result.to_payload()), 200

    @app.route("/health", methods=["GET"])
    def health() -> typing.Tuple[flask.Response, int]:
        return flask.jsonify(
            status="ok",
            providers=[c.name for c in proxy_env.configured()],
        ), 200

    return app
