# src/parcel_tracking_proxy/cli.py
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .config.env import EnvError, load_proxy_env
from .config.logging_config import ROOT_LOGGER_NAME, get_logger
from .errors import ConfigurationError, TrackingError, ValidationError


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="parcel-tracking-proxy",
        description="Tracking proxy that keeps provider API keys server-side.",
    )
    p.add_argument(
        "--no-console",
        action="store_true",
        help="Disable console logging (file logging remains).",
    )
    p.add_argument(
        "--log-level",
        default=None,
        help="Logging level (DEBUG, INFO, WARNING, ERROR). Default: LOG_LEVEL or INFO",
    )
    p.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs to this file (rotating). Default: LOG_FILE if set.",
    )
    p.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Load variables from this .env file instead of searching for one.",
    )

    sub = p.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP proxy.")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=3000)
    serve.add_argument("--debug", action="store_true", help="Flask debug mode (never in production).")

    lookup = sub.add_parser("lookup", help="Resolve one tracking code and print the JSON result.")
    lookup.add_argument("tracking", help="Tracking code to look up.")
    lookup.add_argument(
        "--provider",
        default=None,
        help="auto or a provider name (parcelsapp, trackingmore, ups, 17track). Default: TRACKING_PROVIDER",
    )
    lookup.add_argument("--destination-country", default=None)
    lookup.add_argument("--language", default=None)
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logger = get_logger(
        ROOT_LOGGER_NAME,
        level=args.log_level,
        console=not args.no_console,
        log_file=args.log_file,
    )
    logger.debug("Logger initialized.")

    try:
        proxy_env = load_proxy_env(args.env_file)
    except EnvError as e:
        logger.error("Environment error: %s", e)
        return 2
    logger.info(
        "Configured providers: %s (mode=%s)",
        ", ".join(c.name for c in proxy_env.configured()) or "none",
        proxy_env.tracking_provider,
    )

    if args.command == "serve":
        from .server.app import create_app

        app = create_app(proxy_env, logger=logger)
        logger.info("Serving on http://%s:%s/api/track", args.host, args.port)
        app.run(host=args.host, port=args.port, debug=args.debug and not proxy_env.is_production)
        return 0

    from .resolution.service import TrackingService, build_request

    try:
        request = build_request(
            args.tracking,
            destination_country=args.destination_country,
            language=args.language,
            provider=args.provider or proxy_env.tracking_provider,
        )
        result = TrackingService(proxy_env, logger=logger).lookup(request)
    except (ValidationError, ConfigurationError) as e:
        logger.error("%s", e.message)
        if e.hint:
            logger.error("hint: %s", e.hint)
        return 2
    except TrackingError as e:
        logger.error("Lookup failed (%s): %s", e.status, e.message)
        return 1

    print(json.dumps(result.to_payload(), ensure_ascii=False, indent=2))
    logger.info("Done.")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
