# src/parcel_tracking_proxy/config/env.py
from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Mapping, Optional, Tuple

from parcel_tracking_proxy.models import (
    AUTO,
    PARCELSAPP,
    PROVIDER_PRIORITY,
    TRACK17,
    TRACKINGMORE,
    UPS,
    ProviderConfig,
    ProxyEnv,
)

try:
    # De facto standard for .env files
    from dotenv import load_dotenv, find_dotenv  # type: ignore
except Exception as e:  # pragma: no cover
    raise RuntimeError(
        "Missing dependency 'python-dotenv'. Install it with:\n"
        "  pip install python-dotenv"
    ) from e


# --- Public contract ---------------------------------------------------------

class EnvError(RuntimeError):
    """Raised when the environment cannot drive any provider."""


DEFAULT_BASES: Dict[str, str] = {
    PARCELSAPP: "https://parcelsapp.com/api/v3",
    TRACKINGMORE: "https://api.trackingmore.com/v4",
    UPS: "https://onlinetools.ups.com",
    TRACK17: "https://api.17track.net/track/v2.2",
}

# Env var that overrides each provider's base URL
BASE_URL_KEYS: Dict[str, str] = {
    PARCELSAPP: "PARCELS_API_BASE",
    TRACKINGMORE: "TRACKINGMORE_API_BASE",
    UPS: "UPS_API_BASE",
    TRACK17: "TRACK17_API_BASE",
}

# All listed keys must be set for the provider to count as credentialed
CREDENTIAL_KEYS: Dict[str, Tuple[str, ...]] = {
    PARCELSAPP: ("PARCELS_API_TOKEN",),
    TRACKINGMORE: ("TRACKINGMORE_API_KEY",),
    UPS: ("UPS_ACCESS_KEY", "UPS_USER_ID", "UPS_PASSWORD"),
    TRACK17: ("TRACK17_API_KEY",),
}

_TRUTHY = {"1", "true", "yes", "on"}


def load_project_dotenv(*, override: bool = False) -> Path:
    """
    Load variables from the nearest `.env` file, searching upward from the CWD.
    Does NOT override existing env vars unless `override=True`.
    Returns the resolved Path to the .env file if found; otherwise Path().
    """
    dotenv_str = find_dotenv(filename=".env", usecwd=True)
    if not dotenv_str:
        return Path()
    dotenv_path = Path(dotenv_str)
    if dotenv_path.is_dir():
        return Path()

    load_dotenv(dotenv_path=dotenv_path, override=override)
    return dotenv_path.resolve()


def is_truthy(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in _TRUTHY


def load_env(dotenv_path: Optional[Path] = None, *, override: bool = False) -> Path:
    """
    Load a .env file into the process environment.

    - If `dotenv_path` is provided, load exactly that file (missing file is ignored).
    - Otherwise, auto-discover the nearest .env via `load_project_dotenv`.
    Returns the path that was loaded, or Path() when none was.
    """
    if dotenv_path:
        path = Path(dotenv_path)
        if path.exists():
            load_dotenv(dotenv_path=path, override=override)
            return path.resolve()
        return Path()
    return load_project_dotenv(override=override)


def build_provider_configs(environ: Mapping[str, str]) -> Tuple[ProviderConfig, ...]:
    """One immutable ProviderConfig per known provider, in policy order."""
    configs = []
    for priority, name in enumerate(PROVIDER_PRIORITY):
        keys = CREDENTIAL_KEYS[name]
        creds = {k: (environ.get(k) or "").strip() for k in keys}
        base = (environ.get(BASE_URL_KEYS[name]) or "").strip() or DEFAULT_BASES[name]
        configs.append(
            ProviderConfig(
                name=name,
                credentials_present=all(creds.values()),
                base_url=base.rstrip("/"),
                priority=priority,
                credentials=creds,
            )
        )
    return tuple(configs)


def missing_credentials_hint(names: Tuple[str, ...] = PROVIDER_PRIORITY) -> str:
    """Human-readable pointer at the variables that would enable `names`."""
    parts = [" + ".join(CREDENTIAL_KEYS[n]) for n in names]
    return "Set " + " or ".join(parts)


def get_proxy_env(environ: Optional[Mapping[str, str]] = None, *, strict: bool = False) -> ProxyEnv:
    """
    Collect every setting the proxy reads into one frozen ProxyEnv.

    - `environ` defaults to os.environ (tests pass a plain dict).
    - When `strict=True`, raise EnvError if no provider is credentialed.
    """
    src: Mapping[str, str] = os.environ if environ is None else environ

    providers = build_provider_configs(src)
    requested = (src.get("TRACKING_PROVIDER") or AUTO).strip().lower() or AUTO

    raw_timeout = (src.get("HTTP_TIMEOUT") or "").strip()
    try:
        timeout = float(raw_timeout) if raw_timeout else 30.0
    except ValueError as e:
        raise EnvError(f"HTTP_TIMEOUT must be a number of seconds, got {raw_timeout!r}") from e
    if timeout <= 0:
        raise EnvError(f"HTTP_TIMEOUT must be greater than zero, got {raw_timeout!r}")

    cfg = ProxyEnv(
        providers=providers,
        tracking_provider=requested,
        use_mock_data=is_truthy(src.get("USE_MOCK_DATA")),
        app_env=(src.get("APP_ENV") or "production").strip() or "production",
        http_timeout=timeout,
    )

    if strict and not cfg.configured():
        raise EnvError(
            "No tracking provider credentials found. " + missing_credentials_hint())
    return cfg


def load_proxy_env(
    dotenv_path: Path | str | None = ".env",
    *,
    strict: bool = False,
) -> ProxyEnv:
    """
    Load the .env file (if any) and return the typed settings object.

    - `dotenv_path` may be a Path/str pointing to a specific .env file or None to
      auto-discover one.
    - Existing process env wins over the file (CI/host settings take priority).
    """
    load_env(Path(dotenv_path) if dotenv_path else None, override=False)
    return get_proxy_env(strict=strict)


__all__ = [
    "EnvError",
    "DEFAULT_BASES",
    "BASE_URL_KEYS",
    "CREDENTIAL_KEYS",
    "load_project_dotenv",
    "load_env",
    "is_truthy",
    "build_provider_configs",
    "missing_credentials_hint",
    "get_proxy_env",
    "load_proxy_env",
]
