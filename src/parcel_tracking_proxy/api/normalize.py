# src/parcel_tracking_proxy/api/normalize.py
"""
Field-picking helpers shared by the provider adapters.

Providers disagree on field names, nesting and types. These helpers pick the
first usable value and always hand back a string, so adapters can map payloads
onto TrackingEvent / ShipmentResult without sprinkling None checks everywhere.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional


def as_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value).strip()
    return ""


def first_str(obj: Any, *keys: str) -> str:
    """Return the first non-empty string under any of `keys` (in order)."""
    if not isinstance(obj, dict):
        return ""
    for key in keys:
        val = as_str(obj.get(key))
        if val:
            return val
    return ""


def dig(obj: Any, *path: Any) -> Any:
    """Walk nested dicts/lists; None as soon as a step is missing."""
    cur = obj
    for step in path:
        if isinstance(step, int):
            if not isinstance(cur, list) or len(cur) <= step:
                return None
            cur = cur[step]
        else:
            if not isinstance(cur, dict):
                return None
            cur = cur.get(step)
    return cur


def dict_list(value: Any) -> List[Dict[str, Any]]:
    """Keep only the dict items of a list; anything else becomes []."""
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, dict)]


def join_location(*parts: Optional[str]) -> str:
    return ", ".join(p.strip() for p in parts if p and p.strip())


def location_from(value: Any) -> str:
    """
    Locations arrive as plain strings or as address dicts
    (city/state/country in a handful of spellings).
    """
    if isinstance(value, str):
        return value.strip()
    if not isinstance(value, dict):
        return ""
    addr = value.get("address") if isinstance(value.get("address"), dict) else value
    return join_location(
        first_str(addr, "city", "City"),
        first_str(addr, "stateProvince", "state", "State", "province"),
        first_str(addr, "countryCode", "country", "Country", "country_iso2"),
    )


def iso_from_compact(date: str, time: str = "") -> str:
    """
    `20240110` + `083000` -> `2024-01-10T08:30:00`. Anything that doesn't look
    compact is returned unchanged; no clock is consulted.
    """
    d = (date or "").strip()
    t = (time or "").strip()
    if len(d) != 8 or not d.isdigit():
        return d
    out = f"{d[0:4]}-{d[4:6]}-{d[6:8]}"
    if len(t) >= 4 and t[:6].isdigit():
        t = t[:6].ljust(6, "0")
        out += f"T{t[0:2]}:{t[2:4]}:{t[4:6]}"
    return out

