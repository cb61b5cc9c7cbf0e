# src/parcel_tracking_proxy/api/decode.py
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional

_PREVIEW_LIMIT = 4000


@dataclass(frozen=True)
class DecodedBody:
    """A response body: parsed JSON when possible, the raw text otherwise."""

    status: Optional[int]
    data: Any
    text: str
    is_json: bool

    @property
    def ok(self) -> bool:
        return self.status is not None and 200 <= self.status < 300

    def as_dict(self) -> dict:
        return self.data if isinstance(self.data, dict) else {}


def decode_body(resp) -> DecodedBody:
    """Try JSON first, fall back to the raw text. Never raises on bad JSON."""
    status = getattr(resp, "status_code", None)
    text = getattr(resp, "text", "") or ""
    if not text.strip():
        return DecodedBody(status=status, data=None, text=text, is_json=False)
    try:
        return DecodedBody(status=status, data=json.loads(text), text=text, is_json=True)
    except ValueError:
        return DecodedBody(status=status, data=text, text=text, is_json=False)


def preview(text: Optional[str], limit: int = _PREVIEW_LIMIT) -> str:
    """Truncate a body for DEBUG logging."""
    if not text:
        return ""
    return (text[:limit] + "...") if len(text) > limit else text
