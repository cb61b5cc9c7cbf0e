from __future__ import annotations

from typing import Any, Dict, Optional
import requests
from requests.adapters import HTTPAdapter

DEFAULT_TIMEOUT = 30.0


class RequestsTransport:
    """Requests session wrapper with a bounded per-call timeout.

    Automatic retries are disabled: a failed call is reported to the caller,
    which decides whether another provider should be tried.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.session = requests.Session()
        self.timeout = timeout

        adapter = HTTPAdapter(max_retries=0)
        self.session.mount("https://", adapter)
        self.session.mount("http://", adapter)

    def post(
        self,
        url: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        data: Any = None,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        auth: Any = None,
        timeout: Optional[float] = None,
    ):
        return self.session.post(
            url,
            headers=headers,
            data=data,
            json=json,
            params=params,
            auth=auth,
            timeout=timeout or self.timeout,
        )

    def get(
        self,
        url: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ):
        return self.session.get(url, headers=headers, params=params, timeout=timeout or self.timeout)
