"""Shared HTTP transport for the snapshot API adapter.

A thin wrapper around ``requests.Session`` so the adapter gets one timeout
policy, one retry loop for connectivity failures, and optional API-key
headers.

Dependencies:
    - ``requests`` for network I/O.
    - ``snapview.adapters.api_errors.ApiTimeoutError`` for typed transport failures.

Call context:
    Constructed by ``snapview.adapters.snapshot_rest.SnapshotRestAdapter``;
    use cases only ever see the ``SnapshotPort`` protocol.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests
from requests import exceptions as req_exc

from snapview.adapters.api_errors import ApiTimeoutError

LOGGER = logging.getLogger(__name__)


@dataclass
class HttpConfig:
    """Timeout and retry configuration for adapter HTTP calls.

    Attributes:
        request_timeout_s: Default timeout in seconds for API calls.
        retries: Number of retry attempts after the initial request.
    """
    request_timeout_s: int = 10
    retries: int = 2


class RetryingSession:
    """Shared requests wrapper with API-key headers and retry loops.

    Transport-only: callers decide how to map non-2xx responses. Only
    timeouts and connection errors are retried; HTTP errors are returned.
    """

    def __init__(self, api_key: Optional[str], cfg: HttpConfig) -> None:
        self.session = requests.Session()
        self.api_key = api_key
        self.cfg = cfg

    def _headers(self, accept: str = "application/json") -> Dict[str, str]:
        headers = {"Accept": accept}
        if self.api_key:
            headers["X-API-Key"] = self.api_key
        return headers

    def get(
        self,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        accept: str = "application/json",
        timeout: Optional[int] = None,
    ) -> requests.Response:
        """Send a GET request with retries on timeout/connectivity failures.

        Raises:
            ApiTimeoutError: If all attempts fail with timeout/connection errors.
        """
        context = f"GET {url}"
        last_err: ApiTimeoutError | None = None
        for attempt in range(self.cfg.retries + 1):
            try:
                return self.session.get(
                    url,
                    params=params,
                    headers=self._headers(accept=accept),
                    timeout=timeout or self.cfg.request_timeout_s,
                )
            except (req_exc.Timeout, req_exc.ConnectionError) as exc:
                LOGGER.debug("%s attempt %d failed: %s", context, attempt + 1, exc)
                last_err = ApiTimeoutError(f"Timeout contacting {url}", context=context)
        raise last_err

    def post_multipart(
        self,
        url: str,
        *,
        files: Dict[str, Any],
        timeout: Optional[int] = None,
    ) -> requests.Response:
        """Send a multipart POST request, rewinding file handles between attempts.

        Raises:
            ApiTimeoutError: If all attempts fail with timeout/connection errors.
        """
        context = f"POST {url}"
        last_err: ApiTimeoutError | None = None
        for attempt in range(self.cfg.retries + 1):
            # Each attempt must send the full payload from offset 0.
            for value in files.values():
                handle = value[1] if isinstance(value, tuple) and len(value) >= 2 else value
                if hasattr(handle, "seek"):
                    handle.seek(0)
            try:
                return self.session.post(
                    url,
                    files=files,
                    headers=self._headers(),
                    timeout=timeout or self.cfg.request_timeout_s,
                )
            except (req_exc.Timeout, req_exc.ConnectionError) as exc:
                LOGGER.debug("%s attempt %d failed: %s", context, attempt + 1, exc)
                last_err = ApiTimeoutError(f"Timeout contacting {url}", context=context)
        raise last_err


__all__ = ["HttpConfig", "RetryingSession"]
