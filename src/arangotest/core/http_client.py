"""
httpx transport for python-arango
Plugs into ArangoClient(http_client=...) and adds request logging, a retry
on 503 responses and access to the last response seen by the current thread.
"""

import logging
import threading
import time
from typing import Any, MutableMapping, Optional, Tuple

import httpx
import requests
from arango.http import HTTPClient
from arango.response import Response

from ..utils.error_handling import ErrorHandlingConfig

logger = logging.getLogger(__name__)

HTTP_SERVICE_UNAVAILABLE = 503


class HttpxHTTPClient(HTTPClient):
    """HTTP client backed by one httpx.Client per ArangoDB host"""

    def __init__(
        self,
        request_timeout: float = 60,
        verify: bool = True,
        retry_503: int = 1,
        retry_interval: float = 0.5,
        log_requests: bool = False,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.request_timeout = request_timeout
        self.verify = verify
        self.retry_503 = max(1, retry_503)
        self.retry_interval = retry_interval
        self.log_requests = log_requests
        self._transport = transport
        self._local = threading.local()
        self._lock = threading.Lock()
        self.request_count = 0

    def create_session(self, host: str) -> httpx.Client:
        logger.debug(f"Creating HTTP session for {host}")
        return httpx.Client(
            verify=self.verify,
            timeout=self.request_timeout,
            transport=self._transport,
        )

    @property
    def last_response(self) -> Optional[Response]:
        """Last response received by the calling thread"""
        return getattr(self._local, "response", None)

    def send_request(
        self,
        session: httpx.Client,
        method: str,
        url: str,
        headers: Optional[MutableMapping[str, str]] = None,
        params: Optional[MutableMapping[str, str]] = None,
        data: Any = None,
        auth: Optional[Tuple[str, str]] = None,
    ) -> Response:
        for attempt in range(1, self.retry_503 + 1):
            started = time.monotonic()
            try:
                raw = session.request(
                    method=method.upper(),
                    url=url,
                    params=params,
                    content=data,
                    headers=headers,
                    auth=auth,
                )
            except httpx.TransportError as e:
                if self.log_requests:
                    logger.debug(f"{method.upper()} {url} failed: {e}")
                # python-arango moves to the next host only on requests.ConnectionError
                if isinstance(e, httpx.ConnectError):
                    raise requests.ConnectionError(f"Failed to connect to {url}: {e}") from e
                raise
            duration = time.monotonic() - started

            with self._lock:
                self.request_count += 1

            if self.log_requests:
                self._log_exchange(method, url, headers, raw, duration)

            if raw.status_code != HTTP_SERVICE_UNAVAILABLE or attempt == self.retry_503:
                break
            logger.info(f"{method.upper()} {url} returned 503, retrying ({attempt}/{self.retry_503})")
            time.sleep(self.retry_interval)

        response = Response(
            method=method,
            url=str(raw.url),
            headers=raw.headers,
            status_code=raw.status_code,
            status_text=raw.reason_phrase,
            raw_body=raw.text,
        )
        self._local.response = response
        return response

    def _log_exchange(self, method, url, headers, raw: httpx.Response, duration: float):
        safe_headers = ErrorHandlingConfig.sanitize_data(dict(headers or {}))
        body = ErrorHandlingConfig.sanitize_data(raw.text)
        logger.debug(
            f"{method.upper()} {url} -> {raw.status_code} in {duration:.3f}s "
            f"headers={safe_headers} response={body}"
        )

    def close(self):
        """Transport level cleanup hook; sessions are closed by ArangoClient.close()"""
        self._local = threading.local()
