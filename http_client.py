import logging
import threading
import time
from typing import Any, Callable, Dict, Optional, Tuple

import requests

from errors import UpstreamError

logger = logging.getLogger(__name__)


class FreshnessCache:
    """Successful upstream payloads keyed by request URL, kept for ttl seconds."""

    def __init__(self, ttl_seconds: float = 300, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, Tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, payload = entry
            if self._clock() - stored_at >= self.ttl_seconds:
                del self._entries[key]
                return None
            return payload

    def set(self, key: str, payload: Any) -> None:
        with self._lock:
            self._entries[key] = (self._clock(), payload)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


class UpstreamSession:
    """Bearer-token GET requests against one external API over a caller-owned session."""

    def __init__(
        self,
        session: requests.Session,
        base_url: str,
        token: str,
        cache: Optional[FreshnessCache] = None,
        timeout: Optional[float] = 10.0,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.session = session
        self.base_url = base_url.rstrip("/")
        self.cache = cache
        self.timeout = timeout
        # Sent per request, the session may be shared between APIs
        self.headers = {"Authorization": f"Bearer {token}"}
        if headers:
            self.headers.update(headers)

    def build_url(self, path: str, params: Optional[Dict[str, Any]] = None) -> str:
        url = f"{self.base_url}/{path.lstrip('/')}"
        if params:
            request = requests.Request("GET", url, params=params).prepare()
            url = request.url
        return url

    def get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        url = self.build_url(path, params)
        if self.cache is not None:
            cached = self.cache.get(url)
            if cached is not None:
                logger.debug(f"Serving cached response for {url}")
                return cached

        try:
            response = self.session.get(url, headers=self.headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise UpstreamError(f"Request to {url} failed: {str(e)}", url=url) from e

        if not response.ok:
            raise UpstreamError(
                f"Request to {url} returned {response.status_code}",
                status_code=response.status_code,
                url=url,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamError(f"Invalid JSON from {url}", status_code=response.status_code, url=url) from e

        if self.cache is not None:
            self.cache.set(url, payload)
        return payload
