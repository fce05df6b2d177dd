"""Rate-limited HTTP client shared by the extractor and the loader."""

import time
import logging
from collections import deque
from typing import Any, Callable, Deque, Dict, Optional

import requests

from .exceptions import HttpError

logger = logging.getLogger(__name__)

TRANSPORT_ERROR_STATUS = 500


class RateLimiter:
    """
    Caps dispatches to at most `max_per_second` within any one-second window.

    Calls over the cap are delayed, never dropped or reordered.
    """

    def __init__(
        self,
        max_per_second: int,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
        period: float = 1.0
    ):
        if max_per_second <= 0:
            raise ValueError("max_per_second must be positive")
        self.max_per_second = max_per_second
        self.period = period
        self._clock = clock
        self._sleep = sleep
        self._dispatched: Deque[float] = deque()

    def acquire(self) -> float:
        """
        Block until a request may be dispatched.

        Returns:
            Seconds spent waiting
        """
        waited = 0.0
        while True:
            now = self._clock()
            while self._dispatched and now - self._dispatched[0] >= self.period:
                self._dispatched.popleft()

            if len(self._dispatched) < self.max_per_second:
                self._dispatched.append(now)
                return waited

            wait_time = self.period - (now - self._dispatched[0])
            self._sleep(wait_time)
            waited += wait_time


class RateLimitedClient:
    """
    Authenticated JSON client bound to one base URL and one request budget.

    Non-2xx responses and transport failures are raised as HttpError.
    """

    def __init__(
        self,
        base_url: str,
        auth_header: str,
        max_requests_per_second: int = 5,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
        limiter: Optional[RateLimiter] = None
    ):
        """
        Initialize the client.

        Args:
            base_url: Base URL every path is appended to
            auth_header: Full value of the Authorization header
            max_requests_per_second: Request budget for this client
            timeout: Per-request timeout in seconds
            session: Custom requests session
            limiter: Custom rate limiter (overrides max_requests_per_second)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.limiter = limiter or RateLimiter(max_requests_per_second)
        self._session = session or requests.Session()
        self._session.headers["Authorization"] = auth_header
        self._session.headers["Content-Type"] = "application/json"
        self._session.headers["Accept"] = "application/json"

    @classmethod
    def bearer(cls, base_url: str, api_key: str, **kwargs) -> "RateLimitedClient":
        """Client authenticating with a bearer token."""
        return cls(base_url, f"Bearer {api_key}", **kwargs)

    @classmethod
    def zoho(cls, base_url: str, api_key: str, **kwargs) -> "RateLimitedClient":
        """Client authenticating with a Zoho OAuth token."""
        return cls(base_url, f"Zoho-oauthtoken {api_key}", **kwargs)

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def send(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None
    ) -> requests.Response:
        """
        Send one request, waiting for the rate limiter first.

        Raises:
            HttpError: on a non-2xx response or a transport failure
        """
        url = self._url(path)
        waited = self.limiter.acquire()
        if waited:
            logger.debug(f"Rate limited {method} {url} for {waited:.3f}s")

        try:
            response = self._session.request(
                method, url, json=json, params=params, timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"API Error: {method} {url} failed: {e}")
            raise HttpError(TRANSPORT_ERROR_STATUS, str(e), url=url) from e

        if not 200 <= response.status_code < 300:
            message = _error_message(response)
            logger.error(f"API Error: {method} {url} returned {response.status_code}: {message}")
            raise HttpError(response.status_code, message, url=url)

        return response

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        return self.send("GET", path, params=params)

    def post(self, path: str, json: Any = None) -> requests.Response:
        return self.send("POST", path, json=json)

    def close(self) -> None:
        self._session.close()


def _error_message(response: requests.Response) -> str:
    """Pull the most useful error message out of a failed response."""
    try:
        error_data = response.json()
    except ValueError:
        error_data = None

    if isinstance(error_data, dict):
        message = error_data.get("message") or error_data.get("error")
        messages = error_data.get("messages")
        if isinstance(messages, list) and messages:
            # Twenty reports validation failures as a list
            return "; ".join(str(m) for m in messages)
        if message:
            return str(message)

    return response.text or response.reason or f"HTTP {response.status_code}"
