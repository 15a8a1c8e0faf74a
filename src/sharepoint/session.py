"""Authenticated REST session against a SharePoint site.

Token acquisition is outside this project: the session receives an already
issued bearer token and only owns the HTTP connection, pacing and retries.
"""

import time
from typing import Any

import requests

from common.logger import get_logger

from .rate_limiter import RateLimiter
from .types import ConnectionError as SessionConnectionError
from .types import RequestError, ThrottledError

logger = get_logger(__name__)

JSON_NOMETADATA = "application/json;odata=nometadata"

# Status codes SharePoint uses for throttling and transient overload
RETRYABLE_STATUS = {429, 503}


class SharePointSession:
    """HTTP session bound to one site URL.

    Use as a context manager so the connection is released on every exit
    path:

        >>> with SharePointSession("https://tenant/sites/hub", token) as session:
        ...     session.request("GET", "/_api/web")
    """

    def __init__(
        self,
        site_url: str,
        access_token: str,
        requests_per_minute: int = 600,
        timeout: float = 30,
        max_retries: int = 3,
    ):
        """Initialize session (no network traffic until connect()).

        Args:
            site_url: Absolute site URL
            access_token: OAuth bearer token for the site
            requests_per_minute: Client-side call budget
            timeout: Per-request timeout in seconds
            max_retries: Retries for throttled (429/503) responses
        """
        if not site_url:
            raise ValueError("site_url is required")
        self.site_url = site_url.rstrip("/")
        self.access_token = access_token
        self.timeout = timeout
        self.max_retries = max_retries
        self.rate_limiter = RateLimiter(requests_per_period=requests_per_minute, period_seconds=60)
        self.web_title: str | None = None
        self._http: requests.Session | None = None

    @property
    def connected(self) -> bool:
        return self._http is not None

    def connect(self) -> None:
        """Open the HTTP session and verify access to the site.

        Raises:
            ConnectionError: If the site cannot be reached or rejects the token
        """
        if not self.access_token:
            raise SessionConnectionError("No access token configured")

        self._http = requests.Session()
        self._http.headers.update(
            {
                "Authorization": f"Bearer {self.access_token}",
                "Accept": JSON_NOMETADATA,
                "Content-Type": JSON_NOMETADATA,
                "User-Agent": "policy-list-sync/1.0",
            }
        )

        try:
            web = self.request("GET", "/_api/web", params={"$select": "Title"})
        except RequestError as e:
            self.disconnect()
            raise SessionConnectionError(f"Failed to connect to {self.site_url}: {e}") from e

        self.web_title = (web or {}).get("Title")
        logger.info(f"Connected to [bold]{self.web_title or self.site_url}[/bold]")

    def disconnect(self) -> None:
        """Close the HTTP session."""
        if self._http:
            self._http.close()
            self._http = None
            logger.debug(f"Disconnected from {self.site_url}")

    def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any] | None:
        """Issue a REST call and decode the JSON body.

        Args:
            method: HTTP method
            path: Site-relative path ('/_api/...') or absolute URL (paging links)
            params: Query string parameters
            json: JSON request body
            headers: Extra headers for this call

        Returns:
            Decoded JSON body, or None for empty responses

        Raises:
            ThrottledError: If still throttled after max_retries
            RequestError: On transport failure or any other HTTP error status
        """
        if self._http is None:
            raise RequestError("Session is not connected")

        url = path if path.startswith("http") else f"{self.site_url}{path}"

        for attempt in range(self.max_retries + 1):
            self.rate_limiter.wait_if_needed()
            try:
                response = self._http.request(
                    method, url, params=params, json=json, headers=headers, timeout=self.timeout
                )
            except requests.exceptions.Timeout as e:
                raise RequestError(f"{method} {path} timed out") from e
            except requests.exceptions.RequestException as e:
                raise RequestError(f"{method} {path} failed: {e}") from e

            if response.status_code in RETRYABLE_STATUS:
                if attempt == self.max_retries:
                    raise ThrottledError(
                        f"{method} {path} throttled after {self.max_retries} retries",
                        status_code=response.status_code,
                    )
                delay = self._retry_delay(response, attempt)
                logger.warning(
                    f"Throttled ({response.status_code}) on {method} {path}, "
                    f"retrying in {delay:.1f}s"
                )
                time.sleep(delay)
                continue

            if response.status_code >= 400:
                raise RequestError(
                    f"{method} {path} returned HTTP {response.status_code}: {response.text[:200]}",
                    status_code=response.status_code,
                )

            if response.status_code == 204 or not response.content:
                return None
            return response.json()

        # Loop always returns or raises
        raise RequestError(f"{method} {path} failed")

    @staticmethod
    def _retry_delay(response: requests.Response, attempt: int) -> float:
        retry_after = response.headers.get("Retry-After")
        if retry_after:
            try:
                return float(retry_after)
            except ValueError:
                pass
        return float(2**attempt)

    def __enter__(self):
        """Context manager entry."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.disconnect()
        return False

    def __repr__(self) -> str:
        status = "connected" if self.connected else "disconnected"
        return f"SharePointSession(site_url={self.site_url}, status={status})"
