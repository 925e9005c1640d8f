"""Shared JSON-over-HTTP client for provider APIs.

Single attempt per call: no retries, bounded by a timeout.
"""

from __future__ import annotations

from typing import Any, Mapping

import requests

from SourceFinder.utils.log import log

DEFAULT_TIMEOUT = 8.0
DEFAULT_USER_AGENT = "SourceFinder/0.1 (+https://github.com/sourcefinder/sourcefinder)"


class JsonApiClient:
    """Low-level HTTP client returning decoded JSON objects.

    Responsible only for making the request and validating the payload shape.
    Mapping to suggestions is handled by each source's parser.
    """

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize the client with a reusable HTTP session.

        Args:
            timeout: Per-request timeout in seconds.
            user_agent: User-Agent header sent with every request.
            headers: Extra default headers.
        """
        self.timeout = timeout
        self._session = requests.Session()
        self._headers = {"User-Agent": user_agent, "Accept": "application/json"}
        if headers:
            self._headers.update(headers)

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()

    def __enter__(self) -> JsonApiClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def get_json(self, url: str, *, params: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Issue one GET and decode a JSON object.

        Args:
            url: Endpoint URL.
            params: Query parameters; ``None`` values are dropped.

        Returns:
            Decoded JSON object.

        Raises:
            requests.RequestException: On connection errors, timeouts and
                non-success status codes.
            ValueError: If the body is not JSON or not a JSON object.
        """
        query = {key: value for key, value in (params or {}).items() if value is not None}
        log.debug("GET %s params=%s", url, query)
        response = self._session.get(url, params=query, headers=self._headers, timeout=self.timeout)
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict):
            raise ValueError(f"Expected JSON object from {url}, got {type(payload).__name__}")
        return payload
