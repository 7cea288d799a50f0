"""Async HTTP client for the movies endpoint."""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
from loguru import logger

from cinefetch.types.error_types import (
    FetchTimeoutError,
    FormatError,
    HttpStatusError,
    NetworkError,
)

DEFAULT_API_URL = "https://devsapihub.com/api-movies"


class MoviesAPIClient:
    """Performs one GET against the movies endpoint per call.

    The client does no retrying of its own; it translates transport outcomes
    into the fetch error taxonomy so the retry policy and the orchestrator can
    act on them:

    - non-2xx status -> HttpStatusError
    - httpx timeouts -> FetchTimeoutError
    - other transport errors -> NetworkError
    """

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            api_url: Absolute URL of the movies collection
            headers: Extra request headers
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.api_url = api_url
        self.default_headers = {"Accept": "application/json", **(headers or {})}
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> MoviesAPIClient:
        """Async context manager entry."""
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            # Deadlines are enforced per attempt by TimeoutGuard
            self._client = httpx.AsyncClient(
                headers=self.default_headers,
                timeout=None,
                transport=self._transport,
            )
        return self._client

    async def fetch(self) -> httpx.Response:
        """GET the movies collection.

        Returns:
            The 2xx response, body not yet decoded

        Raises:
            HttpStatusError: Response status was not 2xx
            FetchTimeoutError: Transport reported a timeout
            NetworkError: No response was received
        """
        client = await self._ensure_client()
        logger.debug(f"GET {self.api_url}")

        try:
            response = await client.get(self.api_url)
        except httpx.TimeoutException as e:
            raise FetchTimeoutError(original_error=e) from e
        except httpx.RequestError as e:
            raise NetworkError(f"Request failed: {e}", original_error=e) from e

        if not response.is_success:
            raise HttpStatusError(response.status_code, response_text=response.text)

        return response

    @staticmethod
    def decode(response: httpx.Response) -> Any:
        """Decode a JSON body.

        Raises:
            FormatError: Body is not valid JSON
        """
        try:
            return response.json()
        except ValueError as e:
            raise FormatError(f"Invalid JSON response: {e}", original_error=e) from e

    async def close(self) -> None:
        """Close HTTP client and clean up resources."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.debug("HTTP client closed")
