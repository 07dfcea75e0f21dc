"""
Async HTTP client for the portal and reporting service endpoints.

This module wraps httpx.AsyncClient and converts transport failures and
non-success responses into the client's error model. Requests are never
retried: a failed call surfaces to the caller immediately.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx
from loguru import logger

from .errors import ErrorCode, NetworkError, ProtocolError, RemoteError

_STATUS_CODES = {
    401: ErrorCode.UNAUTHORIZED,
    403: ErrorCode.FORBIDDEN,
    404: ErrorCode.NOT_FOUND,
}


class ServiceHttpClient:
    """HTTP client bound to one base URL.

    Features:
    - Connection pooling via httpx.AsyncClient
    - Trailing-slash normalization of the base URL
    - JSON request/response helpers
    - Structured error conversion (NetworkError, RemoteError)

    Example:
        async with ServiceHttpClient("https://host/reporting/service") as http:
            data = await http.get_json("/job/artifacts", params={"ticket": ticket})
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the HTTP client.

        Args:
            base_url: Base URL for all requests.
            timeout: Default timeout in seconds.
            transport: Optional httpx transport (e.g. httpx.MockTransport).
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the underlying httpx client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client and release connections."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "ServiceHttpClient":
        await self._get_client()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    def build_url(self, path: str) -> str:
        """Build full URL from path.

        Args:
            path: Request path (with or without leading slash).

        Returns:
            Full URL including base_url.
        """
        path = path.lstrip("/")
        return f"{self.base_url}/{path}"

    async def request(
        self,
        method: str,
        path: str,
        network_message: str = "A network error occurred.",
        **kwargs: Any,
    ) -> httpx.Response:
        """Make an HTTP request and check its status.

        Args:
            method: HTTP method (GET, POST, etc.).
            path: Request path relative to base_url.
            network_message: Message used when the transport fails.
            **kwargs: Additional arguments passed to httpx.

        Returns:
            The HTTP response.

        Raises:
            NetworkError: The request could not be sent or timed out.
            RemoteError: The service answered with a non-success status.
        """
        client = await self._get_client()
        url = self.build_url(path)

        try:
            response = await client.request(method=method, url=url, **kwargs)
        except httpx.TimeoutException as e:
            logger.warning(f"Timeout for {method} {url}: {e}")
            raise NetworkError(network_message, code=ErrorCode.TIMEOUT, cause=e)
        except httpx.TransportError as e:
            logger.warning(f"Transport error for {method} {url}: {e}")
            raise NetworkError(network_message, message_debug=str(e), cause=e)

        if not response.is_success:
            logger.debug(f"{method} {url} returned {response.status_code}")
            raise RemoteError(
                response.reason_phrase or f"HTTP {response.status_code}",
                status=response.status_code,
                code=_STATUS_CODES.get(response.status_code, ErrorCode.REMOTE_ERROR),
                message_debug=response.text[:500] if response.text else None,
            )

        return response

    def _decode_json(self, response: httpx.Response) -> dict[str, Any]:
        """Decode a JSON object body.

        Raises:
            ProtocolError: The body is not JSON, or not a JSON object.
        """
        try:
            data = response.json()
        except ValueError as e:
            logger.warning(f"Undecodable response from {response.request.url}: {e}")
            raise ProtocolError(
                "The service returned an invalid response.",
                code=ErrorCode.INVALID_RESPONSE,
                message_debug=response.text[:500] if response.text else None,
                cause=e,
            )

        if not isinstance(data, Mapping):
            raise ProtocolError(
                "The service returned an invalid response.",
                code=ErrorCode.INVALID_RESPONSE,
                message_debug=f"Expected a JSON object, got {type(data).__name__}",
            )
        return dict(data)

    async def get_json(self, path: str, **kwargs: Any) -> dict[str, Any]:
        """Make a GET request and decode the JSON object body."""
        response = await self.request("GET", path, **kwargs)
        return self._decode_json(response)

    async def post_json(self, path: str, body: Any, **kwargs: Any) -> dict[str, Any]:
        """Make a POST request with a JSON body and decode the JSON object response."""
        response = await self.request("POST", path, json=body, **kwargs)
        return self._decode_json(response)
