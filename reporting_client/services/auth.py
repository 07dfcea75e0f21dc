"""
Credential exchange with the reporting service.
"""

from __future__ import annotations

from collections.abc import Mapping

from loguru import logger

from reporting_client.runtime.http_client import ServiceHttpClient


class Authenticator:
    """Exchanges a portal access token for a service run token."""

    def __init__(self, http: ServiceHttpClient):
        """Initialize the authenticator.

        Args:
            http: HTTP client bound to the reporting service API
                (`<service url>/service`).
        """
        self._http = http

    async def exchange_credential(self, portal_url: str, upstream_token: str | None) -> str:
        """Get a run token for the service.

        Without an upstream token no request is made and an empty credential
        is returned, which only reaches unsecured templates. A response that
        lacks the token also yields an empty credential.

        Args:
            portal_url: The portal that issued the upstream token.
            upstream_token: The portal access token, if any.

        Returns:
            The run token, or "" when none is available.

        Raises:
            NetworkError: The service could not be reached.
            RemoteError: The service answered with an error status.
        """
        if not upstream_token:
            return ""

        data = await self._http.post_json(
            "/auth/token/run",
            {"accessToken": upstream_token, "portalUrl": portal_url},
            network_message="A network error occurred fetching an authorization token.",
        )
        response = data.get("response")
        token = response.get("token") if isinstance(response, Mapping) else None
        if not isinstance(token, str):
            token = ""
        if not token:
            logger.warning("Token exchange succeeded but returned no token; continuing unauthenticated")
        return token
