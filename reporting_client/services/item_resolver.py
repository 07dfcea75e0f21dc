"""
Portal item resolution.

Finds the reporting service behind a portal item and checks that the item is
a report or print template.
"""

from __future__ import annotations

import re

from loguru import logger
from pydantic import ValidationError

from reporting_client.domain.models import ItemReference, PortalItem
from reporting_client.runtime.errors import ErrorCode, InvalidInputError, ProtocolError, RemoteError
from reporting_client.runtime.http_client import ServiceHttpClient

PORTAL_ITEM_PATTERN = re.compile(r"^(https?://.*?)/home/item.html.*?id=([a-f0-9]+)", re.IGNORECASE)

TEMPLATE_TYPE_KEYWORDS = frozenset({"Geocortex Printing", "Geocortex Reporting"})


def parse_item_url(url: str) -> ItemReference:
    """Split a portal item URL into its portal URL and item ID.

    Args:
        url: A URL like "https://www.arcgis.com/home/item.html?id=<hex>".

    Returns:
        The item reference.

    Raises:
        InvalidInputError: The URL does not point at a portal item.
    """
    match = PORTAL_ITEM_PATTERN.match(url or "")
    if match is None:
        raise InvalidInputError("The item URL is invalid.", code=ErrorCode.INVALID_ITEM_URL)
    return ItemReference(item_id=match.group(2), portal_url=match.group(1))


def is_valid_item_type(item: PortalItem) -> bool:
    """Check that the item is tagged as a report or print template."""
    if not item.type_keywords:
        return False
    return any(keyword in TEMPLATE_TYPE_KEYWORDS for keyword in item.type_keywords)


class ItemResolver:
    """Looks up portal items through the portal's sharing API.

    Example:
        async with ServiceHttpClient(portal_url) as http:
            service_url = await ItemResolver(http).resolve_service_url(item_id)
    """

    def __init__(self, http: ServiceHttpClient):
        """Initialize the resolver.

        Args:
            http: HTTP client bound to the portal URL.
        """
        self._http = http

    @property
    def portal_url(self) -> str:
        return self._http.base_url

    async def get_item_info(self, item_id: str, token: str | None = None) -> PortalItem:
        """Fetch the portal item JSON.

        Args:
            item_id: The portal item ID.
            token: Optional portal access token.

        Returns:
            The parsed portal item.

        Raises:
            NetworkError: The portal could not be reached.
            RemoteError: The portal answered with an error status or an
                error object inside a successful response.
            ProtocolError: The portal answered with something other than an
                item.
        """
        data = await self._http.get_json(
            f"/sharing/content/items/{item_id}",
            params={"f": "json", "token": token or ""},
            network_message="A network error occurred fetching the portal item.",
        )
        try:
            item = PortalItem.model_validate(data)
        except ValidationError as e:
            raise ProtocolError(
                "The portal returned an invalid item.",
                code=ErrorCode.INVALID_RESPONSE,
                message_debug=str(e),
                cause=e,
            )

        # The portal reports errors inside 200 responses as well
        if item.error is not None:
            raise RemoteError(item.error.message, status=item.error.code)

        return item

    async def resolve_service_url(self, item_id: str, token: str | None = None) -> str:
        """Resolve the reporting service URL behind a template item.

        Args:
            item_id: The portal item ID of the template.
            token: Optional portal access token.

        Returns:
            The service URL without a trailing slash.

        Raises:
            InvalidInputError: The item is not a template, or has no URL.
        """
        item = await self.get_item_info(item_id, token)

        if not is_valid_item_type(item):
            raise InvalidInputError(
                f"The item '{item_id}' is not a valid template type.",
                code=ErrorCode.INVALID_ITEM_TYPE,
            )
        if not item.url:
            raise InvalidInputError(
                f"The item '{item_id}' does not contain a service URL.",
                code=ErrorCode.MISSING_SERVICE_URL,
            )

        logger.debug(f"[{item_id}] Resolved service URL {item.url}")
        return item.url.rstrip("/")
