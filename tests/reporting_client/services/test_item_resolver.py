"""Unit tests for portal item resolution."""

import httpx
import pytest

from conftest import ITEM_ID, PORTAL_URL
from reporting_client.domain.models import PortalItem
from reporting_client.runtime.errors import (
    ErrorCode,
    InvalidInputError,
    NetworkError,
    ProtocolError,
    RemoteError,
)
from reporting_client.runtime.http_client import ServiceHttpClient
from reporting_client.services.item_resolver import (
    ItemResolver,
    is_valid_item_type,
    parse_item_url,
)

ITEM_PATH = f"/sharing/content/items/{ITEM_ID}"


class TestParseItemUrl:
    """Tests for parse_item_url."""

    @pytest.mark.parametrize(
        "url, portal_url",
        [
            (f"https://www.arcgis.com/home/item.html?id={ITEM_ID}", "https://www.arcgis.com"),
            (f"https://server/portal/home/item.html?id={ITEM_ID}", "https://server/portal"),
            (f"HTTP://server/portal/home/item.html?foo=bar&id={ITEM_ID}", "HTTP://server/portal"),
        ],
    )
    def test_valid_urls(self, url, portal_url):
        ref = parse_item_url(url)

        assert ref.item_id == ITEM_ID
        assert ref.portal_url == portal_url

    @pytest.mark.parametrize(
        "url",
        [
            "",
            "https://www.arcgis.com/home/item.html?id=",
            f"www.arcgis.com/home/item.html?id={ITEM_ID}",
            f"https://www.arcgis.com/item.html?id={ITEM_ID}",
        ],
    )
    def test_invalid_urls(self, url):
        with pytest.raises(InvalidInputError) as exc_info:
            parse_item_url(url)

        assert exc_info.value.code == ErrorCode.INVALID_ITEM_URL


class TestIsValidItemType:
    @pytest.mark.parametrize("keyword", ["Geocortex Printing", "Geocortex Reporting"])
    def test_accepts_template_keywords(self, keyword):
        assert is_valid_item_type(PortalItem(typeKeywords=["Other", keyword]))

    def test_rejects_other_keywords(self):
        assert not is_valid_item_type(PortalItem(typeKeywords=["Web Map"]))

    def test_rejects_missing_keywords(self):
        assert not is_valid_item_type(PortalItem())


class TestItemResolver:
    """Tests for ItemResolver requests."""

    @pytest.mark.asyncio
    async def test_get_item_info_sends_token(self, fake_service):
        """Should request the item as JSON with the token."""
        fake_service.add("GET", ITEM_PATH, {"typeKeywords": ["Geocortex Reporting"], "url": "https://svc/"})

        async with ServiceHttpClient(PORTAL_URL, transport=fake_service.transport) as http:
            item = await ItemResolver(http).get_item_info(ITEM_ID, "PORTAL-TOKEN")

        assert item.url == "https://svc/"
        params = fake_service.requests[0].url.params
        assert params["f"] == "json"
        assert params["token"] == "PORTAL-TOKEN"

    @pytest.mark.asyncio
    async def test_get_item_info_sends_empty_token(self, fake_service):
        fake_service.add("GET", ITEM_PATH, {"typeKeywords": []})

        async with ServiceHttpClient(PORTAL_URL, transport=fake_service.transport) as http:
            await ItemResolver(http).get_item_info(ITEM_ID)

        assert fake_service.requests[0].url.params["token"] == ""

    @pytest.mark.asyncio
    async def test_embedded_error_raises_remote_error(self, fake_service):
        """Should check errors wrapped in a 200 response."""
        fake_service.add("GET", ITEM_PATH, {"error": {"message": "Invalid token.", "code": 498}})

        async with ServiceHttpClient(PORTAL_URL, transport=fake_service.transport) as http:
            with pytest.raises(RemoteError) as exc_info:
                await ItemResolver(http).get_item_info(ITEM_ID)

        assert exc_info.value.status == 498
        assert str(exc_info.value) == 'Error code: 498. Response error: "Invalid token."'

    @pytest.mark.asyncio
    async def test_http_error_raises_remote_error(self, fake_service):
        fake_service.add("GET", ITEM_PATH, httpx.Response(403))

        async with ServiceHttpClient(PORTAL_URL, transport=fake_service.transport) as http:
            with pytest.raises(RemoteError) as exc_info:
                await ItemResolver(http).get_item_info(ITEM_ID)

        assert exc_info.value.status == 403

    @pytest.mark.asyncio
    async def test_transport_error_raises_network_error(self, fake_service):
        fake_service.add("GET", ITEM_PATH, httpx.ConnectError("refused"))

        async with ServiceHttpClient(PORTAL_URL, transport=fake_service.transport) as http:
            with pytest.raises(NetworkError):
                await ItemResolver(http).get_item_info(ITEM_ID)

    @pytest.mark.asyncio
    async def test_resolve_service_url_strips_trailing_slash(self, fake_service):
        fake_service.add(
            "GET", ITEM_PATH, {"typeKeywords": ["Geocortex Printing"], "url": "https://svc.test/printing/"}
        )

        async with ServiceHttpClient(PORTAL_URL, transport=fake_service.transport) as http:
            service_url = await ItemResolver(http).resolve_service_url(ITEM_ID)

        assert service_url == "https://svc.test/printing"

    @pytest.mark.asyncio
    async def test_resolve_rejects_wrong_item_type(self, fake_service):
        fake_service.add("GET", ITEM_PATH, {"typeKeywords": ["Web Map"], "url": "https://svc/"})

        async with ServiceHttpClient(PORTAL_URL, transport=fake_service.transport) as http:
            with pytest.raises(InvalidInputError) as exc_info:
                await ItemResolver(http).resolve_service_url(ITEM_ID)

        assert "not a valid template type" in str(exc_info.value)
        assert exc_info.value.code == ErrorCode.INVALID_ITEM_TYPE

    @pytest.mark.asyncio
    async def test_resolve_rejects_missing_url(self, fake_service):
        fake_service.add("GET", ITEM_PATH, {"typeKeywords": ["Geocortex Reporting"]})

        async with ServiceHttpClient(PORTAL_URL, transport=fake_service.transport) as http:
            with pytest.raises(InvalidInputError) as exc_info:
                await ItemResolver(http).resolve_service_url(ITEM_ID)

        assert str(exc_info.value) == f"The item '{ITEM_ID}' does not contain a service URL."

    @pytest.mark.asyncio
    async def test_malformed_item_raises_protocol_error(self, fake_service):
        fake_service.add("GET", ITEM_PATH, {"typeKeywords": "Geocortex Reporting", "url": "https://svc/"})

        async with ServiceHttpClient(PORTAL_URL, transport=fake_service.transport) as http:
            with pytest.raises(ProtocolError) as exc_info:
                await ItemResolver(http).get_item_info(ITEM_ID)

        assert exc_info.value.code == ErrorCode.INVALID_RESPONSE
