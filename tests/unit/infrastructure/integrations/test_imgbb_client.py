"""Tests for ImgBB client implementation."""

from collections.abc import AsyncIterator
from urllib.parse import parse_qs

import httpx
import pytest
from pytest_httpx import HTTPXMock

from hiddenspins.config import ImgBBSettings
from hiddenspins.domain.exceptions import ConfigurationError, RemoteError
from hiddenspins.infrastructure.integrations.imgbb_client import (
    ImgBBClient,
    ImgBBImage,
    strip_data_url_prefix,
)

UPLOAD_URL = "https://api.imgbb.com/1/upload"


@pytest.fixture
def imgbb_settings() -> ImgBBSettings:
    """Create ImgBB settings for testing."""
    return ImgBBSettings(api_key="test-key")


@pytest.fixture
async def imgbb_client(imgbb_settings: ImgBBSettings) -> AsyncIterator[ImgBBClient]:
    """Create ImgBB client for testing."""
    client = ImgBBClient(imgbb_settings)
    yield client
    await client.close()


def _success_payload() -> dict:
    return {
        "data": {
            "id": "2ndCYJK",
            "url": "https://i.ibb.co/w04Prt6/nova.png",
            "display_url": "https://i.ibb.co/98W13PY/nova.png",
            "delete_url": "https://ibb.co/2ndCYJK/670a7e48ddcb85ac340c717a41047e5c",
            "thumb": {"url": "https://i.ibb.co/2ndCYJK/nova.png"},
        },
        "success": True,
        "status": 200,
    }


class TestStripDataUrlPrefix:
    """Test data URL handling."""

    def test_strips_prefix(self) -> None:
        assert strip_data_url_prefix("data:image/png;base64,AAAA") == "AAAA"

    def test_plain_base64_untouched(self) -> None:
        assert strip_data_url_prefix("AAAA") == "AAAA"


class TestImgBBImage:
    """Test response parsing."""

    def test_from_api(self) -> None:
        image = ImgBBImage.from_api(_success_payload()["data"])

        assert image.id == "2ndCYJK"
        assert image.display_url == "https://i.ibb.co/98W13PY/nova.png"
        assert image.thumb_url == "https://i.ibb.co/2ndCYJK/nova.png"
        assert image.medium_url is None

    def test_display_url_falls_back_to_url(self) -> None:
        image = ImgBBImage.from_api({"id": "x", "url": "https://i.ibb.co/x.png"})
        assert image.display_url == "https://i.ibb.co/x.png"


class TestImgBBClientUpload:
    """Test uploads."""

    async def test_upload_success(
        self, imgbb_client: ImgBBClient, httpx_mock: HTTPXMock
    ) -> None:
        """Test successful upload sends key + stripped base64."""
        httpx_mock.add_response(url=UPLOAD_URL, method="POST", json=_success_payload())

        image = await imgbb_client.upload("data:image/png;base64,iVBORw0KGgo=")

        assert image.id == "2ndCYJK"
        assert image.url == "https://i.ibb.co/w04Prt6/nova.png"

        request = httpx_mock.get_request()
        assert request is not None
        form = parse_qs(request.content.decode())
        assert form["key"] == ["test-key"]
        assert form["image"] == ["iVBORw0KGgo="]

    async def test_missing_api_key(self, httpx_mock: HTTPXMock) -> None:
        """Test upload without API key never hits the network."""
        client = ImgBBClient(ImgBBSettings())

        with pytest.raises(ConfigurationError):
            await client.upload("AAAA")

        assert httpx_mock.get_requests() == []
        await client.close()

    async def test_http_error_status(
        self, imgbb_client: ImgBBClient, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(url=UPLOAD_URL, method="POST", status_code=400, json={})

        with pytest.raises(RemoteError) as exc_info:
            await imgbb_client.upload("AAAA")

        assert exc_info.value.message == "ImgBB upload failed: HTTP 400"
        assert isinstance(exc_info.value.cause, httpx.HTTPStatusError)

    async def test_connection_error(
        self, imgbb_client: ImgBBClient, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_exception(httpx.ConnectError("Connection refused"))

        with pytest.raises(RemoteError):
            await imgbb_client.upload("AAAA")

    async def test_invalid_json(self, imgbb_client: ImgBBClient, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(url=UPLOAD_URL, method="POST", text="<html>oops</html>")

        with pytest.raises(RemoteError) as exc_info:
            await imgbb_client.upload("AAAA")

        assert exc_info.value.message == "ImgBB returned an invalid response"

    async def test_success_false(self, imgbb_client: ImgBBClient, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(
            url=UPLOAD_URL, method="POST", json={"data": {}, "success": False}
        )

        with pytest.raises(RemoteError):
            await imgbb_client.upload("AAAA")

    async def test_response_without_url(
        self, imgbb_client: ImgBBClient, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(
            url=UPLOAD_URL, method="POST", json={"data": {"id": "x"}, "success": True}
        )

        with pytest.raises(RemoteError) as exc_info:
            await imgbb_client.upload("AAAA")

        assert "without image URL" in exc_info.value.message


class TestImgBBClientLifecycle:
    """Test client lifecycle."""

    async def test_context_manager_closes(self, imgbb_settings: ImgBBSettings) -> None:
        async with ImgBBClient(imgbb_settings) as client:
            http_client = await client._get_client()
            assert not http_client.is_closed

        assert http_client.is_closed
        assert client._client is None
