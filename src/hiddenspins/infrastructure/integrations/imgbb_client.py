"""ImgBB HTTP client implementation.

Hey future me - ImgBB is the free image host artist photos end up on. We only ever
UPLOAD: the free API has no delete endpoint (the returned delete_url is a web page
meant for humans). That's why ImageService keeps its own metadata record per upload
and "deleting" an image means forgetting that record.

Upload contract:
- POST https://api.imgbb.com/1/upload, form fields `key` + `image`
- `image` is raw base64 - the "data:image/png;base64," prefix from the browser
  must be stripped first
- Response: {"data": {...}, "success": true, "status": 200}

Every failure (transport, non-2xx, success=false, garbage JSON) surfaces as
RemoteError so callers only need to know about the domain taxonomy.
"""

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from hiddenspins.config import ImgBBSettings
from hiddenspins.domain.exceptions import ConfigurationError, RemoteError

logger = logging.getLogger(__name__)

_BASE64_MARKER = "base64,"


@dataclass
class ImgBBImage:
    """One uploaded image as ImgBB reports it.

    display_url is what we show in the UI, thumb/medium are pre-sized versions
    that ImgBB only generates for larger images (so they may be missing).
    """

    id: str
    url: str
    display_url: str
    delete_url: str | None = None
    thumb_url: str | None = None
    medium_url: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "ImgBBImage":
        thumb = data.get("thumb") or {}
        medium = data.get("medium") or {}
        url = str(data.get("url") or "")
        return cls(
            id=str(data.get("id") or ""),
            url=url,
            display_url=str(data.get("display_url") or url),
            delete_url=data.get("delete_url"),
            thumb_url=thumb.get("url"),
            medium_url=medium.get("url"),
        )


def strip_data_url_prefix(image_data: str) -> str:
    """Raw base64 payload of a data URL ("data:image/jpeg;base64,AAAA" -> "AAAA")."""
    if _BASE64_MARKER in image_data:
        return image_data.split(_BASE64_MARKER, 1)[1]
    return image_data


class ImgBBClient:
    """HTTP client for the ImgBB upload API.

    Usage:
        async with ImgBBClient(settings.imgbb) as client:
            image = await client.upload(data_url)
            print(image.display_url)
    """

    def __init__(self, settings: ImgBBSettings) -> None:
        self.settings = settings
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers={"Accept": "application/json"},
                timeout=self.settings.timeout,
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def upload(self, image_data: str) -> ImgBBImage:
        """Upload a base64 image (plain or data URL).

        Args:
            image_data: base64 string, optionally with the data URL prefix

        Returns:
            ImgBBImage with the hosted URLs

        Raises:
            ConfigurationError: no API key configured
            RemoteError: ImgBB unreachable or rejected the upload
        """
        api_key = self.settings.api_key
        if api_key is None or not api_key.get_secret_value():
            raise ConfigurationError("ImgBB API key not configured")

        client = await self._get_client()
        try:
            response = await client.post(
                self.settings.upload_url,
                data={
                    "key": api_key.get_secret_value(),
                    "image": strip_data_url_prefix(image_data),
                },
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "ImgBB upload rejected: HTTP %s", e.response.status_code
            )
            raise RemoteError(
                f"ImgBB upload failed: HTTP {e.response.status_code}", cause=e
            ) from e
        except httpx.HTTPError as e:
            logger.warning("ImgBB upload request failed: %s", e)
            raise RemoteError(f"ImgBB upload failed: {e}", cause=e) from e
        except ValueError as e:
            # response.json() on an HTML error page
            raise RemoteError("ImgBB returned an invalid response", cause=e) from e

        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, dict) or payload.get("success") is False:
            raise RemoteError("ImgBB upload failed: unexpected response")

        image = ImgBBImage.from_api(data)
        if not image.id or not image.url:
            raise RemoteError("ImgBB upload failed: response without image URL")

        logger.debug("Uploaded image %s to ImgBB", image.id)
        return image

    async def __aenter__(self) -> "ImgBBClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()
