"""External integration client implementations."""

from hiddenspins.infrastructure.integrations.imgbb_client import (
    ImgBBClient,
    ImgBBImage,
    strip_data_url_prefix,
)

__all__ = [
    "ImgBBClient",
    "ImgBBImage",
    "strip_data_url_prefix",
]
