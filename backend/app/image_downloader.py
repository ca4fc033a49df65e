"""Download logo images (PNG or JPEG only)."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from .errors import LogoDownloadError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
SUPPORTED_CONTENT_TYPES = {"image/png", "image/jpeg"}


@dataclass(frozen=True)
class DownloadedImage:
    payload: bytes
    content_type: str


async def download_image(
    url: str,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    client: Optional[httpx.AsyncClient] = None,
) -> DownloadedImage:
    logger.info("Starting image download from: %s", url)
    try:
        if client is not None:
            response = await client.get(url, timeout=timeout)
        else:
            async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as owned:
                response = await owned.get(url)
    except httpx.HTTPError as exc:
        raise LogoDownloadError(
            "Failed to download image",
            url=url,
            cause=str(exc) or exc.__class__.__name__,
        ) from exc

    if response.status_code != 200:
        raise LogoDownloadError(
            "Failed to download image",
            url=url,
            cause=f"Status code: {response.status_code}",
        )

    raw_type = response.headers.get("content-type", "")
    content_type = raw_type.split(";", 1)[0].strip().lower()
    if content_type not in SUPPORTED_CONTENT_TYPES:
        raise LogoDownloadError(
            f"Unsupported content-type: '{raw_type}'. Only PNG and JPEG are supported.",
            url=url,
        )

    logger.info("Successfully downloaded image from %s (Type: %s)", url, content_type)
    return DownloadedImage(payload=response.content, content_type=content_type)
