"""Download source PDFs over HTTP."""
from __future__ import annotations

import logging
from typing import Optional

import httpx

from .errors import UpstreamFetchError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


async def download_pdf(
    url: str,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    client: Optional[httpx.AsyncClient] = None,
) -> bytes:
    """Fetch a PDF and return its raw bytes.

    Raises:
        UpstreamFetchError: On transport errors or a non-200 response.
    """
    logger.info("Starting download from: %s", url)
    try:
        if client is not None:
            response = await client.get(url, timeout=timeout)
        else:
            async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as owned:
                response = await owned.get(url)
    except httpx.HTTPError as exc:
        logger.error("HTTP error downloading from %s: %s", url, exc)
        raise UpstreamFetchError(
            f"Failed to download PDF from {url}",
            url=url,
            cause=str(exc) or exc.__class__.__name__,
        ) from exc

    if response.status_code != 200:
        logger.error("Download from %s returned status %s", url, response.status_code)
        raise UpstreamFetchError(
            f"Failed to download PDF from {url}",
            url=url,
            cause=f"Status code: {response.status_code}",
        )

    logger.info("Successfully completed download from: %s (%s bytes)", url, len(response.content))
    return response.content
