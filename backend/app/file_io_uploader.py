"""Upload archives to file.io."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from .errors import UploadError

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://file.io/"
DEFAULT_EXPIRES = "14d"


@dataclass(frozen=True)
class UploadResult:
    url: str
    expires: str


def _extract_error(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(data, dict):
        return str(data.get("message") or data)
    return str(data)


async def upload_to_file_io(
    payload: bytes,
    filename: str,
    *,
    endpoint: str = DEFAULT_ENDPOINT,
    expires: str = DEFAULT_EXPIRES,
    timeout: float = 300.0,
    client: Optional[httpx.AsyncClient] = None,
) -> UploadResult:
    """Upload ``payload`` as ``filename`` and return the public link and expiry.

    Raises:
        UploadError: If the request fails or file.io reports an error.
    """
    logger.info("Uploading %s (%.2f KB) to file.io...", filename, len(payload) / 1024)
    files = {"file": (filename, payload, "application/zip")}
    data = {"expires": expires}
    try:
        if client is not None:
            response = await client.post(endpoint, files=files, data=data, timeout=timeout)
        else:
            async with httpx.AsyncClient(timeout=timeout) as owned:
                response = await owned.post(endpoint, files=files, data=data)
    except httpx.HTTPError as exc:
        logger.error("HTTP error uploading to file.io: %s", exc)
        raise UploadError("Failed to upload to file.io", cause=str(exc) or exc.__class__.__name__) from exc

    if response.status_code >= 400:
        detail = _extract_error(response)
        logger.error("file.io returned status %s: %s", response.status_code, detail)
        raise UploadError("Failed to upload to file.io", cause=detail)

    try:
        body: Dict[str, Any] = response.json()
    except ValueError as exc:
        raise UploadError("file.io returned an invalid response", cause=response.text[:200]) from exc

    if not isinstance(body, dict) or not body.get("success") or not body.get("link"):
        raise UploadError("file.io returned an error", cause=str(body))

    logger.info("Successfully uploaded to file.io. URL: %s", body["link"])
    return UploadResult(url=str(body["link"]), expires=str(body.get("expiry") or expires))
