"""Package output PDFs into a single in-memory ZIP archive."""
from __future__ import annotations

import logging
import zipfile
from dataclasses import dataclass
from io import BytesIO
from typing import Iterable, Set

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ZipInputFile:
    filename: str
    payload: bytes


def create_zip(files: Iterable[ZipInputFile]) -> bytes:
    """Return the bytes of a DEFLATE-compressed archive holding ``files`` in order.

    Raises:
        ValueError: If two entries share a filename.
    """
    buffer = BytesIO()
    seen: Set[str] = set()
    count = 0
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED, compresslevel=9) as zf:
        for item in files:
            if item.filename in seen:
                raise ValueError(f"Duplicate filename in archive: {item.filename}")
            seen.add(item.filename)
            zf.writestr(item.filename, item.payload)
            count += 1
    payload = buffer.getvalue()
    logger.info("ZIP archive created with %s file(s), %s bytes.", count, len(payload))
    return payload
