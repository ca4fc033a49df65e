"""Error types raised while processing a questionnaire batch."""
from __future__ import annotations

from typing import Any, Dict, Optional


class BatchProcessingError(RuntimeError):
    """Base class for failures that abort a batch."""

    status_code = 500

    def __init__(
        self,
        message: str,
        *,
        cause: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.extra = dict(extra or {})

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"message": self.message}
        if self.cause:
            payload["error"] = self.cause
        payload.update(self.extra)
        return payload


class BatchValidationError(BatchProcessingError):
    """Raised when the request body is missing or malformed."""

    status_code = 400

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message, extra={"field": field})
        self.field = field


class UpstreamFetchError(BatchProcessingError):
    """Raised when a remote file cannot be downloaded."""

    status_code = 502

    def __init__(self, message: str, *, url: str, cause: Optional[str] = None) -> None:
        super().__init__(message, cause=cause, extra={"url": url})
        self.url = url


class LogoDownloadError(UpstreamFetchError):
    """Raised when the logo cannot be downloaded or has an unsupported type."""


class AnnotationError(BatchProcessingError):
    """Raised when a PDF cannot be annotated."""


class SizeLimitError(BatchProcessingError):
    """Raised when the packaged archive exceeds the upload limit."""

    status_code = 413


class UploadError(BatchProcessingError):
    """Raised when the archive was built but could not be uploaded."""

    status_code = 502


class InternalError(BatchProcessingError):
    """Raised for unexpected failures."""
