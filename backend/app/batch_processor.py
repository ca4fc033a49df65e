"""Run a distribution plan against download, annotation, packaging and upload."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from functools import partial
from typing import Any, Awaitable, Callable, Dict, List, Optional

from .config import Settings
from .distribution import PdfDistribution, build_plan_payload, distribute_respondents
from .errors import BatchProcessingError, InternalError, SizeLimitError, UploadError
from .file_io_uploader import UploadResult, upload_to_file_io
from .image_downloader import download_image
from .models import ProcessPdfRequest, ProcessPdfResponse
from .pdf_annotator import AnnotationStyle, annotate_pdf
from .pdf_downloader import download_pdf
from .zip_creator import ZipInputFile, create_zip

logger = logging.getLogger(__name__)

PdfFetcher = Callable[[str], Awaitable[bytes]]
PdfAnnotator = Callable[..., Awaitable[bytes]]
Packager = Callable[[List[ZipInputFile]], bytes]
Uploader = Callable[[bytes, str], Awaitable[UploadResult]]

BYTES_PER_MB = 1024 * 1024


@dataclass(frozen=True)
class BatchConfig:
    max_zip_bytes: int = 2 * 1024 * BYTES_PER_MB
    debug_plan_enabled: bool = True
    file_name_prefix: str = "vragenlijsten"
    archive_name_prefix: str = "vragenlijsten"
    annotation_style: AnnotationStyle = field(default_factory=AnnotationStyle)

    @classmethod
    def from_settings(cls, settings: Settings) -> "BatchConfig":
        return cls(
            max_zip_bytes=settings.max_zip_bytes,
            debug_plan_enabled=settings.debug_plan_enabled,
            annotation_style=AnnotationStyle(
                footer_continue_text=settings.footer_continue_text,
                footer_end_text=settings.footer_end_text,
            ),
        )


def _log_timing(stage: str, index: int, start_ts: float) -> None:
    duration_ms = (time.perf_counter() - start_ts) * 1000.0
    logger.info("TIMING|%s|%s|%.2f", stage, index, duration_ms)


class BatchProcessor:
    """Process one request: every PDF in plan order, then zip and upload."""

    def __init__(
        self,
        config: Optional[BatchConfig] = None,
        *,
        fetch_pdf: PdfFetcher = download_pdf,
        annotate: PdfAnnotator = annotate_pdf,
        package: Packager = create_zip,
        upload: Uploader = upload_to_file_io,
    ) -> None:
        self.config = config or BatchConfig()
        self._fetch_pdf = fetch_pdf
        self._annotate = annotate
        self._package = package
        self._upload = upload

    @classmethod
    def from_settings(cls, settings: Settings) -> "BatchProcessor":
        async def fetch_logo(url: str):
            return await download_image(url, timeout=settings.logo_download_timeout)

        return cls(
            BatchConfig.from_settings(settings),
            fetch_pdf=partial(download_pdf, timeout=settings.pdf_download_timeout),
            annotate=partial(annotate_pdf, image_fetcher=fetch_logo),
            upload=partial(
                upload_to_file_io,
                endpoint=settings.file_io_endpoint,
                expires=settings.file_io_expires,
                timeout=settings.upload_timeout,
            ),
        )

    @staticmethod
    def build_plan(request: ProcessPdfRequest) -> List[PdfDistribution]:
        return distribute_respondents(
            request.metadata.respondent_codes,
            request.pdf_urls,
            request.metadata.pages_count,
        )

    @staticmethod
    def plan_payload(request: ProcessPdfRequest) -> Dict[str, Any]:
        return build_plan_payload(
            request.metadata.respondent_codes,
            request.pdf_urls,
            request.metadata.pages_count,
        )

    def output_file_name(self, pdf_index: int) -> str:
        return f"{self.config.file_name_prefix}_{pdf_index + 1:02d}.pdf"

    def archive_name(self, now: Optional[datetime] = None) -> str:
        stamp = (now or datetime.now(timezone.utc)).strftime("%Y%m%d-%H%M%S")
        return f"{self.config.archive_name_prefix}_{stamp}.zip"

    async def process(self, request: ProcessPdfRequest) -> ProcessPdfResponse:
        """Run the whole batch; the first failure aborts it.

        Raises:
            BatchProcessingError: The failure of the stage that aborted the
                batch; unexpected exceptions are wrapped in ``InternalError``.
        """
        try:
            return await self._process(request)
        except BatchProcessingError:
            raise
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected failure while processing batch")
            raise InternalError("Internal Server Error", cause=str(exc)) from exc

    async def _process(self, request: ProcessPdfRequest) -> ProcessPdfResponse:
        batch_timer = time.perf_counter()
        plan = self.build_plan(request)
        metadata = request.metadata
        logger.info(
            "Processing %s respondents over %s PDF(s), %s questionnaire pages each",
            len(metadata.respondenten),
            len(plan),
            metadata.pages_count,
        )

        outputs: List[ZipInputFile] = []
        for entry in plan:
            payload = await self._render_entry(entry, request)
            outputs.append(ZipInputFile(filename=self.output_file_name(entry.pdf_index), payload=payload))

        zip_timer = time.perf_counter()
        archive = self._package(outputs)
        _log_timing("ZIP", len(outputs), zip_timer)
        zip_size_mb = round(len(archive) / BYTES_PER_MB, 2)
        if len(archive) > self.config.max_zip_bytes:
            logger.error("Archive of %s bytes exceeds limit of %s bytes", len(archive), self.config.max_zip_bytes)
            raise SizeLimitError(
                "The generated ZIP archive is too large to upload.",
                extra={"zipSizeMB": zip_size_mb, "maxSizeMB": round(self.config.max_zip_bytes / BYTES_PER_MB, 2)},
            )

        respondents_per_file = [len(entry.respondent_codes) for entry in plan]
        upload_timer = time.perf_counter()
        try:
            uploaded = await self._upload(archive, self.archive_name())
        except UploadError as exc:
            exc.extra.update(
                {
                    "zipSizeMB": zip_size_mb,
                    "respondentCount": len(metadata.respondenten),
                    "filesInZip": len(outputs),
                }
            )
            raise
        _log_timing("UPLOAD", 0, upload_timer)
        _log_timing("BATCH_TOTAL", len(plan), batch_timer)

        return ProcessPdfResponse(
            file_io_url=uploaded.url,
            expires=uploaded.expires,
            respondent_count=len(metadata.respondenten),
            files_in_zip=len(outputs),
            respondents_per_file=respondents_per_file,
            zip_size_mb=zip_size_mb,
        )

    async def _render_entry(self, entry: PdfDistribution, request: ProcessPdfRequest) -> bytes:
        fetch_timer = time.perf_counter()
        source = await self._fetch_pdf(entry.pdf_url)
        _log_timing("DOWNLOAD", entry.pdf_index, fetch_timer)

        if entry.is_empty or not request.annotate:
            logger.info("PDF %s passed through without annotation", entry.pdf_index)
            return source

        annotate_timer = time.perf_counter()
        result = await self._annotate(
            source,
            entry.respondent_details,
            pages_per_questionnaire=request.metadata.pages_count,
            logo_url=request.metadata.logo_url or None,
            style=self.config.annotation_style,
        )
        _log_timing("ANNOTATE", entry.pdf_index, annotate_timer)
        return result

