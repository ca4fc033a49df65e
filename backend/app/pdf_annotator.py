"""Stamp respondent codes, a logo and footer text onto questionnaire pages."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from io import BytesIO
from typing import Awaitable, Callable, Dict, Optional, Sequence, Tuple

from pypdf import PageObject, PdfReader, PdfWriter
from pypdf.errors import PdfReadError
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from .config import DEFAULT_FOOTER_CONTINUE_TEXT, DEFAULT_FOOTER_END_TEXT
from .distribution import RespondentAnnotation
from .errors import AnnotationError
from .image_downloader import DownloadedImage, download_image
from .page_calculator import pages_per_respondent_block

logger = logging.getLogger(__name__)

ImageFetcher = Callable[[str], Awaitable[DownloadedImage]]


@dataclass(frozen=True)
class AnnotationStyle:
    footer_continue_text: str = DEFAULT_FOOTER_CONTINUE_TEXT
    footer_end_text: str = DEFAULT_FOOTER_END_TEXT
    font_name: str = "Helvetica"
    font_size: float = 10
    margin: float = 20
    logo_max_size: float = 100
    footer_height: float = 28
    footer_gray: float = 0.9


async def annotate_pdf(
    pdf_bytes: bytes,
    respondents: Sequence[RespondentAnnotation],
    *,
    pages_per_questionnaire: int,
    logo_url: Optional[str] = None,
    style: Optional[AnnotationStyle] = None,
    image_fetcher: ImageFetcher = download_image,
) -> bytes:
    """Return a copy of ``pdf_bytes`` with every planned page stamped.

    A logo that cannot be downloaded or decoded is skipped with a warning.
    A page count that differs from the plan is reported as a warning and only
    pages that exist are stamped.

    Raises:
        AnnotationError: If the PDF cannot be read or written.
    """
    style = style or AnnotationStyle()
    logger.info("Annotating PDF for %s respondents.", len(respondents))

    logo = await _load_logo(logo_url, image_fetcher)

    try:
        reader = PdfReader(BytesIO(pdf_bytes))
        actual_pages = len(reader.pages)
    except (PdfReadError, ValueError) as exc:
        raise AnnotationError("Could not read PDF for annotation", cause=str(exc)) from exc

    block_size = pages_per_respondent_block(pages_per_questionnaire)
    expected_pages = block_size * len(respondents)
    if expected_pages != actual_pages:
        logger.warning(
            "PDF page count mismatch. Expected %s pages based on %s respondents with blocks of %s pages, "
            "but document has %s pages. Annotation will proceed but might be incorrect.",
            expected_pages,
            len(respondents),
            block_size,
            actual_pages,
        )

    stamps = _plan_stamps(respondents, actual_pages, style)

    try:
        writer = PdfWriter()
        for page_index, page in enumerate(reader.pages):
            stamp = stamps.get(page_index)
            if stamp is not None:
                code, footer_text = stamp
                width = float(page.mediabox.width)
                height = float(page.mediabox.height)
                page.merge_page(_build_overlay(width, height, code, footer_text, logo, style))
            writer.add_page(page)
        buffer = BytesIO()
        writer.write(buffer)
    except (PdfReadError, ValueError, KeyError) as exc:
        raise AnnotationError("Failed to annotate PDF", cause=str(exc)) from exc

    logger.info("PDF annotation completed: %s pages stamped.", len(stamps))
    return buffer.getvalue()


def _plan_stamps(
    respondents: Sequence[RespondentAnnotation],
    actual_pages: int,
    style: AnnotationStyle,
) -> Dict[int, Tuple[str, str]]:
    stamps: Dict[int, Tuple[str, str]] = {}
    for respondent in respondents:
        pages = respondent.annotation_pages
        last_page = pages[-1] if pages else None
        for page_index in pages:
            if page_index >= actual_pages:
                logger.warning(
                    "Skipping annotation for respondent %s on page index %s, as it is out of bounds.",
                    respondent.code,
                    page_index,
                )
                continue
            footer_text = style.footer_end_text if page_index == last_page else style.footer_continue_text
            stamps[page_index] = (respondent.code, footer_text)
    return stamps


async def _load_logo(logo_url: Optional[str], image_fetcher: ImageFetcher) -> Optional[ImageReader]:
    if not logo_url:
        return None
    try:
        image = await image_fetcher(logo_url)
        reader = ImageReader(BytesIO(image.payload))
        reader.getSize()
    except Exception as exc:  # noqa: BLE001
        logger.warning("Could not download or embed logo. Continuing without it. Reason: %s", exc)
        return None
    logger.info("Logo embedded successfully.")
    return reader


def _build_overlay(
    width: float,
    height: float,
    code: str,
    footer_text: str,
    logo: Optional[ImageReader],
    style: AnnotationStyle,
) -> PageObject:
    buffer = BytesIO()
    c = canvas.Canvas(buffer, pagesize=(width, height))

    c.setFillColorRGB(0, 0, 0)
    c.setFont(style.font_name, style.font_size)
    c.drawString(style.margin, height - 40, code)

    if logo is not None:
        logo_width, logo_height = logo.getSize()
        ratio = min(style.logo_max_size / logo_width, style.logo_max_size / logo_height)
        scaled_width = logo_width * ratio
        scaled_height = logo_height * ratio
        c.drawImage(
            logo,
            width - scaled_width - style.margin,
            height - scaled_height - style.margin,
            width=scaled_width,
            height=scaled_height,
            mask="auto",
        )

    if footer_text:
        c.setFillGray(style.footer_gray)
        c.rect(width * 0.1, style.margin, width * 0.8, style.footer_height, stroke=0, fill=1)
        c.setFillColorRGB(0, 0, 0)
        text_width = stringWidth(footer_text, style.font_name, style.font_size)
        c.drawString((width - text_width) / 2, style.margin + 6, footer_text)

    c.showPage()
    c.save()
    buffer.seek(0)
    return PdfReader(buffer).pages[0]
