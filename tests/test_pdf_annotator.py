"""Tests for stamping respondent codes onto generated PDFs."""
import asyncio
import logging
from io import BytesIO

import pytest
from PIL import Image
from pypdf import PdfReader, PdfWriter

from backend.app.config import DEFAULT_FOOTER_CONTINUE_TEXT, DEFAULT_FOOTER_END_TEXT
from backend.app.distribution import distribute_respondents
from backend.app.errors import AnnotationError, LogoDownloadError
from backend.app.image_downloader import DownloadedImage
from backend.app.pdf_annotator import AnnotationStyle, annotate_pdf


def make_pdf(page_count: int) -> bytes:
    writer = PdfWriter()
    for _ in range(page_count):
        writer.add_blank_page(width=595, height=842)
    buffer = BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def make_png() -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (60, 30), "navy").save(buffer, format="PNG")
    return buffer.getvalue()


def page_texts(pdf_bytes: bytes) -> list:
    return [page.extract_text() or "" for page in PdfReader(BytesIO(pdf_bytes)).pages]


def has_image(pdf_bytes: bytes, page_index: int) -> bool:
    page = PdfReader(BytesIO(pdf_bytes)).pages[page_index]
    resources = page.get("/Resources")
    return bool(resources) and "/XObject" in resources.get_object()


def details_for(codes, pages):
    return distribute_respondents(codes, ["https://example.test/a.pdf"], pages)[0].respondent_details


async def _no_logo(url):
    raise AssertionError("logo should not be fetched")


def test_codes_stamped_on_planned_pages_only():
    source = make_pdf(12)
    result = asyncio.run(
        annotate_pdf(source, details_for(["ALPHA", "BRAVO"], 4), pages_per_questionnaire=4, image_fetcher=_no_logo)
    )
    texts = page_texts(result)

    assert len(texts) == 12
    for index in (2, 3, 4, 5):
        assert "ALPHA" in texts[index]
    for index in (8, 9, 10, 11):
        assert "BRAVO" in texts[index]
    for index in (0, 1, 6, 7):
        assert "ALPHA" not in texts[index]
        assert "BRAVO" not in texts[index]


def test_footer_marks_last_page_of_each_respondent():
    source = make_pdf(12)
    result = asyncio.run(
        annotate_pdf(source, details_for(["ALPHA", "BRAVO"], 4), pages_per_questionnaire=4, image_fetcher=_no_logo)
    )
    texts = page_texts(result)

    assert "achterkant" in texts[2]
    assert "Einde van de vragenlijst" in texts[5]
    assert "Einde van de vragenlijst" in texts[11]
    assert "Einde van de vragenlijst" not in texts[8]


def test_custom_footer_text():
    style = AnnotationStyle(footer_continue_text="Please turn over", footer_end_text="All done")
    result = asyncio.run(
        annotate_pdf(
            make_pdf(6),
            details_for(["ALPHA"], 3),
            pages_per_questionnaire=3,
            style=style,
            image_fetcher=_no_logo,
        )
    )
    texts = page_texts(result)
    assert "Please turn over" in texts[2]
    assert "All done" in texts[4]
    assert DEFAULT_FOOTER_END_TEXT not in texts[4]
    assert DEFAULT_FOOTER_CONTINUE_TEXT not in texts[2]


def test_logo_is_drawn_when_available():
    async def fetch(url):
        assert url == "https://example.test/logo.png"
        return DownloadedImage(payload=make_png(), content_type="image/png")

    result = asyncio.run(
        annotate_pdf(
            make_pdf(6),
            details_for(["ALPHA"], 4),
            pages_per_questionnaire=4,
            logo_url="https://example.test/logo.png",
            image_fetcher=fetch,
        )
    )
    assert has_image(result, 2)
    assert not has_image(result, 0)


def test_logo_failure_degrades_gracefully(caplog):
    async def fetch(url):
        raise LogoDownloadError("Failed to download image", url=url, cause="Status code: 404")

    with caplog.at_level(logging.WARNING):
        result = asyncio.run(
            annotate_pdf(
                make_pdf(6),
                details_for(["ALPHA"], 4),
                pages_per_questionnaire=4,
                logo_url="https://example.test/missing.png",
                image_fetcher=fetch,
            )
        )

    assert "ALPHA" in page_texts(result)[2]
    assert not has_image(result, 2)
    assert "Continuing without it" in caplog.text


def test_undecodable_logo_degrades_gracefully(caplog):
    async def fetch(url):
        return DownloadedImage(payload=b"definitely not an image", content_type="image/png")

    with caplog.at_level(logging.WARNING):
        result = asyncio.run(
            annotate_pdf(
                make_pdf(6),
                details_for(["ALPHA"], 4),
                pages_per_questionnaire=4,
                logo_url="https://example.test/broken.png",
                image_fetcher=fetch,
            )
        )
    assert "ALPHA" in page_texts(result)[2]
    assert "Continuing without it" in caplog.text


def test_short_pdf_warns_and_skips_missing_pages(caplog):
    with caplog.at_level(logging.WARNING):
        result = asyncio.run(
            annotate_pdf(make_pdf(4), details_for(["ALPHA"], 4), pages_per_questionnaire=4, image_fetcher=_no_logo)
        )
    texts = page_texts(result)

    assert len(texts) == 4
    assert "ALPHA" in texts[2]
    assert "ALPHA" in texts[3]
    assert "page count mismatch" in caplog.text
    assert "out of bounds" in caplog.text


def test_unreadable_pdf_raises_annotation_error():
    with pytest.raises(AnnotationError):
        asyncio.run(
            annotate_pdf(b"not a pdf at all", details_for(["ALPHA"], 2), pages_per_questionnaire=2, image_fetcher=_no_logo)
        )
