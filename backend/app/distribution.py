"""Distribute respondents over the source PDFs and plan their annotations."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Tuple

from .page_calculator import calculate_annotation_pages, pages_per_respondent_block


@dataclass(frozen=True)
class RespondentAnnotation:
    code: str
    respondent_index_in_pdf: int
    annotation_pages: Tuple[int, ...]

    def to_payload(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "respondentIndexInPdf": self.respondent_index_in_pdf,
            "annotationPages": list(self.annotation_pages),
        }


@dataclass(frozen=True)
class PdfDistribution:
    pdf_url: str
    pdf_index: int
    respondent_codes: Tuple[str, ...]
    respondent_details: Tuple[RespondentAnnotation, ...]

    @property
    def is_empty(self) -> bool:
        return not self.respondent_codes

    def expected_page_count(self, pages_per_questionnaire: int) -> int:
        return pages_per_respondent_block(pages_per_questionnaire) * len(self.respondent_codes)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "pdfUrl": self.pdf_url,
            "pdfIndex": self.pdf_index,
            "respondentCodes": list(self.respondent_codes),
            "respondentDetails": [detail.to_payload() for detail in self.respondent_details],
        }


def respondents_per_pdf(total_respondents: int, pdf_count: int) -> int:
    """Slice size per PDF; rounds up so the last PDF gets the short slice."""
    if pdf_count < 1:
        raise ValueError("pdf_count must be >= 1")
    return math.ceil(total_respondents / pdf_count)


def distribute_respondents(
    respondent_codes: Sequence[str],
    pdf_urls: Sequence[str],
    pages_per_questionnaire: int,
) -> List[PdfDistribution]:
    """Split respondents over the PDFs in order and plan the pages to stamp.

    Returns exactly one entry per PDF URL. Entries past the end of the
    respondent list carry empty slices. Annotation pages are computed from
    the respondent's index inside its own slice, because each output PDF is
    numbered from its own first page.
    """
    if not pdf_urls:
        raise ValueError("At least one PDF URL is required")

    codes = list(respondent_codes)
    per_pdf = respondents_per_pdf(len(codes), len(pdf_urls))

    distribution: List[PdfDistribution] = []
    for pdf_index, pdf_url in enumerate(pdf_urls):
        start = pdf_index * per_pdf
        slice_codes = tuple(codes[start:start + per_pdf])
        details = tuple(
            RespondentAnnotation(
                code=code,
                respondent_index_in_pdf=local_index,
                annotation_pages=tuple(calculate_annotation_pages(local_index, pages_per_questionnaire)),
            )
            for local_index, code in enumerate(slice_codes)
        )
        distribution.append(
            PdfDistribution(
                pdf_url=pdf_url,
                pdf_index=pdf_index,
                respondent_codes=slice_codes,
                respondent_details=details,
            )
        )
    return distribution


def build_plan_payload(
    respondent_codes: Sequence[str],
    pdf_urls: Sequence[str],
    pages_per_questionnaire: int,
) -> Dict[str, Any]:
    distribution = distribute_respondents(respondent_codes, pdf_urls, pages_per_questionnaire)
    return {
        "pagesPerRespondentBlock": pages_per_respondent_block(pages_per_questionnaire),
        "respondentsPerPdf": respondents_per_pdf(len(respondent_codes), len(pdf_urls)),
        "totalRespondents": len(respondent_codes),
        "distribution": [entry.to_payload() for entry in distribution],
    }
