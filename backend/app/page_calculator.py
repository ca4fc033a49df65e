"""Page arithmetic for respondent blocks inside a questionnaire PDF.

Every respondent occupies a fixed-size block of pages: one cover letter, one
blank page, the questionnaire pages and, when that total is odd, one extra
blank page so the next block starts on a fresh sheet when printed duplex.
"""
from __future__ import annotations

import logging
from typing import List

logger = logging.getLogger(__name__)

# Cover letter + blank page in front of the questionnaire pages.
LEADING_PAGES = 2


def pages_per_respondent_block(pages_per_questionnaire: int) -> int:
    """Return the total number of pages reserved for one respondent.

    The result is always even and at least 2.
    """
    if pages_per_questionnaire < 0:
        raise ValueError("pages_per_questionnaire must be >= 0")
    total = LEADING_PAGES + pages_per_questionnaire
    if total % 2 != 0:
        total += 1
    return total


def calculate_annotation_pages(respondent_index_in_pdf: int, pages_per_questionnaire: int) -> List[int]:
    """Return the 0-based page indices to stamp for one respondent.

    Args:
        respondent_index_in_pdf: Position of the respondent within its own PDF,
            not within the overall respondent list.
        pages_per_questionnaire: Number of questionnaire pages per respondent.

    Returns:
        Contiguous, increasing page indices starting right after the cover
        letter and blank page of the respondent's block. Empty when the
        questionnaire has no pages.
    """
    if respondent_index_in_pdf < 0:
        raise ValueError("respondent_index_in_pdf must be >= 0")
    pages_per_block = pages_per_respondent_block(pages_per_questionnaire)
    block_start = respondent_index_in_pdf * pages_per_block
    first_page = block_start + LEADING_PAGES
    pages = list(range(first_page, first_page + pages_per_questionnaire))

    logger.debug(
        "Respondent %s: block size %s, block starts at %s, annotating %s",
        respondent_index_in_pdf,
        pages_per_block,
        block_start,
        pages,
    )
    return pages
