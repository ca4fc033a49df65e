"""Pydantic models for the questionnaire batch endpoints."""
from __future__ import annotations

from typing import Any, List, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr, ValidationError, field_validator

from .errors import BatchValidationError

# Largest accepted questionnaire length per respondent.
MAX_PAGES_COUNT = 1000


class Respondent(BaseModel):
    code: StrictStr = Field(min_length=1)


class ProcessMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    logo_url: StrictStr = Field(alias="logoUrl")
    pages_count: StrictInt = Field(alias="pagesCount", ge=0, le=MAX_PAGES_COUNT)
    respondenten: List[Respondent]

    @field_validator("pages_count", mode="before")
    @classmethod
    def _whole_number_pages(cls, value: Any) -> Any:
        # JSON numbers like 4.0 are whole page counts
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return value

    @property
    def respondent_codes(self) -> List[str]:
        return [respondent.code for respondent in self.respondenten]


class ProcessPdfRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    pdf_urls: List[StrictStr] = Field(alias="pdfUrls", min_length=1)
    annotate: StrictBool
    metadata: ProcessMetadata


class ProcessPdfResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: Literal["success"] = "success"
    file_io_url: str = Field(alias="fileIoUrl")
    expires: str
    respondent_count: int = Field(alias="respondentCount")
    files_in_zip: int = Field(alias="filesInZip")
    respondents_per_file: List[int] = Field(alias="respondentsPerFile")
    zip_size_mb: float = Field(alias="zipSizeMB")


class AnnotationScenario(BaseModel):
    title: str
    respondents: int
    pages: int


class RespondentBreakdown(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    respondent_index_in_pdf: int = Field(alias="respondentIndexInPdf")
    annotation_pages: List[int] = Field(alias="annotationPages")


class AnnotationScenarioResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    scenario: str
    pages_per_respondent_block: int = Field(alias="pagesPerRespondentBlock")
    total_expected_pdf_pages: int = Field(alias="totalExpectedPdfPages")
    breakdown: List[RespondentBreakdown]


def format_error_location(loc: tuple) -> str:
    field = ""
    for part in loc:
        if isinstance(part, int):
            field += f"[{part}]"
        else:
            field = f"{field}.{part}" if field else str(part)
    return field or "body"


def parse_process_request(payload: Any) -> ProcessPdfRequest:
    """Validate a raw request body, naming the first offending field on failure."""
    if not isinstance(payload, dict):
        raise BatchValidationError("body", "Request body is missing or is not a JSON object.")
    try:
        return ProcessPdfRequest.model_validate(payload)
    except ValidationError as exc:
        first = exc.errors()[0]
        field = format_error_location(tuple(first.get("loc", ())))
        raise BatchValidationError(field, f"Invalid '{field}': {first.get('msg', 'invalid value')}") from exc
