from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import Body, FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .access_log import AccessLogMiddleware
from .batch_processor import BatchProcessor
from .config import get_settings
from .errors import BatchProcessingError, BatchValidationError
from .models import (
    AnnotationScenario,
    AnnotationScenarioResult,
    RespondentBreakdown,
    format_error_location,
    parse_process_request,
)
from .page_calculator import calculate_annotation_pages, pages_per_respondent_block

logger = logging.getLogger("uvicorn.error")
settings = get_settings()

app = FastAPI(title="Questionnaire Batch Backend", version="1.0.0")

app.add_middleware(AccessLogMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_allow_origins),
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)

batch_processor = BatchProcessor.from_settings(settings)

SAMPLE_SCENARIOS = (
    AnnotationScenario(title="2 respondents, 4 questionnaire pages", respondents=2, pages=4),
    AnnotationScenario(title="3 respondents, 5 questionnaire pages", respondents=3, pages=5),
    AnnotationScenario(title="1 respondent, 3 questionnaire pages", respondents=1, pages=3),
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    loc = tuple(first.get("loc", ()))
    if not loc or loc[0] == "body":
        error = BatchValidationError("body", "Request body is missing or is not a JSON object.")
    else:
        # Drop the "query" / "path" / "header" prefix FastAPI adds.
        field = format_error_location(loc[1:])
        error = BatchValidationError(field, f"Invalid '{field}': {first.get('msg', 'invalid value')}")
    return JSONResponse(status_code=error.status_code, content={"detail": error.to_payload()})


def _http_error(exc: BatchProcessingError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.to_payload())


@app.get("/api/ping")
def ping() -> Dict[str, str]:
    return {"status": "ok"}


@app.post("/api/process-pdf")
async def process_pdf(
    payload: Optional[Dict[str, Any]] = Body(default=None),
    debug: bool = Query(False),
) -> Dict[str, Any]:
    try:
        request = parse_process_request(payload)
    except BatchValidationError as exc:
        logger.warning("Rejected request: %s", exc.message)
        raise _http_error(exc) from exc

    processor = batch_processor
    if debug:
        if not processor.config.debug_plan_enabled:
            raise HTTPException(status_code=403, detail={"message": "Debug mode is disabled."})
        try:
            return {"status": "debug", **processor.plan_payload(request)}
        except ValueError as exc:
            raise _http_error(BatchValidationError("pdfUrls", str(exc))) from exc

    try:
        response = await processor.process(request)
    except BatchProcessingError as exc:
        logger.error("Batch aborted (%s): %s", exc.__class__.__name__, exc.cause or exc.message)
        raise _http_error(exc) from exc
    return response.model_dump(by_alias=True)


@app.get("/api/test-annotation", response_model=List[AnnotationScenarioResult])
def annotation_examples() -> List[AnnotationScenarioResult]:
    results: List[AnnotationScenarioResult] = []
    for scenario in SAMPLE_SCENARIOS:
        block_size = pages_per_respondent_block(scenario.pages)
        results.append(
            AnnotationScenarioResult(
                scenario=scenario.title,
                pages_per_respondent_block=block_size,
                total_expected_pdf_pages=block_size * scenario.respondents,
                breakdown=[
                    RespondentBreakdown(
                        respondent_index_in_pdf=index,
                        annotation_pages=calculate_annotation_pages(index, scenario.pages),
                    )
                    for index in range(scenario.respondents)
                ],
            )
        )
    return results


@app.on_event("startup")
def log_startup() -> None:
    logger.info("CORS origins: %s", ", ".join(settings.cors_allow_origins))
    logger.info(
        "Limits: max_zip_bytes=%s, pdf_timeout=%ss, logo_timeout=%ss, debug_plan=%s",
        settings.max_zip_bytes,
        settings.pdf_download_timeout,
        settings.logo_download_timeout,
        settings.debug_plan_enabled,
    )
