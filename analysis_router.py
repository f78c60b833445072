"""
FastAPI router for the repetition analysis endpoints
====================================================

Provides HTTP API endpoints for:
- Multipart analysis of inline text and uploaded documents (.txt, .docx, .rtf, .html)
- JSON analysis of inline text
- Health check
"""

from __future__ import annotations

import logging
import time
from typing import List, Optional

from fastapi import APIRouter, File, Form, UploadFile, status
from fastapi.responses import JSONResponse

from config import config
from models import BatchResponse, ErrorResponse, TextAnalysisRequest
from services.batch_analyzer import BatchInput, BatchReport, analyze_batch

logger = logging.getLogger(__name__)

router = APIRouter(tags=["analysis"])

EMPTY_REQUEST_MESSAGE = "Upload at least one file or provide inline text."


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _report_response(report: BatchReport) -> BatchResponse:
    return BatchResponse.model_validate(report.to_dict())


async def _run_batch(inputs: List[BatchInput]) -> BatchResponse | JSONResponse:
    start_time = time.time()
    try:
        report = await analyze_batch(
            inputs,
            analyzer_settings=config.ANALYZER,
            upload_settings=config.UPLOADS,
            verbose=config.VERBOSE_PHASE_LOGS,
        )
    except Exception as e:
        logger.error(f"Repetition analysis failed: {e}", exc_info=True)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, f"Analysis failed: {str(e)}")

    processing_time_ms = (time.time() - start_time) * 1000
    logger.info(
        "Batch %s analyzed %d input(s) in %.1f ms (%d repetitions)",
        report.batch_id,
        len(report.items),
        processing_time_ms,
        report.total_repetitions,
    )
    return _report_response(report)


# ============================================================================
# ENDPOINTS
# ============================================================================

@router.post(
    "/api/analyze",
    response_model=BatchResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Analyze Repeated Sentences and Phrases",
    description=(
        "Accepts inline text and/or uploaded documents and reports sentences and "
        "3-8 word phrases that recur on two or more distinct lines of each input. "
        "A failure on one input is reported on that input only."
    ),
)
async def analyze_endpoint(
    text: Optional[str] = Form(default=None),
    files: Optional[List[UploadFile]] = File(default=None),
):
    uploads = files or []
    has_text = bool(text and text.strip())

    if not uploads and not has_text:
        return _error(status.HTTP_400_BAD_REQUEST, EMPTY_REQUEST_MESSAGE)

    max_files = config.UPLOADS.max_files_per_request
    if len(uploads) > max_files:
        return _error(
            status.HTTP_400_BAD_REQUEST,
            f"Too many files: {len(uploads)} uploaded, at most {max_files} allowed.",
        )

    inputs: List[BatchInput] = []
    if has_text:
        inputs.append(BatchInput.inline(text))

    for upload in uploads:
        # Read one byte past the limit so oversized files are rejected without buffering them whole.
        data = await upload.read(config.UPLOADS.max_size_bytes + 1)
        inputs.append(BatchInput.upload(upload.filename or "", data))

    return await _run_batch(inputs)


@router.post(
    "/api/analyze/text",
    response_model=BatchResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Analyze Inline Text",
    description="JSON variant of /api/analyze for a single inline text.",
)
async def analyze_text_endpoint(request: TextAnalysisRequest):
    if not request.text.strip():
        return _error(status.HTTP_400_BAD_REQUEST, EMPTY_REQUEST_MESSAGE)
    return await _run_batch([BatchInput.inline(request.text)])


@router.get(
    "/health",
    summary="Health Check",
    description="Verify that the service is running",
)
async def health_check():
    return {"status": "ok"}
