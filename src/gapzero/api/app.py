"""HTTP surface: streaming and blocking analysis, standalone ATS scoring."""

import asyncio
import json
import logging
from collections.abc import Callable

from fastapi import FastAPI, File, Form, Request, UploadFile
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import ValidationError
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from gapzero.config import AppConfig, load_config
from gapzero.errors import (
    DocumentTooLargeError,
    GapZeroError,
    InvalidRequestError,
    UnsupportedDocumentError,
)
from gapzero.models.base import WireModel
from gapzero.models.request import AnalysisRequest, Questionnaire, UploadedDocument
from gapzero.parsers.document_parser import is_pdf
from gapzero.pipeline.orchestrator import AnalysisOrchestrator
from gapzero.pipeline.progress import ProgressChannel

logger = logging.getLogger(__name__)

SSE_HEADERS = {
    "Cache-Control": "no-cache, no-transform",
    "X-Accel-Buffering": "no",
    "Connection": "keep-alive",
}
MIN_ATS_TEXT_CHARS = 50

OrchestratorFactory = Callable[[], AnalysisOrchestrator]


class ATSScoreRequest(WireModel):
    cv_text: str = ""
    job_posting: str = ""
    company_name: str | None = None
    job_url: str | None = None


def parse_questionnaire(raw: str | None) -> Questionnaire:
    """Validate the questionnaire form field.

    Raises InvalidRequestError naming the first missing or invalid field.
    """
    if not raw:
        raise InvalidRequestError("Questionnaire is required.")
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        raise InvalidRequestError("Invalid questionnaire format.") from None
    if not isinstance(data, dict):
        raise InvalidRequestError("Invalid questionnaire format.")
    try:
        return Questionnaire.model_validate(data)
    except ValidationError as exc:
        err = exc.errors()[0]
        field = str(err["loc"][0]) if err["loc"] else "questionnaire"
        if err["type"] in ("missing", "string_too_short"):
            raise InvalidRequestError(f"{field} is required.") from None
        raise InvalidRequestError(f"{field} is invalid.") from None


async def read_pdf_upload(upload: UploadFile, max_bytes: int) -> UploadedDocument:
    """Read and check an uploaded PDF: size first, then media type and magic bytes."""
    content = await upload.read()
    if len(content) > max_bytes:
        raise DocumentTooLargeError(
            f"Maximum file size is {max_bytes // (1024 * 1024)}MB. Please upload a smaller PDF."
        )
    filename = upload.filename or "cv.pdf"
    media_type = upload.content_type or ""
    if media_type != "application/pdf" and not filename.lower().endswith(".pdf"):
        raise UnsupportedDocumentError("Please upload a PDF file.")
    if not is_pdf(content):
        raise UnsupportedDocumentError("The uploaded file is not a valid PDF document.")
    return UploadedDocument(filename=filename, content=content, media_type="application/pdf")


def create_app(
    config: AppConfig | None = None,
    orchestrator_factory: OrchestratorFactory | None = None,
) -> FastAPI:
    config = config or load_config()
    if orchestrator_factory is None:
        def orchestrator_factory() -> AnalysisOrchestrator:
            return AnalysisOrchestrator.from_config(config)

    limiter = Limiter(
        key_func=get_remote_address,
        storage_uri=config.rate_limit.storage_uri,
        enabled=config.rate_limit.enabled,
    )
    app = FastAPI(title="GapZero API", description="CV gap analysis and ATS scoring", version="0.1.0")
    app.state.limiter = limiter

    @app.exception_handler(GapZeroError)
    async def gapzero_error_handler(request: Request, exc: GapZeroError) -> JSONResponse:
        logger.warning("%s %s -> %d: %s", request.method, request.url.path, exc.status_code, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.title, "message": exc.message},
        )

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
        return JSONResponse(
            status_code=429,
            content={
                "error": "Rate limit exceeded",
                "message": "Too many requests. Please try again later.",
            },
        )

    async def build_request(
        cv: UploadFile | None,
        linked_in_pdf: UploadFile | None,
        questionnaire: str | None,
    ) -> AnalysisRequest:
        if cv is None:
            raise InvalidRequestError("Please upload your CV as a PDF.")
        cv_doc = await read_pdf_upload(cv, config.upload.max_bytes)
        parsed = parse_questionnaire(questionnaire)
        companion = None
        if linked_in_pdf is not None and linked_in_pdf.filename:
            # Companion problems never block the request
            content = await linked_in_pdf.read()
            if len(content) <= config.upload.max_bytes:
                companion = UploadedDocument(filename=linked_in_pdf.filename, content=content)
        return AnalysisRequest(questionnaire=parsed, cv=cv_doc, companion=companion)

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    @app.post("/api/analyze-stream")
    @limiter.limit(config.rate_limit.limit)
    async def analyze_stream(
        request: Request,
        cv: UploadFile | None = File(None),
        linked_in_pdf: UploadFile | None = File(None, alias="linkedInPdf"),
        questionnaire: str | None = Form(None),
    ):
        analysis_request = await build_request(cv, linked_in_pdf, questionnaire)
        orchestrator = orchestrator_factory()

        channel = ProgressChannel()
        task = asyncio.create_task(orchestrator.stream(analysis_request, channel))

        async def event_generator():
            try:
                async for event in channel:
                    yield event.to_frame()
            finally:
                if not task.done():
                    channel.disconnect()
                    if config.pipeline.cancel_on_disconnect:
                        logger.info("Client disconnected, cancelling analysis")
                        task.cancel()

        return StreamingResponse(
            event_generator(), media_type="text/event-stream", headers=SSE_HEADERS
        )

    @app.post("/api/analyze")
    @limiter.limit(config.rate_limit.limit)
    async def analyze(
        request: Request,
        cv: UploadFile | None = File(None),
        linked_in_pdf: UploadFile | None = File(None, alias="linkedInPdf"),
        questionnaire: str | None = Form(None),
    ):
        analysis_request = await build_request(cv, linked_in_pdf, questionnaire)
        orchestrator = orchestrator_factory()
        try:
            result = await orchestrator.analyze(analysis_request)
        except GapZeroError:
            raise
        except Exception as exc:
            logger.exception("Analysis failed")
            raise GapZeroError() from exc
        return JSONResponse(result.to_payload())

    @app.post("/api/ats-score")
    @limiter.limit(config.rate_limit.limit)
    async def ats_score(request: Request, body: ATSScoreRequest):
        if len(body.cv_text.strip()) < MIN_ATS_TEXT_CHARS:
            raise InvalidRequestError("CV text is required and must be at least 50 characters.")
        if len(body.job_posting.strip()) < MIN_ATS_TEXT_CHARS:
            raise InvalidRequestError("Job posting text is required and must be at least 50 characters.")
        orchestrator = orchestrator_factory()
        try:
            result = await orchestrator.ats_scorer.score(
                body.cv_text,
                body.job_posting,
                company_name=body.company_name,
                job_url=body.job_url,
            )
        except GapZeroError:
            raise
        except Exception as exc:
            logger.exception("ATS scoring failed")
            raise GapZeroError(
                "An error occurred while analyzing your CV. Please try again."
            ) from exc
        return JSONResponse(result.to_payload())

    return app
