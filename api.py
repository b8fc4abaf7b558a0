"""
ClearCue — FastAPI Server
==========================

HTTP boundary for skin consultations.

Endpoints:
    POST /analyze           Multipart: mode, form JSON blob, up to 4 images → record JSON
    POST /generate-pdf      JSON: mode, record, formData → PDF download
    GET  /health            Health check / readiness probe

Run:
    uvicorn api:app --reload              # Dev (http://localhost:8000)
    uvicorn api:app --host 0.0.0.0        # Production

Docs:
    http://localhost:8000/docs             # Swagger UI (auto-generated)
"""

from __future__ import annotations

import asyncio
import base64
import json
import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from dotenv import load_dotenv
from fastapi import FastAPI, File, Form, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from clearcue import __version__
from clearcue.config import Settings
from clearcue.exceptions import (
    ClearCueError,
    InvalidFormData,
    RenderError,
    ServiceUnavailable,
    UpstreamUnavailable,
)
from clearcue.layout import build_render_request
from clearcue.model_client import OpenAIModelClient
from clearcue.models import FORM_TYPES, EncodedImage, Mode, parse_mode
from clearcue.pipeline import ConsultationPipeline

load_dotenv()

logger = logging.getLogger(__name__)

ANALYZE_FAILED = "Failed to analyze. Please try again or contact support."
PDF_FAILED = "Failed to generate PDF"


# ─── Application Lifespan ────────────────────────────────────────────

_pipeline: ConsultationPipeline | None = None
_settings: Settings = Settings.from_env()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the pipeline (and its model client) once on startup."""
    global _pipeline  # noqa: PLW0603
    _pipeline = ConsultationPipeline(OpenAIModelClient(_settings))
    yield
    _pipeline = None


# ─── FastAPI App ─────────────────────────────────────────────────────

app = FastAPI(
    title="ClearCue API",
    description=(
        "AI-powered skin consultations. Turns a model's free-text reply into a "
        "validated diagnosis or skincare plan, and renders it as a PDF report."
    ),
    version=__version__,
    lifespan=lifespan,
)


# ─── Request / Response Schemas ─────────────────────────────────────


class GeneratePdfRequest(BaseModel):
    """Request body for the /generate-pdf endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    mode: str = Field(..., description="'diagnosis' or 'skincare'")
    record: dict[str, Any] = Field(..., description="The record returned by /analyze")
    form_data: dict[str, Any] = Field(default_factory=dict, alias="formData")


class HealthResponse(BaseModel):
    status: str
    version: str
    model: str


# ─── Error Translation ───────────────────────────────────────────────


@app.exception_handler(ClearCueError)
async def handle_clearcue_error(request: Request, exc: ClearCueError) -> JSONResponse:
    """Translate core exceptions into `{"error", "code"}` JSON bodies."""
    if isinstance(exc, UpstreamUnavailable):
        message = ANALYZE_FAILED
    elif isinstance(exc, RenderError):
        message = PDF_FAILED
    else:
        message = exc.message

    if exc.status_code >= 500:
        logger.error("%s %s failed: [%s] %s", request.method, request.url.path, exc.code, exc.message)
    else:
        logger.info("%s %s rejected: [%s] %s", request.method, request.url.path, exc.code, exc.message)

    return JSONResponse(status_code=exc.status_code, content={"error": message, "code": exc.code})


@app.exception_handler(RequestValidationError)
async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Missing or mistyped request fields, in the same body shape as other errors."""
    fields = sorted({".".join(str(p) for p in err["loc"][1:]) for err in exc.errors()})
    logger.info("%s %s rejected: [INVALID_REQUEST] %s", request.method, request.url.path, fields)
    return JSONResponse(
        status_code=422,
        content={"error": f"Invalid request fields: {', '.join(fields)}", "code": "INVALID_REQUEST"},
    )


# ─── Helpers ─────────────────────────────────────────────────────────


def _get_pipeline() -> ConsultationPipeline:
    if _pipeline is None:
        raise ServiceUnavailable("Pipeline not initialised")
    return _pipeline


def _parse_form(mode: Mode, blob: Optional[str]):
    """Decode the mode's JSON form blob into its typed form model."""
    try:
        data = json.loads(blob) if blob else {}
    except json.JSONDecodeError:
        raise InvalidFormData("Form data must be valid JSON") from None

    try:
        return FORM_TYPES[mode].model_validate(data)
    except ValidationError as e:
        raise InvalidFormData(
            "Form data does not match the selected mode",
            details={"errors": e.errors(include_url=False)},
        ) from e


async def _read_images(uploads: list[Optional[UploadFile]]) -> list[EncodedImage]:
    """Read and base64-encode the uploaded images, skipping empty slots."""
    limit = _settings.max_image_bytes
    images: list[EncodedImage] = []
    for upload in uploads:
        if upload is None or not upload.filename:
            continue

        if upload.size and upload.size > limit:
            raise InvalidFormData(
                f"Image '{upload.filename}' is too large", details={"limit_bytes": limit}
            )
        content_type = upload.content_type or ""
        if not content_type.startswith("image/"):
            raise InvalidFormData(
                f"Upload '{upload.filename}' is not an image",
                details={"content_type": content_type or None},
            )

        content = await upload.read()
        if len(content) > limit:
            raise InvalidFormData(
                f"Image '{upload.filename}' is too large", details={"limit_bytes": limit}
            )
        if not content:
            continue

        images.append(
            EncodedImage(data=base64.b64encode(content).decode("ascii"), mime_type=content_type)
        )
    return images


# ─── Endpoints ───────────────────────────────────────────────────────


@app.post(
    "/analyze",
    summary="Analyze skin images and form answers",
    tags=["Consultation"],
    responses={
        400: {"description": "Invalid mode or malformed form data"},
        502: {"description": "The model call failed"},
        503: {"description": "Pipeline not yet initialised"},
    },
)
async def analyze(
    mode: str = Form(...),
    description: Optional[str] = Form(None),
    skincareForm: Optional[str] = Form(None),  # noqa: N803 (wire name)
    image0: Optional[UploadFile] = File(None),
    image1: Optional[UploadFile] = File(None),
    image2: Optional[UploadFile] = File(None),
    image3: Optional[UploadFile] = File(None),
) -> JSONResponse:
    """Run a consultation and return the validated record.

    - **mode**: `diagnosis` (uses `description`) or `skincare` (uses `skincareForm`)
    - **image0..image3**: optional photos; skincare mode only uses `image0`

    Always returns a complete record. When the model reply is unusable the
    mode's generic fallback record is returned instead.
    """
    pipeline = _get_pipeline()
    selected = parse_mode(mode)
    form = _parse_form(selected, description if selected is Mode.DIAGNOSIS else skincareForm)
    images = await _read_images([image0, image1, image2, image3])

    record = await asyncio.to_thread(pipeline.analyze, selected, form, images)
    return JSONResponse(content=record.model_dump(by_alias=True))


@app.post(
    "/generate-pdf",
    summary="Render a record as a PDF report",
    tags=["Consultation"],
    response_class=Response,
    responses={
        200: {"content": {"application/pdf": {}}, "description": "The PDF report"},
        400: {"description": "Invalid mode or malformed form data"},
        500: {"description": "Record does not match the mode"},
    },
)
def generate_pdf(request: GeneratePdfRequest) -> Response:
    """Lay out a diagnosis report or skincare plan and return it as a download."""
    pipeline = _get_pipeline()
    selected = parse_mode(request.mode)
    render_request = build_render_request(selected, request.record, request.form_data)

    document = pipeline.report(render_request)
    return Response(
        content=document.pdf,
        media_type=document.content_type,
        headers={"Content-Disposition": f'attachment; filename="{document.filename}"'},
    )


@app.get(
    "/health",
    summary="Health check",
    tags=["System"],
    responses={503: {"description": "Pipeline not yet initialised"}},
)
def health_check() -> HealthResponse:
    """Returns service status and configuration info."""
    pipeline = _get_pipeline()
    return HealthResponse(
        status="healthy",
        version=__version__,
        model=getattr(pipeline.client, "model", "unknown"),
    )
