"""
Consultation pipeline: orchestrates the two request flows.

Analyze flow:
  ┌────────────┐
  │ Form + imgs│
  └─────┬──────┘
        │
  ┌─────▼──────┐
  │   Prompt   │   ← mode-specific framing
  └─────┬──────┘
        │
  ┌─────▼──────┐
  │ ModelClient│   ← injected; failures → UpstreamUnavailable
  └─────┬──────┘
        │
  ┌─────▼──────┐
  │  Extract   │   ← never raises; fallback on any failure
  └─────┬──────┘
        │
  ┌─────▼──────┐
  │   Record   │
  └────────────┘

Report flow:  RenderRequest → layout.render → RenderedDocument

Design principles:
  - The model client is injected, never a process-wide singleton.
  - Extraction failures are absorbed; only boundary errors propagate.
  - No retries: a failed upstream call is reported to the caller as-is.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Sequence

from .exceptions import InvalidFormData
from .extraction import extract
from .layout import RenderedDocument, render
from .model_client import ModelClient
from .models import DiagnosisForm, EncodedImage, Mode, Record, RenderRequest, SkincareForm
from .prompts import build_prompt

logger = logging.getLogger(__name__)

MAX_IMAGES = 4

# Skincare plans only look at a single face photo.
_IMAGE_LIMITS: dict[Mode, int] = {
    Mode.DIAGNOSIS: MAX_IMAGES,
    Mode.SKINCARE: 1,
}


class ConsultationPipeline:
    """Runs consultations against an injected model client.

    Usage:
        pipeline = ConsultationPipeline(OpenAIModelClient())
        record = pipeline.analyze(Mode.DIAGNOSIS, DiagnosisForm(issue="rash"), images)
        document = pipeline.report(RenderRequest(mode=..., record=record, form_data=...))
    """

    def __init__(self, client: ModelClient):
        self.client = client

    def analyze(
        self,
        mode: Mode,
        form: DiagnosisForm | SkincareForm,
        images: Sequence[EncodedImage] = (),
    ) -> Record:
        """Ask the model about `form` and `images`; always returns a valid record.

        Raises:
            InvalidFormData: more than MAX_IMAGES images were supplied.
            UpstreamUnavailable: the model call failed.
        """
        if len(images) > MAX_IMAGES:
            raise InvalidFormData(
                f"At most {MAX_IMAGES} images are accepted",
                details={"received": len(images)},
            )
        used = list(images)[: _IMAGE_LIMITS[mode]]

        prompt = build_prompt(mode, form, image_count=len(used))

        logger.info("Requesting %s analysis (%d image(s))", mode.value, len(used))
        raw_text = self.client.generate(prompt, used)

        logger.info("Extracting %s record from %d chars", mode.value, len(raw_text))
        return extract(raw_text, mode)

    def report(self, request: RenderRequest, generated_on: date | None = None) -> RenderedDocument:
        """Render the document for an already-validated record."""
        return render(request, generated_on=generated_on)
