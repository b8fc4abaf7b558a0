"""
FastAPI endpoint tests for the ClearCue API.

Uses httpx + FastAPI TestClient with a canned-reply model client. No real
server, no model calls.
"""

from __future__ import annotations

import base64
import dataclasses
import json

import api
import pytest
from api import app
from fastapi.testclient import TestClient
from starlette.datastructures import UploadFile

from clearcue.fallbacks import DIAGNOSIS_FALLBACK, SKINCARE_FALLBACK
from clearcue.pipeline import ConsultationPipeline
from conftest import FakeModelClient

client = TestClient(app)

DIAGNOSIS_REPLY = (
    "Sure, here is the analysis:\n```json\n"
    '{"diagnosis":"Mild eczema","cause":"Dry climate","treatment":["Moisturize"],'
    '"prevention":["Hydrate"],"medicines":["OTC cream"],"naturalRemedies":["Aloe"],'
    '"products":["CeraVe"]}\n```'
)

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


@pytest.fixture
def model() -> FakeModelClient:
    """Install a pipeline around a fake model client (bypasses lifespan)."""
    fake = FakeModelClient(reply=DIAGNOSIS_REPLY)
    api._pipeline = ConsultationPipeline(fake)
    yield fake
    api._pipeline = None


class TestHealthEndpoint:
    def test_health_returns_200(self, model) -> None:
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "healthy", "version": "1.0.0", "model": "fake-model"}

    def test_health_without_pipeline_returns_503(self) -> None:
        api._pipeline = None
        resp = client.get("/health")
        assert resp.status_code == 503
        assert resp.json() == {"error": "Pipeline not initialised", "code": "SERVICE_UNAVAILABLE"}


class TestAnalyzeEndpoint:
    def test_diagnosis_record_is_returned(self, model) -> None:
        resp = client.post(
            "/analyze",
            data={"mode": "diagnosis", "description": json.dumps({"issue": "itchy patches"})},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["diagnosis"] == "Mild eczema"
        assert data["naturalRemedies"] == ["Aloe"]

    def test_form_answers_reach_the_prompt(self, model) -> None:
        client.post(
            "/analyze",
            data={"mode": "diagnosis", "description": json.dumps({"issue": "itchy patches"})},
        )
        prompt, images = model.calls[0]
        assert "- Issue: itchy patches" in prompt
        assert "- Symptoms: Not provided" in prompt
        assert images == []

    def test_images_are_base64_encoded(self, model) -> None:
        resp = client.post(
            "/analyze",
            data={"mode": "diagnosis", "description": "{}"},
            files={
                "image0": ("a.png", PNG_BYTES, "image/png"),
                "image1": ("b.png", PNG_BYTES, "image/png"),
            },
        )
        assert resp.status_code == 200
        _, images = model.calls[0]
        assert len(images) == 2
        assert images[0].mime_type == "image/png"
        assert base64.b64decode(images[0].data) == PNG_BYTES

    def test_skincare_uses_only_the_first_image(self, model) -> None:
        model.reply = "no json at all"
        resp = client.post(
            "/analyze",
            data={
                "mode": "skincare",
                "skincareForm": json.dumps({"skinType": "oily", "goals": ["tan", "pores"]}),
            },
            files={
                "image0": ("a.png", PNG_BYTES, "image/png"),
                "image1": ("b.png", PNG_BYTES, "image/png"),
            },
        )
        assert resp.status_code == 200
        prompt, images = model.calls[0]
        assert len(images) == 1
        assert "- Goals: Remove Tan, Shrink Pores" in prompt
        assert "Face image provided for analysis" in prompt

    def test_unusable_reply_returns_fallback(self, model) -> None:
        model.reply = "I cannot help with that."
        resp = client.post("/analyze", data={"mode": "skincare", "skincareForm": "{}"})
        assert resp.status_code == 200
        assert resp.json() == SKINCARE_FALLBACK.model_dump(by_alias=True)

    def test_invalid_mode_returns_400(self, model) -> None:
        resp = client.post("/analyze", data={"mode": "horoscope"})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Invalid mode specified", "code": "MODE_MISMATCH"}
        assert model.calls == []

    def test_malformed_form_json_returns_400(self, model) -> None:
        resp = client.post("/analyze", data={"mode": "diagnosis", "description": "{oops"})
        assert resp.status_code == 400
        assert resp.json()["code"] == "INVALID_FORM_DATA"

    def test_upstream_failure_returns_generic_error(self, model) -> None:
        model.fail = True
        resp = client.post("/analyze", data={"mode": "diagnosis", "description": "{}"})
        assert resp.status_code == 502
        assert resp.json() == {
            "error": "Failed to analyze. Please try again or contact support.",
            "code": "UPSTREAM_UNAVAILABLE",
        }

    def test_missing_mode_returns_422(self, model) -> None:
        resp = client.post("/analyze", data={})
        assert resp.status_code == 422
        assert resp.json() == {"error": "Invalid request fields: mode", "code": "INVALID_REQUEST"}

    def test_non_image_upload_returns_400(self, model) -> None:
        resp = client.post(
            "/analyze",
            data={"mode": "diagnosis", "description": "{}"},
            files={"image0": ("notes.txt", b"hello", "text/plain")},
        )
        assert resp.status_code == 400
        assert resp.json() == {"error": "Upload 'notes.txt' is not an image", "code": "INVALID_FORM_DATA"}
        assert model.calls == []

    def test_oversized_image_is_rejected_before_reading(self, model, monkeypatch) -> None:
        async def unexpected_read(self, size=-1):
            raise AssertionError("oversized upload was read into memory")

        monkeypatch.setattr(api, "_settings", dataclasses.replace(api._settings, max_image_bytes=8))
        monkeypatch.setattr(UploadFile, "read", unexpected_read)
        resp = client.post(
            "/analyze",
            data={"mode": "diagnosis", "description": "{}"},
            files={"image0": ("a.png", PNG_BYTES, "image/png")},
        )
        assert resp.status_code == 400
        assert resp.json() == {"error": "Image 'a.png' is too large", "code": "INVALID_FORM_DATA"}
        assert model.calls == []


class TestGeneratePdfEndpoint:
    def test_diagnosis_pdf(self, model) -> None:
        resp = client.post(
            "/generate-pdf",
            json={
                "mode": "diagnosis",
                "record": DIAGNOSIS_FALLBACK.model_dump(by_alias=True),
                "formData": {"issue": "rash"},
            },
        )
        assert resp.status_code == 200
        assert resp.headers["content-type"] == "application/pdf"
        assert 'filename="clearcue-diagnosis-report.pdf"' in resp.headers["content-disposition"]
        assert resp.content.startswith(b"%PDF")

    def test_skincare_pdf(self, model) -> None:
        resp = client.post(
            "/generate-pdf",
            json={
                "mode": "skincare",
                "record": SKINCARE_FALLBACK.model_dump(by_alias=True),
                "formData": {"skinType": "dry", "goals": ["hydration"]},
            },
        )
        assert resp.status_code == 200
        assert 'filename="clearcue-skincare-plan.pdf"' in resp.headers["content-disposition"]

    def test_mode_record_mismatch_returns_500(self, model) -> None:
        resp = client.post(
            "/generate-pdf",
            json={"mode": "diagnosis", "record": SKINCARE_FALLBACK.model_dump(by_alias=True)},
        )
        assert resp.status_code == 500
        assert resp.json() == {"error": "Failed to generate PDF", "code": "RENDER_ERROR"}

    def test_invalid_mode_returns_400(self, model) -> None:
        resp = client.post("/generate-pdf", json={"mode": "other", "record": {}})
        assert resp.status_code == 400

    def test_missing_record_returns_422(self, model) -> None:
        resp = client.post("/generate-pdf", json={"mode": "diagnosis"})
        assert resp.status_code == 422
        assert resp.json() == {"error": "Invalid request fields: record", "code": "INVALID_REQUEST"}
