"""
Pydantic models for consultation data.

Records are the only thing that leaves the extraction engine, so they are
strictly typed. Wire names stay camelCase (what the model is asked to emit and
what the web client reads); Python attributes are snake_case aliases.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import ModeMismatch


# ─── Mode ───────────────────────────────────────────────────────────


class Mode(str, Enum):
    """Selects schema, prompt framing and document flavour for a request."""

    DIAGNOSIS = "diagnosis"
    SKINCARE = "skincare"


def parse_mode(tag: object) -> Mode:
    """Turn a wire tag into a Mode, or raise ModeMismatch."""
    try:
        return Mode(str(tag).strip().lower())
    except ValueError:
        raise ModeMismatch(
            "Invalid mode specified",
            details={"mode": tag, "allowed": [m.value for m in Mode]},
        ) from None


# ─── Records ────────────────────────────────────────────────────────


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class DiagnosisRecord(_WireModel):
    """A validated skin diagnosis."""

    diagnosis: str = Field(min_length=1)
    cause: str = Field(min_length=1)
    treatment: list[str]
    prevention: list[str]
    medicines: list[str]
    natural_remedies: list[str] = Field(alias="naturalRemedies")
    products: list[str]


class SkincarePlanRecord(_WireModel):
    """A validated personalised skincare plan."""

    skin_analysis: str = Field(alias="skinAnalysis", min_length=1)
    morning_routine: list[str] = Field(alias="morningRoutine")
    evening_routine: list[str] = Field(alias="eveningRoutine")
    product_recommendations: list[str] = Field(alias="productRecommendations")
    diet_tips: list[str] = Field(alias="dietTips")
    lifestyle_tips: list[str] = Field(alias="lifestyleTips")


Record = Union[DiagnosisRecord, SkincarePlanRecord]

RECORD_TYPES: dict[Mode, type[BaseModel]] = {
    Mode.DIAGNOSIS: DiagnosisRecord,
    Mode.SKINCARE: SkincarePlanRecord,
}


# ─── Form Data ──────────────────────────────────────────────────────


class DiagnosisForm(_WireModel):
    """Free-text answers from the diagnosis questionnaire."""

    appearance: Optional[str] = None
    issue: Optional[str] = None
    started: Optional[str] = None
    symptoms: Optional[str] = None
    triggers: Optional[str] = None
    skin_type: Optional[str] = Field(default=None, alias="skinType")


class SkincareForm(_WireModel):
    """Skin type, goal tags and an optional custom goal."""

    skin_type: str = Field(default="", alias="skinType")
    goals: list[str] = Field(default_factory=list)
    custom_goal: Optional[str] = Field(default=None, alias="customGoal")


FormData = Union[DiagnosisForm, SkincareForm]

FORM_TYPES: dict[Mode, type[BaseModel]] = {
    Mode.DIAGNOSIS: DiagnosisForm,
    Mode.SKINCARE: SkincareForm,
}


# ─── Images ─────────────────────────────────────────────────────────


class EncodedImage(BaseModel):
    """One uploaded image, base64-encoded, consumed only by the model call."""

    data: str
    mime_type: str = "image/jpeg"

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


# ─── Render Request ─────────────────────────────────────────────────


class RenderRequest(BaseModel):
    """Everything the layout engine needs to produce one document."""

    mode: Mode
    record: Record
    form_data: FormData
