"""
Paginated PDF layout for consultation records.

Layout is done in two passes:
  1. Place text runs on an in-memory list of pages, with a top-down cursor
     in millimetres (no I/O, fully inspectable)
  2. Paint those runs onto a reportlab canvas in invariant mode, so the same
     input always yields the same bytes

Page geometry (A4, mm from the top edge):

    20 ─ left margin; text is wrapped to 170 mm
    25   brand mark          ┐
    35   document title      │ page 1 only
    45   "Generated on: …"   ┘
    55   disclaimer / skin metadata, then sections
   250 ─ overflow line: a section title is never started below it
   280   footer, on every page

Continuation pages start their cursor at 20 and do not repeat the header.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from io import BytesIO
from typing import Optional

from pydantic import ValidationError
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from .config import PRODUCT_NAME
from .exceptions import InvalidFormData, RenderError
from .models import FORM_TYPES, RECORD_TYPES, Mode, RenderRequest, SkincareForm
from .prompts import goal_label

logger = logging.getLogger(__name__)

# ─── Geometry (mm) ───────────────────────────────────────────────────

LEFT_MARGIN = 20
TEXT_WIDTH = 170
TOP_MARGIN = 20
CONTENT_START = 55
OVERFLOW_Y = 250
FOOTER_Y = 280
LINE_HEIGHT = 4
ITEM_GAP = 2
TITLE_ADVANCE = 8
SECTION_GAP = 8

# ─── Type & Colour ───────────────────────────────────────────────────

FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"

BODY_SIZE = 9
TITLE_SIZE = 12

BLACK = (0, 0, 0)
INDIGO = (99, 102, 241)
AMBER = (245, 158, 11)
GREY = (100, 100, 100)
LIGHT_GREY = (150, 150, 150)

CONTENT_TYPE = "application/pdf"
BULLET = "• "

DISCLAIMER_TITLE = "IMPORTANT MEDICAL DISCLAIMER"
DISCLAIMER_TEXT = (
    "This AI analysis is for informational purposes only and should not replace "
    "professional medical advice. For persistent, severe, or concerning skin conditions, "
    "please consult a qualified dermatologist or healthcare provider."
)


# ─── Section Tables ──────────────────────────────────────────────────


class ListStyle(str, Enum):
    NUMBERED = "numbered"
    BULLETED = "bulleted"


@dataclass(frozen=True)
class Section:
    """One record field as it appears in the document.

    `list_style` is None for paragraph (scalar) sections.
    """

    title: str
    field: str
    list_style: Optional[ListStyle] = None


@dataclass(frozen=True)
class DocumentTemplate:
    title: str
    footer: str
    filename: str
    sections: tuple[Section, ...]


TEMPLATES: dict[Mode, DocumentTemplate] = {
    Mode.DIAGNOSIS: DocumentTemplate(
        title="Skin Diagnosis Report",
        footer=(
            f"This comprehensive analysis is generated by {PRODUCT_NAME} AI. "
            "Always consult healthcare professionals for medical concerns."
        ),
        filename=f"{PRODUCT_NAME.lower()}-diagnosis-report.pdf",
        sections=(
            Section("DIAGNOSIS", "diagnosis"),
            Section("POSSIBLE CAUSE", "cause"),
            Section("TREATMENT PLAN", "treatment", ListStyle.BULLETED),
            Section("PREVENTION TIPS", "prevention", ListStyle.BULLETED),
            Section("PRESCRIBED MEDICINES", "medicines", ListStyle.BULLETED),
            Section("NATURAL REMEDIES", "natural_remedies", ListStyle.BULLETED),
            Section("RECOMMENDED PRODUCTS", "products", ListStyle.BULLETED),
        ),
    ),
    Mode.SKINCARE: DocumentTemplate(
        title="Personalized Skincare Plan",
        footer=(
            f"This personalized skincare plan is generated by {PRODUCT_NAME} AI. "
            "Results may vary based on individual skin conditions."
        ),
        filename=f"{PRODUCT_NAME.lower()}-skincare-plan.pdf",
        sections=(
            Section("SKIN ANALYSIS", "skin_analysis"),
            Section("MORNING ROUTINE", "morning_routine", ListStyle.NUMBERED),
            Section("EVENING ROUTINE", "evening_routine", ListStyle.NUMBERED),
            Section("PRODUCT RECOMMENDATIONS", "product_recommendations", ListStyle.BULLETED),
            Section("DIET TIPS", "diet_tips", ListStyle.BULLETED),
            Section("LIFESTYLE TIPS", "lifestyle_tips", ListStyle.BULLETED),
        ),
    ),
}


# ─── Document Model ──────────────────────────────────────────────────


@dataclass(frozen=True)
class TextRun:
    """A single line of text at an absolute position (mm from top-left)."""

    text: str
    x: float
    y: float
    font: str
    size: float
    color: tuple[int, int, int]
    role: str


@dataclass
class Page:
    number: int
    runs: list[TextRun] = field(default_factory=list)

    def texts(self, role: str | None = None) -> list[str]:
        return [r.text for r in self.runs if role is None or r.role == role]


@dataclass
class RenderedDocument:
    pages: list[Page]
    pdf: bytes
    filename: str
    content_type: str = CONTENT_TYPE


# ─── Public API ──────────────────────────────────────────────────────


def build_render_request(mode: Mode, record: object, form_data: object = None) -> RenderRequest:
    """Build a typed RenderRequest from wire-level dicts.

    Raises:
        RenderError: the record does not satisfy the schema for `mode`.
        InvalidFormData: the form data does not fit `mode`.
    """
    try:
        typed_record = RECORD_TYPES[mode].model_validate(record)
    except ValidationError as e:
        raise RenderError(
            f"Record does not match mode '{mode.value}'", details={"errors": e.errors()}
        ) from e

    try:
        typed_form = FORM_TYPES[mode].model_validate(form_data or {})
    except ValidationError as e:
        raise InvalidFormData(
            f"Form data does not match mode '{mode.value}'", details={"errors": e.errors()}
        ) from e

    return RenderRequest(mode=mode, record=typed_record, form_data=typed_form)


def render(request: RenderRequest, generated_on: date | None = None) -> RenderedDocument:
    """Lay out and paint the document for `request`.

    Args:
        request: Mode, validated record and originating form data.
        generated_on: Date stamped into the header. Defaults to today.

    Raises:
        RenderError: record or form data belong to a different mode.
    """
    mode = request.mode
    _check_consistency(request)
    template = TEMPLATES[mode]

    layout = _Layout()
    layout.write_header(template.title, generated_on or date.today())

    if mode is Mode.DIAGNOSIS:
        layout.write_disclaimer()
    else:
        assert isinstance(request.form_data, SkincareForm)
        layout.write_skin_profile(request.form_data)

    for section in template.sections:
        layout.write_section(section, getattr(request.record, section.field))

    layout.write_footers(template.footer)

    logger.info("Rendered %s document: %d page(s)", mode.value, len(layout.pages))
    return RenderedDocument(
        pages=layout.pages,
        pdf=_paint(layout.pages, template.title),
        filename=template.filename,
    )


# ─── Layout Pass ─────────────────────────────────────────────────────


class _Layout:
    """Places text runs on pages, tracking a per-page vertical cursor."""

    def __init__(self) -> None:
        self.pages: list[Page] = [Page(number=1)]
        self.y: float = TOP_MARGIN

    @property
    def page(self) -> Page:
        return self.pages[-1]

    def new_page(self) -> None:
        self.pages.append(Page(number=len(self.pages) + 1))
        self.y = TOP_MARGIN

    # ── primitives ──────────────────────────────────────────────────

    def put(
        self,
        text: str,
        y: float,
        size: float,
        role: str,
        color: tuple[int, int, int] = BLACK,
        font: str = FONT,
    ) -> None:
        self.page.runs.append(
            TextRun(_pdf_safe(text), LEFT_MARGIN, y, font, size, color, role)
        )

    def put_wrapped(
        self,
        text: str,
        size: float,
        role: str,
        color: tuple[int, int, int] = BLACK,
    ) -> int:
        """Write `text` wrapped to the text width at the cursor. Returns line count.

        Does not move the cursor; callers advance by their own spacing rule.
        """
        lines = wrap(text, FONT, size)
        for i, line in enumerate(lines):
            self.put(line, self.y + i * LINE_HEIGHT, size, role, color)
        return len(lines)

    # ── blocks ──────────────────────────────────────────────────────

    def write_header(self, title: str, generated_on: date) -> None:
        self.put(PRODUCT_NAME, 25, 20, "brand", INDIGO, FONT_BOLD)
        self.put(title, 35, 14, "title")
        self.put(f"Generated on: {_format_date(generated_on)}", 45, 9, "meta", GREY)
        self.y = CONTENT_START

    def write_disclaimer(self) -> None:
        self.put(DISCLAIMER_TITLE, self.y, 11, "disclaimer", AMBER)
        self.y += 8
        lines = self.put_wrapped(DISCLAIMER_TEXT, 8, "disclaimer")
        self.y += lines * LINE_HEIGHT + 10

    def write_skin_profile(self, form: SkincareForm) -> None:
        self.put(f"Skin Type: {form.skin_type or 'Not provided'}", self.y, 10, "meta")
        self.y += 6
        if form.goals:
            goals = ", ".join(goal_label(g) for g in form.goals)
            lines = self.put_wrapped(f"Goals: {goals}", 10, "meta")
            self.y += lines * LINE_HEIGHT + 8

    def write_section(self, section: Section, content: object) -> None:
        if self.y > OVERFLOW_Y:
            self.new_page()

        self.put(section.title, self.y, TITLE_SIZE, "section-title", font=FONT_BOLD)
        self.y += TITLE_ADVANCE

        if section.list_style is None:
            lines = self.put_wrapped(str(content), BODY_SIZE, "body")
            self.y += lines * LINE_HEIGHT
        else:
            for index, item in enumerate(content, start=1):  # type: ignore[arg-type]
                prefix = f"{index}. " if section.list_style is ListStyle.NUMBERED else BULLET
                lines = self.put_wrapped(f"{prefix}{item}", BODY_SIZE, "body")
                self.y += lines * LINE_HEIGHT + ITEM_GAP

        self.y += SECTION_GAP

    def write_footers(self, footer: str) -> None:
        # Overlay: drawn after layout, exempt from the overflow check.
        for page in self.pages:
            page.runs.append(
                TextRun(_pdf_safe(footer), LEFT_MARGIN, FOOTER_Y, FONT, 7, LIGHT_GREY, "footer")
            )


# ─── Paint Pass ──────────────────────────────────────────────────────


def _paint(pages: list[Page], title: str) -> bytes:
    buffer = BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4, invariant=1)
    pdf.setTitle(title)
    pdf.setAuthor(PRODUCT_NAME)
    page_height = A4[1]

    for page in pages:
        for run in page.runs:
            pdf.setFont(run.font, run.size)
            pdf.setFillColorRGB(*(channel / 255 for channel in run.color))
            pdf.drawString(run.x * mm, page_height - run.y * mm, run.text)
        pdf.showPage()

    pdf.save()
    return buffer.getvalue()


# ─── Helpers ─────────────────────────────────────────────────────────


def wrap(text: str, font: str = FONT, size: float = BODY_SIZE) -> list[str]:
    """Split `text` into lines no wider than the printable width."""
    return simpleSplit(_pdf_safe(text), font, size, TEXT_WIDTH * mm) or [""]


def _pdf_safe(text: str) -> str:
    # Standard Type 1 fonts only cover WinAnsi (cp1252).
    return text.encode("cp1252", "replace").decode("cp1252")


def _format_date(value: date) -> str:
    return f"{value.month}/{value.day}/{value.year}"


def _check_consistency(request: RenderRequest) -> None:
    expected_record = RECORD_TYPES[request.mode]
    if not isinstance(request.record, expected_record):
        raise RenderError(
            f"{type(request.record).__name__} cannot be rendered in "
            f"'{request.mode.value}' mode",
            details={"expected": expected_record.__name__},
        )

    expected_form = FORM_TYPES[request.mode]
    if not isinstance(request.form_data, expected_form):
        raise RenderError(
            f"{type(request.form_data).__name__} cannot be rendered in "
            f"'{request.mode.value}' mode",
            details={"expected": expected_form.__name__},
        )
