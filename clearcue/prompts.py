"""
Prompt framing for the two consultation modes.

The prompts ask for bare JSON with exactly the keys the validators check.
The model does not always comply, which is why extraction exists.
"""

from __future__ import annotations

from .models import DiagnosisForm, Mode, SkincareForm

NOT_PROVIDED = "Not provided"

GOAL_LABELS: dict[str, str] = {
    "tan": "Remove Tan",
    "brighten": "Brighten Skin Tone",
    "blackheads": "Reduce Blackheads",
    "acne-marks": "Clear Acne Marks",
    "pores": "Shrink Pores",
    "oil-control": "Control Oiliness",
    "hydration": "Hydration",
    "anti-aging": "Anti-Aging",
}


# ─── Templates ───────────────────────────────────────────────────────

DIAGNOSIS_PROMPT = """\
You are a professional dermatologist AI assistant. Analyze the provided skin images \
and description to provide a comprehensive skin consultation.

Patient Description:
- Appearance: {appearance}
- Issue: {issue}
- How/when it started: {started}
- Symptoms: {symptoms}
- Triggers: {triggers}
- Skin type: {skin_type}

IMPORTANT: You must respond with ONLY a valid JSON object in exactly this format. \
Do not include any other text, explanations, or markdown formatting:

{{
  "diagnosis": "Clear, professional diagnosis of the skin condition",
  "cause": "Detailed explanation of what likely caused this condition",
  "treatment": ["Step 1 of treatment", "Step 2 of treatment", "Step 3 of treatment"],
  "prevention": ["Prevention tip 1", "Prevention tip 2", "Prevention tip 3"],
  "medicines": ["Medicine 1 with dosage and timing", "Medicine 2 with dosage and timing", "Medicine 3 with dosage and timing"],
  "naturalRemedies": ["Natural remedy 1 with instructions", "Natural remedy 2 with instructions", "Natural remedy 3 with instructions"],
  "products": ["Specific product recommendation 1 with brand if possible", "Specific product recommendation 2 with brand if possible", "Specific product recommendation 3 with brand if possible"]
}}

Guidelines:
- Be professional and thorough
- Provide practical, actionable advice
- Include specific medicine recommendations with dosages and timing
- Include natural remedies that are safe and evidence-based
- Recommend specific skincare products with brand names when possible
- Always recommend consulting a dermatologist for serious conditions
- Be empathetic and reassuring in tone
- Focus on evidence-based treatments
- Ensure all array fields have at least 3 items
- For natural remedies, include safe home remedies like aloe vera, honey, oatmeal, etc.
- For products, recommend well-known brands like CeraVe, Neutrogena, La Roche-Posay, etc.
"""

SKINCARE_PROMPT = """\
You are a professional skincare consultant AI. Create a personalized skincare routine \
based on the provided information.

Client Information:
- Skin Type: {skin_type}
- Goals: {goals}
- Custom Goals/Concerns: {custom_goal}
- {image_note}

IMPORTANT: You must respond with ONLY a valid JSON object in exactly this format. \
Do not include any other text, explanations, or markdown formatting:

{{
  "skinAnalysis": "Professional analysis of the skin type and condition based on provided information and image (if available)",
  "morningRoutine": ["Morning step 1", "Morning step 2", "Morning step 3", "Morning step 4"],
  "eveningRoutine": ["Evening step 1", "Evening step 2", "Evening step 3", "Evening step 4"],
  "productRecommendations": ["Product 1 with brand and purpose", "Product 2 with brand and purpose", "Product 3 with brand and purpose", "Product 4 with brand and purpose"],
  "dietTips": ["Diet tip 1", "Diet tip 2", "Diet tip 3"],
  "lifestyleTips": ["Lifestyle tip 1", "Lifestyle tip 2", "Lifestyle tip 3"]
}}

Guidelines:
- Tailor recommendations specifically to the skin type and goals mentioned
- Provide step-by-step morning and evening routines
- Include specific product recommendations with brand names (CeraVe, Neutrogena, The Ordinary, etc.)
- Give practical diet advice for skin health
- Include lifestyle tips (sleep, stress management, hydration, etc.)
- Be professional and evidence-based
- Ensure all array fields have at least 3-4 items
- Consider the specific goals mentioned (tan removal, brightening, etc.)
- If image is provided, incorporate visual analysis into skin assessment
"""


# ─── Public API ──────────────────────────────────────────────────────


def goal_label(tag: str) -> str:
    """Human label for a goal tag; unknown tags pass through unchanged."""
    return GOAL_LABELS.get(tag, tag)


def build_prompt(mode: Mode, form: DiagnosisForm | SkincareForm, image_count: int = 0) -> str:
    """Render the prompt text for `mode` from the user's form answers."""
    if mode is Mode.DIAGNOSIS:
        assert isinstance(form, DiagnosisForm)
        return DIAGNOSIS_PROMPT.format(
            appearance=form.appearance or NOT_PROVIDED,
            issue=form.issue or NOT_PROVIDED,
            started=form.started or NOT_PROVIDED,
            symptoms=form.symptoms or NOT_PROVIDED,
            triggers=form.triggers or NOT_PROVIDED,
            skin_type=form.skin_type or NOT_PROVIDED,
        )

    assert isinstance(form, SkincareForm)
    return SKINCARE_PROMPT.format(
        skin_type=form.skin_type,
        goals=", ".join(goal_label(g) for g in form.goals),
        custom_goal=form.custom_goal or "None specified",
        image_note="Face image provided for analysis" if image_count else "No image provided",
    )
