"""
Hand-authored fallback records, one per mode.

When the model reply cannot be turned into a valid record, the caller gets
one of these verbatim. They are deliberately generic: never synthesised from
the user's form input.
"""

from __future__ import annotations

from .models import DiagnosisRecord, Mode, Record, SkincarePlanRecord

DIAGNOSIS_FALLBACK = DiagnosisRecord(
    diagnosis=(
        "Based on the images provided, this appears to be a common skin condition "
        "that would benefit from professional evaluation."
    ),
    cause=(
        "The exact cause may vary, but common factors include genetics, environmental "
        "factors, hormonal changes, or skincare routine."
    ),
    treatment=[
        "Maintain a gentle skincare routine with mild, fragrance-free products",
        "Keep the affected area clean and dry",
        "Avoid picking or scratching the area",
        "Consider using over-the-counter treatments as appropriate",
    ],
    prevention=[
        "Use sunscreen daily to protect your skin",
        "Maintain a consistent skincare routine",
        "Stay hydrated and eat a balanced diet",
        "Avoid known triggers and irritants",
    ],
    medicines=[
        "Gentle cleanser - Use twice daily, morning and evening",
        "Moisturizer - Apply after cleansing to maintain skin barrier",
        "Consult a dermatologist for prescription treatments if needed",
    ],
    natural_remedies=[
        "Aloe vera gel - Apply pure aloe vera gel 2-3 times daily for soothing relief",
        "Honey mask - Apply raw honey for 15-20 minutes, then rinse with warm water",
        "Oatmeal bath - Add colloidal oatmeal to lukewarm bath water for gentle cleansing",
    ],
    products=[
        "CeraVe Hydrating Cleanser - Gentle, non-comedogenic daily cleanser",
        "Neutrogena Ultra Gentle Daily Cleanser - For sensitive skin types",
        "La Roche-Posay Toleriane Double Repair Moisturizer - Fragrance-free daily moisturizer",
    ],
)

SKINCARE_FALLBACK = SkincarePlanRecord(
    skin_analysis=(
        "Based on your skin type and goals, here's a personalized skincare plan to help "
        "you achieve healthier, more radiant skin."
    ),
    morning_routine=[
        "Gentle cleanser - Remove overnight buildup",
        "Vitamin C serum - Antioxidant protection and brightening",
        "Moisturizer - Hydrate and protect skin barrier",
        "Broad-spectrum SPF 30+ sunscreen - Essential UV protection",
    ],
    evening_routine=[
        "Double cleanse - Remove makeup and daily impurities",
        "Treatment serum - Target specific concerns",
        "Night moisturizer - Repair and regenerate overnight",
        "Face oil (optional) - Extra nourishment for dry skin",
    ],
    product_recommendations=[
        "CeraVe Foaming Facial Cleanser - Gentle daily cleanser for all skin types",
        "The Ordinary Vitamin C Suspension 23% - Brightening and antioxidant protection",
        "Neutrogena Hydra Boost Water Gel - Lightweight, hydrating moisturizer",
        "EltaMD UV Clear Broad-Spectrum SPF 46 - Excellent daily sunscreen",
    ],
    diet_tips=[
        "Drink at least 8 glasses of water daily for optimal hydration",
        "Include antioxidant-rich foods like berries, leafy greens, and nuts",
        "Limit dairy and high-glycemic foods if you have acne-prone skin",
    ],
    lifestyle_tips=[
        "Get 7-9 hours of quality sleep for skin repair and regeneration",
        "Manage stress through meditation, exercise, or relaxation techniques",
        "Change pillowcases regularly and avoid touching your face frequently",
    ],
)

_FALLBACKS: dict[Mode, Record] = {
    Mode.DIAGNOSIS: DIAGNOSIS_FALLBACK,
    Mode.SKINCARE: SKINCARE_FALLBACK,
}


def fallback_for(mode: Mode) -> Record:
    """Return a fresh copy of the fallback record for `mode`.

    A deep copy, so a caller mutating its record can never change what the
    next caller receives.
    """
    return _FALLBACKS[mode].model_copy(deep=True)
