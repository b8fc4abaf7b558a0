"""
Deterministic schema checks for parsed model payloads.

The parsed payload is an untyped dict straight out of `json.loads`. Nothing
about its shape is trusted until these checks pass; only then is the typed
record constructed.

Rules per field kind:
  - SCALAR   → present, a string, non-empty
  - SEQUENCE → present, a list of strings (an empty list is accepted)

The leniency on empty lists mirrors what the web client has always relied on.
The prompt asks for at least three items, but that is not enforced here.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import ValidationError

from .exceptions import UnrecoverablePayload
from .models import RECORD_TYPES, Mode, Record


class FieldKind(str, Enum):
    SCALAR = "scalar"
    SEQUENCE = "sequence"


# ─── Schemas (wire names, in document order) ─────────────────────────

SCHEMAS: dict[Mode, list[tuple[str, FieldKind]]] = {
    Mode.DIAGNOSIS: [
        ("diagnosis", FieldKind.SCALAR),
        ("cause", FieldKind.SCALAR),
        ("treatment", FieldKind.SEQUENCE),
        ("prevention", FieldKind.SEQUENCE),
        ("medicines", FieldKind.SEQUENCE),
        ("naturalRemedies", FieldKind.SEQUENCE),
        ("products", FieldKind.SEQUENCE),
    ],
    Mode.SKINCARE: [
        ("skinAnalysis", FieldKind.SCALAR),
        ("morningRoutine", FieldKind.SEQUENCE),
        ("eveningRoutine", FieldKind.SEQUENCE),
        ("productRecommendations", FieldKind.SEQUENCE),
        ("dietTips", FieldKind.SEQUENCE),
        ("lifestyleTips", FieldKind.SEQUENCE),
    ],
}


# ─── Public API ──────────────────────────────────────────────────────


def validate_payload(payload: Any, mode: Mode) -> Record:
    """Check a parsed payload against the schema for `mode`.

    Returns:
        The typed record built from the payload's schema fields.

    Raises:
        UnrecoverablePayload: on the first field that violates the schema.
            One bad field rejects the whole payload.
    """
    if not isinstance(payload, dict):
        raise UnrecoverablePayload(
            "Payload is not an object",
            details={"type": type(payload).__name__},
        )

    for name, kind in SCHEMAS[mode]:
        if name not in payload or payload[name] is None:
            raise UnrecoverablePayload(
                f"Missing required field '{name}'", details={"field": name}
            )

        value = payload[name]
        if kind is FieldKind.SCALAR:
            _check_scalar(name, value)
        else:
            _check_sequence(name, value)

    fields = {name: payload[name] for name, _ in SCHEMAS[mode]}
    try:
        return RECORD_TYPES[mode].model_validate(fields)
    except ValidationError as e:
        raise UnrecoverablePayload(
            "Payload rejected by record model", details={"errors": e.errors()}
        ) from e


# ─── Field Checks ────────────────────────────────────────────────────


def _check_scalar(name: str, value: Any) -> None:
    if not isinstance(value, str):
        raise UnrecoverablePayload(
            f"Field '{name}' must be a string",
            details={"field": name, "type": type(value).__name__},
        )
    if not value:
        raise UnrecoverablePayload(
            f"Field '{name}' is empty", details={"field": name}
        )


def _check_sequence(name: str, value: Any) -> None:
    if not isinstance(value, list):
        raise UnrecoverablePayload(
            f"Field '{name}' must be a list",
            details={"field": name, "type": type(value).__name__},
        )
    for index, item in enumerate(value):
        if not isinstance(item, str):
            raise UnrecoverablePayload(
                f"Field '{name}' has a non-string entry at position {index}",
                details={"field": name, "index": index, "type": type(item).__name__},
            )
