"""
Recover a structured record from the model's free-text reply.

The model is asked for pure JSON but regularly wraps it in markdown fences or
chats before and after it. Extraction is permissive about that noise and
strict about the shape of what it recovers:

  1. Strip every ``` / ```json fence marker, wherever it appears
  2. Take the span from the first '{' to the last '}' (no brace matching)
  3. json.loads the span
  4. Validate against the mode's schema
  5. Any failure → the mode's fallback record, verbatim

`extract()` never raises. A generic fallback is a better answer for the user
than a half-right record.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from .exceptions import UnrecoverablePayload
from .fallbacks import fallback_for
from .models import Mode, Record
from .validators import validate_payload

logger = logging.getLogger(__name__)

_FENCE_JSON = re.compile(r"```json\s*")
_FENCE = re.compile(r"```\s*")


def extract(raw_text: str, mode: Mode) -> Record:
    """Turn a raw model reply into a record that satisfies `mode`'s schema.

    Args:
        raw_text: The model's reply, untouched.
        mode: Which schema the reply should satisfy.

    Returns:
        The parsed record, or the fallback record for `mode`.
    """
    try:
        payload = parse_payload(raw_text)
        record = validate_payload(payload, mode)
    except UnrecoverablePayload as e:
        logger.warning(
            "Falling back to default %s record: %s %s", mode.value, e.message, e.details
        )
        logger.debug("Raw model reply: %r", raw_text)
        return fallback_for(mode)

    logger.info("Extracted %s record from model reply", mode.value)
    return record


def parse_payload(raw_text: str) -> Any:
    """Isolate and parse the payload span. Raises UnrecoverablePayload."""
    span = payload_span(strip_fences(raw_text))
    if span is None:
        raise UnrecoverablePayload("No JSON object found in reply")

    # ValueError also covers the int-digit limit; RecursionError is deep nesting.
    try:
        return json.loads(span)
    except (ValueError, RecursionError) as e:
        raise UnrecoverablePayload(
            "Payload span is not valid JSON",
            details={"error": str(e)},
        ) from e


def strip_fences(text: str) -> str:
    """Remove every markdown code-fence marker from `text`."""
    text = _FENCE_JSON.sub("", text)
    return _FENCE.sub("", text)


def payload_span(text: str) -> str | None:
    """Return text[first '{' : last '}'] inclusive, or None if there is none."""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end < start:
        return None
    return text[start : end + 1]
