"""
Runtime configuration, read from the environment.

Entry points (api.py, main.py) call `load_dotenv()` first, so a local `.env`
file is honoured.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

PRODUCT_NAME = "ClearCue"
DEFAULT_MODEL = "gpt-4o"


@dataclass(frozen=True)
class Settings:
    """Settings for the model client and the upload boundary."""

    openai_api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    timeout_seconds: float = 60.0
    max_image_bytes: int = 10 * 1024 * 1024

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            openai_api_key=os.environ.get("OPENAI_API_KEY") or None,
            model=os.environ.get("CLEARCUE_MODEL", DEFAULT_MODEL),
            timeout_seconds=float(os.environ.get("CLEARCUE_TIMEOUT_SECONDS", "60")),
            max_image_bytes=int(os.environ.get("CLEARCUE_MAX_IMAGE_BYTES", str(10 * 1024 * 1024))),
        )
