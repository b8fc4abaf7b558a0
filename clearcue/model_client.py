"""
The external generative model, behind a one-method interface.

The pipeline only ever sees `ModelClient.generate(prompt, images) -> str`, so
tests can hand it canned replies and never touch the network.

The production client sends the prompt and inline base64 images to the OpenAI
chat-completions API. Any failure (no key, network, timeout, empty reply)
becomes UpstreamUnavailable. It is never retried here.
"""

from __future__ import annotations

import logging
from typing import Protocol, Sequence

from openai import OpenAI, OpenAIError

from .config import Settings
from .exceptions import UpstreamUnavailable
from .models import EncodedImage

logger = logging.getLogger(__name__)


class ModelClient(Protocol):
    """Anything that can turn a prompt plus images into raw reply text."""

    def generate(self, prompt: str, images: Sequence[EncodedImage]) -> str: ...


class OpenAIModelClient:
    """ModelClient backed by an OpenAI vision-capable chat model."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or Settings.from_env()

    @property
    def model(self) -> str:
        return self.settings.model

    def generate(self, prompt: str, images: Sequence[EncodedImage]) -> str:
        if not self.settings.openai_api_key:
            logger.error("No OPENAI_API_KEY set, cannot reach the model")
            raise UpstreamUnavailable("Model API key is not configured")

        content: list[dict] = [{"type": "text", "text": prompt}]
        content.extend(
            {"type": "image_url", "image_url": {"url": image.data_url}} for image in images
        )

        try:
            client = OpenAI(
                api_key=self.settings.openai_api_key,
                timeout=self.settings.timeout_seconds,
                max_retries=0,
            )
            response = client.chat.completions.create(
                model=self.settings.model,
                messages=[{"role": "user", "content": content}],
            )
        except OpenAIError as e:
            logger.error("Model call failed: %s", e)
            raise UpstreamUnavailable(
                "Model call failed", details={"error": str(e)}
            ) from e

        text = response.choices[0].message.content if response.choices else None
        if not text:
            logger.error("Model returned empty content")
            raise UpstreamUnavailable("Model returned an empty reply")

        return text.strip()
