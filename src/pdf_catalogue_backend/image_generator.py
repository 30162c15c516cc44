"""Client for the generative-content API used to draw PDF cover images."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from .configuration import GeneratorSettings
from .errors import StructuralFailure

logger = logging.getLogger(__name__)


class GeneratorError(Exception):
    """Raised when the generative service cannot be reached or answers with an error."""


@dataclass
class InlineImage:
    mime_type: str
    data: str

    def as_data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


def extract_inline_image(payload: Any, default_mime_type: str = "image/png") -> InlineImage:
    """
    Pull the first candidate's first inline image out of a generateContent response.

    Raises:
        StructuralFailure: If any level of ``candidates[0].content.parts[0].inlineData.data`` is missing
    """
    candidates = payload.get("candidates") if isinstance(payload, dict) else None
    if not isinstance(candidates, list) or not candidates:
        raise StructuralFailure("Generative response has no candidates")

    content = candidates[0].get("content") if isinstance(candidates[0], dict) else None
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list) or not parts:
        raise StructuralFailure("First candidate has no content parts")

    inline = parts[0].get("inlineData") if isinstance(parts[0], dict) else None
    if not isinstance(inline, dict) or not isinstance(inline.get("data"), str) or not inline["data"]:
        raise StructuralFailure("First content part carries no inline image data")

    return InlineImage(mime_type=inline.get("mimeType") or default_mime_type, data=inline["data"])


class ImageGenerator:
    """Turns a text prompt into inline image data."""

    def __init__(self, settings: GeneratorSettings, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self.settings = settings
        self._transport = transport

    @property
    def endpoint(self) -> str:
        return f"{self.settings.api_base.rstrip('/')}/models/{self.settings.model}:generateContent"

    def _payload(self, prompt: str) -> Dict[str, Any]:
        return {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {"responseMimeType": self.settings.response_mime_type},
        }

    async def generate(self, prompt: str) -> InlineImage:
        if not self.settings.api_key:
            logger.warning("GEMINI_API_KEY not configured, cannot generate images")
            raise GeneratorError("Generative API key is not configured")

        try:
            async with httpx.AsyncClient(timeout=self.settings.timeout, transport=self._transport) as client:
                response = await client.post(
                    self.endpoint,
                    params={"key": self.settings.api_key},
                    json=self._payload(prompt),
                )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Image generation request failed: {e}")
            raise GeneratorError(str(e)) from e
        except ValueError as e:
            logger.error(f"Image generation returned invalid JSON: {e}")
            raise GeneratorError("Invalid JSON from generative service") from e

        image = extract_inline_image(data, self.settings.response_mime_type)
        logger.info(f"Generated {image.mime_type} image for prompt of {len(prompt)} chars")
        return image
