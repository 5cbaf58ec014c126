from __future__ import annotations

from typing import Any

import httpx
from pydantic import BaseModel, ValidationError

from snapai.core.config import settings
from snapai.core.errors import GenerationFailedError, MalformedResponseError
from snapai.core.logging import log

DEFAULT_ERROR_MESSAGE = "Failed to generate image"


class ImageDatum(BaseModel):
    """One entry of the ``data`` list in an images response."""

    url: str
    revised_prompt: str | None = None


class ImagesResponse(BaseModel):
    data: list[ImageDatum]


def extract_error_message(body: Any) -> str:
    """Return ``error.message`` from an error body, or the default message."""
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return DEFAULT_ERROR_MESSAGE


class DalleClient:
    """OpenAI image generation client (one POST per image, no retries)."""

    def __init__(
        self,
        images_url: str | None = None,
        model: str | None = None,
        size: str | None = None,
        quality: str | None = None,
        count: int | None = None,
        timeout_s: float | None = None,
    ):
        self.images_url = settings.images_url if images_url is None else images_url
        self.model = settings.image_model if model is None else model
        self.size = settings.image_size if size is None else size
        self.quality = settings.image_quality if quality is None else quality
        self.count = settings.image_count if count is None else count
        self.timeout_s = settings.request_timeout_s if timeout_s is None else timeout_s

    def build_payload(self, prompt: str) -> dict[str, Any]:
        return {
            "model": self.model,
            "prompt": prompt,
            "size": self.size,
            "quality": self.quality,
            "n": self.count,
        }

    @staticmethod
    def build_headers(api_key: str) -> dict[str, str]:
        """Raises UnicodeEncodeError if the key cannot go into an HTTP header."""
        api_key.encode("ascii")
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        }

    async def generate(self, prompt: str, api_key: str) -> str:
        """Generate one image and return its URL.

        Prompt and key are sent verbatim; checking that they are non-empty is
        up to the caller.

        Args:
            prompt: Free-text image description
            api_key: OpenAI API key, used only for the Authorization header

        Returns:
            URL of the first generated image

        Raises:
            GenerationFailedError: On a non-ASCII key, a non-2xx status or a transport error
            MalformedResponseError: If a 2xx body has no image URL
        """
        payload = self.build_payload(prompt)
        try:
            headers = self.build_headers(api_key)
        except UnicodeEncodeError as e:
            log.error(f"DALLE_INVALID_CREDENTIAL reason=non_ascii position={e.start}")
            raise GenerationFailedError("API key contains characters that cannot be sent") from e

        log.info(f"DALLE_REQUEST model={self.model} size={self.size} prompt_len={len(prompt)}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout_s) as client:
                r = await client.post(
                    self.images_url,
                    headers=headers,
                    json=payload,
                )
        except httpx.HTTPError as e:
            log.error(f"DALLE_TRANSPORT_ERROR error={e!r}")
            raise GenerationFailedError(f"Image service unreachable: {e}") from e

        if not 200 <= r.status_code < 300:
            try:
                body = r.json()
            except ValueError:
                body = {}
            log.error(f"DALLE_API_ERROR status={r.status_code} body={body}")
            raise GenerationFailedError(extract_error_message(body), status_code=r.status_code)

        try:
            parsed = ImagesResponse.model_validate(r.json())
        except (ValueError, ValidationError) as e:
            log.error(f"DALLE_MALFORMED_RESPONSE status={r.status_code} error={e}")
            raise MalformedResponseError(
                "Image service returned no image URL", status_code=r.status_code
            ) from e

        if not parsed.data:
            log.error(f"DALLE_MALFORMED_RESPONSE status={r.status_code} error=empty data list")
            raise MalformedResponseError(
                "Image service returned no images", status_code=r.status_code
            )

        first = parsed.data[0]
        if first.revised_prompt:
            log.info(f"DALLE_REVISED_PROMPT prompt={first.revised_prompt!r}")
        log.info(f"DALLE_SUCCESS status={r.status_code}")
        return first.url
