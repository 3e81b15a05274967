from __future__ import annotations

import logging
from typing import Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from recipe_ingest.services.errors import (
    GeminiConfigurationError,
    ModelCallError,
    RateLimitedError,
)
from recipe_ingest.services.generative import MAX_OUTPUT_TOKENS

logger = logging.getLogger(__name__)

DEFAULT_MODEL_NAME = "gemini-2.5-flash"
DEFAULT_IMAGE_MIME_TYPE = "image/jpeg"


class GeminiClient:
    def __init__(
        self,
        api_key: str,
        model_name: str = DEFAULT_MODEL_NAME,
        timeout_seconds: float = 60.0,
        thinking_budget: Optional[int] = 0,
    ) -> None:
        self.api_key = api_key
        self.model_name = model_name
        self.timeout_seconds = timeout_seconds
        self.thinking_budget = thinking_budget
        self._client: genai.Client | None = None

    def _get_client(self) -> genai.Client:
        if self._client is None:
            if not self.api_key:
                raise GeminiConfigurationError("Missing Gemini API key.")
            self._client = genai.Client(
                api_key=self.api_key,
                http_options=types.HttpOptions(timeout=int(self.timeout_seconds * 1000)),
            )
        return self._client

    def _build_contents(
        self,
        prompt: str,
        image: bytes | None,
        mime_type: str | None,
    ) -> list[str | types.Part]:
        if image is None:
            return [prompt]
        image_part = types.Part.from_bytes(data=image, mime_type=mime_type or DEFAULT_IMAGE_MIME_TYPE)
        return [image_part, prompt]

    def _build_config(self, max_output_tokens: int) -> types.GenerateContentConfig:
        thinking = None
        if self.thinking_budget is not None:
            thinking = types.ThinkingConfig(thinking_budget=self.thinking_budget)
        return types.GenerateContentConfig(
            max_output_tokens=max_output_tokens,
            thinking_config=thinking,
        )

    def generate(
        self,
        prompt: str,
        *,
        image: bytes | None = None,
        mime_type: str | None = None,
        max_output_tokens: int = MAX_OUTPUT_TOKENS,
    ) -> str:
        client = self._get_client()

        try:
            response = client.models.generate_content(
                model=self.model_name,
                contents=self._build_contents(prompt, image, mime_type),
                config=self._build_config(max_output_tokens),
            )
        except genai_errors.ClientError as err:
            status_code = getattr(err, "code", None)
            message = str(err)
            if status_code == 429 or "RESOURCE_EXHAUSTED" in message:
                raise RateLimitedError("Gemini API rate limit reached.") from err
            raise ModelCallError(f"Gemini rejected the request: {message}") from err
        except genai_errors.APIError as err:
            raise ModelCallError(f"Gemini call failed: {err}") from err
        except httpx.HTTPError as err:
            raise ModelCallError(f"Network error calling Gemini: {err}") from err

        text = response.text
        if not text:
            raise ModelCallError("Model response did not include text content.")

        logger.debug("gemini.response model=%s chars=%d", self.model_name, len(text))
        return text
