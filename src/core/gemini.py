"""Gemini API client using the google-genai SDK."""

import logging
from typing import Protocol

from google import genai
from google.genai import errors, types

from src.config import Settings, get_settings
from src.core.exceptions import ErrorKind, ResponseSourceError, classify_error

logger = logging.getLogger(__name__)


class ResponseSource(Protocol):
    """Generative text backend used by the chat service."""

    @property
    def is_available(self) -> bool: ...

    async def generate(self, prompt: str) -> str: ...


class GeminiClient:
    """Wrapper for Gemini text generation authenticated with an API key."""

    TEMPERATURE = 0.7
    MAX_OUTPUT_TOKENS = 2048

    def __init__(self, api_key: str, model_name: str):
        self.model_name = model_name
        self._client: genai.Client | None = None

        if not api_key:
            logger.warning("GEMINI_API_KEY not configured, chat will use fallback responses")
            return

        try:
            self._client = genai.Client(api_key=api_key)
            logger.info(f"Gemini client initialized (model={model_name})")
        except Exception as e:
            logger.error(f"Failed to initialize Gemini client: {e}")
            self._client = None

    @property
    def is_available(self) -> bool:
        return self._client is not None

    async def aclose(self) -> None:
        """Close the SDK's async HTTP client."""
        if self._client is not None:
            await self._client.aio.aclose()
            self._client = None

    async def generate(self, prompt: str) -> str:
        """
        Generate a completion for a single prompt.

        Args:
            prompt: Full prompt including instructions and conversation

        Returns:
            Model's response text

        Raises:
            ResponseSourceError: tagged with the failure kind
        """
        if self._client is None:
            raise ResponseSourceError("Gemini client is not configured", ErrorKind.AUTH)

        try:
            response = await self._client.aio.models.generate_content(
                model=self.model_name,
                contents=prompt,
                config=types.GenerateContentConfig(
                    temperature=self.TEMPERATURE,
                    max_output_tokens=self.MAX_OUTPUT_TOKENS,
                ),
            )
        except errors.APIError as e:
            raise ResponseSourceError(str(e), _kind_for_api_error(e)) from e
        except Exception as e:
            raise ResponseSourceError(str(e), classify_error(e)) from e

        if not response.text:
            raise ResponseSourceError("Gemini returned an empty response")
        return response.text


def _kind_for_api_error(error: errors.APIError) -> ErrorKind:
    """Classify an SDK error by HTTP code, then by message text."""
    if error.code in (401, 403):
        return ErrorKind.AUTH
    if error.code == 429:
        return ErrorKind.OVERLOADED
    return classify_error(error)


def get_gemini_client(settings: Settings | None = None) -> GeminiClient:
    """Build a Gemini client from settings."""
    settings = settings or get_settings()
    return GeminiClient(api_key=settings.gemini_api_key, model_name=settings.gemini_model)
