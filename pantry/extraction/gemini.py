"""Gemini API extraction backend."""

from __future__ import annotations

import logging

from ..errors import ConfigurationError, MalformedResponseError, UpstreamError
from . import ExtractionBackend

logger = logging.getLogger(__name__)


class GeminiExtractionBackend(ExtractionBackend):
    """Extract inventory records using Google Gemini."""

    def __init__(self, api_key: str = "", model: str = "gemini-2.0-flash") -> None:
        self._api_key = api_key
        self._model = model

    async def complete(self, prompt: str) -> str:
        if not self._api_key:
            raise ConfigurationError(
                "Gemini API key is not set. "
                "Check the config file or the GEMINI_API_KEY environment variable."
            )

        try:
            import google.generativeai as genai
            from google.api_core import exceptions as google_exceptions
        except ImportError:
            raise ImportError(
                "google-generativeai SDK is required: pip install google-generativeai"
            ) from None

        genai.configure(api_key=self._api_key)
        model = genai.GenerativeModel(self._model)

        try:
            response = await model.generate_content_async(prompt)
        except google_exceptions.GoogleAPICallError as e:
            message = e.message or f"Gemini API error: {e.code}"
            logger.warning("Gemini API returned %s: %s", e.code, message)
            raise UpstreamError(message) from e

        try:
            text = response.text
        except ValueError as e:
            # Raised when the candidate was blocked or has no text parts
            raise MalformedResponseError(
                f"Invalid response format from Gemini API: {e}"
            ) from None
        return text.strip()
