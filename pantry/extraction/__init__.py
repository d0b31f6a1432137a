"""Extraction backend base class, JSON recovery helpers, and factory."""

from __future__ import annotations

import json
import re
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from ..errors import ConfigurationError, MalformedResponseError

if TYPE_CHECKING:
    from ..config import PantryConfig

_ARRAY_RE = re.compile(r"\[[\s\S]*\]")
_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


class ExtractionBackend(ABC):
    """Abstract base for the language model that reads free text."""

    @abstractmethod
    async def complete(self, prompt: str) -> str:
        """Send ``prompt`` and return the concatenated text of the reply.

        Raises:
            ConfigurationError: If the API key is missing.
            UpstreamError: If the API returns a non-success reply.
        """
        ...

    async def extract(self, prompt: str) -> list[Any]:
        """Return the candidate records found in the model's reply."""
        text = await self.complete(prompt)
        return extract_json_payload(text)


def extract_json_payload(text: str) -> list[Any]:
    """Scrape a JSON array (or a single object) out of free-form model text.

    The model is asked for pure JSON but may wrap it in prose or markdown
    fences, so the first bracketed span is taken. This is best effort.

    Raises:
        MalformedResponseError: If no usable JSON is found.
    """
    match = _ARRAY_RE.search(text)
    if match is None:
        obj_match = _OBJECT_RE.search(text)
        if obj_match is None:
            raise MalformedResponseError("No JSON found in model response")
        try:
            return [json.loads(obj_match.group(0))]
        except json.JSONDecodeError:
            raise MalformedResponseError(
                "Failed to parse single item from response"
            ) from None

    try:
        result = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise MalformedResponseError(
            f"Failed to parse JSON from model response: {e}"
        ) from None

    if not isinstance(result, list):
        raise MalformedResponseError("Response is not an array")
    return result


def extract_json_object(text: str) -> dict[str, Any]:
    """Scrape a single JSON object out of free-form model text."""
    match = _OBJECT_RE.search(text)
    if match is None:
        raise MalformedResponseError("No JSON found in model response")
    try:
        result = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise MalformedResponseError(
            f"Failed to parse JSON from model response: {e}"
        ) from None
    if not isinstance(result, dict):
        raise MalformedResponseError("Invalid response format from model")
    return result


def create_backend(config: PantryConfig) -> ExtractionBackend:
    """Create an extraction backend based on configuration."""
    backend_name = config.extraction.backend

    match backend_name:
        case "claude":
            from .claude import ClaudeExtractionBackend

            return ClaudeExtractionBackend(
                api_key=config.extraction.claude.api_key,
                model=config.extraction.claude.model,
                max_tokens=config.extraction.max_tokens,
            )
        case "gemini":
            from .gemini import GeminiExtractionBackend

            return GeminiExtractionBackend(
                api_key=config.extraction.gemini.api_key,
                model=config.extraction.gemini.model,
            )
        case _:
            raise ConfigurationError(
                f"Unknown extraction backend: {backend_name!r} "
                f"(choose claude or gemini)"
            )
