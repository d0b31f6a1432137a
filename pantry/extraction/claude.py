"""Claude API extraction backend."""

from __future__ import annotations

import logging
from typing import Any

from ..errors import ConfigurationError, MalformedResponseError, UpstreamError
from . import ExtractionBackend

logger = logging.getLogger(__name__)


class ClaudeExtractionBackend(ExtractionBackend):
    """Extract inventory records using Anthropic's Messages API."""

    def __init__(
        self,
        api_key: str = "",
        model: str = "claude-sonnet-4-5",
        max_tokens: int = 2048,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._max_tokens = max_tokens

    async def complete(self, prompt: str) -> str:
        if not self._api_key:
            raise ConfigurationError(
                "Anthropic API key is not set. "
                "Check the config file or the ANTHROPIC_API_KEY environment variable."
            )

        try:
            import anthropic
        except ImportError:
            raise ImportError(
                "anthropic SDK is required: pip install anthropic"
            ) from None

        client = anthropic.AsyncAnthropic(api_key=self._api_key)
        try:
            response = await client.messages.create(
                model=self._model,
                max_tokens=self._max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIStatusError as e:
            message = _error_message(e.body) or (
                f"Anthropic API error: {e.status_code}"
            )
            logger.warning("Anthropic API returned %s: %s", e.status_code, message)
            raise UpstreamError(message) from e
        except anthropic.APIConnectionError as e:
            raise UpstreamError(f"Anthropic API error: {e}") from e

        if not response.content:
            raise MalformedResponseError("Invalid response format from Anthropic API")

        # Concatenate every text block; tool/thinking blocks are ignored
        text = "".join(
            block.text for block in response.content
            if getattr(block, "type", None) == "text"
        )
        return text.strip()


def _error_message(body: Any) -> str | None:
    """Pull ``error.message`` out of an API error body, if present."""
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
    return None
