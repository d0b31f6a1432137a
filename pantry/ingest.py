"""Free text → validated items: the bulk-add entry point."""

from __future__ import annotations

import logging

from .errors import ValidationError
from .extraction import ExtractionBackend
from .models import ParsedItem
from .prompts import build_inventory_prompt
from .validation import validate_items

logger = logging.getLogger(__name__)


async def parse_inventory_text(
    backend: ExtractionBackend, text: str
) -> list[ParsedItem]:
    """Run ``text`` through the model and return the items that validate.

    Raises:
        ValidationError: If ``text`` is blank.
        ConfigurationError, UpstreamError, MalformedResponseError: From the
            extraction backend. Nothing is retried.
    """
    if not text or not text.strip():
        raise ValidationError("Text to parse must not be empty")

    candidates = await backend.extract(build_inventory_prompt(text))
    items = validate_items(candidates)
    logger.info(
        "Parsed %d items (%d candidates dropped)",
        len(items), len(candidates) - len(items),
    )
    return items
