"""Expiration date estimation backed by the extraction model."""

from __future__ import annotations

import math
from datetime import date, timedelta

from .errors import MalformedResponseError
from .extraction import ExtractionBackend, extract_json_object
from .models import CONFIDENCE_LEVELS, ExpirationEstimate, ExpirationRequest
from .prompts import build_expiration_prompt


class ExpirationEstimator:
    def __init__(self, backend: ExtractionBackend) -> None:
        self._backend = backend

    async def estimate(
        self, request: ExpirationRequest, today: date | None = None
    ) -> ExpirationEstimate:
        """Ask the model for a shelf life and turn it into a date.

        Raises:
            MalformedResponseError: If the reply lacks a non-negative
                ``daysUntilExpiration`` or a known ``confidenceLevel``.
        """
        prompt = build_expiration_prompt(
            request.product_name,
            request.location_name,
            request.opened_status,
            request.category,
        )
        text = await self._backend.complete(prompt)
        result = extract_json_object(text)

        start = today or date.today()
        days = result.get("daysUntilExpiration")
        # json.loads accepts NaN and Infinity; the date must also stay in range
        if (
            isinstance(days, bool)
            or not isinstance(days, (int, float))
            or not math.isfinite(days)
            or days < 0
            or days > (date.max - start).days
        ):
            raise MalformedResponseError("Invalid daysUntilExpiration in response")

        level = result.get("confidenceLevel")
        level = level.upper() if isinstance(level, str) else None
        if level not in CONFIDENCE_LEVELS:
            raise MalformedResponseError("Invalid confidenceLevel in response")

        days = int(days)
        return ExpirationEstimate(
            expiration_date=(start + timedelta(days=days)).isoformat(),
            days_until_expiration=days,
            confidence_level=level,
        )
