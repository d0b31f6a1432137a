"""Kitchen inventory bulk-ingestion service."""

from .commit import BatchCommitter
from .config import PantryConfig, load_config
from .errors import (
    ConfigurationError,
    MalformedResponseError,
    NotFoundError,
    PantryError,
    RateLimitError,
    StoreError,
    UpstreamError,
    ValidationError,
)
from .extraction import ExtractionBackend, create_backend, extract_json_payload
from .ingest import parse_inventory_text
from .models import ExpirationEstimate, InventoryItemInsert, ParsedItem, ProductInfo
from .prompts import build_expiration_prompt, build_inventory_prompt
from .ratelimit import RateLimitDecision, SlidingWindowRateLimiter
from .review import ReviewQueue
from .validation import validate_items

__all__ = [
    "ParsedItem",
    "InventoryItemInsert",
    "ExpirationEstimate",
    "ProductInfo",
    "build_inventory_prompt",
    "build_expiration_prompt",
    "ExtractionBackend",
    "create_backend",
    "extract_json_payload",
    "SlidingWindowRateLimiter",
    "RateLimitDecision",
    "validate_items",
    "parse_inventory_text",
    "ReviewQueue",
    "BatchCommitter",
    "PantryConfig",
    "load_config",
    "PantryError",
    "ValidationError",
    "RateLimitError",
    "UpstreamError",
    "MalformedResponseError",
    "ConfigurationError",
    "StoreError",
    "NotFoundError",
]
