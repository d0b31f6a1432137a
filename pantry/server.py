"""Starlette application exposing the parse, estimate, lookup and inventory services.

Every error response has the shape ``{error, message, statusCode}``.

Store calls are short local SQLite statements and run on the event loop;
only the product catalog request goes to a worker thread.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import date
from typing import Any, Callable

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from .commit import BatchCommitter
from .config import PantryConfig, load_config
from .db import InventoryDB
from .errors import (
    InvalidJSONError,
    MethodNotAllowedError,
    NotFoundError,
    PantryError,
    RateLimitError,
    ValidationError,
)
from .expiration import ExpirationEstimator
from .extraction import ExtractionBackend, create_backend
from .ingest import parse_inventory_text as ingest_text
from .lookup import ProductLookup
from .ratelimit import SlidingWindowRateLimiter
from .validation import (
    validate_barcode_request,
    validate_batch_request,
    validate_expiration_request,
    validate_parse_request,
    validate_update_request,
)

logger = logging.getLogger(__name__)

# Routes that take writes accept every method so that a 405 keeps the error shape
_ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def _require_post(request: Request) -> None:
    if request.method != "POST":
        raise MethodNotAllowedError("Only POST requests are allowed")


def _check_rate_limit(limiter: SlidingWindowRateLimiter) -> None:
    decision = limiter.check()
    if not decision.allowed:
        raise RateLimitError(retry_after=decision.retry_after or 60)


async def _read_json(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError:
        raise InvalidJSONError("Request body must be valid JSON") from None


async def parse_inventory_text(request: Request) -> JSONResponse:
    _require_post(request)
    state = request.app.state
    _check_rate_limit(state.parse_limiter)

    text = validate_parse_request(await _read_json(request))
    items = await ingest_text(state.backend, text)
    return JSONResponse([item.to_dict() for item in items])


async def estimate_expiration(request: Request) -> JSONResponse:
    _require_post(request)
    state = request.app.state
    _check_rate_limit(state.expiration_limiter)

    req = validate_expiration_request(await _read_json(request))
    estimate = await state.estimator.estimate(req)
    return JSONResponse(estimate.to_dict())


async def lookup_product(request: Request) -> JSONResponse:
    _require_post(request)
    barcode = validate_barcode_request(await _read_json(request))
    product = await request.app.state.lookup.lookup(barcode)
    return JSONResponse({"product": product.to_dict() if product else None})


async def commit_batch(request: Request) -> JSONResponse:
    _require_post(request)
    state = request.app.state
    records = validate_batch_request(
        await _read_json(request), today=date.today().isoformat()
    )

    _check_locations(state.store, [r.location_id for r in records])

    rows = state.committer.commit_records(records)
    return JSONResponse({"items": rows}, status_code=201)


def _check_locations(store: InventoryDB, location_ids: list[int]) -> None:
    known = {loc.id for loc in store.list_locations()}
    for location_id in location_ids:
        if location_id not in known:
            raise ValidationError(f"Location {location_id} not found")


async def list_inventory(request: Request) -> JSONResponse:
    raw = request.query_params.get("location_id")
    location_id = None
    if raw is not None:
        try:
            location_id = int(raw)
        except ValueError:
            raise ValidationError("location_id must be an integer") from None
    return JSONResponse(request.app.state.store.get_inventory(location_id))


async def inventory_item(request: Request) -> Response:
    store = request.app.state.store
    item_id = request.path_params["item_id"]

    match request.method:
        case "GET":
            item = store.get_item(item_id)
        case "PATCH":
            fields = validate_update_request(await _read_json(request))
            if "location_id" in fields:
                _check_locations(store, [fields["location_id"]])
            item = store.update_item(item_id, fields)
        case "DELETE":
            if not store.delete_item(item_id):
                raise NotFoundError(f"Inventory item {item_id} not found")
            return Response(status_code=204)
        case _:
            raise MethodNotAllowedError("Only GET, PATCH and DELETE requests are allowed")

    if item is None:
        raise NotFoundError(f"Inventory item {item_id} not found")
    return JSONResponse(item)


async def list_locations(request: Request) -> JSONResponse:
    locations = request.app.state.store.list_locations()
    return JSONResponse(
        [
            {"id": loc.id, "name": loc.name, "display_order": loc.display_order}
            for loc in locations
        ]
    )


async def health(request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok"})


async def _handle_pantry_error(request: Request, exc: PantryError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Error in %s: %s", request.url.path, exc.message, exc_info=exc)
    else:
        logger.warning("%s %s -> %d: %s", request.method, request.url.path,
                       exc.status_code, exc.message)

    headers = {}
    if isinstance(exc, RateLimitError):
        headers["Retry-After"] = str(exc.retry_after)
    return JSONResponse(exc.to_dict(), status_code=exc.status_code, headers=headers)


async def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error in %s", request.url.path, exc_info=exc)
    body = {
        "error": "Internal Server Error",
        "message": str(exc) or "Unknown error",
        "statusCode": 500,
    }
    return JSONResponse(body, status_code=500)


def create_app(
    config: PantryConfig | None = None,
    *,
    backend: ExtractionBackend | None = None,
    store: InventoryDB | None = None,
    lookup: ProductLookup | None = None,
    clock: Callable[[], float] | None = None,
) -> Starlette:
    """Create the Starlette app.

    Collaborators default to what ``config`` describes; tests pass their own.
    Each rate-limited route owns its own limiter for the life of the app.
    """
    config = config or load_config()
    owns_store = store is None
    store = store or InventoryDB(config.database.path)
    backend = backend or create_backend(config)

    @asynccontextmanager
    async def lifespan(app: Starlette):
        logger.info("pantry service ready (backend=%s)", config.extraction.backend)
        yield
        if owns_store:
            store.close()

    app = Starlette(
        routes=[
            Route("/parse-inventory-text", parse_inventory_text, methods=_ALL_METHODS),
            Route("/estimate-expiration", estimate_expiration, methods=_ALL_METHODS),
            Route("/lookup-product", lookup_product, methods=_ALL_METHODS),
            Route("/inventory/batch", commit_batch, methods=_ALL_METHODS),
            Route("/inventory", list_inventory, methods=["GET"]),
            Route("/inventory/{item_id:int}", inventory_item, methods=_ALL_METHODS),
            Route("/locations", list_locations, methods=["GET"]),
            Route("/health", health, methods=["GET"]),
        ],
        exception_handlers={
            PantryError: _handle_pantry_error,
            Exception: _handle_unexpected,
        },
        lifespan=lifespan,
    )

    rl = config.rate_limit
    app.state.config = config
    app.state.backend = backend
    app.state.store = store
    app.state.committer = BatchCommitter(store)
    app.state.estimator = ExpirationEstimator(backend)
    app.state.lookup = lookup or ProductLookup(
        store, base_url=config.lookup.base_url, timeout=config.lookup.timeout
    )
    app.state.parse_limiter = SlidingWindowRateLimiter(
        rl.max_requests, rl.window_seconds, clock=clock
    )
    app.state.expiration_limiter = SlidingWindowRateLimiter(
        rl.max_requests, rl.window_seconds, clock=clock
    )
    return app
