"""CLI entry point for the pantry service."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import replace
from typing import Callable

from .commit import BatchCommitter
from .config import PantryConfig, load_config
from .db import InventoryDB
from .errors import NotFoundError, PantryError, ValidationError
from .expiration import ExpirationEstimator
from .extraction import create_backend
from .ingest import parse_inventory_text
from .lookup import ProductLookup
from .models import QUANTITY_TYPES, ExpirationRequest, ParsedItem
from .review import ReviewQueue


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="pantry",
        description="Kitchen inventory: parse free text into items, review and store them",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to the config file (TOML)",
    )

    sub = parser.add_subparsers(dest="command")

    # serve
    serve_parser = sub.add_parser("serve", help="Run the HTTP service")
    serve_parser.add_argument("--host", type=str, default=None)
    serve_parser.add_argument("--port", type=int, default=None)

    # parse
    parse_parser = sub.add_parser("parse", help="Parse free text into items")
    parse_parser.add_argument("text", type=str, help="e.g. '2 apples, frozen peas'")
    parse_parser.add_argument("--json", action="store_true", help="Output JSON")

    # bulk-add
    bulk_parser = sub.add_parser("bulk-add", help="Parse, review and store items")
    bulk_parser.add_argument("text", type=str)
    bulk_parser.add_argument(
        "--yes", "-y", action="store_true", help="Approve every item without asking"
    )

    # expire
    expire_parser = sub.add_parser("expire", help="Estimate an expiration date")
    expire_parser.add_argument("product", type=str)
    expire_parser.add_argument("--location", type=str, default="pantry")
    expire_parser.add_argument("--opened", action="store_true")
    expire_parser.add_argument("--category", type=str, default=None)

    # lookup
    lookup_parser = sub.add_parser("lookup", help="Look up a product by barcode")
    lookup_parser.add_argument("barcode", type=str)

    # locations
    sub.add_parser("locations", help="List storage locations")

    # list
    list_parser = sub.add_parser("list", help="List stored inventory items")
    list_parser.add_argument(
        "--location", type=str, default=None, help="Only items in this location"
    )

    # remove
    remove_parser = sub.add_parser("remove", help="Delete an inventory item")
    remove_parser.add_argument("item_id", type=int)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    config = load_config(args.config)
    logging.basicConfig(
        level=config.logging.level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )

    try:
        match args.command:
            case "serve":
                _cmd_serve(config, args)
            case "parse":
                asyncio.run(_cmd_parse(config, args))
            case "bulk-add":
                asyncio.run(_cmd_bulk_add(config, args))
            case "expire":
                asyncio.run(_cmd_expire(config, args))
            case "lookup":
                asyncio.run(_cmd_lookup(config, args))
            case "locations":
                _cmd_locations(config)
            case "list":
                _cmd_list(config, args)
            case "remove":
                _cmd_remove(config, args)
    except PantryError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        sys.exit(1)


def _cmd_serve(config: PantryConfig, args) -> None:
    try:
        import uvicorn
    except ImportError:
        raise ImportError("uvicorn is required to serve: pip install uvicorn") from None

    from .server import create_app

    uvicorn.run(
        create_app(config),
        host=args.host or config.server.host,
        port=args.port or config.server.port,
        log_level=config.logging.level.lower(),
    )


def _format_item(item: ParsedItem) -> str:
    line = f"{item.product_name} x{item.quantity:g} ({item.quantity_type}) @ {item.location_name}"
    if item.opened_status:
        line += " [opened]"
    if item.expiration_date:
        line += f" exp {item.expiration_date}"
    return line


async def _cmd_parse(config: PantryConfig, args) -> None:
    backend = create_backend(config)
    items = await parse_inventory_text(backend, args.text)

    if args.json:
        print(json.dumps([i.to_dict() for i in items], ensure_ascii=False, indent=2))
        return
    if not items:
        print("No items found.")
        return
    print(f"Found {len(items)} items:")
    for item in items:
        print(f"  {_format_item(item)}")


def review_items(
    queue: ReviewQueue,
    ask: Callable[[str], str] = input,
) -> bool:
    """Walk the queue interactively.

    Returns False if the user quit or input ended; nothing has been stored
    at that point.
    """
    try:
        while not queue.is_complete:
            item = queue.current
            print(f"\n[{queue.current_index + 1}/{len(queue)}] {_format_item(item)}")
            answer = ask("(a)pprove / (r)eject / (e)dit / (q)uit > ").strip().lower()
            match answer:
                case "a" | "approve":
                    queue.approve()
                case "r" | "reject":
                    queue.reject()
                case "e" | "edit":
                    draft = queue.start_edit()
                    queue.save_edit(_edit_item(draft, ask))
                case "q" | "quit":
                    return False
                case _:
                    print("Please answer a, r, e or q.")
    except EOFError:
        print()
        return False
    return True


def _edit_item(item: ParsedItem, ask: Callable[[str], str]) -> ParsedItem:
    name = ask(f"  product [{item.product_name}]: ").strip() or item.product_name
    raw_qty = ask(f"  quantity [{item.quantity:g}]: ").strip()
    try:
        quantity = float(raw_qty) if raw_qty else item.quantity
    except ValueError:
        quantity = item.quantity
    if quantity <= 0:
        quantity = item.quantity
    qtype = ask(f"  type {'/'.join(QUANTITY_TYPES)} [{item.quantity_type}]: ").strip()
    if qtype not in QUANTITY_TYPES:
        qtype = item.quantity_type
    location = ask(f"  location [{item.location_name}]: ").strip().lower() or item.location_name
    return replace(
        item,
        product_name=name,
        quantity=quantity,
        quantity_type=qtype,
        location_name=location,
    )


async def _cmd_bulk_add(config: PantryConfig, args) -> None:
    backend = create_backend(config)
    items = await parse_inventory_text(backend, args.text)
    if not items:
        print("No items found.")
        return

    queue = ReviewQueue(items)
    if args.yes:
        while not queue.is_complete:
            queue.approve()
    elif not review_items(queue, ask=input):
        print("Cancelled. Nothing was stored.")
        return

    summary = queue.summary()
    print(f"\nApproved: {len(summary.approved)} | Rejected: {len(summary.rejected)}")
    if not summary.approved:
        return

    store = InventoryDB(config.database.path)
    try:
        rows = BatchCommitter(store).commit(summary.approved)
    finally:
        store.close()
    print(f"Created {len(rows)} item{'s' if len(rows) != 1 else ''}.")


async def _cmd_expire(config: PantryConfig, args) -> None:
    estimator = ExpirationEstimator(create_backend(config))
    estimate = await estimator.estimate(
        ExpirationRequest(
            product_name=args.product,
            location_name=args.location,
            opened_status=args.opened,
            category=args.category,
        )
    )
    print(
        f"{args.product}: {estimate.expiration_date} "
        f"({estimate.days_until_expiration} days, {estimate.confidence_level})"
    )


async def _cmd_lookup(config: PantryConfig, args) -> None:
    store = InventoryDB(config.database.path)
    try:
        lookup = ProductLookup(
            store, base_url=config.lookup.base_url, timeout=config.lookup.timeout
        )
        product = await lookup.lookup(args.barcode)
    finally:
        store.close()

    if product is None:
        print("Product not found.")
        return
    print(json.dumps(product.to_dict(), ensure_ascii=False, indent=2))


def _cmd_locations(config: PantryConfig) -> None:
    store = InventoryDB(config.database.path)
    try:
        locations = store.list_locations()
    finally:
        store.close()
    for loc in locations:
        print(f"  {loc.id}: {loc.name}")


def _cmd_list(config: PantryConfig, args) -> None:
    store = InventoryDB(config.database.path)
    try:
        location_id = None
        if args.location:
            matches = [
                loc.id for loc in store.list_locations()
                if loc.name.lower() == args.location.lower()
            ]
            if not matches:
                raise ValidationError(f'Location "{args.location}" not found')
            location_id = matches[0]
        items = store.get_inventory(location_id)
    finally:
        store.close()

    if not items:
        print("No items stored.")
        return
    for item in items:
        line = (
            f"  {item['id']}: {item['product_name'] or '(unnamed)'} "
            f"x{item['quantity']:g} ({item['quantity_type']}) @ {item['location_name']}"
        )
        if item["opened_status"]:
            line += " [opened]"
        if item["expiration_date"]:
            line += f" exp {item['expiration_date']}"
        print(line)


def _cmd_remove(config: PantryConfig, args) -> None:
    store = InventoryDB(config.database.path)
    try:
        if not store.delete_item(args.item_id):
            raise NotFoundError(f"Inventory item {args.item_id} not found")
    finally:
        store.close()
    print(f"Removed item {args.item_id}.")
