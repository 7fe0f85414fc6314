#!/usr/bin/env python3
"""
Command-line access to the storefront API.

Usage:
    python run.py products --category rings          # List products
    python run.py product 42                         # Show one product
    python run.py featured                           # Featured products
    python run.py favorites --token $TOKEN           # Your favorites
    python run.py users --token $TOKEN               # Users (admin)
    python run.py cache-demo /products --log-level DEBUG
"""

import argparse
import json
import sys

from storefront_client.api import ApiError, StorefrontSession
from storefront_client.api import favorites, products, users
from storefront_client.config import Config
from storefront_client.logging import setup_logging, get_logger

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Storefront client - browse products, favorites and users"
    )
    parser.add_argument("--base-url", default=Config.API_BASE_URL, help="API base URL")
    parser.add_argument("--token", default=Config.API_TOKEN, help="Bearer token")
    parser.add_argument("--log-level", default=Config.LOG_LEVEL, help="Logging level")

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("products", help="List products")
    p.add_argument("--category")
    p.add_argument("--subcategory")
    p.add_argument("--page", type=int)
    p.add_argument("--max-results", type=int)

    p = sub.add_parser("product", help="Show a product")
    p.add_argument("product_id")

    sub.add_parser("featured", help="List featured products")
    sub.add_parser("favorites", help="List your favorites")

    p = sub.add_parser("users", help="List users (admin)")
    p.add_argument("--page", type=int)
    p.add_argument("--max-results", type=int)

    p = sub.add_parser("cache-demo", help="Fetch a path twice and show cache stats")
    p.add_argument("path", nargs="?", default="/products")

    return parser


def run_command(args: argparse.Namespace, session: StorefrontSession):
    if args.command == "products":
        return products.list_products(
            session,
            max_results=args.max_results,
            page=args.page,
            category=args.category,
            subcategory=args.subcategory,
        )
    if args.command == "product":
        return products.get_product(session, args.product_id)
    if args.command == "featured":
        return products.get_featured_products(session)
    if args.command == "favorites":
        return favorites.list_favorites(session)
    if args.command == "users":
        return users.list_users(session, max_results=args.max_results, page=args.page)
    if args.command == "cache-demo":
        session.get(args.path)
        session.get(args.path)
        return session.cache.stats().to_dict()
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, Config.LOG_FILE)

    errors = Config.validate()
    if errors:
        for e in errors:
            logger.error("Config: %s", e)
        return 1

    session = StorefrontSession(base_url=args.base_url, token=args.token)
    try:
        result = run_command(args, session)
    except ApiError as e:
        print(f"Error ({e.status}): {e.message}", file=sys.stderr)
        return 1
    finally:
        session.close()

    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
