#!/usr/bin/env python3
"""
Local catalog harness (no HTTP server).

Usage:
  python3 scripts/catalog_local.py services --search facial
  python3 scripts/catalog_local.py products --category hair --show-inactive
  python3 scripts/catalog_local.py services --at-home --include-products --json

Resolves the catalog through the same wiring as the API and prints one line per entry.
Ctrl+C cancels the in-flight resolution.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import signal
import sys
from dataclasses import asdict
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from beautycatalog.application.exceptions import AbortedError  # noqa: E402
from beautycatalog.application.utils.cancellation import CancellationToken  # noqa: E402
from beautycatalog.domain.entities.catalog_filters import CatalogFilters  # noqa: E402
from beautycatalog.wiring.dependencies import get_catalog_facade  # noqa: E402


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Resolve the beauty catalog from the configured sources.")
    parser.add_argument("entity", choices=("services", "products"))
    parser.add_argument("--search")
    parser.add_argument("--category", help="products only")
    parser.add_argument("--show-inactive", action="store_true", default=None)
    parser.add_argument("--hide-inactive", dest="show_inactive", action="store_false")
    parser.add_argument("--at-home", action="store_true", default=None)
    parser.add_argument("--include-products", action="store_true")
    parser.add_argument("--json", action="store_true", help="print canonical entities as JSON")
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser.parse_args(argv)


async def _run(args: argparse.Namespace) -> int:
    facade = get_catalog_facade()
    filters = CatalogFilters(
        include_products=args.include_products,
        search=args.search,
        show_inactive=args.show_inactive,
        is_at_home=args.at_home,
        category=args.category,
    )
    token = CancellationToken()
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, token.cancel, "interrupted")
    except (NotImplementedError, RuntimeError):
        pass

    try:
        if args.entity == "services":
            entries = await facade.fetch_catalog_services(filters, cancellation=token)
        else:
            entries = await facade.fetch_catalog_products(filters, cancellation=token)
    except AbortedError as e:
        print(f"aborted: {e}", file=sys.stderr)
        return 130

    if args.json:
        print(json.dumps([asdict(e) for e in entries], indent=2, ensure_ascii=False))
        return 0

    print(f"{len(entries)} {args.entity}")
    print("-" * 60)
    for entry in entries:
        status = "active" if entry.is_active else "inactive"
        print(f"{entry.id:<12} {entry.name:<32} {entry.customer_price:>8.2f} {status}")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s:%(name)s:%(message)s",
    )
    return asyncio.run(_run(args))


if __name__ == "__main__":
    sys.exit(main())
