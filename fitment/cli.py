"""Command-line interface for extracting and syncing fitments offline."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

from fitment.config import DB_PATH
from fitment.extraction import extract_fitments
from fitment.logging_config import setup_logging
from fitment.models import PayloadError, Product
from fitment.store import SQLiteFitmentStore, StoreError
from fitment.sync import sync_fitments

__all__ = ["main", "parse_args", "load_payload"]


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Extract Year/Make/Model fitments from a product payload",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show what would be extracted from a saved webhook payload
  python -m fitment.cli --payload product.json

  # Extract and upsert into the local SQLite store
  python -m fitment.cli --payload product.json --sync --db data/fitment.db

  # List stored fitments for a product
  python -m fitment.cli --list 8123456789
        """,
    )
    parser.add_argument(
        "--payload",
        metavar="PATH",
        help="Product JSON payload file ('-' reads stdin)",
    )
    parser.add_argument(
        "--sync",
        action="store_true",
        help="Upsert the extracted fitments into the SQLite store",
    )
    parser.add_argument(
        "--db",
        default=DB_PATH,
        help=f"SQLite database path (default: {DB_PATH})",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Sync fitments on this many threads (default: 1)",
    )
    parser.add_argument(
        "--list",
        metavar="PRODUCT_ID",
        help="Print stored fitment records for a product and exit",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Debug logging on the console",
    )
    return parser.parse_args(argv)


def load_payload(path: str) -> Any:
    """Read a JSON payload from a file, or stdin for '-'."""
    if path == "-":
        return json.load(sys.stdin)
    with open(Path(path), "r", encoding="utf-8") as f:
        return json.load(f)


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    args = parse_args(argv)
    setup_logging(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        log_to_file=False,
        stream=sys.stderr,
    )

    store = SQLiteFitmentStore(args.db)

    if args.list:
        store.init()
        _print_json(store.list_for_product(args.list))
        return 0

    if not args.payload:
        print("Error: --payload or --list is required", file=sys.stderr)
        return 2

    try:
        product = Product.from_payload(load_payload(args.payload))
    except (OSError, json.JSONDecodeError, PayloadError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    extraction = extract_fitments(product)
    if not args.sync:
        _print_json({"product_id": product.id, **extraction.to_dict()})
        return 0

    try:
        store.init()
    except StoreError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    outcomes = sync_fitments(
        store, product, extraction.fitments, extraction.key_policy, max_workers=args.workers
    )
    _print_json({
        "product_id": product.id,
        "source": extraction.source,
        "results": [o.to_dict() for o in outcomes],
    })
    return 0 if all(o.ok for o in outcomes) else 1


if __name__ == "__main__":
    sys.exit(main())
