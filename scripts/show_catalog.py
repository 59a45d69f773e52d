#!/usr/bin/env python3
"""
Show Catalog

Loads one category catalog, flattens it into product rows and prints a
page of the product table. Optionally writes every row to CSV.

Usage:
    python3 scripts/show_catalog.py --category salad
    python3 scripts/show_catalog.py --category fruit --supermarket tc --sort price --desc
    python3 scripts/show_catalog.py --data-dir public --category vegs --csv vegs.csv
    python3 scripts/show_catalog.py --base-url http://localhost:4200 --page 2 --page-size 10

SETUP:
    Optional environment variables (or .env file):
    - CATALOG_BASE_URL: Root URL serving /data-3/<category>.json
    - CATALOG_DATA_DIR: Local directory containing data-3/<category>.json
"""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from grocery_catalog.common.config_loader import CatalogSettings, load_catalog_settings
from grocery_catalog.common.constants import CATEGORIES, SUPERMARKETS
from grocery_catalog.common.csv_utils import export_rows
from grocery_catalog.common.log_config import setup_logging
from grocery_catalog.pipeline import FilterQueryPipeline
from grocery_catalog.rendering import TableView
from grocery_catalog.rendering.table_view import SORT_KEYS
from grocery_catalog.sources import DocumentSource, HttpDocumentSource, LocalDocumentSource

logger = logging.getLogger("grocery_catalog.show_catalog")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Show a supermarket category catalog as a product table",
    )
    parser.add_argument("--category", choices=sorted(CATEGORIES),
                        help="Category id (default: from config/catalog.yaml)")
    parser.add_argument("--supermarket", choices=sorted(SUPERMARKETS),
                        help="Only show this supermarket (default: all)")

    source = parser.add_mutually_exclusive_group()
    source.add_argument("--base-url", help="Fetch documents over HTTP from this root URL")
    source.add_argument("--data-dir", help="Read documents from this local directory")

    parser.add_argument("--sort", choices=sorted(SORT_KEYS), help="Sort by column")
    parser.add_argument("--desc", action="store_true", help="Sort descending")
    parser.add_argument("--page", type=int, default=1, help="Page number, 1-based (default: 1)")
    parser.add_argument("--page-size", type=int, help="Rows per page (default: from config)")
    parser.add_argument("--csv", help="Also write all rows to this CSV file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="Warnings and errors only")
    return parser


def build_source(args: argparse.Namespace, settings: CatalogSettings) -> DocumentSource:
    """Pick the document source: CLI flags first, then configured settings."""
    if args.data_dir:
        return LocalDocumentSource(args.data_dir)
    if args.base_url:
        return HttpDocumentSource(args.base_url, settings.source.timeout, settings.source.max_retries)
    if os.environ.get("CATALOG_DATA_DIR") or not settings.source.base_url:
        return LocalDocumentSource(settings.source.data_dir)
    return HttpDocumentSource(
        settings.source.base_url,
        timeout=settings.source.timeout,
        max_retries=settings.source.max_retries,
    )


async def load_rows(source: DocumentSource, settings: CatalogSettings, category, supermarket, table: TableView):
    """Run the filter pipeline once for the given selection."""
    pipeline = FilterQueryPipeline(
        source,
        sink=table.update,
        debounce=0,
        initial_category=category or settings.default_category,
        initial_supermarket=supermarket,
    )
    async with pipeline:
        await pipeline.wait_until_idle()
    return pipeline.rows


def main(argv=None) -> int:
    load_dotenv(Path(__file__).parent.parent / ".env")

    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(verbose=args.verbose, quiet=args.quiet)

    settings = load_catalog_settings()
    page_size = args.page_size or settings.page_size
    if args.page < 1:
        parser.error("--page must be 1 or more")

    try:
        table = TableView(page_size=page_size, page_size_options=settings.page_size_options)
    except ValueError as e:
        parser.error(str(e))

    source = build_source(args, settings)
    try:
        rows = asyncio.run(load_rows(source, settings, args.category, args.supermarket, table))
    finally:
        source.close()

    if args.sort:
        table.sort(args.sort, descending=args.desc)

    table.go_to_page(args.page - 1)
    print(table.render_text())
    print(table.range_label())

    if args.csv:
        written = export_rows(args.csv, rows)
        logger.info("Wrote %d rows to %s", written, args.csv)

    return 0 if rows else 1


if __name__ == "__main__":
    sys.exit(main())
