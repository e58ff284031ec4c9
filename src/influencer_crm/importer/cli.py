"""Command-line entry points for spreadsheet imports.

Usage::

    python -m influencer_crm.importer.cli influencers.csv --dry-run
    python -m influencer_crm.importer.cli influencers.csv --delay 2
    python -m influencer_crm.importer.cli extract-handles posts.csv handles.csv \
        --apify-export dataset.csv
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

import httpx

from influencer_crm.config import get_settings
from influencer_crm.importer.csv_import import (
    CsvImporter,
    load_import_config,
    read_post_references,
    read_rows,
    summarize,
)
from influencer_crm.instagram.lookup import RapidApiInstagramClient
from influencer_crm.instagram.matching import build_owner_index, resolve_handles, write_matches
from influencer_crm.store.campaigns import CampaignStore
from influencer_crm.store.client import create_supabase_client
from influencer_crm.store.content import ContentStore
from influencer_crm.store.influencers import InfluencerStore

EXTRACT_COMMAND = "extract-handles"


def build_import_parser() -> argparse.ArgumentParser:
    """Create the argument parser for influencer imports."""
    parser = argparse.ArgumentParser(description="Import influencers from a spreadsheet CSV")
    parser.add_argument("csv_path", type=Path, help="Path to the CSV export")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report what would be created without writing anything",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=1.0,
        help="Seconds to wait after each profile lookup (default: 1.0)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to the column mapping (default: config/import_fields.yaml)",
    )
    return parser


def build_extract_parser() -> argparse.ArgumentParser:
    """Create the argument parser for post-URL handle extraction."""
    parser = argparse.ArgumentParser(
        prog=EXTRACT_COMMAND, description="Resolve Instagram post links to usernames"
    )
    parser.add_argument("csv_path", type=Path, help="Spreadsheet with post links")
    parser.add_argument("output_path", type=Path, help="Where to write the results CSV")
    parser.add_argument(
        "--apify-export",
        type=Path,
        default=None,
        help="Scraper dataset CSV with shortCode/url/inputUrl and ownerUsername columns",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=2.0,
        help="Seconds to wait between oEmbed requests (default: 2.0)",
    )
    parser.add_argument("--config", type=Path, default=None)
    return parser


async def run_import(args: argparse.Namespace) -> int:
    settings = get_settings()
    config = load_import_config(args.config or settings.import_fields_path)
    rows = read_rows(args.csv_path)
    print(f"Found {len(rows)} rows in {args.csv_path}")

    client = create_supabase_client(settings)
    async with httpx.AsyncClient(timeout=30.0) as http:
        lookup = RapidApiInstagramClient(settings.rapidapi_key.get_secret_value(), http=http)
        importer = CsvImporter(
            influencers=InfluencerStore(client),
            campaigns=CampaignStore(client),
            content=ContentStore(client),
            config=config,
            lookup=lookup if settings.rapidapi_key.get_secret_value() else None,
            http=http,
            delay=args.delay,
            dry_run=args.dry_run,
        )
        report = await importer.run(rows)

    counts = summarize(report)
    label = "Dry run" if args.dry_run else "Import"
    print(
        f"{label} complete: {counts['created']} created, {counts['skipped']} skipped, "
        f"{counts['linked']} campaign links, {counts['errors']} errors"
    )
    for error in report.errors:
        print(f"  - {error}")
    return 1 if report.errors else 0


async def run_extract(args: argparse.Namespace) -> int:
    settings = get_settings()
    config = load_import_config(args.config or settings.import_fields_path)
    posts = read_post_references(read_rows(args.csv_path), config)
    print(f"Found {len(posts)} post URLs to resolve")

    index = build_owner_index(read_rows(args.apify_export)) if args.apify_export else {}
    async with httpx.AsyncClient(timeout=30.0, follow_redirects=True) as http:
        matches = await resolve_handles(posts, index, http=http, delay=args.delay)

    write_matches(args.output_path, matches)
    found = [m for m in matches if m.handle]
    print(f"Results saved to: {args.output_path}")
    print(f"Summary: {len(found)} handles found, {len(matches) - len(found)} not found")
    for match in matches:
        if not match.handle:
            print(f"  not found: {match.name} {match.post_url}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Dispatch to the importer or to ``extract-handles``."""
    argv = list(sys.argv[1:] if argv is None else argv)
    if argv and argv[0] == EXTRACT_COMMAND:
        return asyncio.run(run_extract(build_extract_parser().parse_args(argv[1:])))
    return asyncio.run(run_import(build_import_parser().parse_args(argv)))


if __name__ == "__main__":
    sys.exit(main())
