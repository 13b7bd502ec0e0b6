"""
Build the contest catalog from a content tree.

This command:
1. Scans <content root>/<type>/ for statements, inputs and sidecar metadata
2. Pairs them by folder + basename and resolves titles
3. Validates every record
4. Writes catalog.json (or the flat file index with --files-index)

Usage:
    build-catalog
    build-catalog --content-root content --output output/catalog.json
    build-catalog --title-source pdf-first-page --workers 8
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from .builder import CatalogBuilder, write_json
from .config import CatalogSettings, TitleSource
from .errors import CatalogBuildError


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Build the contest catalog from PDFs, inputs and JSON metadata",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Build with settings from .env / environment
    build-catalog

    # Titles from the first page of each PDF
    build-catalog --title-source pdf-first-page

    # Flat list of every published file
    build-catalog --files-index --output output/files.json
        """
    )

    parser.add_argument("--content-root", type=Path, help="Directory holding <type>/<year>/<round>/ folders")
    parser.add_argument("--output", type=Path, help="Output JSON file")
    parser.add_argument(
        "--title-source",
        choices=[source.value for source in TitleSource],
        help="Where record titles come from",
    )
    parser.add_argument("--workers", type=int, help="Threads for file reads and PDF parsing")
    parser.add_argument("--files-index", action="store_true", help="Write the flat file index instead of records")
    parser.add_argument("--env-file", type=Path, help="Load settings from this .env file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Show detailed output")

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        settings = CatalogSettings.from_env(env_file=args.env_file)
        overrides = {}
        if args.content_root:
            overrides["content_root"] = args.content_root
        if args.output:
            overrides["output"] = args.output
        if args.title_source:
            overrides["title_source"] = TitleSource.parse(args.title_source)
        if args.workers is not None:
            overrides["workers"] = args.workers
        if overrides:
            settings = replace(settings, **overrides)
    except ValueError as e:
        print(f"\n✗ Error: {e}")
        return 1

    print("\n" + "=" * 70)
    print("Contest Catalog Builder")
    print("=" * 70)
    print(f"Content: {settings.content_root}")
    print(f"Output: {settings.output}")
    print(f"Titles: {settings.title_source.value}")
    print("=" * 70)

    builder = CatalogBuilder(settings)

    if args.files_index:
        try:
            entries = builder.build_file_index()
        except FileNotFoundError as e:
            print(f"\n✗ Error: {e}")
            return 1
        write_json(settings.output, [entry.model_dump() for entry in entries])
        print(f"\n✓ Indexed {len(entries)} file(s)")
        return 0

    try:
        records = builder.build()
    except FileNotFoundError as e:
        print(f"\n✗ Error: {e}")
        return 1
    except CatalogBuildError as e:
        print(f"\n✗ Build failed: {e}")
        if e.path:
            print(f"  Offending file: {e.path}")
        return 1

    stats = builder.save(records)

    print("\n" + "=" * 70)
    print("CATALOG BUILD COMPLETE")
    print("=" * 70)
    print(f"  Records: {stats['records_count']}")
    if args.verbose:
        print(f"  By Year: {stats['by_year']}")
    print(f"\nCatalog location: {stats['output_file']}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
