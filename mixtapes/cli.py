#!/usr/bin/env python3
"""Command-line interface for the mixtape importer.

``mixtapes import`` scrapes a member's mixes into JSON content files;
``mixtapes normalize`` cleans previously written files in place.
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from mixtapes import __version__
from mixtapes.page_cache import PageCache
from mixtapes.core import MixtapeImporter
from mixtapes.dataclasses import ImporterConfig
from mixtapes.normalizer import normalize_directory


def setup_logging(debug: bool = False):
    """Configure logging for CLI."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(levelname)s: %(message)s'
    )


def parse_args(argv: Optional[List[str]] = None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog='mixtapes',
        description='Import Art of the Mix mixtapes as JSON content files',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s import
  %(prog)s import --detect-pages --cache
  %(prog)s import --member-id 3942 --output-dir src/content/mixtapes
  %(prog)s normalize src/content/mixtapes
  %(prog)s import --cache-info
  %(prog)s import --clear-cache

Environment Variables:
  MIXTAPES_MEMBER_ID   Member whose mixes are imported
  MIXTAPES_BASE_URL    Site origin
  MIXTAPES_OUTPUT_DIR  Directory holding the JSON content files
        """
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    import_parser = subparsers.add_parser('import', help='Fetch mixes and write JSON files')
    import_parser.add_argument(
        '--member-id',
        help='Member ID (default: from MIXTAPES_MEMBER_ID env var, else 3942)'
    )
    import_parser.add_argument(
        '--base-url',
        help='Site origin (default: from MIXTAPES_BASE_URL env var)'
    )
    import_parser.add_argument(
        '-o', '--output-dir',
        help='Output directory (default: from MIXTAPES_OUTPUT_DIR env var, else src/content/mixtapes)'
    )

    pages_group = import_parser.add_mutually_exclusive_group()
    pages_group.add_argument(
        '--pages',
        type=int,
        help='Number of listing pages to read (default: 44)'
    )
    pages_group.add_argument(
        '--detect-pages',
        action='store_true',
        help='Read the page count from the first listing page'
    )

    import_parser.add_argument(
        '--delay',
        type=float,
        help='Seconds between requests (default: 1.0)'
    )
    import_parser.add_argument(
        '--attempts',
        type=int,
        help='Attempts per request, with exponential backoff (default: 1)'
    )
    import_parser.add_argument(
        '--cache',
        action='store_true',
        help='Cache fetched pages on disk and reuse them on later runs'
    )
    import_parser.add_argument(
        '--cache-dir',
        help='Cache directory (default: .mixtape_cache)'
    )
    import_parser.add_argument(
        '--clear-cache',
        action='store_true',
        help='Clear cached pages and exit'
    )
    import_parser.add_argument(
        '--cache-info',
        action='store_true',
        help='Show what the page cache holds and exit'
    )

    normalize_parser = subparsers.add_parser('normalize', help='Clean up previously written JSON files')
    normalize_parser.add_argument(
        'directory',
        nargs='?',
        help='Directory of JSON files (default: from MIXTAPES_OUTPUT_DIR env var, else src/content/mixtapes)'
    )

    return parser.parse_args(argv)


def create_config_from_args(args) -> ImporterConfig:
    """Create ImporterConfig from command-line arguments and environment variables."""
    defaults = ImporterConfig()
    config = ImporterConfig(
        base_url=getattr(args, 'base_url', None) or os.environ.get('MIXTAPES_BASE_URL') or defaults.base_url,
        member_id=getattr(args, 'member_id', None) or os.environ.get('MIXTAPES_MEMBER_ID') or defaults.member_id,
        output_dir=getattr(args, 'output_dir', None) or os.environ.get('MIXTAPES_OUTPUT_DIR') or defaults.output_dir,
    )

    if getattr(args, 'detect_pages', False):
        config.page_count = None
    elif getattr(args, 'pages', None) is not None:
        config.page_count = args.pages

    if getattr(args, 'delay', None) is not None:
        config.min_request_interval = args.delay
    if getattr(args, 'attempts', None) is not None:
        config.max_attempts = args.attempts
    if getattr(args, 'cache', False):
        config.cache_enabled = True
    if getattr(args, 'cache_dir', None):
        config.cache_dir = args.cache_dir

    return config


def run_import(config: ImporterConfig) -> int:
    importer = MixtapeImporter(config)
    try:
        result = importer.run()
    finally:
        importer.fetcher.close()

    print(f"\n{'='*60}")
    print("Import Complete!")
    print(f"  Mixes found: {result.discovered}")
    print(f"  Created: {result.created}")
    print(f"  Updated: {result.updated}")
    print(f"  Errors:  {result.errors}")
    if result.failed_pages:
        print(f"  Failed listing pages: {', '.join(str(page) for page in result.failed_pages)}")
    print(f"{'='*60}")
    return 0


def show_cache_info(config: ImporterConfig) -> int:
    info = PageCache(config.cache_dir, config.cache_expiry_days).info()
    print(f"Cache directory: {info['cache_dir']}")
    print(f"  Mix pages:     {info['mix_pages']}")
    print(f"  Listing pages: {info['listing_pages']}")
    print(f"  Total size:    {info['total_size_bytes']} bytes")
    return 0


def run_normalize(directory: str) -> int:
    if not Path(directory).is_dir():
        print(f"Error: path is not a directory: {directory}", file=sys.stderr)
        return 1

    result = normalize_directory(directory)
    print(f"Reformatted {result.rewritten} files")
    if result.failed:
        print(f"Skipped {len(result.failed)} unreadable file(s): {', '.join(result.failed)}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = parse_args(argv)
    setup_logging(args.debug)
    logger = logging.getLogger(__name__)

    config = create_config_from_args(args)

    try:
        if args.command == 'normalize':
            return run_normalize(args.directory or config.output_dir)

        if args.clear_cache:
            cleared_count = PageCache(config.cache_dir).clear()
            print(f"Cleared {cleared_count} cache file(s)")
            return 0

        if args.cache_info:
            return show_cache_info(config)

        return run_import(config)

    except KeyboardInterrupt:
        print("\nInterrupted by user")
        return 130

    except Exception as e:
        logger.error(f"Fatal error: {e}")
        if args.debug:
            raise
        return 1


if __name__ == '__main__':
    sys.exit(main())
