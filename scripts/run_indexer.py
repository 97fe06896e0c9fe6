"""
CLI script to index a folder of PDF files.

Usage:
    python scripts/run_indexer.py ~/Documents            # Incremental index
    python scripts/run_indexer.py ~/Documents --workers 4
    python scripts/run_indexer.py ~/Documents --config path/to/config.json
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from pdffinder.core import get_config, ConfigurationError, PDFSearchError
from pdffinder.core.config_loader import reload_config
from pdffinder.core.logger import setup_logging
from pdffinder.database import DatabaseManager
from pdffinder.indexer import IndexBuilder


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Index PDF files in a folder for full-text search"
    )

    parser.add_argument(
        "folder",
        type=str,
        help="Folder to index recursively"
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to custom config.json file"
    )

    parser.add_argument(
        "--workers",
        type=int,
        help="Number of parallel extraction workers"
    )

    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output"
    )

    return parser.parse_args()


def progress_callback(current: int, total: int, filename: str) -> None:
    """Print progress to console."""
    percent = (current / total) * 100 if total > 0 else 0
    bar_width = 30
    filled = int(bar_width * current / total) if total > 0 else 0
    bar = "=" * filled + "-" * (bar_width - filled)

    print(f"\r[{bar}] {percent:5.1f}% ({current}/{total}) {filename[:40]:<40}", end="", flush=True)


def main():
    """Main entry point for the indexer CLI."""
    args = parse_args()

    try:
        if args.config:
            reload_config(Path(args.config))
        config = get_config()
    except ConfigurationError as e:
        print(f"Configuration error: {e.message}")
        sys.exit(1)

    logger = setup_logging(config, force=True).getChild("indexer")

    print("=" * 60)
    print("PDF Finder - Indexer")
    print("=" * 60)
    print(f"Folder:            {args.folder}")
    print(f"Database path:     {config.paths.database_path}")
    print("=" * 60)

    callback = None if args.quiet else progress_callback

    with DatabaseManager(config.paths.database_path) as manager:
        try:
            builder = IndexBuilder(
                manager,
                max_workers=args.workers,
                progress_callback=callback,
                config=config
            )
            stats = builder.index_folder(args.folder)
        except PDFSearchError as e:
            logger.error(f"Indexing failed: {e.message}")
            print(f"\nIndexing failed: {e.message}")
            sys.exit(1)

    if callback and stats.files_indexed:
        print("\n")

    print("=" * 60)
    print("Indexing Complete")
    print("=" * 60)
    print(f"Files scanned:     {stats.files_scanned:,}")
    print(f"Files processed:   {stats.files_indexed:,}")
    print(f"Files unchanged:   {stats.files_unchanged:,}")
    print(f"Files removed:     {stats.files_removed:,}")
    print(f"Files failed:      {stats.files_failed:,}")
    print(f"Duration:          {stats.duration_ms:,} ms")
    print("=" * 60)

    if stats.errors:
        print(f"\nErrors ({len(stats.errors)}):")
        for path, reason in stats.errors[:20]:
            print(f"  - {Path(path).name}: {reason}")
        if len(stats.errors) > 20:
            print(f"  ... and {len(stats.errors) - 20} more errors")

    sys.exit(0)


if __name__ == "__main__":
    main()
