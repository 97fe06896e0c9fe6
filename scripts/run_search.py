"""
CLI script to search the PDF index.

Usage:
    python scripts/run_search.py "machine learning"
    python scripts/run_search.py "report AND 2024" --min-size 5000
    python scripts/run_search.py invoice --date-from 2024-01-01 --date-to 2024-03-31
"""

import argparse
import sys
from datetime import datetime, timezone
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from pdffinder.core import get_config, ConfigurationError
from pdffinder.core.config_loader import reload_config
from pdffinder.core.logger import setup_logging
from pdffinder.search import SearchFilters
from pdffinder.service import PDFFinderService
from pdffinder.utils import truncate_text


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Search indexed PDF files")

    parser.add_argument("query", type=str, help="Search query (AND, OR, NOT supported)")
    parser.add_argument("--config", type=str, help="Path to custom config.json file")
    parser.add_argument("--min-size", type=int, help="Minimum file size in bytes")
    parser.add_argument("--max-size", type=int, help="Maximum file size in bytes")
    parser.add_argument("--date-from", type=str, help="Modified on or after (YYYY-MM-DD)")
    parser.add_argument("--date-to", type=str, help="Modified on or before (YYYY-MM-DD)")
    parser.add_argument("--limit", type=int, default=20, help="Number of results to print")

    return parser.parse_args()


def main():
    """Main entry point for the search CLI."""
    args = parse_args()

    try:
        if args.config:
            reload_config(Path(args.config))
        config = get_config()
    except ConfigurationError as e:
        print(f"Configuration error: {e.message}")
        sys.exit(1)

    setup_logging(config, force=True)

    filters = SearchFilters(
        min_size=args.min_size,
        max_size=args.max_size,
        date_from=args.date_from,
        date_to=args.date_to
    )

    with PDFFinderService(config) as service:
        result = service.search(args.query, filters)

    if not result.ok:
        print(result.error)
        sys.exit(1)

    results = result.value
    print(f"{len(results)} result(s) for '{args.query}'")
    print("-" * 60)

    for item in results[:args.limit]:
        modified = datetime.fromtimestamp(item.modified, tz=timezone.utc).strftime("%Y-%m-%d")
        pages = f"{item.pages} p." if item.pages else "? p."
        print(f"{item.title}  ({pages}, {item.size:,} bytes, {modified}, score {item.display_score:.2f})")
        print(f"  {item.path}")
        if item.snippet:
            snippet = item.snippet.replace(config.search.highlight_open, "*").replace(
                config.search.highlight_close, "*"
            )
            print(f"  {truncate_text(snippet, 200)}")

    sys.exit(0)


if __name__ == "__main__":
    main()
