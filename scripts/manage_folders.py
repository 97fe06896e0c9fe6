"""
CLI script to inspect and maintain indexed folders.

Usage:
    python scripts/manage_folders.py list
    python scripts/manage_folders.py remove ~/Documents/old
    python scripts/manage_folders.py stats
    python scripts/manage_folders.py clear
"""

import argparse
import sys
from datetime import datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from pdffinder.core import get_config, ConfigurationError
from pdffinder.core.config_loader import reload_config
from pdffinder.core.logger import setup_logging
from pdffinder.service import PDFFinderService


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Manage indexed PDF folders")
    parser.add_argument("--config", type=str, help="Path to custom config.json file")

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("list", help="List indexed folders")
    remove = commands.add_parser("remove", help="Stop tracking a folder")
    remove.add_argument("folder", type=str)
    commands.add_parser("stats", help="Show index statistics")
    commands.add_parser("clear", help="Delete every indexed document and folder")

    return parser.parse_args()


def main():
    """Main entry point for the folder management CLI."""
    args = parse_args()

    try:
        if args.config:
            reload_config(Path(args.config))
        config = get_config()
    except ConfigurationError as e:
        print(f"Configuration error: {e.message}")
        sys.exit(1)

    setup_logging(config, force=True)

    with PDFFinderService(config) as service:
        if args.command == "list":
            result = service.get_indexed_folders()
            if result.ok:
                for folder in result.value:
                    when = datetime.fromtimestamp(folder.last_indexed).strftime("%Y-%m-%d %H:%M")
                    print(f"{folder.path}  ({folder.pdf_count} PDFs, indexed {when})")

        elif args.command == "remove":
            result = service.remove_indexed_folder(args.folder)
            if result.ok:
                print(f"Removed {args.folder}")

        elif args.command == "stats":
            result = service.get_statistics()
            if result.ok:
                for key, value in result.value.items():
                    print(f"{key.replace('_', ' ').capitalize():<25} {value}")

        else:
            response = input("This will DELETE all indexed data. Continue? [y/N] ")
            if response.lower() != "y":
                print("Aborted.")
                sys.exit(0)
            result = service.clear()
            if result.ok:
                print("Index cleared")

    if not result.ok:
        print(result.error)
        sys.exit(1)


if __name__ == "__main__":
    main()
