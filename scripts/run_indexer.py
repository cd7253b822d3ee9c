"""
CLI script to synchronize the paper index with the PDF directory.

Usage:
    python scripts/run_indexer.py           # Incremental update
    python scripts/run_indexer.py --reset   # Full rebuild (discards tags and notes)
    python scripts/run_indexer.py --config path/to/config.json
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from paperindex.cli import prompt
from paperindex.core import get_config, PaperIndexError
from paperindex.core.config_loader import reload_config
from paperindex.core.logger import configure_from_config
from paperindex.indexer import IndexBuilder


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Index library PDFs by their filenames"
    )

    parser.add_argument(
        "--reset",
        action="store_true",
        help="Discard the existing index and rebuild it from scratch"
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to custom config.json file"
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
            config = reload_config(Path(args.config))
        else:
            config = get_config()
    except PaperIndexError as e:
        print(f"Configuration error: {e.message}")
        sys.exit(1)

    configure_from_config(config, force=True)

    print("=" * 60)
    print("Paper Index - Indexer")
    print("=" * 60)
    print(f"PDF directory:     {config.paths.pdf_directory}")
    print(f"Structured index:  {config.paths.structured_index}")
    print(f"Queryable index:   {config.paths.queryable_index}")
    print(f"Mode:              {'rebuild' if args.reset else 'update'}")
    print("=" * 60)

    callback = None if args.quiet else progress_callback
    builder = IndexBuilder(config=config, progress_callback=callback)

    try:
        stats = builder.build(prompt) if args.reset else builder.update()
    except PaperIndexError as e:
        print(f"\n{e.kind}: {e.message}")
        sys.exit(1)

    if stats.cancelled:
        print("Aborted.")
        sys.exit(0)

    if not args.quiet and stats.files_indexed:
        print("\n")

    print("=" * 60)
    print("Indexing Complete")
    print("=" * 60)
    print(f"Files considered:  {stats.files_scanned:,}")
    print(f"Files indexed:     {stats.files_indexed:,}")
    print(f"Files skipped:     {stats.files_skipped:,}")
    print(f"Records in index:  {stats.records_total:,}")
    print("=" * 60)

    sys.exit(0)


if __name__ == "__main__":
    main()
