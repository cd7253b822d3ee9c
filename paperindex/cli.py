"""
Command line interface for the paper index.

Usage:
    papers find <keywords...>       # Filenames containing all keywords
    papers open <filename>          # Open a PDF in the viewer
    papers reveal <filename>        # Show a PDF in the file manager
    papers note <filename>          # Edit the paper's notes in the index
    papers review <filename>        # Print the paper's record
    papers tags [tags...]           # Tag counts, or papers carrying all tags
    papers index build              # Rebuild the index from scratch
    papers index update             # Add PDFs that are new since last sync
    papers mail <filename>          # Email a PDF as attachment
    papers help
"""

import argparse
import sys
from pathlib import Path
from typing import Callable, Dict, List

from . import __version__
from .core import get_config, get_logger, reload_config, PaperIndexError, RecordNotFoundError
from .core.config_loader import Config
from .core.logger import configure_from_config, set_level
from .actions import PaperActions
from .indexer import IndexBuilder, IndexingStats
from .search import QueryEngine, QueryParser

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2

HELP_TEXT = """\
papers - manage a library of PDFs named <year>_<authors>_<venue>_<topic>.pdf

Commands:
  find <keywords...>    list papers whose filename contains all keywords
  open <filename>       open a paper in the PDF viewer
  reveal <filename>     show a paper in the file manager
  note <filename>       edit a paper's tags and notes in the index file
  review <filename>     print a paper's record and notes
  tags                  list all tags with the number of papers carrying them
  tags <tags...>        list papers carrying all given tags
  index build           rebuild the index from every PDF (discards tags and notes)
  index update          add records for PDFs added since the last sync
  mail <filename>       compose an email with a paper attached
  help                  show this text

<filename> may be any unique part of a filename.

Options:
  -c, --config PATH     use this config.json
  -i, --ignore-case     case-insensitive matching for find and tags
  -v, --verbose         log debug output to stderr

Environment:
  PDF_DIR, INDEX_STRUCTURED, INDEX_QUERYABLE, PDF_VIEWER, EDITOR,
  PAPERINDEX_CONFIG
"""

USAGE = {
    "find": "papers find <keywords...>",
    "open": "papers open <filename>",
    "reveal": "papers reveal <filename>",
    "note": "papers note <filename>",
    "review": "papers review <filename>",
    "index": "papers index build|update",
    "mail": "papers mail <filename>",
}


class HelpfulParser(argparse.ArgumentParser):
    """ArgumentParser that prints the command overview on errors."""

    def error(self, message):
        self.exit(EXIT_USAGE, f"{self.prog}: input error: {message}\nRun 'papers help' for usage.\n")


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = HelpfulParser(prog="papers", add_help=False)

    parser.add_argument("-c", "--config", type=str, help="Path to config.json")
    parser.add_argument("-i", "--ignore-case", action="store_true", help="Case-insensitive matching")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", parser_class=HelpfulParser)

    find = subparsers.add_parser("find", add_help=False)
    find.add_argument("keywords", nargs="*")

    for name in ("open", "reveal", "note", "review", "mail"):
        command = subparsers.add_parser(name, add_help=False)
        command.add_argument("filename", nargs="?")

    tags = subparsers.add_parser("tags", add_help=False)
    tags.add_argument("tags", nargs="*")

    index = subparsers.add_parser("index", add_help=False)
    index.add_argument("action", nargs="?")

    subparsers.add_parser("help", add_help=False)

    return parser


def usage(command: str) -> int:
    """Print a usage hint for a command and return the usage exit code."""
    print(f"Usage: {USAGE[command]}")
    return EXIT_USAGE


def prompt(text: str) -> str:
    """Ask a question on the terminal; end of input counts as no answer."""
    try:
        return input(text)
    except EOFError:
        return ""


def cmd_find(args: argparse.Namespace, config: Config) -> int:
    query = QueryParser(_case_sensitive(args, config)).parse_keywords(args.keywords)
    if query.is_empty:
        return usage("find")

    records = QueryEngine(config=config).find(query)
    if not records:
        raise RecordNotFoundError(f"No papers match {' '.join(query.terms)}", query=" ".join(query.terms))

    for record in records:
        print(record.filename)
    return EXIT_OK


def cmd_tags(args: argparse.Namespace, config: Config) -> int:
    engine = QueryEngine(config=config)
    query = QueryParser(_case_sensitive(args, config)).parse_tags(args.tags)

    if query.is_empty:
        for tag, count in engine.tags_of().items():
            print(f"{tag:<24} {count}")
        return EXIT_OK

    records = engine.list_tags(query)
    if not records:
        raise RecordNotFoundError(f"No papers tagged {', '.join(query.terms)}", query=" ".join(query.terms))

    for record in records:
        print(record.filename)
    return EXIT_OK


def cmd_review(args: argparse.Namespace, config: Config) -> int:
    if not args.filename:
        return usage("review")
    print(PaperActions(config=config).review(args.filename))
    return EXIT_OK


def cmd_note(args: argparse.Namespace, config: Config) -> int:
    if not args.filename:
        return usage("note")
    PaperActions(config=config).open_for_annotation(args.filename)
    return EXIT_OK


def _launch_command(name: str, method: str) -> Callable[[argparse.Namespace, Config], int]:
    def handler(args: argparse.Namespace, config: Config) -> int:
        if not args.filename:
            return usage(name)
        getattr(PaperActions(config=config), method)(args.filename)
        return EXIT_OK

    handler.__name__ = f"cmd_{name}"
    return handler


def cmd_index(args: argparse.Namespace, config: Config) -> int:
    if args.action not in ("build", "update"):
        return usage("index")

    builder = IndexBuilder(config=config)

    if args.action == "build":
        stats = builder.build(prompt)
    else:
        stats = builder.update()

    print_stats(stats)
    return EXIT_OK


def print_stats(stats: IndexingStats) -> None:
    """Print the summary of an indexing run."""
    if stats.cancelled:
        print("Index build cancelled, nothing was changed.")
        return

    for filename in stats.indexed:
        print(f"  + {filename}")

    if stats.mode == "build":
        print(f"Index rebuilt: {stats.files_indexed} papers.")
    else:
        print(f"Index updated: {stats.files_indexed} new papers, {stats.records_total} in total.")


COMMANDS: Dict[str, Callable[[argparse.Namespace, Config], int]] = {
    "find": cmd_find,
    "open": _launch_command("open", "open_pdf"),
    "reveal": _launch_command("reveal", "reveal"),
    "note": cmd_note,
    "review": cmd_review,
    "tags": cmd_tags,
    "index": cmd_index,
    "mail": _launch_command("mail", "mail"),
}


def _case_sensitive(args: argparse.Namespace, config: Config) -> bool:
    return config.search.case_sensitive and not args.ignore_case


def main(argv: List[str] = None) -> int:
    """Main entry point for the command line."""
    args = build_parser().parse_args(argv)

    if args.command == "help":
        print(HELP_TEXT, end="")
        return EXIT_OK

    if args.command is None:
        print(HELP_TEXT, end="")
        return EXIT_USAGE

    try:
        config = reload_config(Path(args.config)) if args.config else get_config()
        configure_from_config(config, force=True)

        if args.verbose:
            set_level("DEBUG")

        return COMMANDS[args.command](args, config)

    except PaperIndexError as e:
        get_logger(__name__).debug(f"{args.command} failed", exc_info=True)
        print(f"{e.kind}: {e.message}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
