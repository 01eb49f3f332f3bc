"""Command-line interface for easy-imslp.

Commands:
    imslp search     Search works (optionally by instrument / composer)
    imslp composer   Fetch a composer by slug
    imslp work       Fetch a work by slug
    imslp scores     List the score files of a work
    imslp parse      Parse a local wikitext file (no network access)

Output is JSON on stdout; parser warnings and errors go to the log.

Examples:
    # Works for cello by Bach
    imslp search "suite" --instrument cello --composer Bach --limit 5

    # Composer record
    imslp composer "Beethoven, Ludwig van"

    # Parse a saved page offline
    imslp parse work page.txt --slug "Cello_Suite_No.1,_BWV_1007_(Bach,_Johann_Sebastian)"
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any

from easy_imslp.api.errors import ImslpError
from easy_imslp.client import ImslpClient, create_client
from easy_imslp.parsers.response import (
    parse_composer_wikitext,
    parse_score_wikitext,
    parse_work_wikitext,
)
from easy_imslp.parsers.types import ParseResult

# =============================================================================
# LOGGING SETUP
# =============================================================================

logger = logging.getLogger("easy_imslp")


def _setup_logging(verbose: bool = False, log_file: Path | None = None) -> None:
    """Configure console logging and an optional log file.

    Args:
        verbose: If True, set console to DEBUG level
        log_file: If given, also write full DEBUG output to this file
    """
    logger.setLevel(logging.DEBUG)
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(levelname)-8s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(file_handler)


def _log_exception(msg: str, exc: Exception) -> None:
    """Log an exception, with the traceback at DEBUG level."""
    logger.error(f"{msg}: {type(exc).__name__}: {exc}")
    logger.debug(f"Traceback:\n{traceback.format_exc()}")


# =============================================================================
# OUTPUT
# =============================================================================


def _to_jsonable(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    if isinstance(value, list):
        return [_to_jsonable(item) for item in value]
    return value


def _emit(result: ParseResult[Any]) -> None:
    """Log warnings and print the record as JSON."""
    for warning in result.warnings:
        logger.warning(warning)
    json.dump(_to_jsonable(result.data), sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")


# =============================================================================
# PARSER
# =============================================================================


def _create_parser() -> argparse.ArgumentParser:
    """Create argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="imslp",
        description="Query IMSLP composers, works and scores",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    parser.add_argument("--log-file", type=Path, default=None, help="Also log to this file")
    parser.add_argument("--no-cache", action="store_true", help="Disable response caching")
    parser.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    search = subparsers.add_parser("search", help="Search works")
    search.add_argument("query", help="Search text")
    search.add_argument("--limit", type=int, default=10, help="Maximum results (default: 10)")
    search.add_argument(
        "--instrument",
        action="append",
        default=None,
        help="Canonical instrument filter, repeatable (e.g. cello)",
    )
    search.add_argument("--composer", default=None, help="Composer name or slug filter")

    composer = subparsers.add_parser("composer", help="Fetch a composer by slug")
    composer.add_argument("slug", help='Composer slug, e.g. "Bach, Johann Sebastian"')

    work = subparsers.add_parser("work", help="Fetch a work by slug")
    work.add_argument("slug", help="Work page slug")

    scores = subparsers.add_parser("scores", help="List score files of a work")
    scores.add_argument("slug", help="Work page slug")

    parse = subparsers.add_parser("parse", help="Parse a local wikitext file")
    parse.add_argument("kind", choices=["composer", "work", "score"], help="Record type")
    parse.add_argument("file", type=Path, help="Wikitext file")
    parse.add_argument(
        "--slug",
        default=None,
        help="Page slug (composer/work) or filename (score); defaults to the file stem",
    )
    parse.add_argument("--composer-slug", default=None, help="Composer slug for works")

    return parser


# =============================================================================
# COMMANDS
# =============================================================================


def _build_client(args: argparse.Namespace) -> ImslpClient:
    overrides: dict[str, Any] = {}
    if args.no_cache:
        overrides["cache"] = False
    if args.timeout is not None:
        overrides["timeout"] = args.timeout
    return create_client(**overrides)


def _run_online(args: argparse.Namespace) -> int:
    """Run a command that talks to IMSLP."""
    try:
        with _build_client(args) as client:
            if args.command == "search":
                result: ParseResult[Any] = client.search(
                    args.query,
                    limit=args.limit,
                    instrument=args.instrument,
                    composer=args.composer,
                )
            elif args.command == "composer":
                result = client.get_composer(args.slug)
            elif args.command == "work":
                result = client.get_work(args.slug)
            else:
                result = client.get_work_scores(args.slug)
    except ImslpError as e:
        _log_exception(f"{args.command} failed", e)
        logger.debug(e.to_detailed_string())
        return 1

    _emit(result)
    return 0


def _run_parse(args: argparse.Namespace) -> int:
    """Parse a local wikitext file without network access."""
    try:
        wikitext = args.file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        _log_exception(f"Could not read {args.file}", e)
        return 1

    slug = args.slug or args.file.stem
    result: ParseResult[Any]
    if args.kind == "composer":
        result = parse_composer_wikitext(wikitext, slug)
    elif args.kind == "work":
        result = parse_work_wikitext(wikitext, slug, args.composer_slug)
    else:
        result = parse_score_wikitext(wikitext, slug)

    _emit(result)
    return 0


def main(argv: list[str] | None = None) -> None:
    """Run the imslp command line."""
    parser = _create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    _setup_logging(verbose=args.verbose, log_file=args.log_file)

    if args.command == "parse":
        sys.exit(_run_parse(args))
    sys.exit(_run_online(args))


if __name__ == "__main__":
    main()
