from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from upserter.blogging import parse_blogs_json, sample_blogs, sync_blogs
from upserter.blogging.unit_of_work import shutdown, startup
from upserter.config import (
    ConfigurationError,
    configure_logging,
    get_database_config,
    get_logging_config,
    parse_log_level,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from upserter.blogging import BlogModel

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Upsert supplied items into a store")
    parser.add_argument(
        "--log-level",
        type=str,
        help="Log level name or number (defaults to UPSERTER_LOG_LEVEL or INFO)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    blogs = subparsers.add_parser("blogs", help="Synchronise blogs and their posts")
    blogs.add_argument(
        "payload",
        nargs="?",
        type=Path,
        help="JSON file holding a list of blogs with nested posts",
    )
    blogs.add_argument(
        "--sample",
        action="store_true",
        help="Use generated sample blogs instead of a payload file",
    )
    blogs.add_argument(
        "--database-uri",
        type=str,
        help="SQLAlchemy database URI (defaults to UPSERTER_DATABASE_URI or in-memory SQLite)",
    )
    blogs.add_argument(
        "--persistent",
        action="store_true",
        help="Store the database in the data directory instead of memory",
    )

    return parser.parse_args(list(argv))


def _load_blogs(args: argparse.Namespace) -> list[BlogModel]:
    if args.sample and args.payload is not None:
        raise ValueError("Pass either a payload file or --sample, not both")
    if args.sample:
        return sample_blogs()
    if args.payload is None:
        raise ValueError("Missing payload file (or pass --sample)")
    return parse_blogs_json(args.payload.read_bytes())


def _resolve_log_level(args: argparse.Namespace) -> int:
    if args.log_level is not None:
        return parse_log_level(args.log_level)
    return get_logging_config().level


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    try:
        parsed_args = _parse_args(argv if argv is not None else sys.argv[1:])
        configure_logging(level=_resolve_log_level(parsed_args), force=True)
        supplied = _load_blogs(parsed_args)
        database_uri = (
            parsed_args.database_uri
            or get_database_config(persistent=parsed_args.persistent).uri
        )
    except (ValueError, ConfigurationError, OSError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        startup(database_uri=database_uri, force=True)
        sync_blogs(supplied)
    except Exception:
        log.exception("Fatal error during blog sync")
        sys.exit(1)
    finally:
        shutdown()


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
