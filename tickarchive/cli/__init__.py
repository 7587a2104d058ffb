"""tickarchive CLI: archive, naming and job utilities for the local data library.

Entry point: ``tickarchive`` console script via ``main()``.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tickarchive",
        description="Archive helpers for the local trading data library",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log at DEBUG level (default: INFO, or TICKARCHIVE_LOG_LEVEL)",
    )
    sub = parser.add_subparsers(dest="command")

    from tickarchive.cli import archive, config, job, naming

    archive.register(sub)
    naming.register(sub)
    job.register(sub)
    config.register(sub)

    return parser


def _configure_logging(verbose: bool) -> None:
    level = "DEBUG" if verbose else os.environ.get("TICKARCHIVE_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.  Returns exit code (0=ok, 1=user error, 2=data error)."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help()
        return 1

    _configure_logging(args.verbose)
    try:
        return handler(args) or 0
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 1
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 1


def cli() -> None:  # pragma: no cover
    """Console-script wrapper that calls ``sys.exit``."""
    sys.exit(main())
