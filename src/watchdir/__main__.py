"""Command-line entry point for the directory watcher."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from .config import ConfigError, load_config
from .decoder import DecodeError
from .events import WILDCARD, WatchTarget
from .monitor import WatchMonitor
from .query import PgrepQuery
from .watcher import LaunchError, WatcherLauncher


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="watchdir",
        usage="%(prog)s [options] DIR [FILE] PATTERN",
        description=(
            "Watch DIR for created, deleted, modified, moved or changed files and "
            "print the processes matching PATTERN whenever FILE (default: any file) changes"
        ),
    )
    parser.add_argument("operands", nargs="+", metavar="DIR [FILE] PATTERN")
    parser.add_argument(
        "--config",
        default=None,
        help="Path to an optional YAML configuration file",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser


def parse_target(parser: argparse.ArgumentParser, operands: List[str]) -> WatchTarget:
    if len(operands) == 2:
        directory, pattern = operands
        file_filter = WILDCARD
    elif len(operands) == 3:
        directory, file_filter, pattern = operands
    else:
        parser.error("expected DIR [FILE] PATTERN")
    return WatchTarget(directory=directory, file_filter=file_filter, process_pattern=pattern)


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    target = parse_target(parser, args.operands)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    )

    try:
        app_config = load_config(Path(args.config) if args.config else None)
    except ConfigError as exc:
        logging.error("%s", exc)
        raise SystemExit(2) from exc

    monitor = WatchMonitor(
        target,
        launcher=WatcherLauncher(app_config.watcher),
        query=PgrepQuery(app_config.query),
    )
    try:
        status = monitor.run()
    except (LaunchError, DecodeError) as exc:
        logging.error("%s", exc)
        raise SystemExit(1) from exc
    raise SystemExit(status)


if __name__ == "__main__":
    main()
