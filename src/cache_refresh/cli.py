"""Command-line interface for running the cache tasks locally.

Provides subcommands: `links`, `uploaders`, `stats`, and `all`. Each command
is implemented as a `cmd_*` function that accepts an argparse namespace.
"""
from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path

from dotenv import load_dotenv

from cache_refresh.config import get_settings
from cache_refresh.db import get_client, get_databases
from cache_refresh.jobs import TASKS, run_scheduled_tasks
from cache_refresh.logging_config import configure_logging

log = logging.getLogger(__name__)


def cmd_task(args: argparse.Namespace) -> None:
    """Run a single cache task (`links`, `uploaders` or `stats`).

    Args:
        args: argparse namespace with `cmd` naming the task.
    """
    s = get_settings()
    databases = get_databases(get_client(s))

    asyncio.run(TASKS[args.cmd](databases, s))


def cmd_all(_: argparse.Namespace) -> None:
    """Convenience: run every task concurrently, as the scheduled function does."""
    s = get_settings()
    databases = get_databases(get_client(s))

    asyncio.run(run_scheduled_tasks(databases, s))
    log.info("All scheduled tasks completed.")


def build_parser() -> argparse.ArgumentParser:
    """Build and return the top-level argument parser for the CLI.

    Returns:
        Configured argparse.ArgumentParser instance.
    """
    p = argparse.ArgumentParser(prog="cache-refresh")
    p.add_argument("--log-file", type=Path, default=Path("logs/cache_refresh.log"))
    p.add_argument("--verbose", action="store_true")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("links", help="rebuild the YouTube/form uploader cache")
    sub.add_parser("uploaders", help="rebuild the note uploader cache")
    sub.add_parser("stats", help="rebuild the teacher contribution stats")
    sub.add_parser("all", help="run every task concurrently")

    return p


def main() -> None:
    """CLI entry point: parse args, configure logging and dispatch commands."""
    load_dotenv()
    args = build_parser().parse_args()
    configure_logging(args.log_file, logging.DEBUG if args.verbose else logging.INFO)

    if args.cmd in TASKS:
        cmd_task(args)
    elif args.cmd == "all":
        cmd_all(args)
    else:
        raise SystemExit(2)


if __name__ == "__main__":
    main()
