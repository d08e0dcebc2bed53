#!/usr/bin/env python3
"""
Asana CLI Tree command-line entry point.

    asana-tree           print the tree from the saved snapshot
    asana-tree --load    fetch a fresh snapshot, save it, then print it

Configuration is read from ~/.asana-cli-tree.yml (see asana_tree.settings).
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Sequence

from rich.console import Console

from asana_tree import __version__
from asana_tree.api import AsanaClient
from asana_tree.exceptions import AsanaTreeError
from asana_tree.models import Snapshot
from asana_tree.settings import Settings, get_settings
from asana_tree.storage import SnapshotCache
from asana_tree.tree import TreeBuilder
from asana_tree.view import Renderer

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# HTTP client libraries that log every request
NOISY_LOGGERS = ("httpx", "httpcore")

NO_SAVED_DATA = "No saved data available. Invoke with --load."
NO_SAVED_DATA_ON_LOAD = "No saved data available."


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="asana-tree",
        description="Print the open tasks of an Asana workspace as a tree.",
    )
    parser.add_argument(
        "-l",
        "--load",
        action="store_true",
        help="Load data from Asana and save it before printing",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show diagnostic output, including HTTP client logs",
    )
    parser.add_argument(
        "-c",
        "--config",
        metavar="PATH",
        default=None,
        help="Config file (default: ~/.asana-cli-tree.yml)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def configure_logging(verbose: bool) -> None:
    """Set up logging; HTTP client chatter stays hidden unless verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.INFO if verbose else logging.WARNING)


class _Abort(Exception):
    """Stop with a message for the user."""


async def fetch_snapshot(settings: Settings) -> Snapshot:
    """Fetch the configured workspace from Asana."""
    async with AsanaClient.from_settings(settings) as client:
        builder = TreeBuilder(client, settings.has_subtask_tag)
        return await builder.build(settings.workspace_id)


def run(
    load: bool,
    settings: Settings,
    console: Console,
) -> Snapshot:
    """
    Produce the snapshot to print, refreshing the cache when ``load`` is set.

    Raises:
        _Abort: If the cache file is missing, in either mode
        AsanaTreeError: On any fetch or cache failure
    """
    cache = SnapshotCache(settings.cache_path)

    if load:
        if not cache.exists():
            raise _Abort(NO_SAVED_DATA_ON_LOAD)
        snapshot = asyncio.run(fetch_snapshot(settings))
        cache.store(snapshot)
        console.print(f"Data saved to {cache.path}...", markup=False, highlight=False, soft_wrap=True)
        return snapshot

    if not cache.exists():
        raise _Abort(NO_SAVED_DATA)
    return cache.load()


def _print_error(console: Console, message: str) -> None:
    console.print(message, style="red", markup=False, highlight=False, soft_wrap=True)


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the asana-tree command."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    console = Console()
    err_console = Console(stderr=True)

    try:
        settings = get_settings(args.config)
        snapshot = run(args.load, settings, console)
    except _Abort as e:
        _print_error(err_console, str(e))
        return 1
    except AsanaTreeError as e:
        logger.debug("Aborting", exc_info=True)
        _print_error(err_console, f"Error: {e}")
        return 1

    Renderer().write(snapshot, console)
    return 0


if __name__ == "__main__":
    sys.exit(main())
