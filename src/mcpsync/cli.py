"""mcpsync command line.

Usage:
    mcpsync sync          # Sync bridge tools into the plugin store
    mcpsync unsync        # Remove synced plugins
    mcpsync status        # Show bridge and sync status
    mcpsync plugins       # List stored plugins
    mcpsync tools         # List bridge tools
    mcpsync call <tool>   # Call a bridge tool
"""

from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from . import __version__
from .catalog.commands import add_catalog_commands, run_catalog_command


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mcpsync",
        description="Keep local plugins in sync with an MCP bridge tool catalog.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--url", help="MCP bridge URL override (e.g. http://localhost:8000)")
    parser.add_argument("--store", help="Plugin store file override")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="subcmd")
    add_catalog_commands(sub)
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    result = run_catalog_command(args)
    if result == -1:
        parser.print_help()
        raise SystemExit(1)
    raise SystemExit(result)


if __name__ == "__main__":
    main()
