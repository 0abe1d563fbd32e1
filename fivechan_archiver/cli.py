#!/usr/bin/env python3
"""5chan archiver - lock and purge threads that fall off a board.

Usage:
  5chan-archiver run board.eth                       # Archive until stopped
  5chan-archiver run board.eth --per-page 15 --pages 10
  5chan-archiver run board.eth --once                # Single pass (cron)
  5chan-archiver status board.eth                    # Show lock and tracked threads
  5chan-archiver config --init                       # Write example config
"""

import argparse
import sys

from . import __version__


def _add_state_args(parser: argparse.ArgumentParser) -> None:
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--state-path", metavar="PATH", help="State file for this board (env: ARCHIVER_STATE_PATH)")
    group.add_argument("--state-dir", metavar="DIR", help="Directory holding <board>.json state files (env: ARCHIVER_STATE_DIR)")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="5chan-archiver",
        description="Imageboard-style thread archiver for plebbit subplebbits",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
EXAMPLES:
  Archive a board:
    5chan-archiver run board.eth
    PLEBBIT_RPC_URL=http://node:9138 5chan-archiver run board.eth --bump-limit 500

  Inspect:
    5chan-archiver status board.eth

Run '5chan-archiver <command> --help' for detailed command help.
"""
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # run
    run_parser = subparsers.add_parser(
        "run", help="Archive a board until interrupted",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
EXAMPLES:
  5chan-archiver run board.eth
  5chan-archiver run board.eth --per-page 10 --pages 5
  5chan-archiver run board.eth --archive-purge-seconds 86400
  5chan-archiver run board.eth --once

HOW IT WORKS:
  - Threads beyond per-page * pages (pinned excluded) are locked
  - Threads with bump-limit replies or more are locked
  - Locked threads are purged after archive-purge-seconds
  - One archiver per board; a second one refuses to start

DEFAULTS:
  per-page 15, pages 10, bump-limit 300, archive-purge-seconds 172800
"""
    )
    run_parser.add_argument("board", help="Subplebbit address")
    run_parser.add_argument("--per-page", type=int, default=None, help="Threads per page (env: PER_PAGE)")
    run_parser.add_argument("--pages", type=int, default=None, help="Number of pages (env: PAGES)")
    run_parser.add_argument("--bump-limit", type=int, default=None, help="Reply count that locks a thread (env: BUMP_LIMIT)")
    run_parser.add_argument(
        "--archive-purge-seconds", type=int, default=None,
        help="Seconds between lock and purge (env: ARCHIVE_PURGE_SECONDS)",
    )
    _add_state_args(run_parser)
    run_parser.add_argument("--rpc-url", default=None, help="Plebbit RPC node URL (env: PLEBBIT_RPC_URL)")
    run_parser.add_argument("--poll-interval", type=float, default=None, help="Seconds between change checks")
    run_parser.add_argument("--once", action="store_true", help="Run a single pass and exit")
    run_parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    # status
    status_parser = subparsers.add_parser(
        "status", help="Show lock holder and tracked locked threads",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
EXAMPLES:
  5chan-archiver status board.eth
  5chan-archiver status board.eth --json
"""
    )
    status_parser.add_argument("board", help="Subplebbit address")
    _add_state_args(status_parser)
    status_parser.add_argument(
        "--archive-purge-seconds", type=int, default=None,
        help="Purge delay used to compute time left (env: ARCHIVE_PURGE_SECONDS)",
    )
    status_parser.add_argument("--json", action="store_true", help="Output raw state JSON")

    # config
    config_parser = subparsers.add_parser(
        "config", help="Manage configuration",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
EXAMPLES:
  5chan-archiver config            # Show current config
  5chan-archiver config --init     # Create config file with defaults
  5chan-archiver config --path     # Show config file path

CONFIG LOCATION:
  ~/.config/5chan-archiver/config.yaml
"""
    )
    config_parser.add_argument("--init", action="store_true", help="Create config file with example settings")
    config_parser.add_argument("--path", action="store_true", help="Show config file path")
    config_parser.add_argument("--force", action="store_true", help="Overwrite existing config (with --init)")

    args = parser.parse_args(argv)

    if args.command == "run":
        from .run_cmd import run
    elif args.command == "status":
        from .status_cmd import run
    elif args.command == "config":
        from .config import find_config_file, init_config, show_config
        if args.path:
            config_file = find_config_file()
            if config_file:
                print(config_file)
            else:
                print("(no config file - using defaults)")
            return 0
        elif args.init:
            try:
                path = init_config(force=args.force)
                print(f"✓ Created config file: {path}")
                print("  Edit it to customize settings.")
                return 0
            except FileExistsError as e:
                print(f"✗ {e}")
                print("  Use --force to overwrite.")
                return 1
        else:
            show_config()
            return 0
    else:
        parser.print_help()
        return 2

    return run(args)


if __name__ == "__main__":
    sys.exit(main())
