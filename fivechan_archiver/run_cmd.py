"""`run` command: archive a board until interrupted."""
from __future__ import annotations

import logging
import os
import signal
import sys
import threading
from pathlib import Path

from .archiver import Archiver
from .config import resolve
from .errors import ArchiverError
from .lifecycle import Limits
from .rpc import PlebbitRpc
from .state import state_path_for_board

LOG = logging.getLogger(__name__)


def resolve_state_path(board: str, state_path: str | None = None, state_dir: str | None = None) -> Path:
    """CLI --state-path, then ARCHIVER_STATE_PATH, then <state dir>/<board>.json."""
    explicit = state_path or os.environ.get("ARCHIVER_STATE_PATH", "").strip()
    if explicit and not state_dir:
        return Path(explicit).expanduser()
    directory = resolve("archiver.state_dir", state_dir)
    return state_path_for_board(board, Path(directory).expanduser() if directory else None)


def resolve_limits(args) -> Limits:
    return Limits(
        per_page=resolve("archiver.per_page", getattr(args, "per_page", None), int),
        pages=resolve("archiver.pages", getattr(args, "pages", None), int),
        bump_limit=resolve("archiver.bump_limit", getattr(args, "bump_limit", None), int),
        archive_purge_seconds=resolve(
            "archiver.archive_purge_seconds", getattr(args, "archive_purge_seconds", None), int
        ),
    )


def _wait_for_shutdown() -> None:
    stop = threading.Event()

    def _handle(signum, _frame):
        LOG.info("Received signal %d, shutting down", signum)
        stop.set()

    signal.signal(signal.SIGINT, _handle)
    signal.signal(signal.SIGTERM, _handle)
    # Short waits keep the main thread responsive to signals.
    while not stop.wait(1.0):
        pass


def run(args) -> int:
    """Execute run command."""
    logging.basicConfig(
        level=logging.DEBUG if getattr(args, "verbose", False) else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        limits = resolve_limits(args)
        poll_interval = resolve("archiver.poll_interval_seconds", args.poll_interval, float)
        rpc_url = resolve("rpc.url", args.rpc_url)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    client = PlebbitRpc(rpc_url, timeout=resolve("rpc.timeout", None, float))
    archiver = Archiver(
        client,
        args.board,
        limits=limits,
        state_path=resolve_state_path(args.board, args.state_path, args.state_dir),
        poll_interval=poll_interval,
    )

    if args.once:
        try:
            report = archiver.run_once()
        except ArchiverError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        if report is None:
            print(f"{args.board}: nothing to do")
        else:
            print(
                f"{args.board}: locked {len(report.locked)}, purged {len(report.purged)}, "
                f"failed {len(report.failed)}"
            )
        return 0

    try:
        archiver.start()
    except ArchiverError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Archiving {args.board} (state: {archiver.state_path}). Ctrl-C to stop.")
    try:
        _wait_for_shutdown()
    finally:
        archiver.stop()
    return 0
