"""`status` command: show what the archiver has recorded for a board."""
from __future__ import annotations

import json
import sys
import time

from .config import resolve
from .process_lock import is_pid_alive
from .run_cmd import resolve_state_path
from .state import load_state


def _fmt_duration(seconds: int) -> str:
    seconds = max(0, int(seconds))
    if seconds < 3600:
        return f"{seconds // 60}m"
    if seconds < 86400:
        return f"{seconds // 3600}h{(seconds % 3600) // 60:02d}m"
    return f"{seconds // 86400}d{(seconds % 86400) // 3600:02d}h"


def run(args) -> int:
    """Execute status command."""
    path = resolve_state_path(args.board, args.state_path, args.state_dir)
    state = load_state(path)

    if args.json:
        print(json.dumps(state.to_dict(), indent=2))
        return 0

    try:
        purge_after = resolve("archiver.archive_purge_seconds", args.archive_purge_seconds, int)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    now = int(time.time())
    print(f"Board: {args.board}")
    print(f"State: {path}{'' if path.exists() else ' (not created yet)'}")

    if state.lock_pid is None:
        print("Lock:  free")
    else:
        alive = "running" if is_pid_alive(state.lock_pid) else "stale"
        print(f"Lock:  PID {state.lock_pid} ({alive})")

    signer = state.signers.get(args.board)
    print(f"Signer: {signer.get('address', '(unknown address)') if signer else '(none yet)'}")

    locked = sorted(state.locked_threads.items(), key=lambda kv: kv[1].lock_timestamp)
    print(f"\nLocked threads: {len(locked)}")
    for cid, info in locked:
        age = now - info.lock_timestamp
        if age > purge_after:
            when = "purge due"
        else:
            when = f"purge in {_fmt_duration(purge_after - age)}"
        print(f"  {cid}  locked {_fmt_duration(age)} ago, {when}")
    return 0
