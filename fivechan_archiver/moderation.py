"""Apply lock/purge decisions to the board and record them in state."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from .errors import RpcError
from .lifecycle import Decisions
from .models import LockedThread, Signer
from .state import load_state, save_state

LOG = logging.getLogger(__name__)


@dataclass
class DispatchReport:
    locked: list[str] = field(default_factory=list)
    purged: list[str] = field(default_factory=list)
    failed: list[tuple[str, str, str]] = field(default_factory=list)  # (cid, action, error)


def _record_lock(state_path: Path, cid: str, now: int) -> None:
    state = load_state(state_path)
    state.locked_threads[cid] = LockedThread(lock_timestamp=now)
    save_state(state_path, state)


def _record_purge(state_path: Path, cid: str) -> None:
    state = load_state(state_path)
    state.locked_threads.pop(cid, None)
    save_state(state_path, state)


def dispatch(
    client,
    board: str,
    signer: Signer,
    decisions: Decisions,
    state_path: Path,
    clock: Callable[[], float] = time.time,
) -> DispatchReport:
    """Publish each moderation one at a time.

    State is saved after every acknowledged action. A failed action is
    logged and left untracked so a later cycle retries it.
    """
    report = DispatchReport()

    for cid in decisions.to_lock:
        try:
            client.publish_moderation(board, cid, {"locked": True}, signer)
        except RpcError as e:
            LOG.warning("Failed to lock %s on %s: %s", cid, board, e)
            report.failed.append((cid, "lock", str(e)))
            continue
        _record_lock(state_path, cid, int(clock()))
        report.locked.append(cid)
        LOG.info("Locked thread %s on %s", cid, board)

    for cid in decisions.to_purge:
        try:
            client.publish_moderation(board, cid, {"purged": True}, signer)
        except RpcError as e:
            LOG.warning("Failed to purge %s on %s: %s", cid, board, e)
            report.failed.append((cid, "purge", str(e)))
            continue
        _record_purge(state_path, cid)
        report.purged.append(cid)
        LOG.info("Purged thread %s on %s", cid, board)

    return report
