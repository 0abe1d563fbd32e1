"""Cooperative single-instance lock per board, stored in the board state.

The lock only guards against launching two archivers for the same board.
A record naming a dead PID is stale and gets taken over.
"""
from __future__ import annotations

import logging
import os
from dataclasses import replace
from pathlib import Path
from typing import Callable

from .errors import BoardLockedError
from .models import BoardState
from .state import load_state, save_state

LOG = logging.getLogger(__name__)


def is_pid_alive(pid: int) -> bool:
    """Probe a PID with signal 0. Any failure counts as dead."""
    try:
        os.kill(pid, 0)
        return True
    except (OSError, OverflowError, ValueError):
        return False


def acquire_lock(
    state: BoardState,
    board: str,
    pid: int,
    is_alive: Callable[[int], bool] = is_pid_alive,
) -> BoardState:
    """Return a copy of state holding the lock for pid.

    Raises BoardLockedError if the current holder is alive. A record naming
    pid itself is left over from an earlier process that had the same PID.
    """
    holder = state.lock_pid
    if holder is not None:
        if holder != pid and is_alive(holder):
            raise BoardLockedError(board, holder)
        LOG.info("Taking over stale lock on %s (PID %d)", board, holder)
    return replace(state, lock_pid=pid)


def release_lock(state: BoardState, pid: int) -> BoardState:
    """Return a copy of state without the lock, if pid holds it."""
    if state.lock_pid != pid:
        return state
    return replace(state, lock_pid=None)


class ProcessLock:
    """Binds acquire/release to a board's state file."""

    def __init__(
        self,
        path: Path,
        board: str,
        pid: int | None = None,
        is_alive: Callable[[int], bool] = is_pid_alive,
    ):
        self.path = Path(path)
        self.board = board
        self.pid = pid if pid is not None else os.getpid()
        self._is_alive = is_alive
        self.held = False

    def acquire(self) -> None:
        state = acquire_lock(load_state(self.path), self.board, self.pid, self._is_alive)
        save_state(self.path, state)
        self.held = True
        LOG.debug("Acquired lock on %s (PID %d)", self.board, self.pid)

    def release(self) -> None:
        if not self.held:
            return
        state = load_state(self.path)
        if state.lock_pid != self.pid:
            LOG.warning("Lock on %s is held by PID %s, not us; leaving it", self.board, state.lock_pid)
        else:
            save_state(self.path, release_lock(state, self.pid))
        self.held = False
        LOG.debug("Released lock on %s", self.board)
