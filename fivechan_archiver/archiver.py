"""Archiver service for a single board.

Threads pushed out of the active window (or past the bump limit) are
locked; locked threads are purged once archive_purge_seconds have passed.
"""
from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from typing import Callable

from .lifecycle import Limits, evaluate
from .models import Signer, Subplebbit
from .moderation import DispatchReport, dispatch
from .process_lock import ProcessLock, is_pid_alive
from .ranking import get_ranked_threads
from .scheduler import UpdateScheduler
from .signers import ensure_moderator_role, ensure_signer
from .state import load_state, state_path_for_board
from .watcher import SubplebbitWatcher

LOG = logging.getLogger(__name__)


class Archiver:
    def __init__(
        self,
        client,
        board: str,
        limits: Limits | None = None,
        state_path: Path | str | None = None,
        state_dir: Path | str | None = None,
        poll_interval: float = 30,
        pid: int | None = None,
        is_alive: Callable[[int], bool] = is_pid_alive,
        clock: Callable[[], float] = time.time,
    ):
        self.client = client
        self.board = board
        self.limits = limits or Limits()
        self.state_path = Path(state_path) if state_path else state_path_for_board(board, state_dir)
        self.poll_interval = poll_interval
        self.clock = clock

        self.lock = ProcessLock(self.state_path, board, pid=pid, is_alive=is_alive)
        self.scheduler = UpdateScheduler(self.run_cycle, name=board)
        self.watcher: SubplebbitWatcher | None = None
        self.signer: Signer | None = None
        self.last_report: DispatchReport | None = None

        self._latest: Subplebbit | None = None
        self._latest_lock = threading.Lock()
        self._stopped = False

    # ------------------------------------------------------------------
    # Lifecycle

    def prepare(self) -> Subplebbit:
        """Take the board lock, then load the signer and check its role.

        Returns the board snapshot. The lock is released again on failure.
        """
        self.lock.acquire()
        try:
            self.signer = ensure_signer(self.client, self.state_path, self.board)
            subplebbit = self.client.get_subplebbit(self.board)
            ensure_moderator_role(self.client, subplebbit, self.signer)
        except BaseException:
            self.lock.release()
            raise
        with self._latest_lock:
            self._latest = subplebbit
        return subplebbit

    def start(self) -> "Archiver":
        subplebbit = self.prepare()
        LOG.info(
            "Archiving %s as %s (capacity=%d, bump_limit=%d, purge_after=%ds)",
            self.board,
            self.signer.address,
            self.limits.capacity,
            self.limits.bump_limit,
            self.limits.archive_purge_seconds,
        )
        self.watcher = SubplebbitWatcher(self.client, self.board, self.handle_update, self.poll_interval)
        try:
            self.watcher.start(initial=subplebbit)
        except BaseException:
            self.stop()
            raise
        return self

    def run_once(self) -> DispatchReport | None:
        """Prepare, run a single cycle in this thread, release the lock."""
        self.prepare()
        try:
            return self.run_cycle()
        finally:
            self._stopped = True
            self.lock.release()

    def stop(self, timeout: float | None = None) -> None:
        if self._stopped:
            return
        self._stopped = True
        if self.watcher is not None:
            self.watcher.stop(timeout)
        if not self.scheduler.stop(timeout):
            LOG.warning("Cycle on %s still running after %ss; releasing lock anyway", self.board, timeout)
        self.lock.release()
        LOG.info("Stopped archiver for %s", self.board)

    def wait_idle(self, timeout: float | None = None) -> bool:
        return self.scheduler.wait_idle(timeout)

    # ------------------------------------------------------------------
    # Updates

    def handle_update(self, subplebbit: Subplebbit) -> None:
        with self._latest_lock:
            self._latest = subplebbit
        self.scheduler.notify()

    def run_cycle(self) -> DispatchReport | None:
        with self._latest_lock:
            subplebbit = self._latest
        if subplebbit is None:
            return None

        threads = get_ranked_threads(self.client, subplebbit)
        state = load_state(self.state_path)
        now = int(self.clock())
        decisions = evaluate(threads, self.limits, state, now)
        LOG.debug(
            "%s: %d threads, %d to lock, %d to purge",
            self.board,
            len(threads),
            len(decisions.to_lock),
            len(decisions.to_purge),
        )
        if decisions.is_empty():
            return None

        report = dispatch(self.client, self.board, self.signer, decisions, self.state_path, clock=self.clock)
        self.last_report = report
        if report.failed:
            LOG.warning("%s: %d moderation(s) failed this cycle", self.board, len(report.failed))
        return report


def start_archiver(client, board: str, **kwargs) -> Archiver:
    """Create an Archiver for board and start it."""
    return Archiver(client, board, **kwargs).start()
