"""Single-flight scheduling of evaluation cycles.

Notifications that arrive while a cycle runs collapse into one follow-up
cycle. States: idle, running, running+pending.
"""
from __future__ import annotations

import logging
import threading
from typing import Callable

LOG = logging.getLogger(__name__)

IDLE = "idle"
RUNNING = "running"
RUNNING_PENDING = "running+pending"


class UpdateScheduler:
    def __init__(self, run_cycle: Callable[[], None], name: str = "archiver"):
        self._run_cycle = run_cycle
        self._name = name
        self._cond = threading.Condition()
        self._running = False
        self._pending = False
        self._stopped = False
        self._worker: threading.Thread | None = None
        self.cycles = 0

    @property
    def state(self) -> str:
        with self._cond:
            if not self._running:
                return IDLE
            return RUNNING_PENDING if self._pending else RUNNING

    def notify(self) -> bool:
        """Request a cycle. Returns True if a new cycle was started."""
        with self._cond:
            if self._stopped:
                return False
            if self._running:
                self._pending = True
                return False
            self._running = True
            self._worker = threading.Thread(target=self._drain, name=f"{self._name}-cycle", daemon=True)
            self._worker.start()
            return True

    def _drain(self) -> None:
        while True:
            try:
                self._run_cycle()
            except Exception:
                # Cycle-scope failure: state is untouched, the next notification retries.
                LOG.warning("Evaluation cycle failed for %s", self._name, exc_info=True)
            with self._cond:
                self.cycles += 1
                if self._pending and not self._stopped:
                    self._pending = False
                    continue
                self._running = False
                self._pending = False
                self._cond.notify_all()
                return

    def wait_idle(self, timeout: float | None = None) -> bool:
        """Block until no cycle is running or pending."""
        with self._cond:
            return self._cond.wait_for(lambda: not self._running, timeout=timeout)

    def stop(self, timeout: float | None = None) -> bool:
        """Refuse new notifications and let the in-flight cycle finish."""
        with self._cond:
            self._stopped = True
            self._pending = False
        return self.wait_idle(timeout)
