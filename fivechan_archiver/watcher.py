"""Poll a board and report when it changes."""
from __future__ import annotations

import logging
import threading
from typing import Callable

from .errors import RpcError
from .models import Subplebbit

LOG = logging.getLogger(__name__)


class SubplebbitWatcher:
    """Delivers a snapshot to on_update whenever updatedAt moves."""

    def __init__(
        self,
        client,
        address: str,
        on_update: Callable[[Subplebbit], None],
        poll_interval: float = 30,
    ):
        self.client = client
        self.address = address
        self.on_update = on_update
        self.poll_interval = poll_interval
        self._last_updated_at: int | None = None
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self, initial: Subplebbit | None = None) -> None:
        """Deliver initial (or a fresh fetch) now, then poll in the background."""
        if initial is None:
            initial = self.client.get_subplebbit(self.address)
        self._deliver(initial)
        self._thread = threading.Thread(target=self._loop, name=f"watch-{self.address}", daemon=True)
        self._thread.start()

    def poll_once(self) -> bool:
        """Fetch once; return True if a change was delivered."""
        try:
            sub = self.client.get_subplebbit(self.address)
        except RpcError as e:
            LOG.warning("Polling %s failed: %s", self.address, e)
            return False
        if sub.updated_at is not None and sub.updated_at == self._last_updated_at:
            return False
        self._deliver(sub)
        return True

    def _deliver(self, sub: Subplebbit) -> None:
        self._last_updated_at = sub.updated_at
        self.on_update(sub)

    def _loop(self) -> None:
        while not self._stop.wait(self.poll_interval):
            try:
                self.poll_once()
            except Exception:
                LOG.warning("Unexpected error while polling %s", self.address, exc_info=True)

    def stop(self, timeout: float | None = None) -> None:
        self._stop.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout)
        self._thread = None
