"""Pytest configuration and fixtures."""
from __future__ import annotations

import subprocess
import sys
import threading

import pytest

from fivechan_archiver import config
from fivechan_archiver.errors import RpcError
from fivechan_archiver.models import Signer, Subplebbit


class FakePlebbit:
    """In-memory stand-in for the RPC client."""

    def __init__(self, local=(), signer_address="mock-address-123"):
        self.subplebbits: dict[str, Subplebbit] = {}
        self.pages: dict[str, object] = {}
        self.local = list(local)
        self.signer_address = signer_address
        self.moderations: list[tuple[str, str, dict]] = []
        self.edits: list[tuple[str, dict]] = []
        self.page_calls: list[str] = []
        self.fail_moderation: set[str] = set()
        self.created_signers = 0
        self._lock = threading.Lock()

    def create_signer(self, private_key=None):
        if private_key is None:
            self.created_signers += 1
            private_key = f"pk-{self.created_signers}"
        return Signer(address=self.signer_address, private_key=private_key)

    def list_local_subplebbits(self):
        return list(self.local)

    def get_subplebbit(self, address):
        return self.subplebbits[address]

    def get_page(self, address, cid):
        with self._lock:
            self.page_calls.append(cid)
        page = self.pages[cid]
        if isinstance(page, Exception):
            raise page
        if callable(page):
            return page()
        return page

    def edit_subplebbit(self, address, edit):
        self.edits.append((address, edit))

    def publish_moderation(self, address, comment_cid, moderation, signer):
        if comment_cid in self.fail_moderation:
            raise RpcError("publishCommentModeration", "node unreachable")
        with self._lock:
            self.moderations.append((address, comment_cid, moderation))

    def moderated(self, kind):
        return [cid for _, cid, m in self.moderations if m.get(kind)]


def make_subplebbit(address="board.eth", active=None, hot=None, roles=None, updated_at=1):
    return Subplebbit(
        address=address,
        roles=roles if roles is not None else {"mock-address-123": {"role": "moderator"}},
        page_cids={"active": active} if active else {},
        pages={"hot": hot} if hot is not None else {},
        updated_at=updated_at,
    )


@pytest.fixture
def plebbit():
    return FakePlebbit()


@pytest.fixture
def state_dir(tmp_path):
    return tmp_path / "states"


@pytest.fixture
def other_pid():
    """PID of a live process other than the test runner."""
    proc = subprocess.Popen([sys.executable, "-c", "import time; time.sleep(60)"])
    yield proc.pid
    proc.kill()
    proc.wait()


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Keep user config files and env overrides out of tests."""
    monkeypatch.setattr(config, "CONFIG_PATHS", [tmp_path / "no-config.yaml"])
    monkeypatch.setattr(config, "_config_cache", None)
    for name in list(config.ENV_OVERRIDES.values()) + ["ARCHIVER_STATE_PATH"]:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg"))
    yield
