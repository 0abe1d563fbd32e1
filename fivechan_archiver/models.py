from __future__ import annotations

import logging
from dataclasses import dataclass, field

LOG = logging.getLogger(__name__)


@dataclass
class Signer:
    address: str
    private_key: str
    type: str = "ed25519"

    def to_dict(self) -> dict:
        return {
            "address": self.address,
            "privateKey": self.private_key,
            "type": self.type,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Signer":
        return cls(
            address=d.get("address", ""),
            private_key=d["privateKey"],
            type=d.get("type", "ed25519"),
        )


@dataclass
class LockedThread:
    lock_timestamp: int

    def to_dict(self) -> dict:
        return {"lockTimestamp": self.lock_timestamp}

    @classmethod
    def from_dict(cls, d: dict) -> "LockedThread":
        return cls(lock_timestamp=int(d["lockTimestamp"]))


@dataclass
class BoardState:
    """Everything the archiver persists for one board."""

    signers: dict[str, dict] = field(default_factory=dict)
    locked_threads: dict[str, LockedThread] = field(default_factory=dict)
    lock_pid: int | None = None

    def to_dict(self) -> dict:
        d: dict = {
            "signers": self.signers,
            "lockedThreads": {cid: t.to_dict() for cid, t in self.locked_threads.items()},
        }
        if self.lock_pid is not None:
            d["lock"] = {"pid": self.lock_pid}
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "BoardState":
        signers = d.get("signers") or {}
        locked = d.get("lockedThreads") or {}
        if not isinstance(signers, dict) or not isinstance(locked, dict):
            raise ValueError("signers and lockedThreads must be objects")
        locked_threads = {}
        for cid, v in locked.items():
            try:
                locked_threads[str(cid)] = LockedThread.from_dict(v)
            except (KeyError, TypeError, ValueError):
                LOG.warning("Skipping malformed lockedThreads entry %s: %r", cid, v)
        lock = d.get("lock")
        return cls(
            signers=dict(signers),
            locked_threads=locked_threads,
            lock_pid=int(lock["pid"]) if isinstance(lock, dict) and "pid" in lock else None,
        )


@dataclass
class ThreadSummary:
    cid: str
    pinned: bool = False
    locked: bool = False
    reply_count: int = 0
    last_reply_timestamp: int | None = None
    post_number: int | None = None

    @classmethod
    def from_comment(cls, c: dict) -> "ThreadSummary":
        return cls(
            cid=c["cid"],
            pinned=bool(c.get("pinned", False)),
            locked=bool(c.get("locked", False)),
            reply_count=int(c.get("replyCount") or 0),
            last_reply_timestamp=c.get("lastReplyTimestamp"),
            post_number=c.get("postNumber"),
        )


@dataclass
class RankedPage:
    threads: list[ThreadSummary]
    next_cid: str | None = None

    @classmethod
    def from_dict(cls, d: dict) -> "RankedPage":
        return cls(
            threads=[ThreadSummary.from_comment(c) for c in d.get("comments", [])],
            next_cid=d.get("nextCid") or None,
        )


@dataclass
class Subplebbit:
    """Snapshot of a board as last reported by the RPC node."""

    address: str
    roles: dict[str, dict] = field(default_factory=dict)
    page_cids: dict[str, str] = field(default_factory=dict)
    pages: dict[str, RankedPage] = field(default_factory=dict)
    updated_at: int | None = None

    @classmethod
    def from_dict(cls, d: dict) -> "Subplebbit":
        posts = d.get("posts") or {}
        return cls(
            address=d["address"],
            roles=dict(d.get("roles") or {}),
            page_cids={k: v for k, v in (posts.get("pageCids") or {}).items() if v},
            pages={k: RankedPage.from_dict(v) for k, v in (posts.get("pages") or {}).items() if v},
            updated_at=d.get("updatedAt"),
        )
