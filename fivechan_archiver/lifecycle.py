from __future__ import annotations

from dataclasses import dataclass, field

from .models import BoardState, LockedThread, ThreadSummary

DEFAULT_PER_PAGE = 15
DEFAULT_PAGES = 10
DEFAULT_BUMP_LIMIT = 300
DEFAULT_ARCHIVE_PURGE_SECONDS = 172800


@dataclass(frozen=True)
class Limits:
    per_page: int = DEFAULT_PER_PAGE
    pages: int = DEFAULT_PAGES
    bump_limit: int = DEFAULT_BUMP_LIMIT
    archive_purge_seconds: int = DEFAULT_ARCHIVE_PURGE_SECONDS

    @property
    def capacity(self) -> int:
        return self.per_page * self.pages


@dataclass
class Decisions:
    to_lock: list[str] = field(default_factory=list)
    to_purge: list[str] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.to_lock and not self.to_purge


def find_lock_candidates(
    threads: list[ThreadSummary],
    limits: Limits,
    locked_threads: dict[str, LockedThread],
) -> list[str]:
    """Threads to lock, in rank order.

    A non-pinned thread qualifies when it sits past capacity or has hit the
    bump limit. Threads the board already shows as locked, or that we have
    already locked ourselves, are skipped. Hitting the bump limit locks
    rather than just freezing the thread's position.
    """
    candidates: list[str] = []
    seen: set[str] = set()
    rank = 0
    for thread in threads:
        if thread.pinned:
            continue
        beyond_capacity = rank >= limits.capacity
        rank += 1
        if thread.locked or thread.cid in locked_threads or thread.cid in seen:
            continue
        if beyond_capacity or thread.reply_count >= limits.bump_limit:
            candidates.append(thread.cid)
            seen.add(thread.cid)
    return candidates


def find_purge_candidates(
    locked_threads: dict[str, LockedThread],
    archive_purge_seconds: int,
    now: int,
) -> list[str]:
    # Strictly greater: a thread locked exactly archive_purge_seconds ago stays.
    return [
        cid
        for cid, info in locked_threads.items()
        if now - info.lock_timestamp > archive_purge_seconds
    ]


def evaluate(threads: list[ThreadSummary], limits: Limits, state: BoardState, now: int) -> Decisions:
    return Decisions(
        to_lock=find_lock_candidates(threads, limits, state.locked_threads),
        to_purge=find_purge_candidates(state.locked_threads, limits.archive_purge_seconds, now),
    )
