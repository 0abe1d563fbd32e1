"""Tests for lock/purge decisions."""
from __future__ import annotations

from fivechan_archiver.lifecycle import (
    Limits,
    evaluate,
    find_lock_candidates,
    find_purge_candidates,
)
from fivechan_archiver.models import BoardState, LockedThread, ThreadSummary

NOW = 1_700_000_000


def _t(cid, **kw):
    return ThreadSummary(cid=cid, **kw)


def _limits(per_page=15, pages=10, bump_limit=300, purge=172800):
    return Limits(per_page=per_page, pages=pages, bump_limit=bump_limit, archive_purge_seconds=purge)


def test_defaults():
    limits = Limits()
    assert (limits.per_page, limits.pages, limits.bump_limit, limits.archive_purge_seconds) == (15, 10, 300, 172800)
    assert limits.capacity == 150


class TestCapacity:
    def test_threads_beyond_capacity(self):
        threads = [_t(f"Qm{i}") for i in range(6)]
        assert find_lock_candidates(threads, _limits(per_page=2, pages=2), {}) == ["Qm4", "Qm5"]

    def test_within_capacity_nothing_locked(self):
        threads = [_t(f"Qm{i}") for i in range(4)]
        assert find_lock_candidates(threads, _limits(per_page=2, pages=2), {}) == []

    def test_pinned_threads_do_not_use_capacity(self):
        threads = [
            _t("QmPin1", pinned=True),
            _t("Qm1"),
            _t("Qm2"),
            _t("QmPin2", pinned=True),
            _t("Qm3"),
        ]
        assert find_lock_candidates(threads, _limits(per_page=2, pages=1), {}) == ["Qm3"]

    def test_already_locked_still_counts_toward_rank(self):
        threads = [
            _t("Qm1"),
            _t("Qm2"),
            _t("Qm3", locked=True),
            _t("Qm4"),
            _t("Qm5"),
        ]
        assert find_lock_candidates(threads, _limits(per_page=2, pages=1), {}) == ["Qm4", "Qm5"]

    def test_cold_start_fifty_threads(self):
        threads = [_t(f"Qm{i}") for i in range(50)]
        candidates = find_lock_candidates(threads, _limits(per_page=2, pages=1), {})
        assert len(candidates) == 48
        assert candidates == [f"Qm{i}" for i in range(2, 50)]

    def test_exactly_n_minus_capacity(self):
        for n in (0, 3, 10, 11, 40):
            threads = [_t(f"Qm{i}") for i in range(n)]
            assert len(find_lock_candidates(threads, _limits(per_page=5, pages=2), {})) == max(0, n - 10)


class TestBumpLimit:
    def test_at_or_above_limit(self):
        threads = [
            _t("Qm1", reply_count=100),
            _t("Qm2", reply_count=300),
            _t("Qm3", reply_count=500),
            _t("Qm4", reply_count=299),
        ]
        assert find_lock_candidates(threads, _limits(), {}) == ["Qm2", "Qm3"]

    def test_skips_locked(self):
        threads = [_t("Qm1", reply_count=300, locked=True), _t("Qm2", reply_count=400)]
        assert find_lock_candidates(threads, _limits(), {}) == ["Qm2"]

    def test_pinned_exempt(self):
        threads = [_t("QmPin", pinned=True, reply_count=10_000)]
        assert find_lock_candidates(threads, _limits(per_page=0, pages=0, bump_limit=1), {}) == []

    def test_overlap_with_capacity_listed_once(self):
        threads = [_t("Qm0"), _t("Qm1", reply_count=999)]
        assert find_lock_candidates(threads, _limits(per_page=1, pages=1), {}) == ["Qm1"]


def test_tracked_threads_are_not_relocked():
    threads = [_t("QmAlready"), _t("QmNew")]
    tracked = {"QmAlready": LockedThread(1000)}
    assert find_lock_candidates(threads, _limits(per_page=0, pages=0), tracked) == ["QmNew"]


class TestPurge:
    def test_boundary_is_strict(self):
        tracked = {
            "QmOld": LockedThread(NOW - 200000),
            "QmRecent": LockedThread(NOW - 1000),
            "QmExact": LockedThread(NOW - 172800),
            "QmJustOver": LockedThread(NOW - 172801),
        }
        assert find_purge_candidates(tracked, 172800, NOW) == ["QmOld", "QmJustOver"]

    def test_recent_not_purged(self):
        tracked = {"Qm1": LockedThread(NOW - 100), "Qm2": LockedThread(NOW)}
        assert find_purge_candidates(tracked, 172800, NOW) == []


def test_evaluate_combines_lock_and_purge():
    state = BoardState(locked_threads={"QmGone": LockedThread(NOW - 200000), "QmHeld": LockedThread(NOW - 10)})
    threads = [_t("QmA"), _t("QmHeld"), _t("QmB"), _t("QmPin", pinned=True, reply_count=999)]

    decisions = evaluate(threads, _limits(per_page=1, pages=1), state, NOW)

    assert decisions.to_lock == ["QmB"]
    assert decisions.to_purge == ["QmGone"]
    assert not decisions.is_empty()


def test_evaluate_nothing_to_do():
    decisions = evaluate([_t("QmA")], _limits(), BoardState(), NOW)
    assert decisions.is_empty()
