"""Tests for rebuilding the ranked thread list."""
from __future__ import annotations

import pytest

from conftest import make_subplebbit
from fivechan_archiver.errors import RpcError
from fivechan_archiver.models import RankedPage, ThreadSummary
from fivechan_archiver.ranking import get_ranked_threads, sort_by_activity


def _t(cid, **kw):
    return ThreadSummary(cid=cid, **kw)


def _cids(threads):
    return [t.cid for t in threads]


def test_empty_board_returns_empty_list(plebbit):
    sub = make_subplebbit()
    assert get_ranked_threads(plebbit, sub) == []
    assert plebbit.page_calls == []


def test_active_single_page(plebbit):
    plebbit.pages["QmActivePage1"] = RankedPage([_t(f"QmActive{i}") for i in range(5)])
    sub = make_subplebbit(active="QmActivePage1")

    threads = get_ranked_threads(plebbit, sub)

    assert _cids(threads) == [f"QmActive{i}" for i in range(5)]
    assert plebbit.page_calls == ["QmActivePage1"]


def test_active_follows_next_cid_in_order(plebbit):
    plebbit.pages["QmPage1Cid"] = RankedPage([_t("QmP1a"), _t("QmP1b")], next_cid="QmPage2Cid")
    plebbit.pages["QmPage2Cid"] = RankedPage([_t("QmP2a"), _t("QmP2b")])
    sub = make_subplebbit(active="QmPage1Cid")

    threads = get_ranked_threads(plebbit, sub)

    assert _cids(threads) == ["QmP1a", "QmP1b", "QmP2a", "QmP2b"]
    assert plebbit.page_calls == ["QmPage1Cid", "QmPage2Cid"]


def test_active_order_is_not_resorted(plebbit):
    plebbit.pages["Qm1"] = RankedPage([
        _t("QmOld", last_reply_timestamp=1),
        _t("QmNew", last_reply_timestamp=999),
    ])
    threads = get_ranked_threads(plebbit, make_subplebbit(active="Qm1"))
    assert _cids(threads) == ["QmOld", "QmNew"]


def test_hot_fallback_sorts_by_last_reply(plebbit):
    hot = RankedPage([
        _t("QmHot3", last_reply_timestamp=100, post_number=4),
        _t("QmHot0", last_reply_timestamp=400, post_number=1),
        _t("QmHot2", last_reply_timestamp=200, post_number=3),
        _t("QmHot1", last_reply_timestamp=300, post_number=2),
    ])
    threads = get_ranked_threads(plebbit, make_subplebbit(hot=hot))

    assert _cids(threads) == ["QmHot0", "QmHot1", "QmHot2", "QmHot3"]
    assert plebbit.page_calls == []


def test_hot_fallback_paginates_then_sorts(plebbit):
    hot = RankedPage(
        [_t("QmH3", last_reply_timestamp=300, post_number=8), _t("QmH1", last_reply_timestamp=500, post_number=10)],
        next_cid="QmHotPage2",
    )
    plebbit.pages["QmHotPage2"] = RankedPage([
        _t("QmH2", last_reply_timestamp=400, post_number=9),
        _t("QmH4", last_reply_timestamp=200, post_number=7),
    ])

    threads = get_ranked_threads(plebbit, make_subplebbit(hot=hot))

    assert _cids(threads) == ["QmH1", "QmH2", "QmH3", "QmH4"]
    assert plebbit.page_calls == ["QmHotPage2"]


def test_active_pointer_wins_over_hot(plebbit):
    plebbit.pages["QmA"] = RankedPage([_t("QmFromActive")])
    sub = make_subplebbit(active="QmA", hot=RankedPage([_t("QmFromHot")]))
    assert _cids(get_ranked_threads(plebbit, sub)) == ["QmFromActive"]


def test_page_failure_propagates(plebbit):
    plebbit.pages["Qm1"] = RankedPage([_t("QmA")], next_cid="Qm2")
    plebbit.pages["Qm2"] = RpcError("getSubplebbitPage", "timeout")

    with pytest.raises(RpcError):
        get_ranked_threads(plebbit, make_subplebbit(active="Qm1"))


class TestSortByActivity:
    def test_descending_by_last_reply(self):
        threads = [
            _t("QmA", last_reply_timestamp=100),
            _t("QmB", last_reply_timestamp=300),
            _t("QmC", last_reply_timestamp=200),
        ]
        assert _cids(sort_by_activity(threads)) == ["QmB", "QmC", "QmA"]

    def test_ties_broken_by_post_number_descending(self):
        threads = [
            _t("QmX", last_reply_timestamp=500, post_number=10),
            _t("QmY", last_reply_timestamp=500, post_number=30),
            _t("QmZ", last_reply_timestamp=500, post_number=20),
        ]
        assert _cids(sort_by_activity(threads)) == ["QmY", "QmZ", "QmX"]

    def test_missing_values_sort_last(self):
        threads = [_t("QmNone"), _t("QmSome", last_reply_timestamp=1)]
        assert _cids(sort_by_activity(threads)) == ["QmSome", "QmNone"]
