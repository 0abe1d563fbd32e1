"""Rebuild a board's full thread ranking from paginated listings.

Two sources, chosen by whether the node publishes an "active" page pointer:

- active: follow nextCid from the pointed page, keep the node's order.
- hot fallback: follow nextCid from the preloaded hot page, then sort
  locally by last reply (newest first), ties by post number (highest first).
"""
from __future__ import annotations

import logging

from .models import RankedPage, Subplebbit, ThreadSummary

LOG = logging.getLogger(__name__)

ACTIVE_SORT = "active"
FALLBACK_SORT = "hot"


def walk_pages(client, address: str, first: RankedPage) -> list[ThreadSummary]:
    """Concatenate first and every page reachable through nextCid, in order."""
    threads = list(first.threads)
    next_cid = first.next_cid
    fetched = 0
    while next_cid:
        page = client.get_page(address, next_cid)
        fetched += 1
        threads.extend(page.threads)
        next_cid = page.next_cid
    LOG.debug("Walked %d extra page(s) on %s, %d threads", fetched, address, len(threads))
    return threads


def active_sort_key(thread: ThreadSummary) -> tuple[int, int]:
    return (thread.last_reply_timestamp or 0, thread.post_number or 0)


def sort_by_activity(threads: list[ThreadSummary]) -> list[ThreadSummary]:
    return sorted(threads, key=active_sort_key, reverse=True)


def get_ranked_threads(client, subplebbit: Subplebbit) -> list[ThreadSummary]:
    """Return every thread on the board in rank order.

    Page fetch errors propagate; an empty board yields [].
    """
    address = subplebbit.address
    active_cid = subplebbit.page_cids.get(ACTIVE_SORT)
    if active_cid:
        first = client.get_page(address, active_cid)
        return walk_pages(client, address, first)

    preloaded = subplebbit.pages.get(FALLBACK_SORT)
    if preloaded is None:
        return []
    return sort_by_activity(walk_pages(client, address, preloaded))
