"""Rate-limited HTTP helpers used for plebbit RPC calls."""

from __future__ import annotations

import requests as _requests

from .config import get
from .ratelimit import RateLimiter


_limiter: RateLimiter | None = None


def get_limiter() -> RateLimiter:
    global _limiter
    if _limiter is None:
        calls_per_minute = get("api.calls_per_minute", 120)
        _limiter = RateLimiter(calls_per_minute=calls_per_minute)
    return _limiter


class _RateLimitedRequests:
    """The slice of the requests API the RPC client needs, throttled."""

    RequestException = _requests.RequestException

    @staticmethod
    def post(url: str, **kwargs):
        get_limiter().wait_if_needed()
        return _requests.post(url, **kwargs)


requests = _RateLimitedRequests()
