from __future__ import annotations

from functools import lru_cache
from typing import Protocol

from fastapi import Request
from limits import RateLimitItemPerSecond
from limits.storage import MemoryStorage
from limits.strategies import MovingWindowRateLimiter
from slowapi import Limiter

from core.config import get_settings


def source_address(request: Request) -> str:
    if get_settings().trust_forwarded_for:
        forwarded = request.headers.get("x-forwarded-for", "")
        first_hop = forwarded.split(",", 1)[0].strip()
        if first_hop:
            return first_hop
    if request.client and request.client.host:
        return request.client.host
    return "127.0.0.1"


limiter = Limiter(key_func=source_address)


class RateLimiter(Protocol):
    def admit(self, key: str) -> bool: ...


class SignupRateLimiter:
    """Moving-window admission per key, backed by ``limits``.

    A denied attempt is not recorded, so a caller hammering the endpoint is
    let back in as soon as its oldest admitted attempt leaves the window.
    Keys whose attempts have all expired are evicted by the storage.
    """

    def __init__(self, max_attempts: int = 5, window_seconds: int = 15 * 60) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if window_seconds < 1:
            raise ValueError("window_seconds must be at least 1")
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds
        self.storage = MemoryStorage()
        self._strategy = MovingWindowRateLimiter(self.storage)
        self._item = RateLimitItemPerSecond(max_attempts, window_seconds, namespace="SIGNUP")

    def admit(self, key: str) -> bool:
        return self._strategy.hit(self._item, key)

    def attempts(self, key: str) -> int:
        stats = self._strategy.get_window_stats(self._item, key)
        return self.max_attempts - stats.remaining

    def reset(self) -> None:
        self.storage.reset()


@lru_cache(maxsize=1)
def get_signup_rate_limiter() -> SignupRateLimiter:
    settings = get_settings()
    return SignupRateLimiter(
        max_attempts=settings.rate_limit_signup_max,
        window_seconds=settings.rate_limit_signup_window_seconds,
    )
