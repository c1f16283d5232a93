"""Fixed-window rate limiter backed by the ``limits`` storage layer."""

from __future__ import annotations

import logging
import threading
import zlib
from contextlib import AbstractContextManager, nullcontext
from dataclasses import dataclass

from limits import RateLimitItem, parse
from limits.storage import storage_from_string
from limits.strategies import FixedWindowRateLimiter

logger = logging.getLogger(__name__)

_LOCK_STRIPES = 64


class RateLimitBackendError(Exception):
    """Raised when counters cannot be read or written in time."""


@dataclass(frozen=True, slots=True)
class RateLimitDecision:
    allowed: bool
    limit: int
    remaining: int
    reset_at: float


class RateLimiter:
    """Counts hits per identifier tuple within fixed windows.

    Memory storage hits are serialized per key through a fixed set of striped
    locks; remote storages increment server-side. Concurrent hits on the same
    key are never undercounted.
    """

    def __init__(self, storage_uri: str = "memory://", *, timeout_seconds: float = 0.5) -> None:
        options: dict[str, float] = {}
        if storage_uri.startswith(("redis://", "rediss://")):
            options = {"socket_timeout": timeout_seconds, "socket_connect_timeout": timeout_seconds}
        self._storage = storage_from_string(storage_uri, **options)
        self._strategy = FixedWindowRateLimiter(self._storage)
        # Memory storage reads the counter back after releasing its key lock.
        self._stripes: tuple[threading.Lock, ...] = (
            tuple(threading.Lock() for _ in range(_LOCK_STRIPES)) if storage_uri.startswith("memory://") else ()
        )

    @staticmethod
    def parse_rate(rate: str) -> RateLimitItem:
        """Parse ``"<amount>/<granularity>"`` strings such as ``"60/minute"``."""
        return parse(rate)

    def hit(self, rate: RateLimitItem | str, *identifiers: str) -> RateLimitDecision:
        item = self.parse_rate(rate) if isinstance(rate, str) else rate
        try:
            with self._lock_for(item.key_for(*identifiers)):
                allowed = self._strategy.hit(item, *identifiers)
                reset_at, remaining = self._strategy.get_window_stats(item, *identifiers)
        except Exception as exc:  # storage driver exception surface
            logger.warning("rate_limit.backend_failed error=%s", type(exc).__name__)
            raise RateLimitBackendError("Rate limit storage unavailable") from exc

        return RateLimitDecision(
            allowed=allowed,
            limit=item.amount,
            remaining=remaining,
            reset_at=reset_at,
        )

    def _lock_for(self, key: str) -> AbstractContextManager:
        if not self._stripes:
            return nullcontext()
        return self._stripes[zlib.crc32(key.encode("utf-8")) % len(self._stripes)]

    def reset(self) -> None:
        self._storage.reset()


__all__ = ["RateLimitBackendError", "RateLimitDecision", "RateLimiter"]
