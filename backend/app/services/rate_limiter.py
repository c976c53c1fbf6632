"""Per-client rate limiting for the diagnostic and report endpoints.

One token bucket per client IP. Buckets are kept in least-recently-seen order so
that clients quiet for a full window, whose bucket would be full again anyway,
can be dropped cheaply from the front. A hard cap bounds memory when many
distinct clients show up inside a single window.
"""

import time
from dataclasses import dataclass
from typing import Callable, Optional

from app.config import get_settings


@dataclass
class ClientBucket:
    tokens: float
    last_seen: float


class ClientRateLimiter:
    """In-memory token buckets keyed by client IP.

    Tokens refill continuously at ``max_requests / window_seconds`` per second.
    Buckets live in process memory: each worker enforces its own limit.
    """

    def __init__(
        self,
        max_requests: Optional[int] = None,
        window_seconds: Optional[int] = None,
        max_clients: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        settings = get_settings()
        self.max_requests = max_requests or settings.RATE_LIMIT_MAX_REQUESTS
        self.window_seconds = window_seconds or settings.RATE_LIMIT_WINDOW_SECONDS
        self.max_clients = max_clients or settings.RATE_LIMIT_MAX_CLIENTS
        self._clock = clock
        self._buckets: dict[str, ClientBucket] = {}

    @property
    def tracked_clients(self) -> int:
        return len(self._buckets)

    def allow_request(self, client: str) -> bool:
        """Consume one token for ``client``.

        Returns:
            True if the request may proceed, False if the client is rate limited
        """
        now = self._clock()
        self._evict_idle(now)

        bucket = self._buckets.pop(client, None)
        if bucket is None:
            bucket = ClientBucket(tokens=self.max_requests, last_seen=now)
        else:
            bucket.tokens = self._refilled(bucket, now)
            bucket.last_seen = now

        # Re-inserted last: the dict stays ordered by last_seen
        self._buckets[client] = bucket
        self._enforce_capacity()

        if bucket.tokens >= 1:
            bucket.tokens -= 1
            return True
        return False

    def retry_after(self, client: str) -> float:
        """Seconds until ``client`` has a token again, 0 if it has one now."""
        bucket = self._buckets.get(client)
        if bucket is None:
            return 0
        missing = 1 - self._refilled(bucket, self._clock())
        if missing <= 0:
            return 0
        return missing * self.window_seconds / self.max_requests

    def reset(self) -> None:
        """Forget every client."""
        self._buckets.clear()

    # ── Internals ──

    def _refilled(self, bucket: ClientBucket, now: float) -> float:
        elapsed = max(0.0, now - bucket.last_seen)
        rate = self.max_requests / self.window_seconds
        return min(self.max_requests, bucket.tokens + elapsed * rate)

    def _evict_idle(self, now: float) -> None:
        # A bucket idle for a whole window is full again
        while self._buckets:
            client, bucket = next(iter(self._buckets.items()))
            if now - bucket.last_seen < self.window_seconds:
                break
            del self._buckets[client]

    def _enforce_capacity(self) -> None:
        while len(self._buckets) > self.max_clients:
            del self._buckets[next(iter(self._buckets))]


# Module-level singleton
rate_limiter = ClientRateLimiter()
