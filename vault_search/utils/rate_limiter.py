"""
Rate Limiting Utilities

Token bucket rate limiter used to pace requests to the remote embedding
provider, which enforces per-minute request quotas.
"""

import asyncio
import time
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class RateLimiterMetrics:
    """Metrics for rate limiter monitoring and observability."""
    total_requests: int = 0
    total_throttled: int = 0
    total_wait_time: float = 0.0
    peak_wait_time: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_requests": self.total_requests,
            "total_throttled": self.total_throttled,
            "total_wait_time_seconds": round(self.total_wait_time, 2),
            "peak_wait_time_seconds": round(self.peak_wait_time, 2),
        }


class TokenBucketRateLimiter:
    """
    Token bucket rate limiter with async support.

    Tokens are added to the bucket at a constant rate and each request
    consumes one. When the bucket is empty, callers wait for a refill, which
    allows short bursts up to the bucket capacity while holding the average
    rate.

    Example:
        >>> limiter = TokenBucketRateLimiter(rate=2, capacity=4)
        >>> await limiter.acquire()
    """

    def __init__(
        self,
        rate: float,
        capacity: Optional[int] = None
    ):
        """
        Initialize token bucket rate limiter.

        Args:
            rate: Token replenishment rate (tokens per second)
            capacity: Maximum bucket capacity (default: max(1, rate))
        """
        if rate <= 0:
            raise ValueError("Rate must be positive")

        self.rate = rate
        self.capacity = capacity if capacity is not None else max(1, int(rate))
        self.tokens = float(self.capacity)
        self.last_update = time.monotonic()

        self._lock = asyncio.Lock()
        self._metrics = RateLimiterMetrics()

        logger.debug(f"TokenBucketRateLimiter initialized: rate={rate}/s, capacity={self.capacity}")

    def _refill_tokens(self) -> None:
        now = time.monotonic()
        elapsed = now - self.last_update
        self.tokens = min(self.capacity, self.tokens + elapsed * self.rate)
        self.last_update = now

    async def acquire(self, tokens: int = 1) -> float:
        """
        Acquire tokens from the bucket, waiting if necessary.

        Requests are served in lock order, so waiters are processed fairly.

        Args:
            tokens: Number of tokens to acquire (default: 1)

        Returns:
            Time waited in seconds (0 if no wait was needed)

        Raises:
            ValueError: If tokens requested exceeds capacity
        """
        if tokens > self.capacity:
            raise ValueError(f"Cannot acquire {tokens} tokens (capacity: {self.capacity})")

        wait_start = time.monotonic()

        async with self._lock:
            self._metrics.total_requests += 1

            while True:
                self._refill_tokens()
                if self.tokens >= tokens:
                    self.tokens -= tokens
                    break

                wait_time = (tokens - self.tokens) / self.rate
                await asyncio.sleep(min(wait_time, 0.1))

        total_wait = time.monotonic() - wait_start
        if total_wait > 0.001:
            self._metrics.total_throttled += 1
            self._metrics.total_wait_time += total_wait
            self._metrics.peak_wait_time = max(self._metrics.peak_wait_time, total_wait)
            logger.debug(f"Rate limiter throttled request for {total_wait:.3f}s")
        return total_wait

    def get_metrics(self) -> Dict[str, Any]:
        return self._metrics.to_dict()
