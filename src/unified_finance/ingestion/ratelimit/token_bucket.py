"""
Per-provider token bucket throttling.

Each provider key owns an independent bucket. Counter reads and writes for a
bucket are serialized through one asyncio.Lock, and the lock is released
before any sleep so a cancelled waiter never strands other tasks.
"""

import asyncio
import math
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from unified_finance.infrastructure.observability import get_ingestion_logger
from unified_finance.ingestion.config.value_objects import RateLimitConfig
from unified_finance.shared.exceptions import ConfigurationError
from unified_finance.shared.models.enums import ProviderKey


@dataclass(frozen=True)
class RateLimiterStatus:
    """Point-in-time view of a bucket."""

    available_tokens: float
    capacity: int
    refill_rate: float
    estimated_wait_ms: int
    enabled: bool


def _wait_ms(tokens: float, refill_rate: float) -> int:
    if tokens >= 1:
        return 0
    return math.ceil((1 - tokens) / refill_rate * 1000)


class TokenBucketRateLimiter:
    """A single token bucket.

    Starts full. ``acquire`` consumes one token, suspending until one has
    refilled when the bucket is empty; under contention it loops rather than
    assuming a single wait suffices.
    """

    def __init__(
        self,
        source: ProviderKey | str,
        config: RateLimitConfig,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.source = str(getattr(source, "value", source))
        self.config = config
        self._clock = clock
        self._sleep = sleep
        self._tokens = float(config.capacity)
        self._last_refill = clock()
        self._lock = asyncio.Lock()
        self.logger = get_ingestion_logger("token-bucket", provider=self.source)

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    def _refilled(self, now: float) -> float:
        elapsed = max(0.0, now - self._last_refill)
        tokens = self._tokens + elapsed * self.config.refill_rate
        return min(float(self.config.capacity), max(0.0, tokens))

    async def acquire(self) -> None:
        if not self.config.enabled:
            return

        waited_ms = 0
        while True:
            async with self._lock:
                now = self._clock()
                self._tokens = self._refilled(now)
                self._last_refill = now
                if self._tokens >= 1:
                    self._tokens -= 1
                    if waited_ms:
                        self.logger.debug(
                            "token_acquired_after_wait",
                            waited_ms=waited_ms,
                            remaining=round(self._tokens, 3),
                        )
                    return
                wait_ms = _wait_ms(self._tokens, self.config.refill_rate)

            self.logger.debug("token_wait", wait_ms=wait_ms)
            await self._sleep(wait_ms / 1000)
            waited_ms += wait_ms

    def status(self) -> RateLimiterStatus:
        """Snapshot from a virtual refill; bucket state is left untouched."""
        tokens = self._refilled(self._clock())
        return RateLimiterStatus(
            available_tokens=tokens,
            capacity=self.config.capacity,
            refill_rate=self.config.refill_rate,
            estimated_wait_ms=(
                _wait_ms(tokens, self.config.refill_rate) if self.config.enabled else 0
            ),
            enabled=self.config.enabled,
        )


class RateLimiterRegistry:
    """Independent buckets keyed by provider.

    Exhausting one provider's quota never blocks another's.
    """

    def __init__(
        self,
        configs: dict[ProviderKey, RateLimitConfig] | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._clock = clock
        self._sleep = sleep
        self._buckets: dict[ProviderKey, TokenBucketRateLimiter] = {}
        for provider_key, config in (configs or {}).items():
            self.register(provider_key, config)

    def register(self, provider_key: ProviderKey, config: RateLimitConfig) -> None:
        """Add or replace the bucket for a provider."""
        self._buckets[provider_key] = TokenBucketRateLimiter(
            provider_key, config, clock=self._clock, sleep=self._sleep
        )

    def bucket(self, provider_key: ProviderKey) -> TokenBucketRateLimiter:
        try:
            return self._buckets[provider_key]
        except KeyError:
            name = getattr(provider_key, "value", provider_key)
            raise ConfigurationError(
                f"No rate limiter configured for provider {name}",
                metadata={"provider": name},
            ) from None

    async def acquire(self, provider_key: ProviderKey) -> None:
        await self.bucket(provider_key).acquire()

    def status(self, provider_key: ProviderKey) -> RateLimiterStatus:
        return self.bucket(provider_key).status()

    def __contains__(self, provider_key: object) -> bool:
        return provider_key in self._buckets
