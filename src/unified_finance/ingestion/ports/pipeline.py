"""Access-layer abstractions shared by domain services.

Domain services depend on IPipeline only; the pipeline in turn is composed
from a rate limiter, a cache and (for the cookie-based provider) an auth
provider, each behind its own Protocol.
"""

from collections.abc import Awaitable, Callable, Hashable, Iterable
from datetime import timedelta
from typing import Any, Protocol, TypeVar

from unified_finance.ingestion.ports.auth import AuthSession
from unified_finance.ingestion.ports.http import HttpResponse, IHttpClient
from unified_finance.shared.models.enums import ProviderKey

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)

OutboundCall = Callable[[AuthSession | None], Awaitable[HttpResponse]]
ResponseParser = Callable[[Any], T]


class IRateLimiter(Protocol):
    async def acquire(self, provider_key: ProviderKey) -> None:
        """Suspend until one token is available for the provider, then consume it."""
        ...

    def status(self, provider_key: ProviderKey) -> Any:
        """Non-mutating snapshot of the provider's bucket."""
        ...


class ICache(Protocol):
    async def get_or_put(
        self,
        key: str,
        ttl: timedelta,
        supplier: Callable[[], Awaitable[T]],
    ) -> T:
        """Return a live value or compute it once for all concurrent callers."""
        ...


class IPipeline(Protocol):
    """Orchestration contract every domain service rides on."""

    http_client: IHttpClient

    async def execute(
        self,
        cache_key: str,
        ttl: timedelta,
        provider_key: ProviderKey,
        call: OutboundCall,
        parse: ResponseParser[T],
    ) -> T:
        ...

    async def execute_batch(
        self,
        items: Iterable[K],
        fetch: Callable[[K], Awaitable[T]],
        max_concurrency: int | None = None,
    ) -> dict[K, T]:
        ...
