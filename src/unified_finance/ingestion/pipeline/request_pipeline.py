"""
Request execution pipeline shared by every domain service.

Composes the cache, the per-provider rate limiter, the provider's auth
session (when it has one) and the HTTP transport into a single call
contract. Services supply only a cache key, a TTL, the outbound call and a
parser.
"""

import asyncio
import json
from collections.abc import Awaitable, Callable, Hashable, Iterable
from datetime import timedelta
from typing import Any, TypeVar

import aiohttp
from pydantic import ValidationError

from unified_finance.infrastructure.observability import get_pipeline_logger
from unified_finance.ingestion.config.value_objects import BatchConfig
from unified_finance.ingestion.pipeline.error_handlers import (
    ErrorMapperChain,
    create_error_mapper_chain,
    preview,
    redact_url,
)
from unified_finance.ingestion.ports.auth import AuthSession, IAuthProvider
from unified_finance.ingestion.ports.http import HttpResponse, IHttpClient
from unified_finance.ingestion.ports.pipeline import (
    ICache,
    IRateLimiter,
    OutboundCall,
    ResponseParser,
)
from unified_finance.shared.exceptions import (
    ApiError,
    AuthenticationError,
    DataParsingError,
    ErrorCode,
    UfcError,
)
from unified_finance.shared.models.enums import ProviderKey

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)

# Parser failures that mean "the body did not have the shape we expected"
PARSE_ERRORS = (KeyError, TypeError, ValueError, IndexError, ValidationError)


class RequestPipeline:
    """Orchestrates cache -> rate limit -> auth -> transport -> classify -> parse.

    Dependencies injected (not instantiated):
    - http_client: Executes HTTP requests; exposed so services can build calls
    - rate_limiter: Per-provider token buckets
    - cache: TTL cache with single-flight deduplication
    - auth_providers: Session holders for providers that require one
    """

    def __init__(
        self,
        http_client: IHttpClient,
        rate_limiter: IRateLimiter,
        cache: ICache,
        auth_providers: dict[ProviderKey, IAuthProvider] | None = None,
        batch_config: BatchConfig | None = None,
        error_chain: ErrorMapperChain | None = None,
        error_chains: dict[ProviderKey, ErrorMapperChain] | None = None,
    ):
        self.http_client = http_client
        self.rate_limiter = rate_limiter
        self.cache = cache
        self.auth_providers = dict(auth_providers or {})
        self.batch_config = batch_config or BatchConfig()
        self.error_chain = error_chain or create_error_mapper_chain()
        # Per-provider overrides of error_chain
        self.error_chains = dict(error_chains or {})
        self.logger = get_pipeline_logger()

    # ------------------------------------------------------------------
    # Single request
    # ------------------------------------------------------------------

    async def execute(
        self,
        cache_key: str,
        ttl: timedelta,
        provider_key: ProviderKey,
        call: OutboundCall,
        parse: ResponseParser[T],
    ) -> T:
        """Return the cached value for ``cache_key`` or fetch, parse and cache it.

        Raises:
            ApiError: Non-2xx response or transport failure
            AuthenticationError: Session could not be (re)established, or a
                renewed session was rejected too. Both leave the provider FAILED.
            DataParsingError: Body is not JSON or does not match the parser
            DataNotFoundError: Raised by the parser for empty/error envelopes
        """

        async def supplier() -> T:
            return await self._fetch(provider_key, call, parse)

        return await self.cache.get_or_put(cache_key, ttl, supplier)

    async def _fetch(
        self,
        provider_key: ProviderKey,
        call: OutboundCall,
        parse: ResponseParser[T],
    ) -> T:
        await self.rate_limiter.acquire(provider_key)

        auth = self.auth_providers.get(provider_key)
        session = await auth.current_session() if auth is not None else None
        response = await self._send(call, session)

        if auth is not None and response.status_code in auth.unauthenticated_statuses:
            self.logger.info(
                "session_rejected",
                provider=provider_key.value,
                status=response.status_code,
            )
            session = await auth.reauthenticate(session)
            await self.rate_limiter.acquire(provider_key)
            response = await self._send(call, session)

            if response.status_code in auth.unauthenticated_statuses:
                auth.mark_failed(response.status_code)
                raise AuthenticationError(
                    f"Upstream rejected a renewed session (HTTP {response.status_code})",
                    metadata={
                        "status_code": response.status_code,
                        "body_preview": preview(response.body),
                        "url": redact_url(response.url),
                    },
                )

        if not response.ok:
            chain = self.error_chains.get(provider_key, self.error_chain)
            error = chain.map_error(
                response.status_code, response.body, response.url
            )
            self.logger.warning(
                "upstream_error",
                provider=provider_key.value,
                status=response.status_code,
                code=error.code,
            )
            raise error

        return self._parse(response, parse)

    async def _send(
        self, call: OutboundCall, session: AuthSession | None
    ) -> HttpResponse:
        try:
            return await call(session)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ApiError(
                f"Network error: {e.__class__.__name__}: {e}",
                error_code=ErrorCode.NETWORK_ERROR,
            ) from e

    def _parse(self, response: HttpResponse, parse: ResponseParser[T]) -> T:
        try:
            payload = json.loads(response.body)
        except (json.JSONDecodeError, TypeError) as e:
            raise DataParsingError(
                f"Response body is not valid JSON: {e}",
                error_code=ErrorCode.JSON_PARSING_ERROR,
                metadata={
                    "url": redact_url(response.url),
                    "body_preview": preview(response.body),
                },
            ) from e

        try:
            return parse(payload)
        except UfcError:
            raise
        except PARSE_ERRORS as e:
            raise DataParsingError(
                f"Unexpected response shape: {e.__class__.__name__}: {e}",
                metadata={"url": redact_url(response.url)},
            ) from e

    # ------------------------------------------------------------------
    # Batch fan-out
    # ------------------------------------------------------------------

    async def execute_batch(
        self,
        items: Iterable[K],
        fetch: Callable[[K], Awaitable[T]],
        max_concurrency: int | None = None,
    ) -> dict[K, T]:
        """Run ``fetch`` once per distinct item with bounded parallelism.

        Items that fail are logged and left out of the result. When every
        item fails, the first failure to complete is raised.
        """
        unique = list(dict.fromkeys(items))
        if not unique:
            return {}

        semaphore = asyncio.Semaphore(
            max_concurrency or self.batch_config.max_concurrency
        )
        results: dict[K, T] = {}
        failures: list[Exception] = []

        async def run(item: K) -> None:
            async with semaphore:
                try:
                    results[item] = await fetch(item)
                except UfcError as e:
                    failures.append(e)
                    self.logger.warning(
                        "batch_item_failed", item=str(item), code=e.code, error=e.message
                    )
                except Exception as e:
                    failures.append(e)
                    self.logger.error(
                        "batch_item_failed", item=str(item), error=str(e), exc_info=True
                    )

        await asyncio.gather(*(run(item) for item in unique))

        if not results:
            self.logger.error("batch_failed", items=len(unique))
            raise failures[0]

        self.logger.debug(
            "batch_completed", succeeded=len(results), failed=len(failures)
        )
        # Preserve request order
        return {item: results[item] for item in unique if item in results}

    def rate_limit_status(self, provider_key: ProviderKey) -> Any:
        return self.rate_limiter.status(provider_key)
