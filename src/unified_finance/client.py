"""
Public entry point.

    async with UnifiedFinanceClient.create() as ufc:
        quote = await ufc.quotes.get_quote("AAPL")
        gdp = await ufc.macro.get_series("GDP")

One client owns one transport, one cache, one rate limiter per provider and
one authenticated session, shared by every service it exposes.
"""

from unified_finance.config.state import ConfigState
from unified_finance.infrastructure.observability import (
    get_infrastructure_logger,
    setup_logging,
)
from unified_finance.ingestion.dependency_container import UfcDependencyContainer
from unified_finance.ingestion.ports.http import IHttpClient
from unified_finance.ingestion.pipeline.request_pipeline import RequestPipeline
from unified_finance.ingestion.ratelimit.token_bucket import (
    RateLimiterRegistry,
    RateLimiterStatus,
)
from unified_finance.shared.exceptions import ConfigurationError
from unified_finance.shared.models.enums import ProviderKey

logger = get_infrastructure_logger("client")


class UnifiedFinanceClient:
    def __init__(
        self,
        http_client: IHttpClient,
        rate_limiter: RateLimiterRegistry,
        pipeline: RequestPipeline,
        container: UfcDependencyContainer,
    ):
        self.http_client = http_client
        self.rate_limiter = rate_limiter
        self.pipeline = pipeline
        self.quotes = container.create_quote_service(pipeline)
        self.history = container.create_history_service(pipeline)
        self.options = container.create_options_service(pipeline)
        self.screener = container.create_screener_service(pipeline)
        self.corporate_actions = container.create_corporate_actions_service(pipeline)
        self.stock = container.create_stock_service(pipeline)
        self.market = container.create_market_service(pipeline)
        self.macro = container.create_macro_service(pipeline)
        self._closed = False

    @classmethod
    def create(
        cls,
        config: ConfigState | None = None,
        container: UfcDependencyContainer | None = None,
        configure_logging: bool = False,
    ) -> "UnifiedFinanceClient":
        """Build a fully wired client.

        Args:
            config: Configuration; loaded with get_config() when omitted
            container: Custom container, e.g. one overriding create_http_client
            configure_logging: Apply the logging section of the config via
                setup_logging. Leave off when the host application owns logging.
        """
        container = container or UfcDependencyContainer(config)
        if configure_logging:
            settings = container.config.logging
            setup_logging(level=settings.level, json_logs=settings.json_logs)
        http_client = container.create_http_client()
        rate_limiter = container.create_rate_limiter()
        pipeline = container.create_pipeline(http_client, rate_limiter)
        logger.debug(
            "client_created", fred_enabled=container.config.fred.api_key is not None
        )
        return cls(http_client, rate_limiter, pipeline, container)

    def rate_limit_status(self, provider: ProviderKey | str) -> RateLimiterStatus:
        """Non-mutating snapshot of a provider's token bucket."""
        try:
            key = ProviderKey(str(getattr(provider, "value", provider)).upper())
        except ValueError:
            raise ConfigurationError(f"Unknown provider: {provider!r}") from None
        return self.rate_limiter.status(key)

    async def close(self) -> None:
        if not self._closed:
            await self.http_client.close()
            self._closed = True

    async def __aenter__(self) -> "UnifiedFinanceClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
