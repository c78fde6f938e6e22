"""Dependency injection container for the unified-finance access layer.

This is the single place where concrete implementations are chosen.

Usage:
    container = UfcDependencyContainer(config)
    http_client = container.create_http_client()
    pipeline = container.create_pipeline(http_client)
    quotes = container.create_quote_service(pipeline)
"""

from unified_finance.config.state import ConfigState, get_config
from unified_finance.ingestion.adapters.fred_plugin.macro_service import MacroService
from unified_finance.ingestion.adapters.yahoo_plugin.auth import YahooAuthProvider
from unified_finance.ingestion.adapters.yahoo_plugin.corporate_actions_service import (
    CorporateActionsService,
)
from unified_finance.ingestion.adapters.yahoo_plugin.history_service import (
    HistoryService,
)
from unified_finance.ingestion.adapters.yahoo_plugin.market_service import (
    MarketService,
)
from unified_finance.ingestion.adapters.yahoo_plugin.options_service import (
    OptionsService,
)
from unified_finance.ingestion.adapters.yahoo_plugin.quote_service import QuoteService
from unified_finance.ingestion.adapters.yahoo_plugin.screener_service import (
    ScreenerService,
)
from unified_finance.ingestion.adapters.yahoo_plugin.stock_service import StockService
from unified_finance.ingestion.cache.ttl_cache import TtlCache
from unified_finance.ingestion.connectors.aiohttp_client import AiohttpClient
from unified_finance.ingestion.pipeline.error_handlers import (
    create_fred_error_mapper_chain,
)
from unified_finance.ingestion.pipeline.request_pipeline import RequestPipeline
from unified_finance.ingestion.ports import (
    IAuthProvider,
    ICache,
    IHttpClient,
    IPipeline,
)
from unified_finance.ingestion.ratelimit.token_bucket import RateLimiterRegistry
from unified_finance.shared.models.enums import ProviderKey


class UfcDependencyContainer:
    """Chooses and wires implementations for every access-layer protocol.

    Responsible for:
    1. Converting ConfigState into configuration value objects
    2. Choosing concrete implementations for each protocol
    3. Wiring dependencies together

    Tests can subclass this and override ``create_*`` methods to inject
    fakes, most commonly ``create_http_client``.
    """

    def __init__(self, config: ConfigState | None = None):
        # Without an explicit config, load YAML files and environment overrides
        self.config = config if config is not None else get_config()
        self.http_config = self.config.http_client_config()
        self.batch_config = self.config.batch_config()
        self.yahoo_endpoints = self.config.yahoo.endpoints()
        self.fred_endpoints = self.config.fred.endpoints()

    def create_http_client(self) -> IHttpClient:
        """Override this in tests to inject a fake HTTP client."""
        return AiohttpClient(self.http_config)

    def create_rate_limiter(self) -> RateLimiterRegistry:
        return RateLimiterRegistry(
            {
                ProviderKey.YAHOO: self.config.yahoo.rate_limit.to_value_object(),
                ProviderKey.FRED: self.config.fred.rate_limit.to_value_object(),
            }
        )

    def create_cache(self) -> ICache:
        return TtlCache(max_entries=self.config.cache.max_entries)

    def create_auth_provider(self, http_client: IHttpClient) -> IAuthProvider:
        return YahooAuthProvider(http_client, self.yahoo_endpoints)

    def create_pipeline(
        self,
        http_client: IHttpClient,
        rate_limiter: RateLimiterRegistry | None = None,
    ) -> RequestPipeline:
        """Assemble the pipeline every service shares.

        Only the quote provider authenticates; the economic-data provider
        carries its API key in each call instead.
        """
        return RequestPipeline(
            http_client=http_client,
            rate_limiter=rate_limiter or self.create_rate_limiter(),
            cache=self.create_cache(),
            auth_providers={ProviderKey.YAHOO: self.create_auth_provider(http_client)},
            batch_config=self.batch_config,
            error_chains={ProviderKey.FRED: create_fred_error_mapper_chain()},
        )

    # ------------------------------------------------------------------
    # Domain services
    # ------------------------------------------------------------------

    def create_quote_service(self, pipeline: IPipeline) -> QuoteService:
        return QuoteService(pipeline, self.yahoo_endpoints)

    def create_history_service(self, pipeline: IPipeline) -> HistoryService:
        return HistoryService(pipeline, self.yahoo_endpoints)

    def create_options_service(self, pipeline: IPipeline) -> OptionsService:
        return OptionsService(pipeline, self.yahoo_endpoints)

    def create_screener_service(self, pipeline: IPipeline) -> ScreenerService:
        return ScreenerService(pipeline, self.yahoo_endpoints)

    def create_corporate_actions_service(
        self, pipeline: IPipeline
    ) -> CorporateActionsService:
        return CorporateActionsService(pipeline, self.yahoo_endpoints)

    def create_stock_service(self, pipeline: IPipeline) -> StockService:
        return StockService(pipeline, self.yahoo_endpoints)

    def create_market_service(self, pipeline: IPipeline) -> MarketService:
        return MarketService(pipeline, self.yahoo_endpoints)

    def create_macro_service(self, pipeline: IPipeline) -> MacroService:
        return MacroService(pipeline, self.config.fred.api_key, self.fred_endpoints)
