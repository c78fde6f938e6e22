"""Regional market overview and trading hours."""

from typing import Any

from unified_finance.ingestion.adapters.yahoo_plugin.base import authenticated_get
from unified_finance.ingestion.adapters.yahoo_plugin.envelope import (
    first_result,
    unwrap_result,
)
from unified_finance.ingestion.adapters.yahoo_plugin.mappers import (
    map_market_summary,
    map_market_time,
)
from unified_finance.ingestion.config.value_objects import YahooEndpoints
from unified_finance.ingestion.ports.pipeline import IPipeline
from unified_finance.shared.exceptions import DataNotFoundError, InvalidInputError
from unified_finance.shared.models.enums import MarketCode, ProviderKey
from unified_finance.shared.models.market import MarketSummary, MarketTime
from unified_finance.shared.ttl import MARKET_SUMMARY_TTL, MARKET_TIME_TTL


def _market_code(market: MarketCode | str) -> MarketCode:
    try:
        return MarketCode(str(getattr(market, "value", market)).strip().lower())
    except ValueError:
        raise InvalidInputError(f"Unknown market: {market!r}", field="market") from None


class MarketService:
    def __init__(self, pipeline: IPipeline, endpoints: YahooEndpoints | None = None):
        self.pipeline = pipeline
        self.endpoints = endpoints or YahooEndpoints()

    async def get_market_summary(
        self, market: MarketCode | str = MarketCode.US
    ) -> MarketSummary:
        """Headline indices of a regional market with their latest prices.

        Raises:
            InvalidInputError: Unknown market code
            DataNotFoundError: Upstream returned no items
        """
        market = _market_code(market)

        def parse(body: Any) -> MarketSummary:
            return map_market_summary(
                unwrap_result(body, "marketSummaryResponse"), market
            )

        return await self.pipeline.execute(
            f"market-summary:{market.value}",
            MARKET_SUMMARY_TTL,
            ProviderKey.YAHOO,
            self._market_call(self.endpoints.market_summary_url, market),
            parse,
        )

    async def get_market_time(self, market: MarketCode | str = MarketCode.US) -> MarketTime:
        """Session boundaries, timezone and current state of a regional market."""
        market = _market_code(market)

        def parse(body: Any) -> MarketTime:
            entry = first_result(body, "finance", key="marketTimes")
            items = entry.get("marketTime") or []
            if not items:
                raise DataNotFoundError(
                    f"finance: no market time for {market.value}",
                    metadata={"market": market.value},
                )
            return map_market_time(items[0], market)

        return await self.pipeline.execute(
            f"market-time:{market.value}",
            MARKET_TIME_TTL,
            ProviderKey.YAHOO,
            self._market_call(self.endpoints.market_time_url, market),
            parse,
        )

    def _market_call(self, url: str, market: MarketCode):
        return authenticated_get(
            self.pipeline.http_client,
            url,
            {"market": market.value, "formatted": "false"},
        )
