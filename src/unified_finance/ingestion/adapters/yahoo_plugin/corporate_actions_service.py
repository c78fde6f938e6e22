"""Dividends and splits from the chart endpoint's event stream."""

from collections.abc import Callable
from typing import Any, TypeVar

from unified_finance.ingestion.adapters.yahoo_plugin.base import authenticated_get
from unified_finance.ingestion.adapters.yahoo_plugin.envelope import first_result
from unified_finance.ingestion.adapters.yahoo_plugin.history_service import coerce_period
from unified_finance.ingestion.adapters.yahoo_plugin.mappers import map_dividends, map_splits
from unified_finance.ingestion.config.value_objects import YahooEndpoints
from unified_finance.ingestion.ports.pipeline import IPipeline
from unified_finance.shared.models.charts import Dividend, Split
from unified_finance.shared.models.enums import ChartEventType, Interval, Period, ProviderKey
from unified_finance.shared.ttl import CORPORATE_ACTIONS_TTL
from unified_finance.shared.validation import validate_symbol

T = TypeVar("T")


class CorporateActionsService:
    """A symbol with no events yields an empty list, not an error.

    The chart envelope itself must still be populated; an unknown symbol is
    DataNotFoundError like everywhere else.
    """

    def __init__(self, pipeline: IPipeline, endpoints: YahooEndpoints | None = None):
        self.pipeline = pipeline
        self.endpoints = endpoints or YahooEndpoints()

    async def get_dividends(
        self, symbol: str, period: Period | str = Period.MAX
    ) -> list[Dividend]:
        return await self._fetch(symbol, period, ChartEventType.DIVIDENDS, map_dividends)

    async def get_splits(self, symbol: str, period: Period | str = Period.MAX) -> list[Split]:
        return await self._fetch(symbol, period, ChartEventType.SPLITS, map_splits)

    async def _fetch(
        self,
        symbol: str,
        period: Period | str,
        event: ChartEventType,
        mapper: Callable[[dict[str, Any]], list[T]],
    ) -> list[T]:
        symbol = validate_symbol(symbol)
        period = coerce_period(period)
        call = authenticated_get(
            self.pipeline.http_client,
            f"{self.endpoints.chart_url}/{symbol}",
            {"interval": Interval.ONE_DAY.value, "range": period.value, "events": event.value},
        )

        def parse(body: Any) -> list[T]:
            return mapper(first_result(body, "chart"))

        return await self.pipeline.execute(
            f"events:{event.value}:{symbol}:{period.value}",
            CORPORATE_ACTIONS_TTL,
            ProviderKey.YAHOO,
            call,
            parse,
        )
