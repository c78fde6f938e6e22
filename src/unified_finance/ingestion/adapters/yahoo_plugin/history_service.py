"""Historical OHLCV bars from the v8 chart endpoint."""

from collections.abc import Iterable
from datetime import date, datetime
from typing import Any

from unified_finance.infrastructure.observability import get_service_logger
from unified_finance.ingestion.adapters.yahoo_plugin.base import authenticated_get
from unified_finance.ingestion.adapters.yahoo_plugin.envelope import first_result
from unified_finance.ingestion.adapters.yahoo_plugin.mappers import map_price_history
from unified_finance.ingestion.config.value_objects import YahooEndpoints
from unified_finance.ingestion.ports.pipeline import IPipeline
from unified_finance.shared.exceptions import InvalidInputError
from unified_finance.shared.models.charts import PriceHistory
from unified_finance.shared.models.enums import Interval, Period, ProviderKey
from unified_finance.shared.ttl import HISTORY_TTL
from unified_finance.shared.validation import (
    to_utc_datetime,
    validate_symbol,
    validate_symbols,
)

# Upstream refuses finer bars over longer spans
INTRADAY_MAX_DAYS = 60
ONE_MINUTE_MAX_DAYS = 7


def coerce_interval(interval: Interval | str) -> Interval:
    try:
        return Interval(interval)
    except ValueError:
        raise InvalidInputError(f"Unsupported interval: {interval!r}", field="interval") from None


def coerce_period(period: Period | str) -> Period:
    try:
        return Period(period)
    except ValueError:
        raise InvalidInputError(f"Unsupported period: {period!r}", field="period") from None


def check_span(interval: Interval, days: float) -> None:
    """Reject interval/span combinations the chart endpoint cannot serve."""
    if interval is Interval.ONE_MINUTE and days > ONE_MINUTE_MAX_DAYS:
        raise InvalidInputError(
            f"1m bars are limited to {ONE_MINUTE_MAX_DAYS} days of range",
            field="interval",
        )
    if interval.is_intraday and days > INTRADAY_MAX_DAYS:
        raise InvalidInputError(
            f"Intraday bars are limited to {INTRADAY_MAX_DAYS} days of range",
            field="interval",
        )


class HistoryService:
    """Price history by look-back period or explicit date range."""

    def __init__(self, pipeline: IPipeline, endpoints: YahooEndpoints | None = None):
        self.pipeline = pipeline
        self.endpoints = endpoints or YahooEndpoints()
        self.logger = get_service_logger("history-service")

    async def get_history(
        self,
        symbol: str,
        interval: Interval | str = Interval.ONE_DAY,
        period: Period | str = Period.ONE_YEAR,
    ) -> PriceHistory:
        symbol = validate_symbol(symbol)
        interval = coerce_interval(interval)
        period = coerce_period(period)
        check_span(interval, period.approx_days)
        return await self._fetch_period(symbol, interval, period)

    async def get_history_range(
        self,
        symbol: str,
        start: date | datetime,
        end: date | datetime,
        interval: Interval | str = Interval.ONE_DAY,
    ) -> PriceHistory:
        """Bars in ``[start, end)``. Naive datetimes and dates are read as UTC."""
        symbol = validate_symbol(symbol)
        interval = coerce_interval(interval)
        start_dt = to_utc_datetime(start, "start")
        end_dt = to_utc_datetime(end, "end")
        if start_dt >= end_dt:
            raise InvalidInputError("start must be before end", field="start")
        check_span(interval, (end_dt - start_dt).total_seconds() / 86400)

        period1 = int(start_dt.timestamp())
        period2 = int(end_dt.timestamp())
        return await self._fetch(
            symbol,
            interval,
            cache_suffix=f"{period1}-{period2}",
            params={"period1": period1, "period2": period2},
        )

    async def get_histories(
        self,
        symbols: Iterable[str],
        interval: Interval | str = Interval.ONE_DAY,
        period: Period | str = Period.ONE_YEAR,
    ) -> dict[str, PriceHistory]:
        normalized = validate_symbols(symbols)
        interval = coerce_interval(interval)
        period = coerce_period(period)
        check_span(interval, period.approx_days)

        async def fetch(symbol: str) -> PriceHistory:
            return await self._fetch_period(symbol, interval, period)

        return await self.pipeline.execute_batch(normalized, fetch)

    async def _fetch_period(
        self, symbol: str, interval: Interval, period: Period
    ) -> PriceHistory:
        return await self._fetch(
            symbol, interval, cache_suffix=period.value, params={"range": period.value}
        )

    async def _fetch(
        self,
        symbol: str,
        interval: Interval,
        cache_suffix: str,
        params: dict[str, Any],
    ) -> PriceHistory:
        call = authenticated_get(
            self.pipeline.http_client,
            f"{self.endpoints.chart_url}/{symbol}",
            {"interval": interval.value, "includeAdjustedClose": "true", **params},
        )

        def parse(body: Any) -> PriceHistory:
            return map_price_history(first_result(body, "chart"), interval)

        history = await self.pipeline.execute(
            f"history:{symbol}:{interval.value}:{cache_suffix}",
            HISTORY_TTL,
            ProviderKey.YAHOO,
            call,
            parse,
        )
        self.logger.debug("history_ready", symbol=symbol, bars=len(history.bars))
        return history
