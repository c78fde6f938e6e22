"""Mapping of quote-provider JSON into domain models.

Missing optional fields map to None. Missing required fields raise KeyError
or TypeError, which the pipeline reports as DataParsingError.
"""

from datetime import datetime, timezone
from typing import Any

from unified_finance.shared.exceptions import DataNotFoundError
from unified_finance.shared.models.charts import Bar, ChartMeta, Dividend, PriceHistory, Split
from unified_finance.shared.models.enums import (
    Interval,
    LookupType,
    MarketCode,
    MarketState,
)
from unified_finance.shared.models.market import (
    MarketSummary,
    MarketSummaryItem,
    MarketTime,
    TradingHours,
)
from unified_finance.shared.models.options import OptionContract, OptionsChain
from unified_finance.shared.models.quotes import (
    LookupDocument,
    LookupResult,
    Quote,
    SearchQuote,
)
from unified_finance.shared.models.screener import ScreenerQuote, ScreenerResult
from unified_finance.shared.models.stock import CompanyProfile, FastInfo


def raw(value: Any) -> Any:
    """quoteSummary wraps numbers as {"raw": 1.0, "fmt": "1.00"}."""
    if isinstance(value, dict):
        return value.get("raw")
    return value


def to_datetime(epoch: Any) -> datetime | None:
    epoch = raw(epoch)
    if epoch is None:
        return None
    return datetime.fromtimestamp(int(epoch), tz=timezone.utc)


def _at(values: list | None, index: int) -> Any:
    if values is None or index >= len(values):
        return None
    return values[index]


# ============================================================================
# QUOTES
# ============================================================================
def map_quote(item: dict[str, Any]) -> Quote:
    return Quote(
        symbol=item["symbol"],
        short_name=item.get("shortName"),
        long_name=item.get("longName"),
        quote_type=item.get("quoteType"),
        currency=item.get("currency"),
        exchange=item.get("fullExchangeName") or item.get("exchange"),
        market_state=item.get("marketState"),
        regular_market_price=item.get("regularMarketPrice"),
        regular_market_change=item.get("regularMarketChange"),
        regular_market_change_percent=item.get("regularMarketChangePercent"),
        regular_market_previous_close=item.get("regularMarketPreviousClose"),
        regular_market_open=item.get("regularMarketOpen"),
        regular_market_day_high=item.get("regularMarketDayHigh"),
        regular_market_day_low=item.get("regularMarketDayLow"),
        regular_market_volume=item.get("regularMarketVolume"),
        regular_market_time=to_datetime(item.get("regularMarketTime")),
        market_cap=item.get("marketCap"),
        fifty_two_week_high=item.get("fiftyTwoWeekHigh"),
        fifty_two_week_low=item.get("fiftyTwoWeekLow"),
    )


def map_search_quotes(body: dict[str, Any]) -> list[SearchQuote]:
    results = [
        SearchQuote(
            symbol=q["symbol"],
            short_name=q.get("shortname"),
            long_name=q.get("longname"),
            exchange=q.get("exchDisp") or q.get("exchange"),
            quote_type=q.get("quoteType"),
            score=q.get("score"),
        )
        for q in body["quotes"]
        if q.get("symbol")
    ]
    if not results:
        raise DataNotFoundError("search: no matching symbols")
    return results


# ============================================================================
# LOOKUP
# ============================================================================
def map_lookup_result(
    result: dict[str, Any] | None, query: str, lookup_type: LookupType
) -> LookupResult:
    """Documents without a symbol or a name are dropped."""
    if result is None:
        return LookupResult(query=query, lookup_type=lookup_type)

    documents = []
    for doc in result.get("documents") or []:
        symbol = doc.get("symbol")
        name = doc.get("shortName") or doc.get("name")
        if not symbol or not name:
            continue
        documents.append(
            LookupDocument(
                symbol=symbol,
                name=name,
                exchange=doc.get("exchange") or doc.get("exch"),
                quote_type=doc.get("quoteType") or doc.get("type"),
                industry=doc.get("industryName") or doc.get("industry"),
                sector=doc.get("sector"),
                score=doc.get("rank") if doc.get("rank") is not None else doc.get("score"),
            )
        )

    return LookupResult(
        query=query,
        lookup_type=lookup_type,
        start=result.get("start") or 0,
        total=result.get("total") or len(documents),
        documents=documents,
    )


# ============================================================================
# CHART
# ============================================================================
def map_chart_meta(meta: dict[str, Any]) -> ChartMeta:
    return ChartMeta(
        symbol=meta["symbol"],
        currency=meta.get("currency"),
        exchange_name=meta.get("exchangeName"),
        instrument_type=meta.get("instrumentType"),
        timezone=meta.get("exchangeTimezoneName") or meta.get("timezone"),
        regular_market_price=meta.get("regularMarketPrice"),
        data_granularity=meta.get("dataGranularity"),
        range=meta.get("range"),
    )


def map_price_history(result: dict[str, Any], interval: Interval) -> PriceHistory:
    timestamps = result.get("timestamp") or []
    indicators = result.get("indicators") or {}
    quote = (indicators.get("quote") or [{}])[0]
    adjclose = (indicators.get("adjclose") or [{}])[0].get("adjclose")

    bars = [
        Bar(
            timestamp=to_datetime(ts),
            open=_at(quote.get("open"), i),
            high=_at(quote.get("high"), i),
            low=_at(quote.get("low"), i),
            close=_at(quote.get("close"), i),
            adj_close=_at(adjclose, i),
            volume=_at(quote.get("volume"), i),
        )
        for i, ts in enumerate(timestamps)
    ]
    return PriceHistory(meta=map_chart_meta(result["meta"]), interval=interval, bars=bars)


def map_dividends(result: dict[str, Any]) -> list[Dividend]:
    events = (result.get("events") or {}).get("dividends") or {}
    dividends = [
        Dividend(date=to_datetime(event["date"]), amount=event["amount"])
        for event in events.values()
    ]
    return sorted(dividends, key=lambda d: d.date)


def map_splits(result: dict[str, Any]) -> list[Split]:
    events = (result.get("events") or {}).get("splits") or {}
    splits = [
        Split(
            date=to_datetime(event["date"]),
            numerator=event["numerator"],
            denominator=event["denominator"],
            ratio=event.get("splitRatio"),
        )
        for event in events.values()
    ]
    return sorted(splits, key=lambda s: s.date)


# ============================================================================
# OPTIONS
# ============================================================================
def map_option_contract(item: dict[str, Any]) -> OptionContract:
    return OptionContract(
        contract_symbol=item["contractSymbol"],
        strike=item["strike"],
        expiration=to_datetime(item["expiration"]),
        currency=item.get("currency"),
        last_price=item.get("lastPrice"),
        change=item.get("change"),
        percent_change=item.get("percentChange"),
        bid=item.get("bid"),
        ask=item.get("ask"),
        volume=item.get("volume"),
        open_interest=item.get("openInterest"),
        implied_volatility=item.get("impliedVolatility"),
        in_the_money=bool(item.get("inTheMoney", False)),
    )


def map_options_chain(result: dict[str, Any]) -> OptionsChain:
    options = result.get("options") or []
    chain = options[0] if options else {}
    return OptionsChain(
        underlying_symbol=result["underlyingSymbol"],
        underlying_price=(result.get("quote") or {}).get("regularMarketPrice"),
        expiration_dates=[to_datetime(ts) for ts in result.get("expirationDates") or []],
        strikes=result.get("strikes") or [],
        expiration=to_datetime(chain.get("expirationDate")),
        calls=[map_option_contract(c) for c in chain.get("calls") or []],
        puts=[map_option_contract(p) for p in chain.get("puts") or []],
    )


# ============================================================================
# SCREENER
# ============================================================================
def map_screener_result(result: dict[str, Any], screener_id: str) -> ScreenerResult:
    return ScreenerResult(
        screener_id=result.get("id") or screener_id,
        title=result.get("title"),
        description=result.get("description"),
        total=result.get("total") or 0,
        quotes=[
            ScreenerQuote(
                symbol=q["symbol"],
                short_name=q.get("shortName"),
                regular_market_price=q.get("regularMarketPrice"),
                regular_market_change_percent=q.get("regularMarketChangePercent"),
                regular_market_volume=q.get("regularMarketVolume"),
                market_cap=q.get("marketCap"),
            )
            for q in result.get("quotes") or []
        ],
    )


# ============================================================================
# QUOTE SUMMARY
# ============================================================================
def map_company_profile(result: dict[str, Any], symbol: str) -> CompanyProfile:
    profile = result["assetProfile"]
    quote_type = result.get("quoteType") or {}
    return CompanyProfile(
        symbol=quote_type.get("symbol") or symbol,
        long_name=quote_type.get("longName"),
        short_name=quote_type.get("shortName"),
        quote_type=quote_type.get("quoteType"),
        exchange=quote_type.get("exchange"),
        sector=profile.get("sector"),
        industry=profile.get("industry"),
        country=profile.get("country"),
        website=profile.get("website"),
        full_time_employees=raw(profile.get("fullTimeEmployees")),
        business_summary=profile.get("longBusinessSummary"),
    )


def map_fast_info(result: dict[str, Any], symbol: str) -> FastInfo:
    price = result["price"]
    detail = result.get("summaryDetail") or {}
    return FastInfo(
        symbol=price.get("symbol") or symbol,
        currency=price.get("currency"),
        exchange=price.get("exchangeName"),
        last_price=raw(price.get("regularMarketPrice")),
        previous_close=raw(price.get("regularMarketPreviousClose")),
        open=raw(price.get("regularMarketOpen")),
        day_high=raw(price.get("regularMarketDayHigh")),
        day_low=raw(price.get("regularMarketDayLow")),
        market_cap=raw(price.get("marketCap")),
        fifty_two_week_high=raw(detail.get("fiftyTwoWeekHigh")),
        fifty_two_week_low=raw(detail.get("fiftyTwoWeekLow")),
        fifty_day_average=raw(detail.get("fiftyDayAverage")),
        two_hundred_day_average=raw(detail.get("twoHundredDayAverage")),
        ten_day_average_volume=raw(detail.get("averageVolume10days")),
    )


# ============================================================================
# MARKET
# ============================================================================
def parse_iso(value: str) -> datetime:
    """ISO 8601 timestamp as an aware datetime; a trailing Z means UTC."""
    if not isinstance(value, str):
        raise TypeError(f"expected an ISO 8601 string, got {value!r}")
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


def map_market_summary(items: list[dict[str, Any]], market: MarketCode) -> MarketSummary:
    return MarketSummary(
        market=market,
        items=[
            MarketSummaryItem(
                symbol=item["symbol"],
                exchange=item.get("exchange"),
                short_name=item.get("shortName"),
                quote_type=item.get("quoteType"),
                currency=item.get("currency"),
                market_state=MarketState.parse(item.get("marketState")),
                regular_market_price=raw(item.get("regularMarketPrice")),
                regular_market_change=raw(item.get("regularMarketChange")),
                regular_market_change_percent=raw(item.get("regularMarketChangePercent")),
                regular_market_previous_close=raw(item.get("regularMarketPreviousClose")),
                regular_market_day_high=raw(item.get("regularMarketDayHigh")),
                regular_market_day_low=raw(item.get("regularMarketDayLow")),
                regular_market_volume=raw(item.get("regularMarketVolume")),
                # 0 means the provider has no trade time
                regular_market_time=to_datetime(raw(item.get("regularMarketTime")) or None),
                timezone_name=item.get("exchangeTimezoneName"),
                gmt_offset_ms=raw(item.get("gmtOffSetMilliseconds")),
            )
            for item in items
        ],
    )


def _trading_hours(window: dict[str, Any] | None) -> TradingHours | None:
    if not window:
        return None
    return TradingHours(start=parse_iso(window["start"]), end=parse_iso(window["end"]))


def map_market_time(item: dict[str, Any], market: MarketCode) -> MarketTime:
    tz = item["timezone"][0]
    return MarketTime(
        market=market,
        exchange=item["exchange"],
        market_id=item["market"],
        market_state=MarketState.parse(item["marketState"]),
        open=parse_iso(item["open"]),
        close=parse_iso(item["close"]),
        pre_market=_trading_hours(item.get("preMarket")),
        post_market=_trading_hours(item.get("postMarket")),
        timezone_short_name=tz["short"],
        timezone_name=tz["name"],
        gmt_offset_ms=int(tz["gmtoffset"]),
        current_time=parse_iso(item["time"]) if item.get("time") else None,
    )
