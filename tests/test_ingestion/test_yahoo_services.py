"""
End-to-end tests for the quote-provider services through a fully wired
client backed by the fake transport.
"""

from datetime import date, datetime, timezone

import pytest

from tests.fixtures import (
    TEST_CRUMB,
    YAHOO,
    chart_payload,
    envelope,
    json_response,
    lookup_payload,
    market_summary_payload,
    market_time_payload,
    options_payload,
    quote_payload,
    quote_summary_payload,
    screener_payload,
    search_payload,
)
from unified_finance.shared.exceptions import (
    DataNotFoundError,
    DataParsingError,
    ErrorCode,
    InvalidInputError,
)
from unified_finance.shared.models.enums import (
    Interval,
    LookupType,
    MarketCode,
    MarketState,
    Period,
    PredefinedScreener,
)


def quotes_by_param(call):
    """Answer a quote call for whichever symbol it asks about; ZZZZ is unknown."""
    symbol = call.params["symbols"]
    if symbol == "ZZZZ":
        return json_response(envelope("quoteResponse", []))
    return json_response(quote_payload(symbol))


# ============================================================================
# QUOTES
# ============================================================================
class TestQuoteService:
    @pytest.mark.asyncio
    async def test_get_quote_maps_fields(self, ufc, fake_http):
        fake_http.set(YAHOO.quote_url, quotes_by_param)

        quote = await ufc.quotes.get_quote("aapl")

        assert quote.symbol == "AAPL"
        assert quote.regular_market_price == 190.5
        assert quote.exchange == "NasdaqGS"
        assert quote.market_cap == 2950000000000
        assert quote.regular_market_time == datetime(2024, 1, 3, 20, 0, tzinfo=timezone.utc)

        call = fake_http.calls_to(YAHOO.quote_url)[0]
        assert call.params["symbols"] == "AAPL"
        assert call.params["crumb"] == TEST_CRUMB

    @pytest.mark.asyncio
    async def test_get_quote_is_cached(self, ufc, fake_http):
        fake_http.set(YAHOO.quote_url, quotes_by_param)

        first = await ufc.quotes.get_quote("AAPL")
        second = await ufc.quotes.get_quote("aapl")

        assert first is second
        assert len(fake_http.calls_to(YAHOO.quote_url)) == 1

    @pytest.mark.asyncio
    async def test_unknown_symbol(self, ufc, fake_http):
        fake_http.set(YAHOO.quote_url, quotes_by_param)

        with pytest.raises(DataNotFoundError):
            await ufc.quotes.get_quote("ZZZZ")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("bad", ["", "   ", "AA PL", "TOO-LONG-SYMBOL-XXXXXXX", "$AAPL"])
    async def test_invalid_symbol_never_reaches_network(self, ufc, fake_http, bad):
        with pytest.raises(InvalidInputError) as exc_info:
            await ufc.quotes.get_quote(bad)

        assert exc_info.value.error_code is ErrorCode.INVALID_SYMBOL
        assert exc_info.value.field == "symbol"
        assert fake_http.calls == []

    @pytest.mark.asyncio
    async def test_get_quotes_skips_unknown(self, ufc, fake_http):
        fake_http.set(YAHOO.quote_url, quotes_by_param)

        quotes = await ufc.quotes.get_quotes(["msft", "ZZZZ", "AAPL", "MSFT"])

        assert list(quotes) == ["MSFT", "AAPL"]
        assert quotes["AAPL"].symbol == "AAPL"
        assert len(fake_http.calls_to(YAHOO.quote_url)) == 3

    @pytest.mark.asyncio
    async def test_get_quotes_all_unknown_raises(self, ufc, fake_http):
        fake_http.set(YAHOO.quote_url, quotes_by_param)

        with pytest.raises(DataNotFoundError):
            await ufc.quotes.get_quotes(["ZZZZ"])

    @pytest.mark.asyncio
    async def test_get_quotes_rejects_empty_batch(self, ufc):
        with pytest.raises(InvalidInputError):
            await ufc.quotes.get_quotes([])

    @pytest.mark.asyncio
    async def test_get_quotes_caps_batch_size(self, ufc, fake_http):
        symbols = [f"S{i}" for i in range(101)]

        with pytest.raises(InvalidInputError) as exc_info:
            await ufc.quotes.get_quotes(symbols)

        assert exc_info.value.field == "symbols"
        assert fake_http.calls == []

    @pytest.mark.asyncio
    async def test_duplicates_do_not_count_toward_batch_cap(self, ufc, fake_http):
        fake_http.set(YAHOO.quote_url, quotes_by_param)
        symbols = [f"S{i}" for i in range(100)] * 2

        quotes = await ufc.quotes.get_quotes(symbols)

        assert len(quotes) == 100


# ============================================================================
# HISTORY
# ============================================================================
class TestHistoryService:
    @pytest.mark.asyncio
    async def test_get_history(self, ufc, fake_http):
        url = f"{YAHOO.chart_url}/AAPL"
        fake_http.set(url, json_response(chart_payload("AAPL")))

        history = await ufc.history.get_history("AAPL", interval="1d", period="5d")

        assert history.symbol == "AAPL"
        assert history.interval is Interval.ONE_DAY
        assert len(history.bars) == 3
        assert history.bars[0].close == 185.64
        assert history.bars[0].adj_close == 184.94
        assert history.bars[2].close is None
        assert history.closes() == [185.64, 184.25]

        params = fake_http.calls_to(url)[0].params
        assert params["interval"] == "1d"
        assert params["range"] == "5d"
        assert params["includeAdjustedClose"] == "true"

    @pytest.mark.asyncio
    async def test_get_history_range_sends_epochs(self, ufc, fake_http):
        url = f"{YAHOO.chart_url}/AAPL"
        fake_http.set(url, json_response(chart_payload("AAPL")))

        await ufc.history.get_history_range("AAPL", date(2024, 1, 1), date(2024, 1, 5))

        params = fake_http.calls_to(url)[0].params
        assert params["period1"] == 1704067200
        assert params["period2"] == 1704412800
        assert "range" not in params

    @pytest.mark.asyncio
    async def test_range_must_be_ordered(self, ufc, fake_http):
        with pytest.raises(InvalidInputError):
            await ufc.history.get_history_range("AAPL", date(2024, 1, 5), date(2024, 1, 5))
        assert fake_http.calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "interval,period",
        [("1m", Period.ONE_MONTH), ("5m", Period.ONE_YEAR), ("1h", Period.MAX)],
    )
    async def test_intraday_span_limits(self, ufc, fake_http, interval, period):
        with pytest.raises(InvalidInputError) as exc_info:
            await ufc.history.get_history("AAPL", interval=interval, period=period)
        assert exc_info.value.field == "interval"
        assert fake_http.calls == []

    @pytest.mark.asyncio
    async def test_one_minute_bars_within_a_week_allowed(self, ufc, fake_http):
        url = f"{YAHOO.chart_url}/AAPL"
        fake_http.set(url, json_response(chart_payload("AAPL")))

        history = await ufc.history.get_history("AAPL", interval="1m", period="5d")
        assert history.interval is Interval.ONE_MINUTE

    @pytest.mark.asyncio
    @pytest.mark.parametrize("kwargs", [{"interval": "7m"}, {"period": "3w"}])
    async def test_unknown_vocabulary(self, ufc, kwargs):
        with pytest.raises(InvalidInputError):
            await ufc.history.get_history("AAPL", **kwargs)

    @pytest.mark.asyncio
    async def test_get_histories(self, ufc, fake_http):
        for symbol in ("AAPL", "MSFT"):
            fake_http.set(
                f"{YAHOO.chart_url}/{symbol}", json_response(chart_payload(symbol))
            )

        histories = await ufc.history.get_histories(["MSFT", "AAPL", "NOPE"])

        assert list(histories) == ["MSFT", "AAPL"]
        assert histories["MSFT"].symbol == "MSFT"


# ============================================================================
# CORPORATE ACTIONS
# ============================================================================
EVENTS = {
    "dividends": {
        "1707489000": {"amount": 0.24, "date": 1707489000},
        "1699626600": {"amount": 0.24, "date": 1699626600},
    },
    "splits": {
        "1598880600": {
            "date": 1598880600,
            "numerator": 4,
            "denominator": 1,
            "splitRatio": "4:1",
        }
    },
}


class TestCorporateActionsService:
    @pytest.mark.asyncio
    async def test_dividends_sorted_oldest_first(self, ufc, fake_http):
        url = f"{YAHOO.chart_url}/AAPL"
        fake_http.set(url, json_response(chart_payload("AAPL", events=EVENTS)))

        dividends = await ufc.corporate_actions.get_dividends("AAPL")

        assert [d.date.year for d in dividends] == [2023, 2024]
        assert all(d.amount == 0.24 for d in dividends)
        params = fake_http.calls_to(url)[0].params
        assert params["events"] == "div"
        assert params["range"] == "max"

    @pytest.mark.asyncio
    async def test_splits(self, ufc, fake_http):
        url = f"{YAHOO.chart_url}/AAPL"
        fake_http.set(url, json_response(chart_payload("AAPL", events=EVENTS)))

        splits = await ufc.corporate_actions.get_splits("AAPL", period="10y")

        assert len(splits) == 1
        assert splits[0].factor == 4.0
        assert splits[0].ratio == "4:1"

    @pytest.mark.asyncio
    async def test_no_events_is_empty_list(self, ufc, fake_http):
        fake_http.set(f"{YAHOO.chart_url}/AAPL", json_response(chart_payload("AAPL")))

        assert await ufc.corporate_actions.get_dividends("AAPL") == []


# ============================================================================
# OPTIONS
# ============================================================================
class TestOptionsService:
    @pytest.mark.asyncio
    async def test_nearest_expiration(self, ufc, fake_http):
        url = f"{YAHOO.options_url}/AAPL"
        fake_http.set(url, json_response(options_payload("AAPL")))

        chain = await ufc.options.get_options_chain("AAPL")

        assert chain.underlying_symbol == "AAPL"
        assert chain.underlying_price == 185.64
        assert len(chain.calls) == 2
        assert len(chain.puts) == 1
        assert chain.calls[0].in_the_money is True
        assert chain.expiration == datetime(2024, 1, 19, tzinfo=timezone.utc)
        assert len(chain.expiration_dates) == 2
        assert "date" not in fake_http.calls_to(url)[0].params

    @pytest.mark.asyncio
    async def test_expiration_date_sent_as_epoch(self, ufc, fake_http):
        url = f"{YAHOO.options_url}/AAPL"
        fake_http.set(url, json_response(options_payload("AAPL")))

        await ufc.options.get_options_chain("AAPL", expiration=date(2024, 1, 19))

        assert fake_http.calls_to(url)[0].params["date"] == 1705622400

    @pytest.mark.asyncio
    @pytest.mark.parametrize("bad", [0, -5, True, "2024-01-19"])
    async def test_invalid_expiration(self, ufc, bad):
        with pytest.raises(InvalidInputError):
            await ufc.options.get_options_chain("AAPL", expiration=bad)


# ============================================================================
# SCREENER
# ============================================================================
class TestScreenerService:
    @pytest.mark.asyncio
    async def test_run_predefined(self, ufc, fake_http):
        fake_http.set(YAHOO.screener_url, json_response(screener_payload("day_gainers", 2)))

        result = await ufc.screener.run_predefined(PredefinedScreener.DAY_GAINERS, count=2)

        assert result.screener_id == "day_gainers"
        assert result.total == 120
        assert [q.symbol for q in result.quotes] == ["GAIN0", "GAIN1"]
        params = fake_http.calls_to(YAHOO.screener_url)[0].params
        assert params["scrIds"] == "day_gainers"
        assert params["count"] == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "screener_id,count",
        [("day gainers!", 25), ("", 25), ("day_gainers", 0), ("day_gainers", 251)],
    )
    async def test_invalid_arguments(self, ufc, fake_http, screener_id, count):
        with pytest.raises(InvalidInputError):
            await ufc.screener.run_predefined(screener_id, count=count)
        assert fake_http.calls == []


# ============================================================================
# STOCK REFERENCE DATA AND SEARCH
# ============================================================================
class TestStockService:
    @pytest.mark.asyncio
    async def test_company_profile(self, ufc, fake_http):
        url = f"{YAHOO.quote_summary_url}/AAPL"
        fake_http.set(url, json_response(quote_summary_payload("AAPL")))

        profile = await ufc.stock.get_company_profile("AAPL")

        assert profile.sector == "Technology"
        assert profile.long_name == "Apple Inc."
        assert profile.full_time_employees == 161000
        assert fake_http.calls_to(url)[0].params["modules"] == "assetProfile,quoteType"

    @pytest.mark.asyncio
    async def test_fast_info_unwraps_raw_values(self, ufc, fake_http):
        url = f"{YAHOO.quote_summary_url}/AAPL"
        fake_http.set(url, json_response(quote_summary_payload("AAPL")))

        info = await ufc.stock.get_fast_info("AAPL")

        assert info.last_price == 185.64
        assert info.open == 187.15
        assert info.market_cap == 2870000000000
        assert info.fifty_two_week_high == 199.62
        assert info.fifty_two_week_low == 124.17
        assert info.day_high is None

    @pytest.mark.asyncio
    async def test_profile_and_fast_info_cached_separately(self, ufc, fake_http):
        url = f"{YAHOO.quote_summary_url}/AAPL"
        fake_http.set(url, json_response(quote_summary_payload("AAPL")))

        await ufc.stock.get_company_profile("AAPL")
        await ufc.stock.get_fast_info("AAPL")
        await ufc.stock.get_fast_info("AAPL")

        assert len(fake_http.calls_to(url)) == 2

    @pytest.mark.asyncio
    async def test_search(self, ufc, fake_http):
        fake_http.set(YAHOO.search_url, json_response(search_payload("AAPL", "APLE", "APPL")))

        results = await ufc.stock.search("apple", max_results=2)

        assert [r.symbol for r in results] == ["AAPL", "APLE"]
        params = fake_http.calls_to(YAHOO.search_url)[0].params
        assert params["q"] == "apple"
        assert params["quotesCount"] == 2
        assert params["newsCount"] == 0

    @pytest.mark.asyncio
    async def test_search_cache_ignores_case(self, ufc, fake_http):
        fake_http.set(YAHOO.search_url, json_response(search_payload("AAPL")))

        await ufc.stock.search("Apple")
        await ufc.stock.search("  APPLE ")

        assert len(fake_http.calls_to(YAHOO.search_url)) == 1

    @pytest.mark.asyncio
    async def test_search_no_matches(self, ufc, fake_http):
        fake_http.set(YAHOO.search_url, json_response(search_payload()))

        with pytest.raises(DataNotFoundError):
            await ufc.stock.search("qwertyuiop")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "query,max_results", [("", 8), ("   ", 8), ("x" * 501, 8), ("apple", 0), ("apple", 101)]
    )
    async def test_search_rejects_bad_input(self, ufc, fake_http, query, max_results):
        with pytest.raises(InvalidInputError):
            await ufc.stock.search(query, max_results=max_results)
        assert fake_http.calls == []

    @pytest.mark.asyncio
    async def test_lookup(self, ufc, fake_http):
        fake_http.set(YAHOO.lookup_url, json_response(lookup_payload("NVDA", "NVD", total=42)))

        result = await ufc.stock.lookup(" nvidia ", lookup_type=LookupType.EQUITY, count=10)

        assert result.query == "nvidia"
        assert result.lookup_type is LookupType.EQUITY
        assert [d.symbol for d in result.documents] == ["NVDA", "NVD"]
        assert result.documents[0].name == "NVDA Holdings"
        assert result.documents[0].industry == "Software"
        assert result.documents[0].score == 100
        assert result.count == 2
        assert result.total == 42

        call = fake_http.calls_to(YAHOO.lookup_url)[0]
        assert call.params["query"] == "nvidia"
        assert call.params["type"] == "equity"
        assert call.params["count"] == 10
        assert call.params["crumb"] == TEST_CRUMB

    @pytest.mark.asyncio
    async def test_lookup_accepts_type_string(self, ufc, fake_http):
        fake_http.set(YAHOO.lookup_url, json_response(lookup_payload("BTC-USD")))

        result = await ufc.stock.lookup("bitcoin", lookup_type="CRYPTOCURRENCY")

        assert result.lookup_type is LookupType.CRYPTOCURRENCY

    @pytest.mark.asyncio
    async def test_lookup_without_matches_is_empty(self, ufc, fake_http):
        fake_http.set(YAHOO.lookup_url, json_response(envelope("finance", [])))

        result = await ufc.stock.lookup("qwertyuiop")

        assert result.documents == []
        assert result.count == 0
        assert result.total == 0

    @pytest.mark.asyncio
    async def test_lookup_drops_documents_without_name(self, ufc, fake_http):
        payload = lookup_payload("AAA", "BBB")
        del payload["finance"]["result"][0]["documents"][1]["shortName"]
        fake_http.set(YAHOO.lookup_url, json_response(payload))

        result = await ufc.stock.lookup("aaa")

        assert [d.symbol for d in result.documents] == ["AAA"]

    @pytest.mark.asyncio
    async def test_lookup_envelope_error(self, ufc, fake_http):
        fake_http.set(
            YAHOO.lookup_url,
            json_response(envelope("finance", None, {"code": "Bad Request", "description": "x"})),
        )

        with pytest.raises(DataNotFoundError):
            await ufc.stock.lookup("apple")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "query,lookup_type,count",
        [("", "all", 25), ("apple", "bonds", 25), ("apple", "all", 0), ("apple", "all", 101)],
    )
    async def test_lookup_rejects_bad_input(self, ufc, fake_http, query, lookup_type, count):
        with pytest.raises(InvalidInputError):
            await ufc.stock.lookup(query, lookup_type=lookup_type, count=count)
        assert fake_http.calls == []


# ============================================================================
# MARKET
# ============================================================================
class TestMarketService:
    @pytest.mark.asyncio
    async def test_market_summary(self, ufc, fake_http):
        fake_http.set(YAHOO.market_summary_url, json_response(market_summary_payload()))

        summary = await ufc.market.get_market_summary("US")

        assert summary.market is MarketCode.US
        sp500, dow = summary.items
        assert sp500.symbol == "^GSPC"
        assert sp500.regular_market_price == 4742.83
        assert sp500.market_state is MarketState.REGULAR
        assert sp500.regular_market_time == datetime(2024, 1, 3, 21, 0, tzinfo=timezone.utc)
        assert sp500.gmt_offset_ms == -18000000
        assert dow.market_state is MarketState.UNKNOWN
        assert dow.regular_market_time is None
        assert fake_http.calls_to(YAHOO.market_summary_url)[0].params["market"] == "us"

    @pytest.mark.asyncio
    async def test_market_summary_empty_is_not_found(self, ufc, fake_http):
        fake_http.set(
            YAHOO.market_summary_url,
            json_response({"marketSummaryResponse": {"result": [], "error": None}}),
        )

        with pytest.raises(DataNotFoundError):
            await ufc.market.get_market_summary(MarketCode.KR)

    @pytest.mark.asyncio
    async def test_market_time(self, ufc, fake_http):
        fake_http.set(YAHOO.market_time_url, json_response(market_time_payload()))

        market_time = await ufc.market.get_market_time(MarketCode.US)

        assert market_time.exchange == "NYSE"
        assert market_time.market_id == "us_market"
        assert market_time.market_state is MarketState.REGULAR
        assert market_time.open == datetime(2024, 1, 3, 14, 30, tzinfo=timezone.utc)
        assert market_time.close == datetime(2024, 1, 3, 21, 0, tzinfo=timezone.utc)
        assert market_time.pre_market.end == market_time.open
        assert market_time.post_market is None
        assert market_time.timezone_name == "America/New_York"
        assert market_time.current_time == datetime(2024, 1, 3, 20, 45, 12, tzinfo=timezone.utc)

    @pytest.mark.asyncio
    async def test_market_time_cached_per_market(self, ufc, fake_http):
        fake_http.set(YAHOO.market_time_url, json_response(market_time_payload()))

        await ufc.market.get_market_time("us")
        await ufc.market.get_market_time(MarketCode.US)
        await ufc.market.get_market_time("jp")

        markets = [c.params["market"] for c in fake_http.calls_to(YAHOO.market_time_url)]
        assert markets == ["us", "jp"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides", [{"open": None}, {"close": "not-a-time"}, {"timezone": []}]
    )
    async def test_market_time_missing_fields(self, ufc, fake_http, overrides):
        fake_http.set(YAHOO.market_time_url, json_response(market_time_payload(**overrides)))

        with pytest.raises(DataParsingError):
            await ufc.market.get_market_time("us")

    @pytest.mark.asyncio
    async def test_market_time_without_entries(self, ufc, fake_http):
        fake_http.set(
            YAHOO.market_time_url,
            json_response({"finance": {"marketTimes": [{"marketTime": []}], "error": None}}),
        )

        with pytest.raises(DataNotFoundError):
            await ufc.market.get_market_time("us")

    @pytest.mark.asyncio
    async def test_unknown_market(self, ufc, fake_http):
        with pytest.raises(InvalidInputError) as exc_info:
            await ufc.market.get_market_summary("mars")

        assert exc_info.value.field == "market"
        assert fake_http.calls == []
