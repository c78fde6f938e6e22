"""
Test fixtures package for unified-finance tests.

Provides a scripted fake transport and builders for upstream JSON payloads.
"""

import asyncio
import json
from dataclasses import dataclass, field
from typing import Any

from unified_finance.ingestion.config.value_objects import FredEndpoints, YahooEndpoints
from unified_finance.ingestion.ports.http import HttpResponse

YAHOO = YahooEndpoints()
FRED = FredEndpoints()

TEST_CRUMB = "AbCdEfGhIjK"
TEST_COOKIES = {"A3": "d=AQABBtest"}


@dataclass
class RecordedCall:
    url: str
    params: dict[str, Any] = field(default_factory=dict)
    cookies: dict[str, str] = field(default_factory=dict)


class FakeHttpClient:
    """Scripted IHttpClient.

    Responses are queued per URL. Each call pops the next queued item; the
    last item stays in place and answers every further call. An item may be
    an HttpResponse, an exception instance (raised) or a callable receiving
    the RecordedCall and returning an HttpResponse.
    """

    def __init__(self, delay: float = 0.0):
        self.routes: dict[str, list[Any]] = {}
        self.calls: list[RecordedCall] = []
        self.delay = delay
        self.closed = False

    def add(self, url: str, *responses: Any) -> "FakeHttpClient":
        self.routes.setdefault(url, []).extend(responses)
        return self

    def set(self, url: str, *responses: Any) -> "FakeHttpClient":
        self.routes[url] = list(responses)
        return self

    def calls_to(self, url: str) -> list[RecordedCall]:
        return [c for c in self.calls if c.url == url]

    async def get(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        cookies: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> HttpResponse:
        recorded = RecordedCall(url, dict(params or {}), dict(cookies or {}))
        self.calls.append(recorded)
        if self.delay:
            await asyncio.sleep(self.delay)

        queue = self.routes.get(url)
        if not queue:
            return HttpResponse(status_code=404, body="Not Found", url=url)
        item = queue.pop(0) if len(queue) > 1 else queue[0]

        if isinstance(item, BaseException):
            raise item
        if callable(item):
            return item(recorded)
        return item

    async def close(self) -> None:
        self.closed = True


# ============================================================================
# RESPONSE BUILDERS
# ============================================================================
def json_response(payload: Any, status: int = 200, url: str = "") -> HttpResponse:
    return HttpResponse(status_code=status, body=json.dumps(payload), url=url)


def text_response(body: str, status: int = 200, cookies: dict | None = None) -> HttpResponse:
    return HttpResponse(status_code=status, body=body, cookies=dict(cookies or {}))


def install_yahoo_auth(fake: FakeHttpClient, *crumbs: str) -> FakeHttpClient:
    """Script the cookie page and crumb endpoint for a successful handshake."""
    fake.set(YAHOO.cookie_url, text_response("", status=404, cookies=TEST_COOKIES))
    fake.set(YAHOO.crumb_url, *[text_response(c) for c in (crumbs or (TEST_CRUMB,))])
    return fake


def envelope(resource: str, result: list | None, error: Any = None) -> dict:
    return {resource: {"result": result, "error": error}}


def quote_payload(*symbols: str) -> dict:
    return envelope(
        "quoteResponse",
        [
            {
                "symbol": s,
                "shortName": f"{s} Inc.",
                "quoteType": "EQUITY",
                "currency": "USD",
                "fullExchangeName": "NasdaqGS",
                "marketState": "REGULAR",
                "regularMarketPrice": 190.5,
                "regularMarketChange": 1.25,
                "regularMarketChangePercent": 0.66,
                "regularMarketPreviousClose": 189.25,
                "regularMarketVolume": 51234567,
                "regularMarketTime": 1704312000,
                "marketCap": 2950000000000,
                "fiftyTwoWeekHigh": 199.62,
                "fiftyTwoWeekLow": 124.17,
            }
            for s in symbols
        ],
    )


def chart_payload(symbol: str = "AAPL", events: dict | None = None) -> dict:
    result = {
        "meta": {
            "symbol": symbol,
            "currency": "USD",
            "exchangeName": "NMS",
            "instrumentType": "EQUITY",
            "exchangeTimezoneName": "America/New_York",
            "regularMarketPrice": 185.64,
            "dataGranularity": "1d",
            "range": "5d",
        },
        "timestamp": [1704205800, 1704292200, 1704378600],
        "indicators": {
            "quote": [
                {
                    "open": [187.15, 184.22, None],
                    "high": [188.44, 185.88, None],
                    "low": [183.89, 183.43, None],
                    "close": [185.64, 184.25, None],
                    "volume": [82488700, 58414500, None],
                }
            ],
            "adjclose": [{"adjclose": [184.94, 183.55, None]}],
        },
    }
    if events is not None:
        result["events"] = events
    return envelope("chart", [result])


def options_payload(symbol: str = "AAPL") -> dict:
    def contract(kind: str, strike: float, itm: bool) -> dict:
        return {
            "contractSymbol": f"{symbol}240119{kind}00{int(strike * 1000):08d}",
            "strike": strike,
            "currency": "USD",
            "lastPrice": 5.2,
            "bid": 5.1,
            "ask": 5.3,
            "volume": 1200,
            "openInterest": 34000,
            "expiration": 1705622400,
            "impliedVolatility": 0.21,
            "inTheMoney": itm,
        }

    return envelope(
        "optionChain",
        [
            {
                "underlyingSymbol": symbol,
                "expirationDates": [1705622400, 1706227200],
                "strikes": [180.0, 190.0],
                "quote": {"regularMarketPrice": 185.64},
                "options": [
                    {
                        "expirationDate": 1705622400,
                        "calls": [contract("C", 180.0, True), contract("C", 190.0, False)],
                        "puts": [contract("P", 180.0, False)],
                    }
                ],
            }
        ],
    )


def screener_payload(screener_id: str = "day_gainers", count: int = 2) -> dict:
    return envelope(
        "finance",
        [
            {
                "id": screener_id,
                "title": "Day Gainers",
                "description": "Stocks ordered in descending order by price percent change",
                "total": 120,
                "quotes": [
                    {
                        "symbol": f"GAIN{i}",
                        "shortName": f"Gainer {i}",
                        "regularMarketPrice": 10.0 + i,
                        "regularMarketChangePercent": 15.0 - i,
                        "regularMarketVolume": 1000000,
                        "marketCap": 500000000,
                    }
                    for i in range(count)
                ],
            }
        ],
    )


def quote_summary_payload(symbol: str = "AAPL") -> dict:
    return envelope(
        "quoteSummary",
        [
            {
                "assetProfile": {
                    "sector": "Technology",
                    "industry": "Consumer Electronics",
                    "country": "United States",
                    "website": "https://www.apple.com",
                    "fullTimeEmployees": 161000,
                    "longBusinessSummary": "Apple Inc. designs smartphones.",
                },
                "quoteType": {
                    "symbol": symbol,
                    "exchange": "NMS",
                    "quoteType": "EQUITY",
                    "shortName": "Apple Inc.",
                    "longName": "Apple Inc.",
                },
                "price": {
                    "symbol": symbol,
                    "currency": "USD",
                    "exchangeName": "NasdaqGS",
                    "regularMarketPrice": {"raw": 185.64, "fmt": "185.64"},
                    "regularMarketPreviousClose": {"raw": 192.53, "fmt": "192.53"},
                    "regularMarketOpen": 187.15,
                    "marketCap": {"raw": 2870000000000, "fmt": "2.87T"},
                },
                "summaryDetail": {
                    "fiftyTwoWeekHigh": {"raw": 199.62, "fmt": "199.62"},
                    "fiftyTwoWeekLow": 124.17,
                    "averageVolume10days": 52000000,
                },
            }
        ],
    )


def search_payload(*symbols: str) -> dict:
    return {
        "count": len(symbols),
        "quotes": [
            {
                "symbol": s,
                "shortname": f"{s} Corp",
                "longname": f"{s} Corporation",
                "exchDisp": "NASDAQ",
                "quoteType": "EQUITY",
                "score": 1000.0 - i,
            }
            for i, s in enumerate(symbols)
        ],
        "news": [],
    }


def lookup_payload(*symbols: str, total: int | None = None) -> dict:
    return envelope(
        "finance",
        [
            {
                "start": 0,
                "count": len(symbols),
                "total": total if total is not None else len(symbols),
                "documents": [
                    {
                        "symbol": s,
                        "shortName": f"{s} Holdings",
                        "exchange": "NMS",
                        "quoteType": "equity",
                        "industryName": "Software",
                        "rank": 100 - i,
                    }
                    for i, s in enumerate(symbols)
                ],
            }
        ],
    )


def market_summary_payload() -> dict:
    return {
        "marketSummaryResponse": {
            "result": [
                {
                    "exchange": "SNP",
                    "symbol": "^GSPC",
                    "shortName": "S&P 500",
                    "quoteType": "INDEX",
                    "marketState": "regular",
                    "regularMarketPrice": {"raw": 4742.83, "fmt": "4,742.83"},
                    "regularMarketChangePercent": 0.35,
                    "regularMarketTime": {"raw": 1704315600, "fmt": "4:00PM EST"},
                    "exchangeTimezoneName": "America/New_York",
                    "gmtOffSetMilliseconds": -18000000,
                },
                {
                    "exchange": "DJI",
                    "symbol": "^DJI",
                    "shortName": "Dow 30",
                    "marketState": "SOMETHING_NEW",
                    "regularMarketPrice": 37715.04,
                    "regularMarketTime": 0,
                },
            ],
            "error": None,
        }
    }


def market_time_payload(**overrides: Any) -> dict:
    item = {
        "exchange": "NYSE",
        "market": "us_market",
        "marketState": "REGULAR",
        "open": "2024-01-03T14:30:00Z",
        "close": "2024-01-03T21:00:00Z",
        "preMarket": {"start": "2024-01-03T09:00:00Z", "end": "2024-01-03T14:30:00Z"},
        "timezone": [{"short": "EST", "name": "America/New_York", "gmtoffset": -18000000}],
        "time": "2024-01-03T15:45:12-05:00",
    }
    item.update(overrides)
    return {"finance": {"marketTimes": [{"marketTime": [item]}], "error": None}}


def fred_series_payload(series_id: str = "GDP") -> dict:
    return {
        "seriess": [
            {
                "id": series_id,
                "title": "Gross Domestic Product",
                "frequency": "Quarterly",
                "units": "Billions of Dollars",
                "seasonal_adjustment": "Seasonally Adjusted Annual Rate",
                "last_updated": "2024-01-25 07:55:01-06",
                "observation_start": "1947-01-01",
                "observation_end": "2023-10-01",
            }
        ]
    }


def fred_observations_payload() -> dict:
    return {
        "observations": [
            {"date": "2023-04-01", "value": "27063.012"},
            {"date": "2023-07-01", "value": "."},
            {"date": "2023-10-01", "value": "27956.998"},
        ]
    }


__all__ = [
    "FRED",
    "TEST_COOKIES",
    "TEST_CRUMB",
    "YAHOO",
    "FakeHttpClient",
    "RecordedCall",
    "chart_payload",
    "envelope",
    "fred_observations_payload",
    "fred_series_payload",
    "install_yahoo_auth",
    "json_response",
    "options_payload",
    "quote_payload",
    "quote_summary_payload",
    "screener_payload",
    "search_payload",
    "text_response",
]
