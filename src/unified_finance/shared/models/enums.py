"""
Shared enumerations for unified-finance.

Provider keys scope rate-limiter and auth state; the remaining enums mirror the
query vocabulary accepted by the upstream chart and economic-data endpoints.
"""

import enum


# ============================================================================
# PROVIDERS
# ============================================================================
class ProviderKey(str, enum.Enum):
    """Upstream service identifier scoping rate-limit and auth state."""

    YAHOO = "YAHOO"
    FRED = "FRED"


# ============================================================================
# CHART VOCABULARY
# ============================================================================
class Interval(str, enum.Enum):
    """Bar size accepted by the chart endpoint."""

    ONE_MINUTE = "1m"
    TWO_MINUTES = "2m"
    FIVE_MINUTES = "5m"
    FIFTEEN_MINUTES = "15m"
    THIRTY_MINUTES = "30m"
    ONE_HOUR = "1h"
    NINETY_MINUTES = "90m"
    ONE_DAY = "1d"
    FIVE_DAYS = "5d"
    ONE_WEEK = "1wk"
    ONE_MONTH = "1mo"
    THREE_MONTHS = "3mo"

    @property
    def minutes(self) -> int:
        return _INTERVAL_MINUTES[self]

    @property
    def is_intraday(self) -> bool:
        return self.minutes < 1440


_INTERVAL_MINUTES = {
    Interval.ONE_MINUTE: 1,
    Interval.TWO_MINUTES: 2,
    Interval.FIVE_MINUTES: 5,
    Interval.FIFTEEN_MINUTES: 15,
    Interval.THIRTY_MINUTES: 30,
    Interval.ONE_HOUR: 60,
    Interval.NINETY_MINUTES: 90,
    Interval.ONE_DAY: 1440,
    Interval.FIVE_DAYS: 7200,
    Interval.ONE_WEEK: 10080,
    Interval.ONE_MONTH: 43200,
    Interval.THREE_MONTHS: 129600,
}


class Period(str, enum.Enum):
    """Look-back range accepted by the chart endpoint."""

    ONE_DAY = "1d"
    FIVE_DAYS = "5d"
    ONE_MONTH = "1mo"
    THREE_MONTHS = "3mo"
    SIX_MONTHS = "6mo"
    ONE_YEAR = "1y"
    TWO_YEARS = "2y"
    FIVE_YEARS = "5y"
    TEN_YEARS = "10y"
    YEAR_TO_DATE = "ytd"
    MAX = "max"

    @property
    def approx_days(self) -> int:
        """Upper bound on calendar days covered (ytd counted as a full year)."""
        return _PERIOD_DAYS[self]


_PERIOD_DAYS = {
    Period.ONE_DAY: 1,
    Period.FIVE_DAYS: 5,
    Period.ONE_MONTH: 31,
    Period.THREE_MONTHS: 92,
    Period.SIX_MONTHS: 183,
    Period.ONE_YEAR: 366,
    Period.TWO_YEARS: 731,
    Period.FIVE_YEARS: 1827,
    Period.TEN_YEARS: 3653,
    Period.YEAR_TO_DATE: 366,
    Period.MAX: 36500,
}


class ChartEventType(str, enum.Enum):
    """Corporate action events the chart endpoint can attach."""

    DIVIDENDS = "div"
    SPLITS = "split"
    CAPITAL_GAINS = "capitalGains"


# ============================================================================
# LOOKUP AND MARKET VOCABULARY
# ============================================================================
class LookupType(str, enum.Enum):
    """Instrument filter accepted by the lookup endpoint."""

    ALL = "all"
    EQUITY = "equity"
    MUTUAL_FUND = "mutualfund"
    ETF = "etf"
    INDEX = "index"
    FUTURE = "future"
    CURRENCY = "currency"
    CRYPTOCURRENCY = "cryptocurrency"


class MarketCode(str, enum.Enum):
    """Regional market accepted by the market summary and market time endpoints."""

    US = "us"
    KR = "kr"
    JP = "jp"
    GB = "gb"
    DE = "de"
    HK = "hk"
    CN = "cn"
    FR = "fr"


class MarketState(str, enum.Enum):
    PRE = "PRE"
    REGULAR = "REGULAR"
    POST = "POST"
    CLOSED = "CLOSED"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: str | None) -> "MarketState":
        """Case-insensitive; anything unrecognised is UNKNOWN."""
        try:
            return cls((value or "").upper())
        except ValueError:
            return cls.UNKNOWN


# ============================================================================
# ECONOMIC DATA VOCABULARY
# ============================================================================
class DataFrequency(str, enum.Enum):
    """Observation frequency accepted by the economic-data provider."""

    DAILY = "d"
    WEEKLY = "w"
    BIWEEKLY = "bw"
    MONTHLY = "m"
    QUARTERLY = "q"
    SEMIANNUAL = "sa"
    ANNUAL = "a"


class PredefinedScreener(str, enum.Enum):
    """Saved screeners exposed by the quote provider."""

    AGGRESSIVE_SMALL_CAPS = "aggressive_small_caps"
    DAY_GAINERS = "day_gainers"
    DAY_LOSERS = "day_losers"
    MOST_ACTIVES = "most_actives"
    GROWTH_TECHNOLOGY_STOCKS = "growth_technology_stocks"
    UNDERVALUED_GROWTH_STOCKS = "undervalued_growth_stocks"
    UNDERVALUED_LARGE_CAPS = "undervalued_large_caps"
    SMALL_CAP_GAINERS = "small_cap_gainers"
    MOST_SHORTED_STOCKS = "most_shorted_stocks"
    HIGH_YIELD_BOND = "high_yield_bond"
    SOLID_LARGE_GROWTH_FUNDS = "solid_large_growth_funds"
    TOP_MUTUAL_FUNDS = "top_mutual_funds"
