"""Domain models returned by unified-finance services."""

from .charts import Bar, ChartMeta, Dividend, PriceHistory, Split
from .enums import (
    ChartEventType,
    DataFrequency,
    Interval,
    LookupType,
    MarketCode,
    MarketState,
    Period,
    PredefinedScreener,
    ProviderKey,
)
from .macro import FredObservation, FredSeries, FredSeriesInfo
from .market import MarketSummary, MarketSummaryItem, MarketTime, TradingHours
from .options import OptionContract, OptionsChain
from .quotes import LookupDocument, LookupResult, Quote, SearchQuote
from .screener import ScreenerQuote, ScreenerResult
from .stock import CompanyProfile, FastInfo

__all__ = [
    # Enums
    "ChartEventType",
    "DataFrequency",
    "Interval",
    "LookupType",
    "MarketCode",
    "MarketState",
    "Period",
    "PredefinedScreener",
    "ProviderKey",
    # Quotes
    "LookupDocument",
    "LookupResult",
    "Quote",
    "SearchQuote",
    # Market
    "MarketSummary",
    "MarketSummaryItem",
    "MarketTime",
    "TradingHours",
    # Charts
    "Bar",
    "ChartMeta",
    "Dividend",
    "PriceHistory",
    "Split",
    # Options
    "OptionContract",
    "OptionsChain",
    # Screener
    "ScreenerQuote",
    "ScreenerResult",
    # Stock
    "CompanyProfile",
    "FastInfo",
    # Macro
    "FredObservation",
    "FredSeries",
    "FredSeriesInfo",
]
