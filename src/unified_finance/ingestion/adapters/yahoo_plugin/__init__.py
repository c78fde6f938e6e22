"""Adapter for the cookie/crumb authenticated quote provider."""

from .auth import MIN_CRUMB_LENGTH, YahooAuthProvider
from .corporate_actions_service import CorporateActionsService
from .envelope import unwrap_result
from .history_service import HistoryService
from .market_service import MarketService
from .options_service import OptionsService
from .quote_service import QuoteService
from .screener_service import ScreenerService
from .stock_service import StockService

__all__ = [
    "MIN_CRUMB_LENGTH",
    "CorporateActionsService",
    "HistoryService",
    "MarketService",
    "OptionsService",
    "QuoteService",
    "ScreenerService",
    "StockService",
    "YahooAuthProvider",
    "unwrap_result",
]
