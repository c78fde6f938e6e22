"""
unified-finance: async access to market data and economic time series.

Quote, chart, options, screener and company data come from the cookie/crumb
authenticated quote provider; economic series come from the API-key
documented economic-data provider. Both ride one request pipeline with
per-provider rate limiting and a single-flight TTL cache.
"""

from unified_finance.client import UnifiedFinanceClient
from unified_finance.config.state import ConfigState, get_config
from unified_finance.shared.exceptions import (
    ApiError,
    AuthenticationError,
    ConfigurationError,
    DataNotFoundError,
    DataParsingError,
    ErrorCode,
    InvalidInputError,
    UfcError,
)
from unified_finance.shared.models.enums import (
    DataFrequency,
    Interval,
    LookupType,
    MarketCode,
    Period,
    PredefinedScreener,
    ProviderKey,
)

__version__ = "0.1.0"

__all__ = [
    "ApiError",
    "AuthenticationError",
    "ConfigState",
    "ConfigurationError",
    "DataFrequency",
    "DataNotFoundError",
    "DataParsingError",
    "ErrorCode",
    "Interval",
    "InvalidInputError",
    "LookupType",
    "MarketCode",
    "Period",
    "PredefinedScreener",
    "ProviderKey",
    "UfcError",
    "UnifiedFinanceClient",
    "get_config",
]
