"""Cache lifetimes per data category.

The cache itself is TTL-agnostic; each domain service picks the lifetime
that matches how quickly its data goes stale.
"""

from datetime import timedelta

QUOTE_TTL = timedelta(seconds=60)
OPTIONS_TTL = timedelta(seconds=60)
HISTORY_TTL = timedelta(minutes=5)
SCREENER_TTL = timedelta(minutes=5)
SEARCH_TTL = timedelta(hours=1)
LOOKUP_TTL = timedelta(hours=1)
MARKET_SUMMARY_TTL = timedelta(seconds=60)
MARKET_TIME_TTL = timedelta(minutes=5)
PROFILE_TTL = timedelta(hours=24)
FAST_INFO_TTL = timedelta(hours=24)
CORPORATE_ACTIONS_TTL = timedelta(hours=24)
MACRO_SERIES_TTL = timedelta(hours=24)
SERIES_INFO_TTL = timedelta(days=30)
