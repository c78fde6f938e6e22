"""Company reference data, symbol search and symbol lookup."""

from collections.abc import Iterable
from typing import Any

from unified_finance.infrastructure.observability import get_service_logger
from unified_finance.ingestion.adapters.yahoo_plugin.base import authenticated_get
from unified_finance.ingestion.adapters.yahoo_plugin.envelope import (
    first_result,
    unwrap_result,
)
from unified_finance.ingestion.adapters.yahoo_plugin.mappers import (
    map_company_profile,
    map_fast_info,
    map_lookup_result,
    map_search_quotes,
)
from unified_finance.ingestion.config.value_objects import YahooEndpoints
from unified_finance.ingestion.ports.pipeline import IPipeline
from unified_finance.shared.exceptions import InvalidInputError
from unified_finance.shared.models.enums import LookupType, ProviderKey
from unified_finance.shared.models.quotes import LookupResult, SearchQuote
from unified_finance.shared.models.stock import CompanyProfile, FastInfo
from unified_finance.shared.ttl import (
    FAST_INFO_TTL,
    LOOKUP_TTL,
    PROFILE_TTL,
    SEARCH_TTL,
)
from unified_finance.shared.validation import (
    validate_range,
    validate_symbol,
    validate_symbols,
)

MAX_QUERY_LENGTH = 500
MAX_SEARCH_RESULTS = 100
MAX_LOOKUP_COUNT = 100


class StockService:
    """quoteSummary modules plus the search and lookup endpoints."""

    def __init__(self, pipeline: IPipeline, endpoints: YahooEndpoints | None = None):
        self.pipeline = pipeline
        self.endpoints = endpoints or YahooEndpoints()
        self.logger = get_service_logger("stock-service")

    async def get_company_profile(self, symbol: str) -> CompanyProfile:
        return await self._fetch_profile(validate_symbol(symbol))

    async def get_company_profiles(
        self, symbols: Iterable[str]
    ) -> dict[str, CompanyProfile]:
        return await self.pipeline.execute_batch(
            validate_symbols(symbols), self._fetch_profile
        )

    async def get_fast_info(self, symbol: str) -> FastInfo:
        symbol = validate_symbol(symbol)

        def parse(body: Any) -> FastInfo:
            return map_fast_info(first_result(body, "quoteSummary"), symbol)

        return await self.pipeline.execute(
            f"fast-info:{symbol}",
            FAST_INFO_TTL,
            ProviderKey.YAHOO,
            self._summary_call(symbol, "price,summaryDetail"),
            parse,
        )

    async def search(self, query: str, max_results: int = 8) -> list[SearchQuote]:
        """Symbols matching a free-text query, best match first.

        Raises:
            InvalidInputError: Blank or overlong query, or bad max_results
            DataNotFoundError: Nothing matched
        """
        query = _validate_query(query)
        max_results = validate_range(max_results, "max_results", 1, MAX_SEARCH_RESULTS)

        call = authenticated_get(
            self.pipeline.http_client,
            self.endpoints.search_url,
            {
                "q": query,
                "quotesCount": max_results,
                "newsCount": 0,
                "enableFuzzyQuery": "false",
                "quotesQueryId": "tss_match_phrase_query",
            },
        )

        def parse(body: Any) -> list[SearchQuote]:
            return map_search_quotes(body)[:max_results]

        results = await self.pipeline.execute(
            f"search:{query.lower()}:{max_results}",
            SEARCH_TTL,
            ProviderKey.YAHOO,
            call,
            parse,
        )
        self.logger.debug("search_completed", results=len(results))
        return results

    async def lookup(
        self,
        query: str,
        lookup_type: LookupType | str = LookupType.ALL,
        count: int = 25,
    ) -> LookupResult:
        """Instruments whose symbol or name matches ``query``, filtered by type.

        Unlike search, a query that matches nothing returns an empty
        LookupResult.

        Raises:
            InvalidInputError: Blank or overlong query, unknown type or bad count
        """
        query = _validate_query(query)
        try:
            lookup_type = LookupType(str(getattr(lookup_type, "value", lookup_type)).lower())
        except ValueError:
            raise InvalidInputError(
                f"Unknown lookup type: {lookup_type!r}", field="lookup_type"
            ) from None
        count = validate_range(count, "count", 1, MAX_LOOKUP_COUNT)

        call = authenticated_get(
            self.pipeline.http_client,
            self.endpoints.lookup_url,
            {"query": query, "type": lookup_type.value, "count": count},
        )

        def parse(body: Any) -> LookupResult:
            if not unwrap_result(body, "finance", allow_empty=True):
                return map_lookup_result(None, query, lookup_type)
            return map_lookup_result(first_result(body, "finance"), query, lookup_type)

        return await self.pipeline.execute(
            f"lookup:{query.lower()}:{lookup_type.value}:{count}",
            LOOKUP_TTL,
            ProviderKey.YAHOO,
            call,
            parse,
        )

    async def _fetch_profile(self, symbol: str) -> CompanyProfile:
        def parse(body: Any) -> CompanyProfile:
            return map_company_profile(first_result(body, "quoteSummary"), symbol)

        return await self.pipeline.execute(
            f"profile:{symbol}",
            PROFILE_TTL,
            ProviderKey.YAHOO,
            self._summary_call(symbol, "assetProfile,quoteType"),
            parse,
        )

    def _summary_call(self, symbol: str, modules: str):
        return authenticated_get(
            self.pipeline.http_client,
            f"{self.endpoints.quote_summary_url}/{symbol}",
            {"modules": modules, "formatted": "false"},
        )


def _validate_query(query: str) -> str:
    if not isinstance(query, str) or not query.strip():
        raise InvalidInputError("Search query must not be blank", field="query")
    query = query.strip()
    if len(query) > MAX_QUERY_LENGTH:
        raise InvalidInputError(
            f"Search query longer than {MAX_QUERY_LENGTH} characters", field="query"
        )
    return query
