"""Real-time quotes from the v7 quote endpoint."""

from collections.abc import Iterable
from typing import Any

from unified_finance.infrastructure.observability import get_service_logger
from unified_finance.ingestion.adapters.yahoo_plugin.base import authenticated_get
from unified_finance.ingestion.adapters.yahoo_plugin.envelope import unwrap_result
from unified_finance.ingestion.adapters.yahoo_plugin.mappers import map_quote
from unified_finance.ingestion.config.value_objects import YahooEndpoints
from unified_finance.ingestion.ports.pipeline import IPipeline
from unified_finance.shared.exceptions import DataNotFoundError
from unified_finance.shared.models.enums import ProviderKey
from unified_finance.shared.models.quotes import Quote
from unified_finance.shared.ttl import QUOTE_TTL
from unified_finance.shared.validation import validate_symbol, validate_symbols


class QuoteService:
    def __init__(self, pipeline: IPipeline, endpoints: YahooEndpoints | None = None):
        self.pipeline = pipeline
        self.endpoints = endpoints or YahooEndpoints()
        self.logger = get_service_logger("quote-service")

    async def get_quote(self, symbol: str) -> Quote:
        """Latest regular-market quote for one symbol.

        Raises:
            InvalidInputError: Malformed symbol
            DataNotFoundError: Upstream knows no such symbol
        """
        return await self._fetch(validate_symbol(symbol))

    async def get_quotes(self, symbols: Iterable[str]) -> dict[str, Quote]:
        """Quotes keyed by symbol. Unknown symbols are left out."""
        normalized = validate_symbols(symbols)
        quotes = await self.pipeline.execute_batch(normalized, self._fetch)
        self.logger.info("quotes_fetched", requested=len(normalized), found=len(quotes))
        return quotes

    async def _fetch(self, symbol: str) -> Quote:
        call = authenticated_get(
            self.pipeline.http_client,
            self.endpoints.quote_url,
            {"symbols": symbol, "formatted": "false"},
        )

        def parse(body: Any) -> Quote:
            for item in unwrap_result(body, "quoteResponse"):
                if str(item.get("symbol", "")).upper() == symbol:
                    return map_quote(item)
            raise DataNotFoundError(
                f"No quote returned for {symbol}", metadata={"symbol": symbol}
            )

        return await self.pipeline.execute(
            f"quote:{symbol}", QUOTE_TTL, ProviderKey.YAHOO, call, parse
        )
