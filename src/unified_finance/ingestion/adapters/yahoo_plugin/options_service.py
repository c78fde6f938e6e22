"""Options chains from the v7 options endpoint."""

from datetime import date, datetime
from typing import Any

from unified_finance.ingestion.adapters.yahoo_plugin.base import authenticated_get
from unified_finance.ingestion.adapters.yahoo_plugin.envelope import first_result
from unified_finance.ingestion.adapters.yahoo_plugin.mappers import map_options_chain
from unified_finance.ingestion.config.value_objects import YahooEndpoints
from unified_finance.ingestion.ports.pipeline import IPipeline
from unified_finance.shared.exceptions import InvalidInputError
from unified_finance.shared.models.enums import ProviderKey
from unified_finance.shared.models.options import OptionsChain
from unified_finance.shared.ttl import OPTIONS_TTL
from unified_finance.shared.validation import to_utc_datetime, validate_symbol


def expiration_epoch(expiration: date | datetime | int | None) -> int | None:
    """Upstream identifies expirations by epoch seconds at midnight UTC."""
    if expiration is None:
        return None
    if isinstance(expiration, bool):
        raise InvalidInputError("expiration must be a date or epoch seconds", field="expiration")
    if isinstance(expiration, int):
        if expiration <= 0:
            raise InvalidInputError("expiration must be positive", field="expiration")
        return expiration
    return int(to_utc_datetime(expiration, "expiration").timestamp())


class OptionsService:
    def __init__(self, pipeline: IPipeline, endpoints: YahooEndpoints | None = None):
        self.pipeline = pipeline
        self.endpoints = endpoints or YahooEndpoints()

    async def get_options_chain(
        self,
        symbol: str,
        expiration: date | datetime | int | None = None,
    ) -> OptionsChain:
        """Calls and puts for one expiration (the nearest when omitted).

        ``expiration_dates`` on the result lists every expiration available.
        """
        symbol = validate_symbol(symbol)
        epoch = expiration_epoch(expiration)

        params = {} if epoch is None else {"date": epoch}
        call = authenticated_get(
            self.pipeline.http_client, f"{self.endpoints.options_url}/{symbol}", params
        )

        def parse(body: Any) -> OptionsChain:
            return map_options_chain(first_result(body, "optionChain"))

        return await self.pipeline.execute(
            f"options:{symbol}:{epoch if epoch is not None else 'nearest'}",
            OPTIONS_TTL,
            ProviderKey.YAHOO,
            call,
            parse,
        )
