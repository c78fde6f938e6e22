"""Predefined (saved) screeners."""

import re
from typing import Any

from unified_finance.ingestion.adapters.yahoo_plugin.base import authenticated_get
from unified_finance.ingestion.adapters.yahoo_plugin.envelope import first_result
from unified_finance.ingestion.adapters.yahoo_plugin.mappers import map_screener_result
from unified_finance.ingestion.config.value_objects import YahooEndpoints
from unified_finance.ingestion.ports.pipeline import IPipeline
from unified_finance.shared.exceptions import InvalidInputError
from unified_finance.shared.models.enums import PredefinedScreener, ProviderKey
from unified_finance.shared.models.screener import ScreenerResult
from unified_finance.shared.ttl import SCREENER_TTL
from unified_finance.shared.validation import validate_range

MAX_SCREENER_COUNT = 250
_SCREENER_ID_RE = re.compile(r"^[a-z0-9_]{1,64}$")


class ScreenerService:
    def __init__(self, pipeline: IPipeline, endpoints: YahooEndpoints | None = None):
        self.pipeline = pipeline
        self.endpoints = endpoints or YahooEndpoints()

    async def run_predefined(
        self,
        screener_id: PredefinedScreener | str,
        count: int = 25,
    ) -> ScreenerResult:
        """Run a saved screener such as ``day_gainers``.

        Any id matching the upstream naming scheme is accepted, not only the
        members of PredefinedScreener.
        """
        screener_id = str(getattr(screener_id, "value", screener_id)).strip().lower()
        if not _SCREENER_ID_RE.match(screener_id):
            raise InvalidInputError(
                f"Invalid screener id: {screener_id!r}", field="screener_id"
            )
        count = validate_range(count, "count", 1, MAX_SCREENER_COUNT)

        call = authenticated_get(
            self.pipeline.http_client,
            self.endpoints.screener_url,
            {"scrIds": screener_id, "count": count, "formatted": "false"},
        )

        def parse(body: Any) -> ScreenerResult:
            return map_screener_result(first_result(body, "finance"), screener_id)

        return await self.pipeline.execute(
            f"screener:{screener_id}:{count}",
            SCREENER_TTL,
            ProviderKey.YAHOO,
            call,
            parse,
        )
