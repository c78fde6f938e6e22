"""
Economic time series from the API-key documented provider.

The provider is disabled when no API key is configured: every operation then
raises ConfigurationError before touching the cache or the network.
"""

import asyncio
from datetime import date
from typing import Any

from unified_finance.infrastructure.observability import get_service_logger
from unified_finance.ingestion.adapters.fred_plugin.mappers import (
    map_observations,
    map_series_info,
)
from unified_finance.ingestion.config.value_objects import FredEndpoints
from unified_finance.ingestion.ports.auth import AuthSession
from unified_finance.ingestion.ports.http import HttpResponse
from unified_finance.ingestion.ports.pipeline import IPipeline, OutboundCall
from unified_finance.shared.exceptions import ConfigurationError, InvalidInputError
from unified_finance.shared.models.enums import DataFrequency, ProviderKey
from unified_finance.shared.models.macro import FredObservation, FredSeries, FredSeriesInfo
from unified_finance.shared.ttl import MACRO_SERIES_TTL, SERIES_INFO_TTL
from unified_finance.shared.validation import validate_series_id


class MacroService:
    def __init__(
        self,
        pipeline: IPipeline,
        api_key: str | None,
        endpoints: FredEndpoints | None = None,
    ):
        self.pipeline = pipeline
        self._api_key = api_key
        self.endpoints = endpoints or FredEndpoints()
        self.logger = get_service_logger("macro-service")

    @property
    def enabled(self) -> bool:
        return bool(self._api_key)

    def _require_key(self) -> str:
        if not self._api_key:
            raise ConfigurationError(
                "FRED API key is not configured; set FRED_API_KEY or fred.api_key",
                metadata={"provider": ProviderKey.FRED.value},
            )
        return self._api_key

    def _call(self, url: str, params: dict[str, Any]) -> OutboundCall:
        api_key = self._require_key()

        async def call(session: AuthSession | None) -> HttpResponse:
            query = {**params, "api_key": api_key, "file_type": "json"}
            return await self.pipeline.http_client.get(url, params=query)

        return call

    async def get_series_info(self, series_id: str) -> FredSeriesInfo:
        """Title, units and frequency of a series."""
        self._require_key()
        series_id = validate_series_id(series_id)
        call = self._call(self.endpoints.series_url, {"series_id": series_id})

        def parse(body: Any) -> FredSeriesInfo:
            return map_series_info(body, series_id)

        return await self.pipeline.execute(
            f"fred:info:{series_id}", SERIES_INFO_TTL, ProviderKey.FRED, call, parse
        )

    async def get_observations(
        self,
        series_id: str,
        start: date | None = None,
        end: date | None = None,
        frequency: DataFrequency | str | None = None,
    ) -> list[FredObservation]:
        """Dated values, oldest first. Missing values come back as None.

        ``frequency`` asks the provider to aggregate to a lower frequency.
        """
        self._require_key()
        series_id = validate_series_id(series_id)
        if start is not None and end is not None and start > end:
            raise InvalidInputError("start must not be after end", field="start")
        if frequency is not None:
            try:
                frequency = DataFrequency(frequency)
            except ValueError:
                raise InvalidInputError(
                    f"Unsupported frequency: {frequency!r}", field="frequency"
                ) from None

        params: dict[str, Any] = {"series_id": series_id}
        if start is not None:
            params["observation_start"] = start.isoformat()
        if end is not None:
            params["observation_end"] = end.isoformat()
        if frequency is not None:
            params["frequency"] = frequency.value

        cache_key = ":".join(
            [
                "fred:obs",
                series_id,
                start.isoformat() if start else "",
                end.isoformat() if end else "",
                frequency.value if frequency else "",
            ]
        )
        observations = await self.pipeline.execute(
            cache_key,
            MACRO_SERIES_TTL,
            ProviderKey.FRED,
            self._call(self.endpoints.observations_url, params),
            map_observations,
        )
        self.logger.debug(
            "observations_ready", series_id=series_id, count=len(observations)
        )
        return observations

    async def get_series(
        self,
        series_id: str,
        start: date | None = None,
        end: date | None = None,
        frequency: DataFrequency | str | None = None,
    ) -> FredSeries:
        """Series metadata and observations, fetched concurrently."""
        self._require_key()
        info, observations = await asyncio.gather(
            self.get_series_info(series_id),
            self.get_observations(series_id, start, end, frequency),
        )
        return FredSeries(info=info, observations=observations)
