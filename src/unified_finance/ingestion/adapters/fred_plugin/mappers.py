"""Mapping of economic-data JSON into domain models."""

from datetime import date
from typing import Any

from unified_finance.shared.exceptions import DataNotFoundError
from unified_finance.shared.models.macro import FredObservation, FredSeriesInfo

# Placeholder the provider uses for a missing observation
MISSING_VALUE = "."


def _parse_date(value: Any) -> date | None:
    if not value:
        return None
    return date.fromisoformat(value)


def map_series_info(body: dict[str, Any], series_id: str) -> FredSeriesInfo:
    seriess = body["seriess"]
    if not seriess:
        raise DataNotFoundError(
            f"Unknown series: {series_id}", metadata={"series_id": series_id}
        )
    item = seriess[0]
    return FredSeriesInfo(
        id=item["id"],
        title=item["title"],
        frequency=item.get("frequency"),
        units=item.get("units"),
        seasonal_adjustment=item.get("seasonal_adjustment"),
        last_updated=item.get("last_updated"),
        observation_start=_parse_date(item.get("observation_start")),
        observation_end=_parse_date(item.get("observation_end")),
    )


def map_observation(item: dict[str, Any]) -> FredObservation:
    value = item["value"]
    return FredObservation(
        date=date.fromisoformat(item["date"]),
        value=None if value in (MISSING_VALUE, "", None) else float(value),
    )


def map_observations(body: dict[str, Any]) -> list[FredObservation]:
    return [map_observation(item) for item in body["observations"]]
