"""Predefined screener result models."""

from pydantic import BaseModel, ConfigDict, Field


class ScreenerQuote(BaseModel):
    model_config = ConfigDict(frozen=True)

    symbol: str
    short_name: str | None = None
    regular_market_price: float | None = None
    regular_market_change_percent: float | None = None
    regular_market_volume: int | None = None
    market_cap: int | None = None


class ScreenerResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    screener_id: str
    title: str | None = None
    description: str | None = None
    total: int = 0
    quotes: list[ScreenerQuote] = Field(default_factory=list)
