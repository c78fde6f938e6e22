"""Real-time quote and symbol search models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from unified_finance.shared.models.enums import LookupType


class Quote(BaseModel):
    """Snapshot of a symbol's regular-market quote."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    short_name: str | None = None
    long_name: str | None = None
    quote_type: str | None = None
    currency: str | None = None
    exchange: str | None = None
    market_state: str | None = None

    regular_market_price: float | None = None
    regular_market_change: float | None = None
    regular_market_change_percent: float | None = None
    regular_market_previous_close: float | None = None
    regular_market_open: float | None = None
    regular_market_day_high: float | None = None
    regular_market_day_low: float | None = None
    regular_market_volume: int | None = None
    regular_market_time: datetime | None = None

    market_cap: int | None = None
    fifty_two_week_high: float | None = None
    fifty_two_week_low: float | None = None


class SearchQuote(BaseModel):
    """One hit from the symbol search endpoint."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    short_name: str | None = None
    long_name: str | None = None
    exchange: str | None = None
    quote_type: str | None = None
    score: float | None = Field(default=None, description="Relevance score")


class LookupDocument(BaseModel):
    """One instrument returned by the lookup endpoint."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    name: str
    exchange: str | None = None
    quote_type: str | None = None
    industry: str | None = None
    sector: str | None = None
    score: float | None = None


class LookupResult(BaseModel):
    """Lookup page. An empty page is a valid answer, not an error."""

    model_config = ConfigDict(frozen=True)

    query: str
    lookup_type: LookupType
    start: int = 0
    total: int = 0
    documents: list[LookupDocument] = Field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.documents)
