"""Regional market overview and trading-hours models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from unified_finance.shared.models.enums import MarketCode, MarketState


class MarketSummaryItem(BaseModel):
    """Headline instrument (usually an index) of a regional market."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    exchange: str | None = None
    short_name: str | None = None
    quote_type: str | None = None
    currency: str | None = None
    market_state: MarketState = MarketState.UNKNOWN
    regular_market_price: float | None = None
    regular_market_change: float | None = None
    regular_market_change_percent: float | None = None
    regular_market_previous_close: float | None = None
    regular_market_day_high: float | None = None
    regular_market_day_low: float | None = None
    regular_market_volume: int | None = None
    regular_market_time: datetime | None = None
    timezone_name: str | None = None
    gmt_offset_ms: int | None = None


class MarketSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    market: MarketCode
    items: list[MarketSummaryItem] = Field(default_factory=list)


class TradingHours(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime


class MarketTime(BaseModel):
    """Session boundaries and current state of a regional market.

    All datetimes are timezone-aware; timezone_name is the IANA zone of the
    exchange.
    """

    model_config = ConfigDict(frozen=True)

    market: MarketCode
    exchange: str
    market_id: str
    market_state: MarketState
    open: datetime
    close: datetime
    pre_market: TradingHours | None = None
    post_market: TradingHours | None = None
    timezone_short_name: str
    timezone_name: str
    gmt_offset_ms: int
    current_time: datetime | None = None
