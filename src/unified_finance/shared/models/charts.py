"""Historical bar and corporate action models derived from the chart endpoint."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from unified_finance.shared.models.enums import Interval


class Bar(BaseModel):
    """One OHLCV bar. Fields are None where the provider left gaps."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    open: float | None = None
    high: float | None = None
    low: float | None = None
    close: float | None = None
    adj_close: float | None = None
    volume: int | None = None


class ChartMeta(BaseModel):
    """Chart-level metadata returned alongside the bars."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    currency: str | None = None
    exchange_name: str | None = None
    instrument_type: str | None = None
    timezone: str | None = None
    regular_market_price: float | None = None
    data_granularity: str | None = None
    range: str | None = None


class PriceHistory(BaseModel):
    """Bars for one symbol, oldest first."""

    model_config = ConfigDict(frozen=True)

    meta: ChartMeta
    interval: Interval
    bars: list[Bar] = Field(default_factory=list)

    @property
    def symbol(self) -> str:
        return self.meta.symbol

    def closes(self) -> list[float]:
        return [bar.close for bar in self.bars if bar.close is not None]


class Dividend(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: datetime
    amount: float


class Split(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: datetime
    numerator: float
    denominator: float
    ratio: str | None = None

    @property
    def factor(self) -> float:
        """Share multiplier, e.g. 4.0 for a 4:1 split."""
        return self.numerator / self.denominator
