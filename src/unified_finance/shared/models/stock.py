"""Company reference data models (quoteSummary modules)."""

from pydantic import BaseModel, ConfigDict


class CompanyProfile(BaseModel):
    """Mostly-static company description from the assetProfile module."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    long_name: str | None = None
    short_name: str | None = None
    quote_type: str | None = None
    exchange: str | None = None
    sector: str | None = None
    industry: str | None = None
    country: str | None = None
    website: str | None = None
    full_time_employees: int | None = None
    business_summary: str | None = None


class FastInfo(BaseModel):
    """Frequently requested price/valuation fields from price + summaryDetail."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    currency: str | None = None
    exchange: str | None = None
    last_price: float | None = None
    previous_close: float | None = None
    open: float | None = None
    day_high: float | None = None
    day_low: float | None = None
    market_cap: int | None = None
    fifty_two_week_high: float | None = None
    fifty_two_week_low: float | None = None
    fifty_day_average: float | None = None
    two_hundred_day_average: float | None = None
    ten_day_average_volume: int | None = None
