"""Options chain models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class OptionContract(BaseModel):
    model_config = ConfigDict(frozen=True)

    contract_symbol: str
    strike: float
    expiration: datetime
    currency: str | None = None
    last_price: float | None = None
    change: float | None = None
    percent_change: float | None = None
    bid: float | None = None
    ask: float | None = None
    volume: int | None = None
    open_interest: int | None = None
    implied_volatility: float | None = None
    in_the_money: bool = False


class OptionsChain(BaseModel):
    """Calls and puts for a single expiration, plus the full expiration list."""

    model_config = ConfigDict(frozen=True)

    underlying_symbol: str
    underlying_price: float | None = None
    expiration_dates: list[datetime] = Field(default_factory=list)
    strikes: list[float] = Field(default_factory=list)
    expiration: datetime | None = None
    calls: list[OptionContract] = Field(default_factory=list)
    puts: list[OptionContract] = Field(default_factory=list)
