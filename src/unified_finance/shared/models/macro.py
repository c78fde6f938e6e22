"""Economic time-series models."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field


class FredSeriesInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    frequency: str | None = None
    units: str | None = None
    seasonal_adjustment: str | None = None
    last_updated: str | None = None
    observation_start: date | None = None
    observation_end: date | None = None


class FredObservation(BaseModel):
    """A dated value; None where the provider reports a missing value."""

    model_config = ConfigDict(frozen=True)

    date: date
    value: float | None = None


class FredSeries(BaseModel):
    model_config = ConfigDict(frozen=True)

    info: FredSeriesInfo
    observations: list[FredObservation] = Field(default_factory=list)

    @property
    def id(self) -> str:
        return self.info.id

    def latest(self) -> FredObservation | None:
        """Most recent observation carrying a value."""
        for observation in reversed(self.observations):
            if observation.value is not None:
                return observation
        return None
