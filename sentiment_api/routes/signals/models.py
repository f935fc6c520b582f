"""Request and response models for signal endpoints."""

from pydantic import BaseModel, Field

from sentiment_api.domain.entities.sentiment import SentimentObservation, UniverseEntry


class ObservationResponse(BaseModel):
    """One source's latest sentiment call for a symbol."""

    symbol: str
    source: str
    date: str = Field(..., description="Observation date (YYYY-MM-DD)")
    sentiment: str
    entry_price: float
    sentiment_score: float | None = None
    analyzed_count: int | None = Field(
        None, description="Tweets, keywords or articles behind the call"
    )

    @classmethod
    def from_observation(cls, obs: SentimentObservation) -> "ObservationResponse":
        return cls(**obs.to_dict())


class SourceSignalsResponse(BaseModel):
    """Latest observation per symbol for one source."""

    source: str
    count: int
    signals: list[ObservationResponse]


class UniverseEntryResponse(BaseModel):
    """A symbol on which every requested source agrees."""

    symbol: str
    sentiment: str = Field(..., description="Shared sentiment, lowercased")
    observations: dict[str, ObservationResponse]

    @classmethod
    def from_entry(cls, entry: UniverseEntry) -> "UniverseEntryResponse":
        return cls(
            symbol=entry.symbol,
            sentiment=entry.sentiment,
            observations={
                source.value: ObservationResponse.from_observation(obs)
                for source, obs in entry.observations.items()
            },
        )


class UniverseResponse(BaseModel):
    """Reconciled stock universe for the requested sources."""

    sources: list[str]
    count: int
    universe: list[UniverseEntryResponse]
