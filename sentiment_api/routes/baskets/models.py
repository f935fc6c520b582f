"""Request and response models for basket endpoints."""

from pydantic import BaseModel, Field

from sentiment_api.domain.constants import (
    DEFAULT_GOOGLE_TRENDS_WEIGHT,
    DEFAULT_NEWS_WEIGHT,
    DEFAULT_TWITTER_WEIGHT,
    MAX_ALLOCATION_ENTRIES,
)
from sentiment_api.domain.entities.allocation import SourceWeights
from sentiment_api.domain.entities.basket import Basket, BasketStock


class SourceWeightsModel(BaseModel):
    """Relative weight of each sentiment source."""

    twitter: float = Field(DEFAULT_TWITTER_WEIGHT, ge=0, le=1)
    google_trends: float = Field(DEFAULT_GOOGLE_TRENDS_WEIGHT, ge=0, le=1)
    news: float = Field(DEFAULT_NEWS_WEIGHT, ge=0, le=1)


class BasketStockModel(BaseModel):
    """A stock in a basket."""

    symbol: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    sector: str = "Unknown"
    allocation: float = Field(0.0, ge=0, le=100)
    is_locked: bool = False

    def to_stock(self) -> BasketStock:
        return BasketStock(
            symbol=self.symbol,
            name=self.name,
            sector=self.sector,
            allocation=self.allocation,
            is_locked=self.is_locked,
        )


class SaveBasketRequest(BaseModel):
    """Request model for creating or updating a basket."""

    id: str | None = Field(None, description="Existing basket id to update; omit to create")
    name: str = Field(..., min_length=1, max_length=100)
    is_locked: bool = Field(False, description="Whether the basket is locked in as a snapshot")
    source_weights: SourceWeightsModel = Field(default_factory=SourceWeightsModel)
    stocks: list[BasketStockModel] = Field(..., min_length=1, max_length=MAX_ALLOCATION_ENTRIES)

    def to_basket(self) -> Basket:
        return Basket(
            id=self.id,
            name=self.name,
            is_locked=self.is_locked,
            source_weights=SourceWeights.from_dict(self.source_weights.model_dump()),
            stocks=[s.to_stock() for s in self.stocks],
        )


class BasketStockResponse(BaseModel):
    id: str | None
    symbol: str
    name: str
    sector: str
    allocation: float
    is_locked: bool


class BasketResponse(BaseModel):
    """A saved basket (stocks omitted in list views)."""

    id: str
    name: str
    is_locked: bool
    source_weights: SourceWeightsModel
    created_at: str | None
    updated_at: str | None
    stocks: list[BasketStockResponse] = Field(default_factory=list)

    @classmethod
    def from_basket(cls, basket: Basket) -> "BasketResponse":
        return cls(**basket.to_dict())
