"""Basket endpoints: save, list and load a user's stock baskets."""

from sentiment_api.routes.baskets.endpoints import router
from sentiment_api.routes.baskets.models import (
    BasketResponse,
    BasketStockModel,
    BasketStockResponse,
    SaveBasketRequest,
    SourceWeightsModel,
)

__all__ = [
    "router",
    # Models
    "BasketResponse",
    "BasketStockModel",
    "BasketStockResponse",
    "SaveBasketRequest",
    "SourceWeightsModel",
]
