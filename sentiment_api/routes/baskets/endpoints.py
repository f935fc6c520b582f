"""Basket route handlers. Every endpoint requires a logged-in user."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from sentiment_api.domain.entities.basket import BasketStock, User
from sentiment_api.domain.exceptions import (
    CannotReconcileAllocationsError,
    DataNotFoundError,
)
from sentiment_api.domain.services import AllocationRebalancer
from sentiment_api.routes.baskets.models import (
    BasketResponse,
    SaveBasketRequest,
)
from sentiment_api.routes.dependencies import get_basket_repository, get_current_user
from sentiment_api.storage import BasketRepository

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=list[BasketResponse])
def list_baskets(
    user: Annotated[User, Depends(get_current_user)],
    repo: Annotated[BasketRepository, Depends(get_basket_repository)],
) -> list[BasketResponse]:
    """The user's baskets, newest first (without stocks)."""
    return [BasketResponse.from_basket(b) for b in repo.list_for_user(user.email)]


@router.get("/latest", response_model=BasketResponse | None)
def get_latest_basket(
    user: Annotated[User, Depends(get_current_user)],
    repo: Annotated[BasketRepository, Depends(get_basket_repository)],
) -> BasketResponse | None:
    """The user's most recent basket with its stocks, or null."""
    basket = repo.get_most_recent(user.email)
    return BasketResponse.from_basket(basket) if basket is not None else None


@router.get("/{basket_id}", response_model=BasketResponse)
def get_basket(
    basket_id: str,
    user: Annotated[User, Depends(get_current_user)],
    repo: Annotated[BasketRepository, Depends(get_basket_repository)],
) -> BasketResponse:
    """One of the user's baskets with its stocks.

    Raises:
        HTTPException 404: if the user has no basket with this id
    """
    try:
        basket = repo.get(basket_id, user.email)
    except DataNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from None
    return BasketResponse.from_basket(basket)


@router.post("", response_model=BasketResponse)
def save_basket(
    request: SaveBasketRequest,
    user: Annotated[User, Depends(get_current_user)],
    repo: Annotated[BasketRepository, Depends(get_basket_repository)],
) -> BasketResponse:
    """Create or update a basket.

    Allocations are finalized first (whole points summing to 100, the first
    unlocked stock absorbing rounding), then the stock list is replaced.

    Raises:
        HTTPException 404: updating a basket the user does not own
        HTTPException 409: allocations cannot be reconciled to 100
    """
    basket = request.to_basket()

    # Position-based ids keep duplicate symbols distinct during rebalancing
    entries = []
    for position, stock in enumerate(basket.stocks):
        entry = stock.to_entry()
        entry.id = str(position)
        entries.append(entry)

    try:
        finalized = AllocationRebalancer(entries).finalize_for_save()
    except CannotReconcileAllocationsError as e:
        raise HTTPException(status_code=409, detail=str(e)) from None
    basket.stocks = [BasketStock.from_entry(e) for e in finalized]

    try:
        saved = repo.save(basket, user.email)
    except DataNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from None
    return BasketResponse.from_basket(saved)
