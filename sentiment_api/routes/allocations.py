"""Basket allocation endpoints.

These endpoints are stateless: each request carries the full entry set, the
rebalancer is applied, and the new entry set is returned. The dashboard
keeps the state between calls.
"""

import logging

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field, field_validator

from sentiment_api.domain.constants import MAX_ALLOCATION_ENTRIES
from sentiment_api.domain.entities.allocation import AllocationEntry, SourceWeights
from sentiment_api.domain.exceptions import (
    CannotReconcileAllocationsError,
    DataValidationError,
)
from sentiment_api.domain.services import (
    AllocationRebalancer,
    composite_sentiment,
    rebalance_source_weights,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# Request / Response models
# ============================================================================


class AllocationEntryModel(BaseModel):
    """One stock's share of the basket, in percentage points."""

    id: str = Field(..., min_length=1)
    symbol: str = Field(..., min_length=1)
    allocation: float = 0.0
    locked: bool = False
    name: str | None = None
    sector: str | None = None

    def to_entry(self) -> AllocationEntry:
        return AllocationEntry.from_dict(self.model_dump())

    @classmethod
    def from_entry(cls, entry: AllocationEntry) -> "AllocationEntryModel":
        return cls(**entry.to_dict())


class AllocationEntryInput(AllocationEntryModel):
    """An entry as sent by the client; allocations must lie in 0-100."""

    allocation: float = Field(0.0, ge=0, le=100)


def _require_unique_ids(entries: list[AllocationEntryInput]) -> list[AllocationEntryInput]:
    ids = [e.id for e in entries]
    duplicates = sorted({i for i in ids if ids.count(i) > 1})
    if duplicates:
        raise ValueError(f"duplicate entry ids: {', '.join(duplicates)}")
    return entries


class EntriesRequest(BaseModel):
    """The basket's current entries."""

    entries: list[AllocationEntryInput] = Field(..., max_length=MAX_ALLOCATION_ENTRIES)

    @field_validator("entries")
    @classmethod
    def unique_entry_ids(
        cls, entries: list[AllocationEntryInput]
    ) -> list[AllocationEntryInput]:
        return _require_unique_ids(entries)


class SetAllocationRequest(EntriesRequest):
    """Move one entry to a new allocation."""

    entry_id: str = Field(..., description="Id of the entry being moved")
    value: float = Field(..., description="Requested allocation (clamped to 0-100)")


class ToggleLockRequest(EntriesRequest):
    entry_id: str


class SelectionRequest(EntriesRequest):
    """Replace the selection; entries already present keep their allocation."""

    selection: list[AllocationEntryInput] = Field(..., max_length=MAX_ALLOCATION_ENTRIES)

    @field_validator("selection")
    @classmethod
    def unique_selection_ids(
        cls, selection: list[AllocationEntryInput]
    ) -> list[AllocationEntryInput]:
        return _require_unique_ids(selection)


class AllocationsResponse(BaseModel):
    entries: list[AllocationEntryModel]
    total_allocation: float


class SourceWeightsModel(BaseModel):
    twitter: float = Field(..., ge=0, le=1)
    google_trends: float = Field(..., ge=0, le=1)
    news: float = Field(..., ge=0, le=1)


class WeightsRequest(BaseModel):
    """Move one source's weight; the other two rescale."""

    weights: SourceWeightsModel
    source: str = Field(..., description="twitter, google_trends or news")
    value: float = Field(..., description="Requested weight (clamped to 0-1)")


class CompositeRequest(BaseModel):
    """Per-source sentiment scores to blend with the current weights."""

    weights: SourceWeightsModel
    twitter: float = Field(..., ge=-1, le=1)
    google_trends: float = Field(..., ge=-1, le=1)
    news: float = Field(..., ge=-1, le=1)


class CompositeResponse(BaseModel):
    composite_sentiment: float


# ============================================================================
# Helpers
# ============================================================================


def _rebalancer(request: EntriesRequest) -> AllocationRebalancer:
    return AllocationRebalancer(e.to_entry() for e in request.entries)


def _response(entries: list[AllocationEntry]) -> AllocationsResponse:
    return AllocationsResponse(
        entries=[AllocationEntryModel.from_entry(e) for e in entries],
        total_allocation=sum(e.allocation for e in entries),
    )


# ============================================================================
# Endpoints
# ============================================================================


@router.post("/set", response_model=AllocationsResponse)
def set_allocation(request: SetAllocationRequest) -> AllocationsResponse:
    """Move one entry and redistribute the difference over unlocked peers.

    Unknown ids, tiny moves, and moves with no unlocked peer leave the
    entries unchanged.
    """
    return _response(_rebalancer(request).set_allocation(request.entry_id, request.value))


@router.post("/reset", response_model=AllocationsResponse)
def reset_allocations(request: EntriesRequest) -> AllocationsResponse:
    """Split what locked entries leave equally across unlocked entries."""
    return _response(_rebalancer(request).reset_to_equal())


@router.post("/toggle-lock", response_model=AllocationsResponse)
def toggle_lock(request: ToggleLockRequest) -> AllocationsResponse:
    """Flip one entry's lock."""
    return _response(_rebalancer(request).toggle_lock(request.entry_id))


@router.post("/select", response_model=AllocationsResponse)
def apply_selection(request: SelectionRequest) -> AllocationsResponse:
    """Replace the selected stocks, keeping continuing stocks' allocations."""
    rebalancer = _rebalancer(request)
    return _response(rebalancer.apply_selection(e.to_entry() for e in request.selection))


@router.post("/finalize", response_model=AllocationsResponse)
def finalize_allocations(request: EntriesRequest) -> AllocationsResponse:
    """Round to whole points summing to exactly 100, as done before saving.

    Raises:
        HTTPException 409: if every entry is locked and the rounded total is not 100
    """
    try:
        return _response(_rebalancer(request).finalize_for_save())
    except CannotReconcileAllocationsError as e:
        logger.info(f"[Allocations] Finalize rejected: {e}")
        raise HTTPException(status_code=409, detail=str(e)) from None


@router.post("/weights", response_model=SourceWeightsModel)
def rebalance_weights(request: WeightsRequest) -> SourceWeightsModel:
    """Set one source weight and rescale the others so the total stays 1.

    Raises:
        HTTPException 400: if the source is not a weight key
    """
    try:
        weights = rebalance_source_weights(
            SourceWeights.from_dict(request.weights.model_dump()),
            request.source,
            request.value,
        )
    except DataValidationError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None
    return SourceWeightsModel(**weights.to_dict())


@router.post("/composite", response_model=CompositeResponse)
def blend_sentiment(request: CompositeRequest) -> CompositeResponse:
    """Weighted composite of the three per-source sentiment scores."""
    weights = SourceWeights.from_dict(request.weights.model_dump())
    return CompositeResponse(
        composite_sentiment=composite_sentiment(
            request.twitter, request.google_trends, request.news, weights
        )
    )
