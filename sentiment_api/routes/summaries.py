"""Signal summary endpoints (aggregate win-rate statistics per signal type)."""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from sentiment_api.domain.entities.sentiment import SignalSummary
from sentiment_api.routes.dependencies import get_summary_repository
from sentiment_api.storage import SummaryRepository

router = APIRouter()


class SummaryRequest(BaseModel):
    """Request model for upserting a signal summary."""

    signal_type: str = Field(..., min_length=1, description="e.g. twitter, google, news")
    total_signals: int = Field(..., ge=0)
    positive_ratio: float = Field(..., ge=0, le=1)
    win_rate_percent: float = Field(..., ge=0, le=100)
    positive_signals: int = Field(..., ge=0)
    negative_signals: int = Field(..., ge=0)


class SummaryResponse(SummaryRequest):
    """A stored signal summary."""

    last_updated_at: str | None = None


@router.get("", response_model=list[SummaryResponse])
def list_summaries(
    repo: Annotated[SummaryRepository, Depends(get_summary_repository)],
) -> list[SummaryResponse]:
    """All stored summaries, ordered by signal type."""
    return [SummaryResponse(**s.to_dict()) for s in repo.list_all()]


@router.post("", response_model=SummaryResponse)
def upsert_summary(
    request: SummaryRequest,
    repo: Annotated[SummaryRepository, Depends(get_summary_repository)],
) -> SummaryResponse:
    """Insert or replace the summary for ``signal_type``."""
    stored = repo.upsert(SignalSummary(**request.model_dump()))
    return SummaryResponse(**stored.to_dict())
