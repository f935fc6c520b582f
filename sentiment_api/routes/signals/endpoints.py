"""Signal route handlers."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from sentiment_api.domain.entities.sentiment import SignalSource
from sentiment_api.domain.services import build_universe, latest_by_symbol
from sentiment_api.routes.dependencies import get_signal_repository
from sentiment_api.routes.signals.models import (
    ObservationResponse,
    SourceSignalsResponse,
    UniverseEntryResponse,
    UniverseResponse,
)
from sentiment_api.storage import SignalRepository

logger = logging.getLogger(__name__)

router = APIRouter()


# Declared before /{source} so "universe" is not parsed as a source name
@router.get("/universe", response_model=UniverseResponse)
def get_universe(
    repo: Annotated[SignalRepository, Depends(get_signal_repository)],
    sources: Annotated[list[SignalSource] | None, Query()] = None,
) -> UniverseResponse:
    """Symbols covered by every requested source whose sentiments agree.

    Pass sources as repeated query parameters, e.g.
    ``?sources=google&sources=twitter``. No sources means an empty universe.
    """
    requested = list(dict.fromkeys(sources or []))
    tables = {source: repo.list_latest(source) for source in requested}
    universe = build_universe(tables, requested)
    logger.info(
        f"[Signals] Universe for {[s.value for s in requested]}: {len(universe)} symbols"
    )
    return UniverseResponse(
        sources=[s.value for s in requested],
        count=len(universe),
        universe=[UniverseEntryResponse.from_entry(e) for e in universe],
    )


@router.get("/{source}", response_model=SourceSignalsResponse)
def get_source_signals(
    source: SignalSource,
    repo: Annotated[SignalRepository, Depends(get_signal_repository)],
) -> SourceSignalsResponse:
    """Latest observation per symbol for one source."""
    latest = latest_by_symbol(repo.list_latest(source))
    signals = [ObservationResponse.from_observation(latest[s]) for s in sorted(latest)]
    return SourceSignalsResponse(source=source.value, count=len(signals), signals=signals)
