"""Signal endpoints: latest per-source sentiment and the reconciled universe."""

from sentiment_api.routes.signals.endpoints import router
from sentiment_api.routes.signals.models import (
    ObservationResponse,
    SourceSignalsResponse,
    UniverseEntryResponse,
    UniverseResponse,
)

__all__ = [
    "router",
    # Models
    "ObservationResponse",
    "SourceSignalsResponse",
    "UniverseEntryResponse",
    "UniverseResponse",
]
