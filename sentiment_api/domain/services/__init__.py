"""Domain services - pure business logic with no I/O.

These services contain the core algorithms and business logic.
They depend only on domain entities and standard library types (pandas for
the equity curve).
"""

from sentiment_api.domain.services.performance import (
    compute_metrics,
    cumulative_pl,
    trade_history,
)
from sentiment_api.domain.services.rebalancer import (
    AllocationListener,
    AllocationRebalancer,
    round_half_up,
)
from sentiment_api.domain.services.reconciler import (
    build_universe,
    latest_by_symbol,
    normalize_sentiment,
)
from sentiment_api.domain.services.source_weighting import (
    composite_sentiment,
    rebalance_source_weights,
)

__all__ = [
    # Allocation
    "AllocationListener",
    "AllocationRebalancer",
    "round_half_up",
    # Signals
    "build_universe",
    "latest_by_symbol",
    "normalize_sentiment",
    # Source weighting
    "composite_sentiment",
    "rebalance_source_weights",
    # Performance
    "compute_metrics",
    "cumulative_pl",
    "trade_history",
]
