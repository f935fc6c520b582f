"""Source weighting domain service.

Pure functions for adjusting how much each sentiment source contributes to a
basket's composite sentiment.
"""

from sentiment_api.domain.constants import TOTAL_SOURCE_WEIGHT, WEIGHT_CHANGE_EPSILON
from sentiment_api.domain.entities.allocation import SourceWeights
from sentiment_api.domain.exceptions import DataValidationError

WEIGHT_KEYS = ("twitter", "google_trends", "news")


def rebalance_source_weights(
    weights: SourceWeights,
    source: str,
    new_value: float,
) -> SourceWeights:
    """Set one source's weight and rescale the others so the total stays 1.

    The other sources keep their proportions. If they currently sum to
    (almost) zero they split the remainder evenly.

    Args:
        weights: Current weights
        source: One of "twitter", "google_trends", "news"
        new_value: Requested weight, clamped to [0, 1]

    Returns:
        New SourceWeights summing to 1 (or the input unchanged for tiny moves)

    Raises:
        DataValidationError: if source is not a known weight key
    """
    if source not in WEIGHT_KEYS:
        raise DataValidationError(
            f"Unknown source {source!r}, expected one of {WEIGHT_KEYS}",
            field="source",
            value=source,
        )

    current = weights.to_dict()
    new_value = max(0.0, min(TOTAL_SOURCE_WEIGHT, float(new_value)))
    delta = new_value - current[source]
    if abs(delta) < WEIGHT_CHANGE_EPSILON:
        return weights

    updated = dict(current)
    updated[source] = new_value
    others = [key for key in WEIGHT_KEYS if key != source]
    other_sum = sum(current[key] for key in others)

    if other_sum <= WEIGHT_CHANGE_EPSILON:
        even_share = max(0.0, TOTAL_SOURCE_WEIGHT - new_value) / len(others)
        for key in others:
            updated[key] = even_share
    else:
        factor = (other_sum - delta) / other_sum
        for key in others:
            updated[key] = max(0.0, current[key] * factor)

    total = sum(updated.values())
    if total > 0:
        for key in WEIGHT_KEYS:
            updated[key] /= total

    return SourceWeights.from_dict(updated)


def composite_sentiment(
    twitter: float,
    google_trends: float,
    news: float,
    weights: SourceWeights,
) -> float:
    """Weighted sum of per-source sentiment scores, rounded to 2 decimals."""
    value = (
        twitter * weights.twitter
        + google_trends * weights.google_trends
        + news * weights.news
    )
    return round(value, 2)
