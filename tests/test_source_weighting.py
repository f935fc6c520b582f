"""Unit tests for the source weighting domain service."""

import pytest

from sentiment_api.domain.entities.allocation import SourceWeights
from sentiment_api.domain.exceptions import DataValidationError
from sentiment_api.domain.services.source_weighting import (
    composite_sentiment,
    rebalance_source_weights,
)


def _total(weights: SourceWeights) -> float:
    return weights.twitter + weights.google_trends + weights.news


class TestRebalanceSourceWeights:
    def test_others_keep_their_proportions(self):
        weights = SourceWeights(twitter=0.4, google_trends=0.3, news=0.3)
        result = rebalance_source_weights(weights, "twitter", 0.6)

        assert result.twitter == pytest.approx(0.6)
        assert result.google_trends == pytest.approx(0.2)
        assert result.news == pytest.approx(0.2)
        assert _total(result) == pytest.approx(1.0)

    def test_zero_others_split_evenly(self):
        weights = SourceWeights(twitter=1.0, google_trends=0.0, news=0.0)
        result = rebalance_source_weights(weights, "twitter", 0.5)

        assert result.google_trends == pytest.approx(0.25)
        assert result.news == pytest.approx(0.25)

    def test_value_clamped(self):
        weights = SourceWeights(twitter=0.4, google_trends=0.3, news=0.3)
        result = rebalance_source_weights(weights, "news", 2.0)

        assert result.news == pytest.approx(1.0)
        assert result.twitter == pytest.approx(0.0)
        assert result.google_trends == pytest.approx(0.0)

    def test_tiny_change_returns_input(self):
        weights = SourceWeights(twitter=0.4, google_trends=0.3, news=0.3)

        assert rebalance_source_weights(weights, "news", 0.3000001) is weights

    def test_unknown_source_raises(self):
        weights = SourceWeights(twitter=0.4, google_trends=0.3, news=0.3)

        with pytest.raises(DataValidationError):
            rebalance_source_weights(weights, "reddit", 0.5)


class TestCompositeSentiment:
    def test_weighted_sum_rounded(self):
        weights = SourceWeights(twitter=0.4, google_trends=0.3, news=0.3)

        assert composite_sentiment(0.5, 0.2, -0.1, weights) == pytest.approx(0.23)
