"""Unit tests for the signal reconciler domain service."""

from datetime import date

from sentiment_api.domain.entities.sentiment import SentimentObservation, SignalSource
from sentiment_api.domain.services.reconciler import (
    build_universe,
    latest_by_symbol,
    normalize_sentiment,
)

GOOGLE = SignalSource.GOOGLE
TWITTER = SignalSource.TWITTER
NEWS = SignalSource.NEWS


def _obs(symbol, source, day, sentiment, price=100.0) -> SentimentObservation:
    return SentimentObservation(
        symbol=symbol,
        source=source,
        date=date.fromisoformat(day),
        sentiment=sentiment,
        entry_price=price,
    )


class TestNormalizeSentiment:
    def test_case_folded(self):
        assert normalize_sentiment("POSITIVE") == "positive"

    def test_whitespace_kept(self):
        assert normalize_sentiment(" Positive ") == " positive "

    def test_unknown_labels_kept_as_tokens(self):
        assert normalize_sentiment("Mixed") == "mixed"


class TestLatestBySymbol:
    def test_keeps_most_recent(self):
        rows = [
            _obs("AAPL", GOOGLE, "2024-01-01", "negative"),
            _obs("AAPL", GOOGLE, "2024-01-03", "positive"),
            _obs("AAPL", GOOGLE, "2024-01-02", "neutral"),
        ]
        latest = latest_by_symbol(rows)

        assert latest["AAPL"].sentiment == "positive"

    def test_equal_dates_keep_earlier_seen(self):
        rows = [
            _obs("AAPL", GOOGLE, "2024-01-03", "positive", price=1.0),
            _obs("AAPL", GOOGLE, "2024-01-03", "negative", price=2.0),
        ]
        latest = latest_by_symbol(rows)

        assert latest["AAPL"].entry_price == 1.0


class TestBuildUniverse:
    """Tests for build_universe."""

    def test_disagreement_excluded(self):
        tables = {
            GOOGLE: [_obs("AAPL", GOOGLE, "2024-01-01", "positive")],
            TWITTER: [_obs("AAPL", TWITTER, "2024-01-01", "negative")],
        }
        assert build_universe(tables, [GOOGLE, TWITTER]) == []

    def test_agreement_included_and_tagged(self):
        tables = {
            GOOGLE: [_obs("AAPL", GOOGLE, "2024-01-01", "positive")],
            TWITTER: [_obs("AAPL", TWITTER, "2024-01-02", "Positive")],
        }
        universe = build_universe(tables, [GOOGLE, TWITTER])

        assert [e.symbol for e in universe] == ["AAPL"]
        assert universe[0].sentiment == "positive"
        assert set(universe[0].observations) == {GOOGLE, TWITTER}

    def test_trailing_whitespace_is_a_different_label(self):
        tables = {
            GOOGLE: [_obs("AAPL", GOOGLE, "2024-01-01", "positive")],
            TWITTER: [_obs("AAPL", TWITTER, "2024-01-01", "positive ")],
        }

        assert build_universe(tables, [GOOGLE, TWITTER]) == []

    def test_empty_request_returns_empty(self):
        tables = {GOOGLE: [_obs("AAPL", GOOGLE, "2024-01-01", "positive")]}

        assert build_universe(tables, []) == []

    def test_symbol_missing_from_a_source_excluded(self):
        tables = {
            GOOGLE: [
                _obs("AAPL", GOOGLE, "2024-01-01", "positive"),
                _obs("MSFT", GOOGLE, "2024-01-01", "positive"),
            ],
            NEWS: [_obs("AAPL", NEWS, "2024-01-01", "positive")],
        }
        universe = build_universe(tables, [GOOGLE, NEWS])

        assert [e.symbol for e in universe] == ["AAPL"]

    def test_only_latest_observation_counts(self):
        tables = {
            GOOGLE: [
                _obs("AAPL", GOOGLE, "2024-01-01", "negative"),
                _obs("AAPL", GOOGLE, "2024-02-01", "positive"),
            ],
            TWITTER: [_obs("AAPL", TWITTER, "2024-01-15", "positive")],
        }
        universe = build_universe(tables, [GOOGLE, TWITTER])

        assert len(universe) == 1
        assert universe[0].observations[GOOGLE].date == date(2024, 2, 1)

    def test_unrequested_source_ignored(self):
        tables = {
            GOOGLE: [_obs("AAPL", GOOGLE, "2024-01-01", "positive")],
            TWITTER: [_obs("AAPL", TWITTER, "2024-01-01", "negative")],
        }
        universe = build_universe(tables, [GOOGLE])

        assert [e.symbol for e in universe] == ["AAPL"]
        assert set(universe[0].observations) == {GOOGLE}

    def test_missing_table_treated_as_empty(self):
        tables = {GOOGLE: [_obs("AAPL", GOOGLE, "2024-01-01", "positive")]}

        assert build_universe(tables, [GOOGLE, TWITTER]) == []

    def test_sorted_by_symbol(self):
        symbols = ["TSLA", "AAPL", "MSFT"]
        tables = {
            GOOGLE: [_obs(s, GOOGLE, "2024-01-01", "neutral") for s in symbols],
            NEWS: [_obs(s, NEWS, "2024-01-01", "NEUTRAL") for s in reversed(symbols)],
        }
        universe = build_universe(tables, [NEWS, GOOGLE])

        assert [e.symbol for e in universe] == ["AAPL", "MSFT", "TSLA"]

    def test_unknown_sentiment_matches_only_itself(self):
        tables = {
            GOOGLE: [
                _obs("AAPL", GOOGLE, "2024-01-01", "Mixed"),
                _obs("MSFT", GOOGLE, "2024-01-01", "Mixed"),
            ],
            TWITTER: [
                _obs("AAPL", TWITTER, "2024-01-01", "mixed"),
                _obs("MSFT", TWITTER, "2024-01-01", "neutral"),
            ],
        }
        universe = build_universe(tables, [GOOGLE, TWITTER])

        assert [(e.symbol, e.sentiment) for e in universe] == [("AAPL", "mixed")]

    def test_duplicate_requested_sources_deduped(self):
        tables = {GOOGLE: [_obs("AAPL", GOOGLE, "2024-01-01", "positive")]}
        universe = build_universe(tables, [GOOGLE, GOOGLE])

        assert [e.symbol for e in universe] == ["AAPL"]

    def test_all_three_sources(self):
        tables = {
            GOOGLE: [_obs("AAPL", GOOGLE, "2024-01-01", "positive")],
            TWITTER: [_obs("AAPL", TWITTER, "2024-01-01", "positive")],
            NEWS: [_obs("AAPL", NEWS, "2024-01-01", "negative")],
        }

        assert build_universe(tables, [GOOGLE, TWITTER]) != []
        assert build_universe(tables, [GOOGLE, TWITTER, NEWS]) == []
