"""Signal reconciliation domain service.

Builds the stock universe shown on the performance view: symbols that every
requested source has an opinion on, and on which those opinions agree.
"""

from collections.abc import Iterable, Mapping, Sequence

from sentiment_api.domain.entities.sentiment import (
    SentimentObservation,
    SignalSource,
    UniverseEntry,
)


def normalize_sentiment(sentiment: str) -> str:
    """Case-fold a sentiment label for comparison.

    Labels outside positive/negative/neutral are kept as their own token,
    whitespace included.
    """
    return sentiment.lower()


def latest_by_symbol(
    observations: Iterable[SentimentObservation],
) -> dict[str, SentimentObservation]:
    """Reduce observations to the most recent one per symbol.

    A later observation replaces the kept one only if its date is strictly
    greater, so on equal dates the earlier-seen observation wins.

    Args:
        observations: Rows for a single source, in any order

    Returns:
        Dict mapping symbol -> latest observation
    """
    latest: dict[str, SentimentObservation] = {}
    for obs in observations:
        current = latest.get(obs.symbol)
        if current is None or obs.date > current.date:
            latest[obs.symbol] = obs
    return latest


def build_universe(
    source_tables: Mapping[SignalSource, Sequence[SentimentObservation]],
    requested_sources: Iterable[SignalSource],
) -> list[UniverseEntry]:
    """Filter symbols to those covered by, and agreed on by, every requested source.

    Steps:
    1. Reduce each requested source's table to its latest observation per symbol
    2. Collect every symbol seen in any requested source
    3. Keep a symbol only if all requested sources have it and their
       sentiments match case-insensitively

    A requested source with no table behaves like an empty table.

    Args:
        source_tables: Observation list per source
        requested_sources: Sources that must agree; empty means empty result

    Returns:
        Universe entries sorted by symbol, tagged with the shared sentiment
    """
    # dict.fromkeys dedupes while keeping the caller's order
    sources = list(dict.fromkeys(SignalSource(s) for s in requested_sources))
    if not sources:
        return []

    latest_maps = {
        source: latest_by_symbol(source_tables.get(source, ())) for source in sources
    }

    candidates: set[str] = set()
    for latest in latest_maps.values():
        candidates.update(latest)

    universe: list[UniverseEntry] = []
    for symbol in sorted(candidates):
        if not all(symbol in latest_maps[source] for source in sources):
            continue

        observations = {source: latest_maps[source][symbol] for source in sources}
        sentiments = {normalize_sentiment(obs.sentiment) for obs in observations.values()}
        if len(sentiments) != 1:
            continue

        universe.append(
            UniverseEntry(
                symbol=symbol,
                sentiment=sentiments.pop(),
                observations=observations,
            )
        )

    return universe
