"""Stock price lookups.

Current and historical prices come from a QuoteProvider (yfinance by
default). When the provider fails or has nothing, a deterministic fallback
price is used so the dashboard always renders the same number for the same
symbol and date. Every price served is memoized for the life of the service.
"""

import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from typing import Protocol

import yfinance as yf

from sentiment_api.domain.constants import (
    FALLBACK_PRICE_FLOOR,
    FALLBACK_PRICE_MODULUS,
    HISTORICAL_ADJUSTMENT_OFFSET,
    HISTORICAL_ADJUSTMENT_RANGE,
    KNOWN_FALLBACK_PRICES,
)

logger = logging.getLogger(__name__)


# ============================================================================
# Data models
# ============================================================================


@dataclass
class ProviderQuote:
    """Latest quote as returned by a provider."""

    price: float
    currency: str
    market_state: str


@dataclass
class DailyBar:
    """One day of OHLCV data as returned by a provider."""

    open: float
    high: float
    low: float
    close: float
    volume: int


@dataclass
class PriceQuote:
    """Current price served to clients."""

    symbol: str
    price: float
    currency: str
    market_state: str
    last_updated: str  # ISO format
    source: str  # "cache", "yahoo" or "mock"


@dataclass
class HistoricalPrice:
    """Closing price on a given date served to clients."""

    symbol: str
    date: date
    price: float
    source: str  # "cache", "yahoo" or "mock"
    open: float | None = None
    high: float | None = None
    low: float | None = None
    volume: int | None = None


# ============================================================================
# Providers
# ============================================================================


class QuoteProvider(Protocol):
    """Protocol for fetching market data."""

    def quote(self, symbol: str) -> ProviderQuote | None:
        """Fetch the latest quote, or None if unavailable."""
        ...

    def daily_bar(self, symbol: str, day: date) -> DailyBar | None:
        """Fetch the OHLCV bar for a date, or None if unavailable."""
        ...


class YFinanceQuoteProvider:
    """Quote provider backed by yfinance."""

    def quote(self, symbol: str) -> ProviderQuote | None:
        info = yf.Ticker(symbol).fast_info
        price = info.last_price
        if not price:
            return None
        return ProviderQuote(
            price=float(price),
            currency=info.currency or "USD",
            market_state="REGULAR",
        )

    def daily_bar(self, symbol: str, day: date) -> DailyBar | None:
        history = yf.Ticker(symbol).history(
            start=day.isoformat(),
            end=(day + timedelta(days=1)).isoformat(),
            interval="1d",
        )
        if history is None or history.empty:
            return None
        row = history.iloc[0]
        return DailyBar(
            open=float(row["Open"]),
            high=float(row["High"]),
            low=float(row["Low"]),
            close=float(row["Close"]),
            volume=int(row["Volume"]),
        )


class MockQuoteProvider:
    """Provider that never has data, so every price is the deterministic fallback."""

    def quote(self, symbol: str) -> ProviderQuote | None:
        return None

    def daily_bar(self, symbol: str, day: date) -> DailyBar | None:
        return None


# ============================================================================
# Fallback prices
# ============================================================================


def fallback_price(symbol: str) -> float:
    """Stable stand-in price for a symbol.

    Well-known tickers use a fixed table; anything else is derived from the
    sum of its character codes, landing between $10 and $500.
    """
    if symbol in KNOWN_FALLBACK_PRICES:
        return KNOWN_FALLBACK_PRICES[symbol]
    char_sum = sum(ord(c) for c in symbol)
    return round(float(char_sum % FALLBACK_PRICE_MODULUS + FALLBACK_PRICE_FLOOR), 2)


def fallback_historical_price(symbol: str, day: date) -> float:
    """Stable stand-in closing price for a symbol on a date (base price +/-10%)."""
    base = fallback_price(symbol)
    date_seed = day.day + (day.month - 1) * 31
    adjustment = (date_seed % HISTORICAL_ADJUSTMENT_RANGE - HISTORICAL_ADJUSTMENT_OFFSET) / 100
    return round(base * (1 + adjustment), 2)


# ============================================================================
# Service
# ============================================================================


class PriceService:
    """Memoizing price lookup with deterministic fallback."""

    def __init__(self, provider: QuoteProvider):
        self.provider = provider
        self._current: dict[str, float] = {}
        self._historical: dict[tuple[str, date], float] = {}

    def current(self, symbol: str) -> PriceQuote:
        """Get the current price for a symbol."""
        symbol = symbol.upper()
        now = datetime.now(UTC).isoformat()

        if symbol in self._current:
            return PriceQuote(
                symbol=symbol,
                price=self._current[symbol],
                currency="USD",
                market_state="REGULAR",
                last_updated=now,
                source="cache",
            )

        try:
            quote = self.provider.quote(symbol)
        except Exception as e:
            logger.warning(f"[Prices] Quote lookup failed for {symbol}: {e}")
            quote = None

        if quote is not None:
            self._current[symbol] = quote.price
            return PriceQuote(
                symbol=symbol,
                price=quote.price,
                currency=quote.currency,
                market_state=quote.market_state,
                last_updated=now,
                source="yahoo",
            )

        price = fallback_price(symbol)
        self._current[symbol] = price
        logger.info(f"[Prices] Using fallback price for {symbol}: {price}")
        return PriceQuote(
            symbol=symbol,
            price=price,
            currency="USD",
            market_state="CLOSED",
            last_updated=now,
            source="mock",
        )

    def batch(self, symbols: list[str]) -> dict[str, float]:
        """Get current prices for several symbols as {symbol: price}."""
        logger.info(f"[Prices] Fetching current prices for {len(symbols)} symbols")
        return {quote.symbol: quote.price for quote in map(self.current, symbols)}

    def historical(self, symbol: str, day: date) -> HistoricalPrice:
        """Get the closing price for a symbol on a date."""
        symbol = symbol.upper()
        key = (symbol, day)

        if key in self._historical:
            return HistoricalPrice(
                symbol=symbol, date=day, price=self._historical[key], source="cache"
            )

        try:
            bar = self.provider.daily_bar(symbol, day)
        except Exception as e:
            logger.warning(f"[Prices] Historical lookup failed for {symbol} on {day}: {e}")
            bar = None

        if bar is not None:
            self._historical[key] = bar.close
            return HistoricalPrice(
                symbol=symbol,
                date=day,
                price=bar.close,
                source="yahoo",
                open=bar.open,
                high=bar.high,
                low=bar.low,
                volume=bar.volume,
            )

        price = fallback_historical_price(symbol, day)
        self._historical[key] = price
        logger.info(f"[Prices] Using fallback historical price for {symbol} on {day}: {price}")
        return HistoricalPrice(
            symbol=symbol,
            date=day,
            price=price,
            source="mock",
            open=round(price * 0.99, 2),
            high=round(price * 1.01, 2),
            low=round(price * 0.98, 2),
            volume=1_000_000,
        )


def build_price_service(provider_name: str) -> PriceService:
    """Create a PriceService for the configured provider name."""
    if provider_name == "mock":
        return PriceService(MockQuoteProvider())
    return PriceService(YFinanceQuoteProvider())
