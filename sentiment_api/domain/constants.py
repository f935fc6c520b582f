"""Domain constants for sentiment_api.

This module centralizes the magic numbers used by the allocation and signal
services so the thresholds are named in one place.
"""

# ============================================================================
# Allocation Constants
# ============================================================================

# Every basket's allocations sum to this many percentage points at rest
TOTAL_ALLOCATION = 100.0

# Allocation bounds for a single entry (percentage points)
MIN_ALLOCATION = 0.0
MAX_ALLOCATION = 100.0

# Changes smaller than this are treated as slider noise and ignored
ALLOCATION_CHANGE_EPSILON = 0.001

# Unlocked pools summing to less than this are treated as empty
ALLOCATION_POOL_EPSILON = 0.001


# ============================================================================
# Source Weighting Constants
# ============================================================================

# Source weights are fractions that sum to 1
TOTAL_SOURCE_WEIGHT = 1.0

WEIGHT_CHANGE_EPSILON = 0.001

# Default weights for a new basket
DEFAULT_TWITTER_WEIGHT = 0.4
DEFAULT_GOOGLE_TRENDS_WEIGHT = 0.3
DEFAULT_NEWS_WEIGHT = 0.3


# ============================================================================
# Sentiment Constants
# ============================================================================

SENTIMENT_POSITIVE = "positive"
SENTIMENT_NEGATIVE = "negative"
SENTIMENT_NEUTRAL = "neutral"


# ============================================================================
# Price Fallback Constants
# ============================================================================

# Generated fallback prices land in [10, 500)
FALLBACK_PRICE_MODULUS = 490
FALLBACK_PRICE_FLOOR = 10

# Historical fallback prices move at most +/-10% around the base price
HISTORICAL_ADJUSTMENT_RANGE = 20
HISTORICAL_ADJUSTMENT_OFFSET = 10

# Well-known tickers with fixed fallback prices (USD)
KNOWN_FALLBACK_PRICES = {
    "AAPL": 175.43,
    "MSFT": 325.76,
    "GOOGL": 132.58,
    "AMZN": 145.68,
    "META": 302.55,
    "TSLA": 238.45,
    "NVDA": 437.92,
    "NFLX": 412.34,
    "JPM": 145.23,
    "V": 235.67,
    "GRPN": 26.6,
    "APRN": 75.2,
}


# ============================================================================
# API Limits
# ============================================================================

# Maximum symbols per batch price request
MAX_BATCH_PRICE_SYMBOLS = 100

# Maximum entries per allocation request
MAX_ALLOCATION_ENTRIES = 100


# ============================================================================
# Auth Constants
# ============================================================================

SESSION_COOKIE_NAME = "session_id"
DEFAULT_SESSION_TTL_DAYS = 7

PASSWORD_HASH_METHOD = "pbkdf2:sha256:260000"
PASSWORD_SALT_LENGTH = 16
MIN_PASSWORD_LENGTH = 8


# ============================================================================
# Storage Constants
# ============================================================================

DEFAULT_DB_PATH = "data/sentiment.db"
