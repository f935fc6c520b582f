"""Sentiment dashboard API: signals, baskets and performance views."""

__version__ = "0.1.0"
