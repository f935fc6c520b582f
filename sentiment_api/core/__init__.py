"""Configuration, prices and security helpers."""
