"""Logging helpers for the fetcher."""
