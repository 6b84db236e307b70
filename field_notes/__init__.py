"""Offline-first note store with a sync engine for a remote notes API."""
__version__ = "1.0.0"
