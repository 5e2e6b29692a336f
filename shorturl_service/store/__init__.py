"""
Store module for short URL records.
Implements Strategy Pattern so the service layer only sees ShortURLStore.
"""

from .strategies import InMemoryShortURLStore, Lookup, LookupStatus, ShortURLStore

__all__ = [
    "ShortURLStore",
    "InMemoryShortURLStore",
    "Lookup",
    "LookupStatus",
]
