"""
Domain models for the URL shortener.

Records and their click logs are held in memory by the store; nothing here is
persisted.
"""

from .url import ClickData, ClickEvent, StoreStats, UrlAnalytics, UrlRecord, utc_now

__all__ = [
    "ClickData",
    "ClickEvent",
    "StoreStats",
    "UrlAnalytics",
    "UrlRecord",
    "utc_now",
]
