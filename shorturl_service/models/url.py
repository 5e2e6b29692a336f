"""
Domain models for short URLs and their click logs.

These live only in memory; there is no ORM behind them. Each UrlRecord owns
its clicks, and click events have no lifecycle of their own.
"""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime"""
    return datetime.now(timezone.utc)


class ClickData(BaseModel):
    """Request metadata supplied by the caller when a short URL is followed"""

    ip: Optional[str] = Field(None, description="Client IP address")
    user_agent: Optional[str] = Field(None, description="User agent string")
    referer: Optional[str] = Field(None, description="HTTP referer")


class ClickEvent(BaseModel):
    """
    One recorded redirect.

    Missing request metadata is stored as an empty string.
    """

    timestamp: datetime = Field(..., description="When the click happened")
    user_agent: str = Field("", description="User agent string")
    ip: str = Field("", description="Client IP address")
    referer: str = Field("", description="HTTP referer")

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "timestamp": "2025-10-29T10:30:00Z",
                "user_agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) Chrome/120.0",
                "ip": "192.168.1.1",
                "referer": "https://twitter.com",
            }
        },
    )


class UrlRecord(BaseModel):
    """
    A shortcode mapped to its original URL.

    Everything except the click log is fixed at creation. click_count always
    equals len(clicks); it is kept alongside the list so reads stay O(1).
    """

    shortcode: str
    original_url: str
    created_at: datetime
    expires_at: datetime
    clicks: List[ClickEvent] = Field(default_factory=list)
    click_count: int = 0

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    def snapshot(self) -> "UrlRecord":
        """Copy that shares the (frozen) click events but not the list"""
        return self.model_copy(update={"clicks": list(self.clicks)})


class UrlAnalytics(BaseModel):
    """Click analytics for one live short URL"""

    shortcode: str
    original_url: str
    created_at: datetime
    expires_at: datetime
    click_count: int
    # Distinct client IPs; clients sharing an IP count once
    unique_clicker_count: int
    clicks: List[ClickEvent]


class StoreStats(BaseModel):
    """Totals over every record currently held by a store"""

    total_urls: int
    total_clicks: int
