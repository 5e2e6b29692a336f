from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, computed_field
from pydantic.alias_generators import to_camel

from shorturl_service.config import settings


class CamelModel(BaseModel):
    """Response base: snake_case attributes, camelCase JSON keys

    from_attributes=True lets responses be built straight from domain models.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class URLCreate(BaseModel):
    url: str = Field(..., description="The original URL to be shortened")
    # Strict: "30" and true are not minutes
    validity: Optional[StrictInt] = Field(
        None,
        description="Minutes until the short URL expires (1-10080, default 30)"
    )
    shortcode: Optional[str] = Field(
        None,
        description="Custom shortcode, 3-20 alphanumeric characters"
    )


class URLResponse(CamelModel):
    shortcode: str
    original_url: str
    expires_at: datetime
    created_at: datetime

    @computed_field(alias="shortUrl")
    @property
    def short_url(self) -> str:
        """Computed field - automatically generated from shortcode"""
        return f"{settings.base_url}/{self.shortcode}"


class ClickResponse(CamelModel):
    timestamp: datetime
    user_agent: str
    ip: str
    referer: str


class AnalyticsResponse(CamelModel):
    shortcode: str
    original_url: str
    created_at: datetime
    expires_at: datetime
    click_count: int
    unique_clicker_count: int
    clicks: List[ClickResponse]


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    service: str
    version: str
    environment: str
