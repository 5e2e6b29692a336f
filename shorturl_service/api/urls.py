import logging

from fastapi import APIRouter, Depends, HTTPException, status

from shorturl_service.dependencies import get_url_service
from shorturl_service.exceptions import (
    InvalidInputError,
    ShortcodeAlreadyExistsError,
    ShortcodeExhaustedError,
)
from shorturl_service.schemas.url import AnalyticsResponse, URLCreate, URLResponse
from shorturl_service.services.url_service import URLService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/shorturls", tags=["shorturls"])


@router.post("", response_model=URLResponse, status_code=status.HTTP_201_CREATED)
async def create_short_url(
    url_data: URLCreate,
    url_service: URLService = Depends(get_url_service)
):
    """Create a new short URL with an optional custom shortcode and validity"""
    try:
        record = await url_service.create_short_url(
            url_data.url,
            validity=url_data.validity,
            shortcode=url_data.shortcode
        )
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ShortcodeAlreadyExistsError as e:
        logger.info("Custom shortcode conflict: %s", e)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ShortcodeExhaustedError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create short URL"
        )
    return URLResponse.model_validate(record)


@router.get("/{shortcode}/analytics", response_model=AnalyticsResponse)
async def get_url_analytics(
    shortcode: str,
    url_service: URLService = Depends(get_url_service)
):
    """Get click analytics for a short URL (expired URLs are not found)"""
    analytics = await url_service.get_url_analytics(shortcode)
    if not analytics:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Short URL not found"
        )
    return AnalyticsResponse.model_validate(analytics)
