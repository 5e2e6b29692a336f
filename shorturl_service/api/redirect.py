from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import RedirectResponse

from shorturl_service.dependencies import get_click_data, get_url_service
from shorturl_service.exceptions import ShortcodeExpiredError, ShortcodeNotFoundError
from shorturl_service.models.url import ClickData
from shorturl_service.services.url_service import URLService

router = APIRouter(tags=["redirect"])


@router.get("/{shortcode}")
async def redirect_to_original_url(
    shortcode: str,
    click: ClickData = Depends(get_click_data),
    url_service: URLService = Depends(get_url_service)
):
    """
    Redirect to the original URL and record the click.

    410 tells the caller the short URL existed but has lapsed; once it has
    been evicted, later requests get 404 like any unknown shortcode.
    """
    try:
        original_url = await url_service.resolve_redirect(shortcode, click)
    except ShortcodeExpiredError:
        raise HTTPException(
            status_code=status.HTTP_410_GONE,
            detail="Short URL has expired"
        )
    except ShortcodeNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Short URL not found"
        )

    return RedirectResponse(url=original_url, status_code=status.HTTP_302_FOUND)
