import logging
from datetime import timedelta
from typing import Annotated, Optional

from pydantic import AnyUrl, TypeAdapter, UrlConstraints, ValidationError

from shorturl_service.config import settings
from shorturl_service.exceptions import (
    InvalidURLError,
    InvalidValidityError,
    ShortcodeExpiredError,
    ShortcodeNotFoundError,
)
from shorturl_service.models.url import ClickData, UrlAnalytics, UrlRecord
from shorturl_service.services.shortcode_allocator import ShortcodeAllocator
from shorturl_service.store.strategies import LookupStatus, ShortURLStore

logger = logging.getLogger(__name__)

# Absolute http/https URLs, no length cap
WebUrl = Annotated[AnyUrl, UrlConstraints(allowed_schemes=["http", "https"], host_required=True)]

_http_url_adapter = TypeAdapter(WebUrl)


class URLService:
    """
    URL Service with dependency injection for the store and allocator.

    This follows the Dependency Injection pattern:
    - The store is created once at startup and passed in (never a global)
    - The allocator shares the same store, so both agree on liveness
    - Easy to test (inject a store with a fake clock)

    Methods are async for interface consistency with the routers; the store
    itself never awaits.
    """

    def __init__(
        self,
        store: ShortURLStore,
        allocator: ShortcodeAllocator,
        default_validity: int = settings.default_validity_minutes,
        max_validity: int = settings.max_validity_minutes
    ):
        """
        Initialize URL service with dependencies.

        Args:
            store: Short URL store (single source of truth)
            allocator: Shortcode allocator bound to the same store
            default_validity: Minutes a URL stays live when no validity is given
            max_validity: Largest accepted validity in minutes
        """
        self.store = store
        self.allocator = allocator
        self.default_validity = default_validity
        self.max_validity = max_validity

    @staticmethod
    def normalize_url(url: str) -> str:
        """
        Validate and normalize an absolute http/https URL.

        Raises:
            InvalidURLError: If the URL is empty, malformed or uses another scheme
        """
        if not isinstance(url, str) or not url.strip():
            raise InvalidURLError("URL is required")
        try:
            return str(_http_url_adapter.validate_python(url.strip()))
        except ValidationError:
            raise InvalidURLError("Invalid URL format: only absolute HTTP and HTTPS URLs are allowed") from None

    def validate_validity(self, validity: Optional[int]) -> int:
        """
        Resolve the validity window in minutes.

        Raises:
            InvalidValidityError: Unless validity is a whole number in [1, max_validity]
        """
        if validity is None:
            return self.default_validity
        # bool is an int subclass; reject it explicitly
        if isinstance(validity, bool) or not isinstance(validity, int):
            raise InvalidValidityError("Validity must be a whole number of minutes")
        if validity < 1 or validity > self.max_validity:
            raise InvalidValidityError(
                f"Validity must be a positive number (in minutes) and not exceed "
                f"{self.max_validity} minutes"
            )
        return validity

    async def create_short_url(
        self,
        url: str,
        validity: Optional[int] = None,
        shortcode: Optional[str] = None
    ) -> UrlRecord:
        """Create a new short URL

        An empty custom shortcode is treated the same as none at all.

        Raises:
            InvalidURLError, InvalidValidityError, InvalidShortcodeError:
                Input is not acceptable
            ShortcodeAlreadyExistsError: The custom shortcode is live
            ShortcodeExhaustedError: No free random shortcode was found
        """
        normalized_url = self.normalize_url(url)
        minutes = self.validate_validity(validity)
        expires_at = self.store.now() + timedelta(minutes=minutes)

        record = self.allocator.allocate(normalized_url, expires_at, custom_code=shortcode or None)

        logger.info(
            "Short URL created: '%s' -> %s (expires %s, custom=%s)",
            record.shortcode, record.original_url, record.expires_at.isoformat(), bool(shortcode)
        )
        return record

    async def get_url_by_shortcode(self, shortcode: str) -> Optional[UrlRecord]:
        """Get the live record for a shortcode, or None"""
        return self.store.find_by_shortcode(shortcode)

    async def resolve_redirect(self, shortcode: str, click: ClickData) -> str:
        """
        Get the redirect target for a shortcode and record the click.

        Raises:
            ShortcodeExpiredError: The record lapsed (evicted by this request)
            ShortcodeNotFoundError: The shortcode is unknown
        """
        found = self.store.lookup(shortcode)

        if found.status is LookupStatus.EXPIRED:
            logger.info("Redirect requested for expired shortcode '%s'", shortcode)
            raise ShortcodeExpiredError(f"Short URL '{shortcode}' has expired")
        if found.record is None:
            logger.info("Redirect requested for unknown shortcode '%s'", shortcode)
            raise ShortcodeNotFoundError(f"Short URL '{shortcode}' not found")

        # The record may lapse between the lookup and the click
        if not self.store.add_click(shortcode, click):
            logger.info("Shortcode '%s' expired before the click was recorded", shortcode)
            raise ShortcodeExpiredError(f"Short URL '{shortcode}' has expired")

        logger.debug("Click recorded for '%s' from ip=%s", shortcode, click.ip)
        return found.record.original_url

    async def get_url_analytics(self, shortcode: str) -> Optional[UrlAnalytics]:
        """Get click analytics for a live shortcode, or None"""
        return self.store.get_analytics(shortcode)
