"""
FastAPI dependencies for dependency injection.

The store is created once by the application lifespan and kept on
app.state; everything else is built per request around that one instance.

Pattern: Dependency Injection
- Loose coupling between components
- Easy to test (override get_store with a store on a fake clock)
"""

from fastapi import Depends, Request

from shorturl_service.config import settings
from shorturl_service.models.url import ClickData
from shorturl_service.services.short_code_factory import ShortCodeFactory
from shorturl_service.services.shortcode_allocator import ShortcodeAllocator
from shorturl_service.services.url_service import URLService
from shorturl_service.store.strategies import InMemoryShortURLStore, ShortURLStore


def build_store() -> ShortURLStore:
    """Create the process-wide store from settings (called by the lifespan)"""
    return InMemoryShortURLStore(shards=settings.store_shards)


def get_store(request: Request) -> ShortURLStore:
    """Get the store owned by the running application"""
    return request.app.state.store


def get_allocator(store: ShortURLStore = Depends(get_store)) -> ShortcodeAllocator:
    """Get an allocator bound to the application store and configured strategy"""
    return ShortcodeAllocator(
        store=store,
        strategy=ShortCodeFactory.create_strategy(),
        max_attempts=settings.max_retries
    )


def get_url_service(
    store: ShortURLStore = Depends(get_store),
    allocator: ShortcodeAllocator = Depends(get_allocator)
) -> URLService:
    """
    Get URLService with all dependencies injected.

    Controllers depend on the service only; the service depends on the store
    and allocator.
    """
    return URLService(store=store, allocator=allocator)


def get_client_ip(request: Request) -> str:
    """First X-Forwarded-For hop if present, else the peer address, else empty"""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return request.client.host if request.client else ""


def get_click_data(request: Request) -> ClickData:
    """Collect click metadata from the incoming redirect request"""
    return ClickData(
        ip=get_client_ip(request),
        user_agent=request.headers.get("user-agent"),
        referer=request.headers.get("referer"),
    )
