import asyncio
import contextlib
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shorturl_service.config import settings
from shorturl_service.logging_config import configure_logging
from shorturl_service.api import urls, redirect
from shorturl_service.dependencies import build_store
from shorturl_service.middleware import RequestLoggingMiddleware
from shorturl_service.models.url import utc_now
from shorturl_service.schemas.url import HealthResponse
from shorturl_service.workers import CleanupWorker

logger = configure_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One store per running app; gone when the process exits
    app.state.store = build_store()

    worker = None
    sweeper_task = None
    if settings.cleanup_interval_seconds > 0:
        worker = CleanupWorker(app.state.store, interval_seconds=settings.cleanup_interval_seconds)
        sweeper_task = asyncio.create_task(worker.start())

    logger.info(
        "%s v%s started (environment: %s, base URL: %s)",
        settings.app_name, settings.app_version, settings.environment, settings.base_url
    )
    yield

    if worker is not None:
        worker.stop()
        sweeper_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await sweeper_task
    logger.info("%s shut down", settings.app_name)


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="A URL shortener service with expiring short links and click analytics",
    debug=settings.debug,
    lifespan=lifespan
)

app.add_middleware(RequestLoggingMiddleware)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are client errors: 400 instead of 422"""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())}
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled exception on %s %s: %s", request.method, request.url.path, exc, exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"}
    )


@app.get("/")
def read_root():
    """Root endpoint with API information"""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc"
    }


@app.get("/health", response_model=HealthResponse)
def health_check():
    """Health check endpoint"""
    return HealthResponse(
        status="healthy",
        timestamp=utc_now(),
        service=settings.app_name,
        version=settings.app_version,
        environment=settings.environment
    )




######## Include routers
app.include_router(urls.router)
# Catch-all "/{shortcode}" goes last so fixed paths win
app.include_router(redirect.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=settings.host, port=settings.port, reload=settings.debug)
