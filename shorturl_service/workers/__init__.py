"""Background workers for the URL shortener."""

from .cleanup_worker import CleanupWorker

__all__ = ["CleanupWorker"]
