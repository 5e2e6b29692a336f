"""Logging configuration for the URL shortener."""

import logging
import sys


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Configure root logging to stdout and return the service logger.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        The "shorturl_service" logger
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=numeric_level,
        format='%(asctime)s | %(levelname)s | %(name)s | %(funcName)s:%(lineno)d | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        handlers=[
            logging.StreamHandler(sys.stdout)
        ],
        force=True,
    )

    logging.getLogger("uvicorn.error").propagate = True
    # Requests are logged by RequestLoggingMiddleware
    logging.getLogger("uvicorn.access").disabled = True

    return logging.getLogger("shorturl_service")
