"""
Shortcode allocation: custom code validation and collision-checked random
generation against a ShortURLStore.
"""

import logging
import re
from datetime import datetime
from typing import Iterator, Optional

from shorturl_service.exceptions import (
    InvalidShortcodeError,
    ShortcodeAlreadyExistsError,
    ShortcodeExhaustedError,
)
from shorturl_service.models.url import UrlRecord
from shorturl_service.services.short_code_strategies import ShortCodeStrategy
from shorturl_service.store.strategies import ShortURLStore

logger = logging.getLogger(__name__)

SHORTCODE_PATTERN = re.compile(r"[a-zA-Z0-9]{3,20}")


class ShortcodeAllocator:
    """
    Assigns shortcodes to new records.

    Custom codes are only format-checked here; whether they are free is
    decided by store.create(), so there is no window between the check and
    the insert. Random codes are drawn from a strategy and probed against the
    store, with at most max_attempts draws per allocation.
    """

    def __init__(self, store: ShortURLStore, strategy: ShortCodeStrategy, max_attempts: int = 10):
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1 (given value: {max_attempts})")
        self.store = store
        self.strategy = strategy
        self.max_attempts = max_attempts

    @staticmethod
    def validate_custom(code: str) -> None:
        """
        Check the format of a caller-supplied shortcode.

        Raises:
            InvalidShortcodeError: Unless code is 3-20 alphanumeric characters
        """
        if not isinstance(code, str) or not SHORTCODE_PATTERN.fullmatch(code):
            raise InvalidShortcodeError(
                "Custom shortcode must be alphanumeric and between 3-20 characters"
            )

    def _free_candidates(self, max_attempts: int) -> Iterator[str]:
        # One draw per attempt; yields only codes absent from the store
        for attempt in range(1, max_attempts + 1):
            code = self.strategy.generate()
            if self.store.find_by_shortcode(code) is None:
                logger.debug("Generated shortcode '%s' after %d attempt(s)", code, attempt)
                yield code
                continue
            logger.warning(
                "Shortcode collision detected: '%s' (attempt %d of %d)", code, attempt, max_attempts
            )

    @staticmethod
    def _exhausted(max_attempts: int) -> ShortcodeExhaustedError:
        logger.error(
            "Failed to generate unique shortcode after %d attempts; "
            "keyspace may be exhausted or the random source faulty",
            max_attempts,
        )
        return ShortcodeExhaustedError(
            f"Unable to generate unique shortcode after {max_attempts} attempts"
        )

    def generate_unique(self, max_attempts: Optional[int] = None) -> str:
        """
        Generate a random shortcode not currently live in the store.

        Args:
            max_attempts: Draw budget, defaults to the allocator's

        Raises:
            ShortcodeExhaustedError: If every draw collided
            ValueError: If max_attempts is below 1
        """
        attempts = self.max_attempts if max_attempts is None else max_attempts
        if attempts < 1:
            raise ValueError(f"max_attempts must be at least 1 (given value: {attempts})")
        for code in self._free_candidates(attempts):
            return code
        raise self._exhausted(attempts)

    def allocate(
        self,
        original_url: str,
        expires_at: datetime,
        custom_code: Optional[str] = None
    ) -> UrlRecord:
        """
        Create a record under a custom or freshly generated shortcode.

        Raises:
            InvalidShortcodeError: Custom code has a bad format
            ShortcodeAlreadyExistsError: Custom code is live
            ShortcodeExhaustedError: No free random code was found
        """
        if custom_code is not None:
            self.validate_custom(custom_code)
            return self.store.create(custom_code, original_url, expires_at)

        for code in self._free_candidates(self.max_attempts):
            try:
                return self.store.create(code, original_url, expires_at)
            except ShortcodeAlreadyExistsError:
                # Taken by a concurrent create since the probe
                logger.warning("Shortcode '%s' was claimed concurrently, retrying", code)

        raise self._exhausted(self.max_attempts)
