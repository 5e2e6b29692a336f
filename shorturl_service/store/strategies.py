"""
Short URL store strategies using Strategy Pattern.

The store owns every UrlRecord and its click log and is the single authority
on whether a shortcode is live. Expiry is lazy: any operation that finds an
expired record evicts it before answering.
"""

import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum
from typing import Callable, Dict, List, NamedTuple, Optional

from shorturl_service.exceptions import InvalidValidityError, ShortcodeAlreadyExistsError
from shorturl_service.models.url import (
    ClickData,
    ClickEvent,
    StoreStats,
    UrlAnalytics,
    UrlRecord,
    utc_now,
)

logger = logging.getLogger(__name__)


class LookupStatus(Enum):
    """Outcome of a shortcode lookup"""
    LIVE = "live"
    MISSING = "missing"
    EXPIRED = "expired"  # Evicted by this lookup


class Lookup(NamedTuple):
    status: LookupStatus
    record: Optional[UrlRecord] = None


class ShortURLStore(ABC):
    """
    Abstract base class for short URL stores.

    "Not found" covers both unknown and expired shortcodes everywhere except
    lookup(), which also reports whether the record was evicted just now.
    Records handed out are snapshots; changing them does not touch the store.
    """

    @abstractmethod
    def now(self) -> datetime:
        """Current time according to the clock used for expiry checks"""
        pass

    @abstractmethod
    def create(self, shortcode: str, original_url: str, expires_at: datetime) -> UrlRecord:
        """
        Insert a new record with an empty click log.

        Args:
            shortcode: Key of the new record
            original_url: Normalized target URL
            expires_at: Instant after which the record is no longer live

        Returns:
            The created record

        Raises:
            ShortcodeAlreadyExistsError: If a live record holds the shortcode
            InvalidValidityError: If expires_at is not after the creation time
        """
        pass

    @abstractmethod
    def lookup(self, shortcode: str) -> Lookup:
        """
        Look up a shortcode, evicting it if it has expired.

        Returns:
            Lookup with the live record, or status MISSING / EXPIRED
        """
        pass

    @abstractmethod
    def find_by_shortcode(self, shortcode: str) -> Optional[UrlRecord]:
        """
        Get the live record for a shortcode.

        Returns:
            The record, or None if unknown or expired
        """
        pass

    @abstractmethod
    def add_click(self, shortcode: str, click: ClickData) -> bool:
        """
        Append a click event to a live record.

        Returns:
            True if recorded, False if unknown or expired (nothing is changed)
        """
        pass

    @abstractmethod
    def get_analytics(self, shortcode: str) -> Optional[UrlAnalytics]:
        """
        Get click analytics for a live record.

        Returns:
            UrlAnalytics, or None if unknown or expired
        """
        pass

    @abstractmethod
    def cleanup_expired(self) -> int:
        """
        Evict every expired record.

        Returns:
            Number of records evicted
        """
        pass

    @abstractmethod
    def stats(self) -> StoreStats:
        """Totals over the records currently held"""
        pass


class _Shard:
    __slots__ = ("lock", "records")

    def __init__(self):
        self.lock = threading.Lock()
        self.records: Dict[str, UrlRecord] = {}


class InMemoryShortURLStore(ShortURLStore):
    """
    In-memory store using lock striping.

    Keys are spread over a fixed number of shards, each a dict guarded by its
    own lock. Every read-modify-write on a key runs under that key's shard
    lock, so operations on one shortcode are serialized while operations on
    shortcodes in other shards proceed independently.

    Pros:
    - Fast (no I/O, nothing awaits)
    - Safe under threaded servers and worker threads

    Cons:
    - Lost on restart
    - Not shared between processes
    """

    def __init__(self, shards: int = 64, clock: Callable[[], datetime] = utc_now):
        """
        Initialize the store.

        Args:
            shards: Number of lock stripes
            clock: Returns the current timezone-aware time
        """
        if shards < 1:
            raise ValueError(f"Shard count must be at least 1 (given value: {shards})")
        self._clock = clock
        self._shards: List[_Shard] = [_Shard() for _ in range(shards)]

    def now(self) -> datetime:
        return self._clock()

    def _shard_for(self, shortcode: str) -> _Shard:
        return self._shards[hash(shortcode) % len(self._shards)]

    def _get_live_or_evict(self, shard: _Shard, shortcode: str, now: datetime) -> Lookup:
        # Caller holds shard.lock
        record = shard.records.get(shortcode)
        if record is None:
            return Lookup(LookupStatus.MISSING)
        if record.is_expired(now):
            del shard.records[shortcode]
            logger.debug("Evicted expired shortcode '%s' (expired at %s)", shortcode, record.expires_at.isoformat())
            return Lookup(LookupStatus.EXPIRED)
        return Lookup(LookupStatus.LIVE, record)

    def create(self, shortcode: str, original_url: str, expires_at: datetime) -> UrlRecord:
        shard = self._shard_for(shortcode)
        with shard.lock:
            now = self._clock()
            if expires_at <= now:
                raise InvalidValidityError(
                    f"Expiry {expires_at.isoformat()} must be after creation time {now.isoformat()}"
                )
            if self._get_live_or_evict(shard, shortcode, now).record is not None:
                raise ShortcodeAlreadyExistsError(f"Shortcode '{shortcode}' already exists")

            record = UrlRecord(
                shortcode=shortcode,
                original_url=original_url,
                created_at=now,
                expires_at=expires_at,
            )
            shard.records[shortcode] = record
            return record.snapshot()

    def lookup(self, shortcode: str) -> Lookup:
        shard = self._shard_for(shortcode)
        with shard.lock:
            found = self._get_live_or_evict(shard, shortcode, self._clock())
            if found.record is None:
                return found
            return Lookup(found.status, found.record.snapshot())

    def find_by_shortcode(self, shortcode: str) -> Optional[UrlRecord]:
        return self.lookup(shortcode).record

    def add_click(self, shortcode: str, click: ClickData) -> bool:
        shard = self._shard_for(shortcode)
        with shard.lock:
            now = self._clock()
            record = self._get_live_or_evict(shard, shortcode, now).record
            if record is None:
                return False

            event = ClickEvent(
                timestamp=now,
                user_agent=click.user_agent or "",
                ip=click.ip or "",
                referer=click.referer or "",
            )
            record.clicks.append(event)
            record.click_count += 1
            return True

    def get_analytics(self, shortcode: str) -> Optional[UrlAnalytics]:
        shard = self._shard_for(shortcode)
        with shard.lock:
            record = self._get_live_or_evict(shard, shortcode, self._clock()).record
            if record is None:
                return None

            return UrlAnalytics(
                shortcode=record.shortcode,
                original_url=record.original_url,
                created_at=record.created_at,
                expires_at=record.expires_at,
                click_count=record.click_count,
                unique_clicker_count=len({click.ip for click in record.clicks}),
                clicks=list(record.clicks),
            )

    def cleanup_expired(self) -> int:
        now = self._clock()
        evicted = 0
        for shard in self._shards:
            with shard.lock:
                expired = [code for code, record in shard.records.items() if record.is_expired(now)]
                for code in expired:
                    del shard.records[code]
            evicted += len(expired)
        return evicted

    def stats(self) -> StoreStats:
        total_urls = 0
        total_clicks = 0
        for shard in self._shards:
            with shard.lock:
                total_urls += len(shard.records)
                total_clicks += sum(record.click_count for record in shard.records.values())
        return StoreStats(total_urls=total_urls, total_clicks=total_clicks)
