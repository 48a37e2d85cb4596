"""In-memory cache for the current menu snapshot."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from cafe_menu_service.models.menu_models import CacheClearResult, CacheStatus, MenuSnapshot

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class CacheEntry:
    """A cached snapshot and the time it was stored.

    Attributes:
        snapshot: The snapshot as stored, annotated with cache metadata
        timestamp: When the entry was written
    """

    snapshot: MenuSnapshot
    timestamp: datetime


class MenuCache:
    """Holds the last successfully acquired menu snapshot.

    The cache never raises and never refreshes itself; it reports validity and
    leaves the refresh decision to its owner. One instance is built per process
    and injected wherever it is needed.
    """

    def __init__(self, ttl: timedelta, clock: Callable[[], datetime] = utc_now) -> None:
        """Initialize the MenuCache.

        Args:
            ttl: How long an entry stays valid after it is written
            clock: Source of the current time (injectable for tests)
        """
        self.ttl = ttl
        self._clock = clock
        self._entry: CacheEntry | None = None

    @property
    def ttl_minutes(self) -> float:
        return self.ttl.total_seconds() / 60

    def _age(self, entry: CacheEntry) -> timedelta:
        return self._clock() - entry.timestamp

    def is_valid(self) -> bool:
        """Check whether an entry exists and is younger than the TTL."""
        return self._entry is not None and self._age(self._entry) < self.ttl

    def get(self) -> MenuSnapshot | None:
        """Return the cached snapshot if it is still valid.

        Returns:
            The cached snapshot, or None if the cache is empty or expired
        """
        if not self.is_valid():
            return None
        return self._entry.snapshot  # type: ignore[union-attr]

    def peek(self) -> MenuSnapshot | None:
        """Return the cached snapshot regardless of age, for stale fallback."""
        return self._entry.snapshot if self._entry else None

    def put(self, snapshot: MenuSnapshot) -> MenuSnapshot:
        """Store a snapshot, replacing any existing entry.

        Args:
            snapshot: Freshly acquired snapshot

        Returns:
            The stored copy, annotated with cached=True and its cache timestamp
        """
        now = self._clock()
        stored = snapshot.model_copy(update={"cached": True, "cache_timestamp": now, "stale": False})
        self._entry = CacheEntry(snapshot=stored, timestamp=now)
        hours = round(self.ttl_minutes / 60)
        logger.info(f"Menu cached with {stored.item_count} items, expires in {hours} hours")
        return stored

    def clear(self) -> CacheClearResult:
        """Drop the current entry.

        Returns:
            Whether an entry was present and how many items it held
        """
        entry = self._entry
        self._entry = None
        logger.info("Menu cache cleared - next request will fetch fresh data")
        return CacheClearResult(
            had_entry=entry is not None,
            items_cleared=entry.snapshot.item_count if entry else 0,
            timestamp=self._clock(),
        )

    def status(self) -> CacheStatus:
        """Report the cache state without changing it."""
        entry = self._entry
        if entry is None:
            return CacheStatus(cached=False, ttl_minutes=self.ttl_minutes, valid=False)

        age_minutes = self._age(entry).total_seconds() / 60
        return CacheStatus(
            cached=True,
            cache_timestamp=entry.timestamp,
            age_minutes=round(age_minutes, 2),
            ttl_minutes=self.ttl_minutes,
            valid=self.is_valid(),
            item_count=entry.snapshot.item_count,
        )
