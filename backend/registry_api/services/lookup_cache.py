import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from registry_api.core.config import settings
from registry_api.schemas.lookup import LookupQuery, LookupResponse

logger = logging.getLogger(__name__)


def cache_key(query: LookupQuery) -> str:
    """
    Derive the cache key for a lookup.

    Filter sets are sorted so their order in the request does not matter.
    Domains cannot contain ':' and filter values cannot contain ',' or ':',
    so distinct queries never share a key.
    """
    trust_levels = ",".join(sorted(set(query.trust_levels)))
    deployment_types = ",".join(sorted(set(query.deployment_types)))
    return (
        f"{query.domain}:{trust_levels}:{deployment_types}:"
        f"{query.max_results}:{str(query.include_categories).lower()}"
    )


@dataclass
class CacheEntry:
    response: LookupResponse
    stored_at: float


class LookupCache:
    """
    In-memory lookup response cache with a fixed time-to-live.

    Expiry is checked on every read, so an entry is never served past its
    TTL even before the background sweep removes it. The sweep runs as an
    asyncio task started with ``start()`` and stopped with ``shutdown()``.
    """

    _instance: Optional["LookupCache"] = None

    def __init__(
        self,
        ttl_seconds: float = settings.LOOKUP_CACHE_TTL_SECONDS,
        sweep_interval_seconds: float = settings.LOOKUP_CACHE_SWEEP_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self.sweep_interval_seconds = sweep_interval_seconds
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._sweep_task: Optional[asyncio.Task] = None

    @classmethod
    def get_instance(cls) -> "LookupCache":
        """Process-wide cache used by the API."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def __len__(self) -> int:
        return len(self._entries)

    def _is_expired(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.stored_at >= self.ttl_seconds

    def get(self, key: str) -> Optional[LookupResponse]:
        entry = self._entries.get(key)
        if entry is None:
            logger.debug(f"Cache miss for {key}")
            return None

        if self._is_expired(entry, self._clock()):
            logger.debug(f"Cache expired for {key}")
            # Another request may have replaced the entry meanwhile; only drop this one
            if self._entries.get(key) is entry:
                del self._entries[key]
            return None

        logger.debug(f"Cache hit for {key}")
        return entry.response

    def set(self, key: str, response: LookupResponse) -> None:
        # Last write wins when concurrent requests compute the same key
        self._entries[key] = CacheEntry(response=response, stored_at=self._clock())

    def clear(self) -> None:
        self._entries.clear()

    def sweep(self) -> int:
        """Remove expired entries and return how many were dropped."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if self._is_expired(entry, now)]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug(f"Swept {len(expired)} expired lookup cache entries, {len(self._entries)} remain")
        return len(expired)

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self.sweep_interval_seconds)
            self.sweep()

    @property
    def running(self) -> bool:
        return self._sweep_task is not None and not self._sweep_task.done()

    def start(self) -> None:
        """Start the periodic sweep on the running event loop. Calling it twice is a no-op."""
        if self.running:
            return
        self._sweep_task = asyncio.create_task(self._sweep_loop(), name="lookup-cache-sweep")
        logger.info(
            f"Lookup cache sweep started (ttl={self.ttl_seconds}s, interval={self.sweep_interval_seconds}s)"
        )

    async def shutdown(self) -> None:
        """Stop the periodic sweep and drop all entries."""
        task, self._sweep_task = self._sweep_task, None
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            logger.info("Lookup cache sweep stopped")
        self.clear()
