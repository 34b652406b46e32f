import logging
import time

from registry_api.core.metrics import LOOKUP_CACHE_RESULTS
from registry_api.db.store import RegistryStore
from registry_api.schemas.lookup import LookupQuery, LookupResponse, MatchMetadata
from registry_api.services.enrichment import ServerEnricher
from registry_api.services.lookup_cache import LookupCache, cache_key
from registry_api.services.lookup_pipeline import run_match_stages

logger = logging.getLogger(__name__)


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


class LookupService:
    """
    Answers "which MCP servers are relevant to this domain?".

    Store errors are not caught here: a failed query aborts the whole lookup
    and reaches the caller unchanged.
    """

    def __init__(self, store: RegistryStore, cache: LookupCache):
        self.store = store
        self.cache = cache
        self.enricher = ServerEnricher(store)

    async def lookup_servers(self, query: LookupQuery) -> LookupResponse:
        """
        Look up servers for ``query.domain``.

        Args:
            query: A validated lookup query.

        Returns:
            The enriched response. ``matches`` is empty when nothing matched;
            on a cache hit only ``cache_hit`` and ``search_time_ms`` differ
            from the stored response.
        """
        started = time.perf_counter()
        key = cache_key(query)

        cached = self.cache.get(key)
        if cached is not None:
            LOOKUP_CACHE_RESULTS.labels(result="hit").inc()
            metadata = cached.match_metadata.model_copy(
                update={"cache_hit": True, "search_time_ms": _elapsed_ms(started)}
            )
            return cached.model_copy(update={"match_metadata": metadata})

        LOOKUP_CACHE_RESULTS.labels(result="miss").inc()

        candidates = await run_match_stages(self.store, query)
        matches = [await self.enricher.enrich(candidate) for candidate in candidates]

        response = LookupResponse(
            domain=query.domain,
            match_metadata=MatchMetadata(
                match_count=len(matches),
                search_time_ms=_elapsed_ms(started),
                cache_hit=False,
            ),
            matches=matches,
        )

        try:
            self.cache.set(key, response)
        except Exception as e:
            # A failed cache write does not fail the lookup
            logger.warning(f"Failed to cache lookup for {query.domain}: {e}", exc_info=True)

        logger.info(f"Lookup for {query.domain} found {len(matches)} match(es) in {response.match_metadata.search_time_ms}ms")
        return response

    def clear_cache(self) -> None:
        self.cache.clear()
