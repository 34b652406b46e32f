import asyncio

import pytest

from registry_api.schemas.lookup import LookupQuery, LookupResponse, MatchMetadata
from registry_api.services.lookup_cache import LookupCache, cache_key


def make_response(domain: str = "github.com") -> LookupResponse:
    return LookupResponse(
        domain=domain,
        match_metadata=MatchMetadata(match_count=0, search_time_ms=1, cache_hit=False),
        matches=[],
    )


@pytest.fixture
def cache(clock) -> LookupCache:
    return LookupCache(ttl_seconds=900, sweep_interval_seconds=300, clock=clock)


def test_get_returns_stored_response(cache):
    response = make_response()
    cache.set("k", response)

    assert cache.get("k") is response
    assert len(cache) == 1


def test_get_unknown_key_returns_none(cache):
    assert cache.get("missing") is None


def test_entry_expires_exactly_at_ttl(cache, clock):
    cache.set("k", make_response())

    clock.advance(899.9)
    assert cache.get("k") is not None

    clock.advance(0.1)
    assert cache.get("k") is None
    # Expired entries are dropped on read
    assert len(cache) == 0


def test_set_overwrites_and_restarts_ttl(cache, clock):
    cache.set("k", make_response("first.com"))
    clock.advance(600)
    cache.set("k", make_response("second.com"))
    clock.advance(600)

    assert cache.get("k").domain == "second.com"


def test_sweep_removes_only_expired_entries(cache, clock):
    cache.set("old", make_response())
    clock.advance(500)
    cache.set("new", make_response())
    clock.advance(400)

    assert cache.sweep() == 1
    assert cache.get("old") is None
    assert cache.get("new") is not None


def test_clear_drops_everything(cache):
    cache.set("a", make_response())
    cache.set("b", make_response())

    cache.clear()

    assert len(cache) == 0


def test_get_instance_is_shared():
    LookupCache._instance = None
    try:
        assert LookupCache.get_instance() is LookupCache.get_instance()
    finally:
        LookupCache._instance = None


@pytest.mark.asyncio
async def test_background_sweep_runs_on_interval(clock):
    cache = LookupCache(ttl_seconds=10, sweep_interval_seconds=0.01, clock=clock)
    cache.set("k", make_response())
    clock.advance(10)

    cache.start()
    try:
        for _ in range(100):
            if len(cache) == 0:
                break
            await asyncio.sleep(0.01)
        assert len(cache) == 0
    finally:
        await cache.shutdown()


@pytest.mark.asyncio
async def test_start_is_idempotent_and_shutdown_stops(cache):
    cache.start()
    task = cache._sweep_task
    cache.start()

    assert cache._sweep_task is task
    assert cache.running

    cache.set("k", make_response())
    await cache.shutdown()

    assert not cache.running
    assert task.cancelled()
    assert len(cache) == 0


@pytest.mark.asyncio
async def test_shutdown_without_start_is_safe(cache):
    await cache.shutdown()
    assert not cache.running


# Cache keys

def test_key_ignores_filter_order():
    a = LookupQuery(domain="github.com", trust_levels=["verified", "community"], deployment_types=["remote", "local"])
    b = LookupQuery(domain="github.com", trust_levels=["community", "verified"], deployment_types=["local", "remote"])

    assert cache_key(a) == cache_key(b)


def test_key_format():
    query = LookupQuery(domain="github.com", trust_levels=["verified"], max_results=5, include_categories=True)

    assert cache_key(query) == "github.com:verified:hybrid,local,remote:5:true"


@pytest.mark.parametrize(
    "other",
    [
        {"domain": "gitlab.com"},
        {"trust_levels": ["verified"]},
        {"deployment_types": ["local"]},
        {"max_results": 11},
        {"include_categories": True},
    ],
)
def test_key_distinguishes_each_field(other):
    base = {"domain": "github.com"}

    assert cache_key(LookupQuery(**base)) != cache_key(LookupQuery(**{**base, **other}))
