import fnmatch
import logging
import os

import pytest
from prometheus_client import REGISTRY

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import redis

import dealersite.core.cache as cache_module
from dealersite.core.cache import (
    SITE_CONFIG_CACHE,
    TENANT_LOOKUP_CACHE,
    CacheService,
    InMemoryCache,
    NullCache,
    RedisCache,
    TenantCacheInvalidator,
    build_backend,
    cache_get,
    cache_set,
    dealer_cache_tags,
    invalidate_tenant_cache,
    reset_cache_backend,
    site_config_cache_key,
    tagged_cache_key,
    tenant_cache_prefix,
)
from dealersite.core.config import settings


@pytest.fixture(autouse=True)
def _enable_memory_cache():
    previous = os.environ.get("CACHE_BACKEND")
    os.environ["CACHE_BACKEND"] = "memory"
    reset_cache_backend()
    yield
    if previous is None:
        os.environ.pop("CACHE_BACKEND", None)
    else:
        os.environ["CACHE_BACKEND"] = previous
    reset_cache_backend()


class FakeRedis:
    """Just enough of redis.Redis for the cache backend."""

    def __init__(self):
        self.data = {}
        self.ttls = {}

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.data[key] = value

    def setex(self, key, ttl, value):
        self.data[key] = value
        self.ttls[key] = ttl

    def scan_iter(self, match=None):
        return [key for key in list(self.data) if match is None or fnmatch.fnmatch(key, match)]

    def delete(self, *keys):
        removed = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                removed += 1
        return removed


def _sample(name, **labels):
    return REGISTRY.get_sample_value(name, labels) or 0.0


def test_site_config_keys_are_tenant_scoped_and_split_by_mode():
    published = site_config_cache_key("102324", preview=False)
    preview = site_config_cache_key("102324", preview=True)
    assert published == f"{settings.CACHE_NAMESPACE}:tenant:102324:site_config:published"
    assert preview == f"{settings.CACHE_NAMESPACE}:tenant:102324:site_config:preview"
    assert published.startswith(tenant_cache_prefix("102324"))


def test_dealer_tags_match_published_revalidation_names():
    assert dealer_cache_tags("102324") == ["dealer:102324", "cms:bundle:102324"]


def test_invalidate_tenant_cache_only_touches_that_tenant():
    key_a = site_config_cache_key("a", preview=False)
    key_b = site_config_cache_key("b", preview=False)
    cache_set(key_a, {"v": 1}, cache_name=SITE_CONFIG_CACHE)
    cache_set(key_b, {"v": 2}, cache_name=SITE_CONFIG_CACHE)
    cache_set(tagged_cache_key("dealer:a", "tenant"), {"v": 3}, cache_name=TENANT_LOOKUP_CACHE)
    assert invalidate_tenant_cache("a") == 2
    assert cache_get(key_a, cache_name=SITE_CONFIG_CACHE) is None
    assert cache_get(key_b, cache_name=SITE_CONFIG_CACHE) == {"v": 2}


def test_invalidate_tenant_clears_prefix_and_tags_in_one_backend_call():
    calls = []

    class CountingCache(InMemoryCache):
        def delete_prefixes(self, prefixes):
            prefixes = list(prefixes)
            calls.append(prefixes)
            return super().delete_prefixes(prefixes)

    service = CacheService(backend=CountingCache())
    service.set(site_config_cache_key("d1", preview=True), {"v": 1}, cache_name=SITE_CONFIG_CACHE)
    for tag in dealer_cache_tags("d1"):
        service.set(tagged_cache_key(tag, "bundle"), {"v": 2}, cache_name=TENANT_LOOKUP_CACHE)
    service.set(tagged_cache_key("dealer:d2", "tenant"), {"v": 3}, cache_name=TENANT_LOOKUP_CACHE)

    assert service.invalidate_tenant("d1") == 3
    assert calls == [
        [
            tenant_cache_prefix("d1"),
            f"{settings.CACHE_NAMESPACE}:tag:dealer:d1:",
            f"{settings.CACHE_NAMESPACE}:tag:cms:bundle:d1:",
        ]
    ]
    assert service.get(tagged_cache_key("dealer:d2", "tenant"), cache_name=TENANT_LOOKUP_CACHE) == {"v": 3}


def test_hits_and_misses_are_labelled_by_cache_name():
    service = CacheService(backend=InMemoryCache())
    misses = _sample("cache_miss_total", cache=SITE_CONFIG_CACHE)
    hits = _sample("cache_hit_total", cache=TENANT_LOOKUP_CACHE)
    service.get("absent", cache_name=SITE_CONFIG_CACHE)
    service.set("present", {"tenant_id": "d1"}, cache_name=TENANT_LOOKUP_CACHE)
    assert service.get("present", cache_name=TENANT_LOOKUP_CACHE) == {"tenant_id": "d1"}
    assert _sample("cache_miss_total", cache=SITE_CONFIG_CACHE) == misses + 1
    assert _sample("cache_hit_total", cache=TENANT_LOOKUP_CACHE) == hits + 1


def test_null_cache_never_stores():
    service = CacheService(backend=NullCache())
    service.set("k", {"v": 1}, cache_name=SITE_CONFIG_CACHE)
    assert service.get("k", cache_name=SITE_CONFIG_CACHE) is None
    assert service.invalidate_tenant("d1") == 0


def test_in_memory_cache_respects_ttl(monkeypatch):
    backend = InMemoryCache()
    clock = [1000.0]
    monkeypatch.setattr("dealersite.core.cache.time.monotonic", lambda: clock[0])
    backend.set("k", "v", ttl=10)
    backend.set("forever", "v", ttl=0)
    assert backend.get("k") == "v"
    clock[0] += 11
    assert backend.get("k") is None
    assert backend.get("forever") == "v"


def test_redis_backend_round_trips_and_invalidates_by_prefix():
    client = FakeRedis()
    service = CacheService(backend=RedisCache(client), default_ttl=30)
    key = site_config_cache_key("d1", preview=False)
    service.set(key, {"theme": {"key": "t1"}}, cache_name=SITE_CONFIG_CACHE)
    service.set(tagged_cache_key("dealer:d1", "tenant"), {"v": 1}, cache_name=TENANT_LOOKUP_CACHE, ttl=0)

    assert client.ttls == {key: 30}
    assert service.get(key, cache_name=SITE_CONFIG_CACHE) == {"theme": {"key": "t1"}}
    assert service.invalidate_tenant("d1") == 2
    assert client.data == {}
    assert service.invalidate_tenant("d1") == 0


def test_build_backend_honours_disabled_names():
    assert isinstance(build_backend("none"), NullCache)
    assert isinstance(build_backend("OFF"), NullCache)
    assert isinstance(build_backend("memory"), InMemoryCache)


def test_tests_run_uncached_unless_backend_is_requested(monkeypatch):
    monkeypatch.delenv("CACHE_BACKEND")
    assert isinstance(build_backend(), NullCache)


def test_redis_backend_uses_configured_url(monkeypatch):
    client = FakeRedis()
    seen = []

    def from_url(url, **kwargs):
        seen.append((url, kwargs))
        return client

    monkeypatch.setattr(cache_module.settings, "REDIS_URL", "redis://cache:6379/0")
    monkeypatch.setattr(redis.Redis, "from_url", from_url)
    backend = build_backend("redis")
    assert isinstance(backend, RedisCache)
    assert seen == [("redis://cache:6379/0", {"decode_responses": True})]


def test_redis_without_url_falls_back_to_memory(monkeypatch, caplog):
    monkeypatch.setattr(cache_module.settings, "REDIS_URL", None)
    with caplog.at_level(logging.WARNING, logger="dealersite.core.cache"):
        assert isinstance(build_backend("redis"), InMemoryCache)
    assert "cache.redis_url_missing" in [record.getMessage() for record in caplog.records]


def test_unreachable_redis_falls_back_to_memory(monkeypatch, caplog):
    def from_url(url, **kwargs):
        raise redis.ConnectionError("connection refused")

    monkeypatch.setattr(cache_module.settings, "REDIS_URL", "redis://cache:6379/0")
    monkeypatch.setattr(redis.Redis, "from_url", from_url)
    with caplog.at_level(logging.WARNING, logger="dealersite.core.cache"):
        assert isinstance(build_backend("redis"), InMemoryCache)
    assert "cache.redis_unavailable" in [record.getMessage() for record in caplog.records]


def test_tenant_invalidator_runs_hooks_after_clearing():
    service = CacheService(backend=InMemoryCache())
    purged = []
    key = site_config_cache_key("d1", preview=True)
    service.set(key, {"v": 1}, cache_name=SITE_CONFIG_CACHE)

    TenantCacheInvalidator(cache=service, hooks=[purged.append]).invalidate("d1")

    assert service.get(key, cache_name=SITE_CONFIG_CACHE) is None
    assert purged == ["d1"]


class _ExplodingBackend(InMemoryCache):
    def delete_prefixes(self, prefixes):
        raise ConnectionError("redis down")


def test_invalidator_swallows_backend_and_hook_failures(caplog):
    def broken_hook(tenant_id):
        raise RuntimeError("cdn unavailable")

    calls = []
    invalidator = TenantCacheInvalidator(
        cache=CacheService(backend=_ExplodingBackend()),
        hooks=[broken_hook, calls.append],
    )
    with caplog.at_level(logging.WARNING, logger="dealersite.core.cache"):
        invalidator.invalidate("d1")
    assert calls == ["d1"]
    messages = [record.getMessage() for record in caplog.records]
    assert "cache.invalidate_failed" in messages
    assert "cache.invalidate_hook_failed" in messages
