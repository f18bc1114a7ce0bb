"""
Read-through cache for resolved site configs and tenant lookups.

Keys live in two families under CACHE_NAMESPACE:

    {ns}:tenant:{dealer_id}:site_config:{mode}   resolved configs
    {ns}:tag:{tag}:{name}                        tag-scoped entries

Invalidation is by prefix. A dealer write clears its tenant prefix and the
dealer's tags in one backend call.
"""

from __future__ import annotations

import json
import logging
import os
import time
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Protocol

from fastapi.encoders import jsonable_encoder

from dealersite.core.config import settings
from dealersite.core.metrics import (
    record_cache_hit,
    record_cache_key_count,
    record_cache_miss,
    record_cache_set,
)


logger = logging.getLogger(__name__)

SITE_CONFIG_CACHE = "site_config"
TENANT_LOOKUP_CACHE = "tenant_lookup"

_DISABLED = {"none", "disabled", "off"}


class CacheBackend(Protocol):
    backend_name: str

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str, ttl: int | None = None) -> None:
        ...

    def delete_prefixes(self, prefixes: Iterable[str]) -> int:
        ...

    def count_keys(self) -> int:
        ...


@dataclass
class _Entry:
    value: str
    expires_at: float | None


class InMemoryCache:
    """Process-local backend; entries expire lazily on read."""

    backend_name = "memory"

    def __init__(self) -> None:
        self._entries: dict[str, _Entry] = {}

    def get(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at is not None and time.monotonic() >= entry.expires_at:
            del self._entries[key]
            return None
        return entry.value

    def set(self, key: str, value: str, ttl: int | None = None) -> None:
        expires_at = time.monotonic() + ttl if ttl else None
        self._entries[key] = _Entry(value=value, expires_at=expires_at)

    def delete_prefixes(self, prefixes: Iterable[str]) -> int:
        prefixes = tuple(prefixes)
        doomed = [key for key in self._entries if key.startswith(prefixes)]
        for key in doomed:
            del self._entries[key]
        return len(doomed)

    def count_keys(self) -> int:
        return len(self._entries)


class NullCache:
    backend_name = "none"

    def get(self, key: str) -> str | None:
        return None

    def set(self, key: str, value: str, ttl: int | None = None) -> None:
        return None

    def delete_prefixes(self, prefixes: Iterable[str]) -> int:
        return 0

    def count_keys(self) -> int:
        return 0


class RedisCache:
    """Shared backend for multi-process deployments."""

    backend_name = "redis"

    def __init__(self, client) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisCache":
        import redis

        return cls(redis.Redis.from_url(url, decode_responses=True))

    def get(self, key: str) -> str | None:
        return self._client.get(key)

    def set(self, key: str, value: str, ttl: int | None = None) -> None:
        if ttl:
            self._client.setex(key, ttl, value)
        else:
            self._client.set(key, value)

    def delete_prefixes(self, prefixes: Iterable[str]) -> int:
        keys: list[str] = []
        for prefix in prefixes:
            keys.extend(self._client.scan_iter(match=f"{prefix}*"))
        if not keys:
            return 0
        return int(self._client.delete(*keys))

    def count_keys(self) -> int:
        return sum(1 for _ in self._client.scan_iter(match=f"{settings.CACHE_NAMESPACE}:*"))


def _backend_name() -> str:
    # Tests run uncached unless they opt in through the environment.
    override = os.getenv("CACHE_BACKEND")
    if override is None and os.getenv("PYTEST_CURRENT_TEST"):
        return "none"
    return (override or settings.CACHE_BACKEND or "memory").lower()


def build_backend(name: str | None = None) -> CacheBackend:
    name = (name or _backend_name()).lower()
    if name in _DISABLED:
        return NullCache()
    if name != "redis":
        return InMemoryCache()
    if not settings.REDIS_URL:
        logger.warning("cache.redis_url_missing", extra={"fallback": "memory"})
        return InMemoryCache()
    try:
        return RedisCache.from_url(settings.REDIS_URL)
    except Exception as exc:
        logger.warning(
            "cache.redis_unavailable",
            extra={"fallback": "memory", "error_code": type(exc).__name__},
        )
        return InMemoryCache()


_BACKEND: CacheBackend | None = None
_SERVICE: "CacheService" | None = None


def _shared_backend() -> CacheBackend:
    global _BACKEND
    if _BACKEND is None:
        _BACKEND = build_backend()
    return _BACKEND


def reset_cache_backend() -> None:
    global _BACKEND, _SERVICE
    _BACKEND = None
    _SERVICE = None


class CacheService:
    """
    JSON-encoding front for a backend. Records hit/miss/set metrics under
    the given cache name ("site_config" or "tenant_lookup").
    """

    def __init__(self, *, backend: CacheBackend | None = None, default_ttl: int | None = None) -> None:
        self._backend = backend
        self._default_ttl = settings.CACHE_DEFAULT_TTL_SECONDS if default_ttl is None else default_ttl

    @property
    def backend(self) -> CacheBackend:
        return self._backend or _shared_backend()

    def get(self, key: str, *, cache_name: str) -> Any | None:
        payload = self.backend.get(key)
        value = None
        if payload is not None:
            try:
                value = json.loads(payload)
            except ValueError:
                value = None
        if value is None:
            record_cache_miss(cache_name)
            return None
        record_cache_hit(cache_name)
        return value

    def set(self, key: str, value: Any, *, cache_name: str, ttl: int | None = None) -> None:
        payload = json.dumps(jsonable_encoder(value), sort_keys=True, separators=(",", ":"))
        backend = self.backend
        backend.set(key, payload, ttl=self._default_ttl if ttl is None else ttl)
        record_cache_set(cache_name, len(payload))
        self._observe_size(backend)

    def invalidate(self, prefixes: Iterable[str]) -> int:
        backend = self.backend
        removed = backend.delete_prefixes(prefixes)
        self._observe_size(backend)
        return removed

    def invalidate_tenant(self, tenant_id: str) -> int:
        """Drop the dealer's resolved configs and every entry under its tags."""
        prefixes = [tenant_cache_prefix(tenant_id)]
        prefixes.extend(tag_cache_prefix(tag) for tag in dealer_cache_tags(tenant_id))
        return self.invalidate(prefixes)

    def invalidate_tags(self, tags: Iterable[str]) -> int:
        return self.invalidate(tag_cache_prefix(tag) for tag in tags)

    @staticmethod
    def _observe_size(backend: CacheBackend) -> None:
        try:
            record_cache_key_count(backend.backend_name, backend.count_keys())
        except Exception:
            logger.debug("cache.key_count_failed", exc_info=True)


def get_cache_service() -> CacheService:
    global _SERVICE
    if _SERVICE is None:
        _SERVICE = CacheService()
    return _SERVICE


def cache_get(key: str, *, cache_name: str) -> Any | None:
    return get_cache_service().get(key, cache_name=cache_name)


def cache_set(key: str, value: Any, *, cache_name: str, ttl: int | None = None) -> None:
    get_cache_service().set(key, value, cache_name=cache_name, ttl=ttl)


def tenant_cache_prefix(tenant_id: str) -> str:
    return f"{settings.CACHE_NAMESPACE}:tenant:{tenant_id}:"


def tag_cache_prefix(tag: str) -> str:
    return f"{settings.CACHE_NAMESPACE}:tag:{tag}:"


def site_config_cache_key(tenant_id: str, *, preview: bool) -> str:
    """Preview folds the draft on top, so it never shares an entry with published."""
    mode = "preview" if preview else "published"
    return f"{tenant_cache_prefix(tenant_id)}{SITE_CONFIG_CACHE}:{mode}"


def tagged_cache_key(tag: str, name: str) -> str:
    return f"{tag_cache_prefix(tag)}{name}"


def dealer_cache_tags(tenant_id: str) -> list[str]:
    return [f"dealer:{tenant_id}", f"cms:bundle:{tenant_id}"]


def invalidate_tenant_cache(tenant_id: str) -> int:
    return get_cache_service().invalidate_tenant(tenant_id)


def invalidate_cache_tags(tags: Iterable[str]) -> int:
    return get_cache_service().invalidate_tags(tags)


class CacheInvalidator(Protocol):
    def invalidate(self, tenant_id: str) -> None:
        ...


class TenantCacheInvalidator:
    """
    Runs after a committed draft or publish write. Clears the dealer's
    cache entries, then calls each hook (a CDN purge, say) with the dealer
    id. Failures are logged, never raised.
    """

    def __init__(
        self,
        *,
        cache: CacheService | None = None,
        hooks: Iterable[Callable[[str], None]] | None = None,
    ) -> None:
        self._cache = cache
        self._hooks = list(hooks or [])

    def invalidate(self, tenant_id: str) -> None:
        service = self._cache or get_cache_service()
        try:
            service.invalidate_tenant(tenant_id)
        except Exception:
            logger.warning("cache.invalidate_failed", extra={"tenant_id": tenant_id}, exc_info=True)
        for hook in self._hooks:
            try:
                hook(tenant_id)
            except Exception:
                logger.warning(
                    "cache.invalidate_hook_failed",
                    extra={"tenant_id": tenant_id, "hook": getattr(hook, "__name__", repr(hook))},
                    exc_info=True,
                )
