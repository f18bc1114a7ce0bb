from __future__ import annotations

import logging
from typing import Any, Mapping

from pydantic import ValidationError

from dealersite.composition.defaults import default_dealer_config, theme_config_defaults
from dealersite.core.cache import (
    SITE_CONFIG_CACHE,
    CacheService,
    get_cache_service,
    site_config_cache_key,
)
from dealersite.core.config import settings
from dealersite.core.logging import site_logger
from dealersite.core.merge import merge_layers
from dealersite.core.metrics import record_config_fallback, record_config_resolution
from dealersite.customizations.store import CustomizationStore
from dealersite.models.enums import CustomizationStatusEnum
from dealersite.schemas.dealer_config import DealerConfig
from dealersite.tenancy.directory import TenantDirectory
from dealersite.tenancy.errors import DealerNotFoundError
from dealersite.themes.registry import ThemeRegistry


logger = logging.getLogger(__name__)


def compose_layers(
    *,
    theme_defaults: Mapping[str, Any] | None = None,
    published: Mapping[str, Any] | None = None,
    draft: Mapping[str, Any] | None = None,
    site_overrides: Mapping[str, Any] | None = None,
    base: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Fold the config layers in precedence order, lowest first:
    global defaults, theme defaults, published, draft, site overrides.

    Pass `draft=None` for published mode. The result is not validated.
    """
    return merge_layers(
        [
            base if base is not None else default_dealer_config(),
            theme_defaults,
            published,
            draft,
            site_overrides,
        ]
    )


class ConfigCompositor:
    """
    Computes the effective DealerConfig for a tenant.

    A broken layer (unreadable store, or a merged result that fails
    validation) degrades to the global defaults instead of failing the
    page. Only an unknown tenant is an error.
    """

    def __init__(
        self,
        store: CustomizationStore,
        directory: TenantDirectory,
        *,
        themes: ThemeRegistry | None = None,
        cache: CacheService | None = None,
        cache_ttl: int | None = None,
    ) -> None:
        self._store = store
        self._directory = directory
        self._themes = themes
        self._cache = cache
        self._cache_ttl = settings.CONFIG_CACHE_TTL_SECONDS if cache_ttl is None else cache_ttl

    def _cache_service(self) -> CacheService:
        return self._cache or get_cache_service()

    def _theme_key(self, theme_key: str) -> str:
        if self._themes is None:
            return theme_key
        normalized = self._themes.normalize(theme_key)
        if normalized in self._themes:
            return normalized
        return self._themes.default_key

    def _cached(self, tenant_id: str, preview: bool) -> DealerConfig | None:
        key = site_config_cache_key(tenant_id, preview=preview)
        try:
            payload = self._cache_service().get(key, cache_name=SITE_CONFIG_CACHE)
        except Exception:
            logger.warning("site_config.cache_read_failed", extra={"tenant_id": tenant_id}, exc_info=True)
            return None
        if payload is None:
            return None
        try:
            return DealerConfig.model_validate(payload)
        except ValidationError:
            return None

    def _store_cached(self, tenant_id: str, preview: bool, config: DealerConfig) -> None:
        key = site_config_cache_key(tenant_id, preview=preview)
        try:
            self._cache_service().set(
                key,
                config.to_payload(),
                ttl=self._cache_ttl,
                cache_name=SITE_CONFIG_CACHE,
            )
        except Exception:
            logger.warning("site_config.cache_write_failed", extra={"tenant_id": tenant_id}, exc_info=True)

    def _fallback(self, tenant_id: str, preview: bool, reason: str) -> DealerConfig:
        record_config_fallback(reason)
        record_config_resolution(preview=preview, outcome="fallback")
        return DealerConfig.model_validate(default_dealer_config())

    def resolve_config(self, tenant_id: str, preview: bool = False) -> DealerConfig:
        mode = "preview" if preview else "published"
        try:
            dealer = self._directory.get(tenant_id)
        except Exception as exc:
            site_logger.error(
                "site_config.directory_read_failed",
                extra={
                    "tenant_id": tenant_id,
                    "mode": mode,
                    "reason": "directory_read_failed",
                    "error_code": type(exc).__name__,
                },
                exc_info=True,
            )
            return self._fallback(tenant_id, preview, "directory_read_failed")
        if dealer is None:
            raise DealerNotFoundError(tenant_id)

        cached = self._cached(tenant_id, preview)
        if cached is not None:
            record_config_resolution(preview=preview, outcome="cached")
            return cached

        theme_key = self._theme_key(dealer.theme_key)
        try:
            published = self._store.get(tenant_id, CustomizationStatusEnum.PUBLISHED)
            draft = self._store.get(tenant_id, CustomizationStatusEnum.DRAFT) if preview else None
        except Exception as exc:
            site_logger.error(
                "site_config.store_read_failed",
                extra={
                    "tenant_id": tenant_id,
                    "theme_key": theme_key,
                    "mode": mode,
                    "reason": "store_read_failed",
                    "error_code": type(exc).__name__,
                },
                exc_info=True,
            )
            return self._fallback(tenant_id, preview, "store_read_failed")

        merged = compose_layers(
            theme_defaults=theme_config_defaults(theme_key),
            published=published.data if published is not None else None,
            draft=draft.data if draft is not None else None,
            site_overrides=dealer.site_overrides,
        )
        try:
            config = DealerConfig.model_validate(merged)
        except ValidationError as exc:
            site_logger.error(
                "site_config.validation_failed",
                extra={
                    "tenant_id": tenant_id,
                    "theme_key": theme_key,
                    "mode": mode,
                    "reason": "validation_failed",
                    "error_code": "invalid_config",
                    "errors": exc.errors(include_url=False, include_input=False),
                },
            )
            return self._fallback(tenant_id, preview, "validation_failed")

        record_config_resolution(preview=preview, outcome="resolved")
        self._store_cached(tenant_id, preview, config)
        return config
