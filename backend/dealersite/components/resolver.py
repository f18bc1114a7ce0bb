from __future__ import annotations

import logging
from typing import Iterable

from dealersite.components.models import ComponentImplementation, missing_component
from dealersite.components.registry import ComponentRegistry, dealer_scope, theme_scope
from dealersite.core.metrics import record_component_resolution
from dealersite.tenancy.context import TenantInfo
from dealersite.themes.registry import ThemeRegistry
from dealersite.themes.resolver import theme_chain


logger = logging.getLogger(__name__)


class ComponentResolver:
    """
    Picks the most specific implementation of a logical component.

    Order: dealer override, the tenant's theme and its ancestors (leaf
    first), the default base theme, then a visible "missing component"
    placeholder. A factory that raises counts as a miss at that level.
    Results are memoized per (tenant_id, theme_key, name) for the life of
    the resolver; component code is bound at deploy time, so customization
    edits never invalidate this memo.
    """

    def __init__(self, components: ComponentRegistry, themes: ThemeRegistry) -> None:
        self._components = components
        self._themes = themes
        self._cache: dict[tuple[str, str, str], ComponentImplementation] = {}

    def _candidate_scopes(self, tenant: TenantInfo) -> list[tuple[str, str]]:
        scopes = [("dealer", dealer_scope(tenant.tenant_id))]
        chain = theme_chain(self._themes, tenant.theme_key)
        default_key = self._themes.normalize(self._themes.default_key)
        for theme in reversed(chain):
            level = "base" if theme.key == default_key else "theme"
            scopes.append((level, theme_scope(theme.key)))
        if default_key not in {theme.key for theme in chain}:
            scopes.append(("base", theme_scope(default_key)))
        return scopes

    def _load(self, scope: str, name: str) -> ComponentImplementation | None:
        factory = self._components.lookup(scope, name)
        if factory is None:
            return None
        try:
            return factory()
        except Exception:
            logger.debug(
                "component.load_failed",
                extra={"scope": scope, "component": name},
                exc_info=True,
            )
            return None

    def resolve(self, name: str, tenant: TenantInfo) -> ComponentImplementation:
        cache_key = (tenant.tenant_id, tenant.theme_key, name)
        cached = self._cache.get(cache_key)
        if cached is not None:
            return cached

        resolved = None
        level = "fallback"
        for candidate_level, scope in self._candidate_scopes(tenant):
            resolved = self._load(scope, name)
            if resolved is not None:
                level = candidate_level
                break
        if resolved is None:
            logger.info(
                "component.missing",
                extra={"tenant_id": tenant.tenant_id, "theme_key": tenant.theme_key, "component": name},
            )
            resolved = missing_component(name)

        record_component_resolution(level)
        # Two concurrent misses may both land here; the value is identical.
        self._cache[cache_key] = resolved
        return resolved

    def resolve_many(
        self,
        names: Iterable[str],
        tenant: TenantInfo,
    ) -> dict[str, ComponentImplementation]:
        return {name: self.resolve(name, tenant) for name in names}

    def clear(self) -> None:
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)
