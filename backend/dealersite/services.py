"""
Startup wiring: builds the registries, resolvers and workflow once and
hands them around as one object.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from sqlalchemy.orm import Session

from dealersite.components.models import ComponentImplementation
from dealersite.components.registry import ComponentRegistry
from dealersite.components.resolver import ComponentResolver
from dealersite.composition.compositor import ConfigCompositor
from dealersite.core.cache import CacheService, TenantCacheInvalidator
from dealersite.customizations.store import CustomizationStore, SqlCustomizationStore
from dealersite.customizations.workflow import CustomizationWorkflow
from dealersite.models.enums import CustomizationStatusEnum
from dealersite.schemas.dealer_config import DealerConfig
from dealersite.tenancy.context import TenantInfo
from dealersite.tenancy.directory import SqlTenantDirectory, TenantDirectory
from dealersite.themes.dealers import DealerOverrideRegistry, build_default_dealer_registry
from dealersite.themes.models import DealerOverrides, ResolvedTheme
from dealersite.themes.registry import ThemeRegistry, build_default_theme_registry
from dealersite.themes.resolver import resolve_theme
from dealersite.themes.templates import TemplateRegistry


logger = logging.getLogger(__name__)


@dataclass
class SiteServices:
    themes: ThemeRegistry
    dealers: DealerOverrideRegistry
    components: ComponentResolver
    store: CustomizationStore
    directory: TenantDirectory
    compositor: ConfigCompositor
    workflow: CustomizationWorkflow

    def resolve_config(self, tenant_id: str, preview: bool = False) -> DealerConfig:
        return self.compositor.resolve_config(tenant_id, preview=preview)

    def resolve_component(self, name: str, tenant: TenantInfo) -> ComponentImplementation:
        return self.components.resolve(name, tenant)

    def resolve_theme(self, tenant: TenantInfo, preview: bool = False) -> ResolvedTheme:
        """
        Theme chain, then the tokens and pages of the dealer's selected
        template, then the dealer's registered overrides.
        """
        overrides = self._template_overrides(tenant.tenant_id, preview)
        return resolve_theme(
            self.themes,
            tenant.theme_key,
            overrides.merged_with(self.dealers.get(tenant.tenant_id)),
        )

    def _template_overrides(self, tenant_id: str, preview: bool) -> DealerOverrides:
        statuses = [CustomizationStatusEnum.PUBLISHED]
        if preview:
            statuses.insert(0, CustomizationStatusEnum.DRAFT)
        try:
            for status in statuses:
                record = self.store.get(tenant_id, status)
                if record is not None and record.data.get("template"):
                    return DealerOverrides.from_mapping(record.data["template"])
        except Exception:
            logger.warning("theme.template_read_failed", extra={"tenant_id": tenant_id}, exc_info=True)
        return DealerOverrides()


def build_site_services(
    session_factory: Callable[[], Session] | None = None,
    *,
    themes: ThemeRegistry | None = None,
    dealers: DealerOverrideRegistry | None = None,
    store: CustomizationStore | None = None,
    directory: TenantDirectory | None = None,
    cache: CacheService | None = None,
    templates: TemplateRegistry | None = None,
) -> SiteServices:
    if session_factory is None and (store is None or directory is None):
        from dealersite.core.db import SessionLocal

        session_factory = SessionLocal
    themes = themes or build_default_theme_registry()
    dealers = dealers or build_default_dealer_registry()
    store = store or SqlCustomizationStore(session_factory)
    directory = directory or SqlTenantDirectory(session_factory)
    component_registry = ComponentRegistry.from_registries(themes, dealers)
    return SiteServices(
        themes=themes,
        dealers=dealers,
        components=ComponentResolver(component_registry, themes),
        store=store,
        directory=directory,
        compositor=ConfigCompositor(store, directory, themes=themes, cache=cache),
        workflow=CustomizationWorkflow(
            store,
            directory,
            invalidator=TenantCacheInvalidator(cache=cache),
            templates=templates,
        ),
    )
