from __future__ import annotations

import logging
from typing import Any, Mapping

from pydantic import ValidationError

from dealersite.core.cache import CacheInvalidator, TenantCacheInvalidator
from dealersite.core.logging import site_logger
from dealersite.core.merge import deep_merge
from dealersite.core.metrics import record_customization_action
from dealersite.customizations.errors import InvalidCustomizationError, NoDraftError, UnknownTemplateError
from dealersite.customizations.store import CustomizationStore
from dealersite.models.enums import CustomizationStatusEnum
from dealersite.schemas.dealer_config import (
    CustomizationRead,
    CustomizationRevisionRead,
    DealerConfigPatch,
)
from dealersite.tenancy.directory import TenantDirectory
from dealersite.tenancy.errors import DealerNotFoundError
from dealersite.themes.templates import TemplateRegistry, build_default_template_registry


logger = logging.getLogger(__name__)


class CustomizationWorkflow:
    """
    Admin-side lifecycle of a dealer's customization: edit the DRAFT or
    seed it from a template, reset it, publish it.

    Writes propagate their failures. Cache invalidation runs after a
    successful write and never fails the operation.
    """

    def __init__(
        self,
        store: CustomizationStore,
        directory: TenantDirectory,
        *,
        invalidator: CacheInvalidator | None = None,
        templates: TemplateRegistry | None = None,
    ) -> None:
        self._store = store
        self._directory = directory
        self._invalidator = invalidator or TenantCacheInvalidator()
        self._templates = templates or build_default_template_registry()

    def _require_tenant(self, tenant_id: str) -> None:
        if self._directory.get(tenant_id) is None:
            raise DealerNotFoundError(tenant_id)

    def _invalidate(self, tenant_id: str) -> None:
        try:
            self._invalidator.invalidate(tenant_id)
        except Exception:
            logger.warning("customization.invalidate_failed", extra={"tenant_id": tenant_id}, exc_info=True)

    def _draft_base(self, tenant_id: str) -> tuple[dict[str, Any], int]:
        # An existing DRAFT keeps its version; a new one starts after PUBLISHED.
        draft = self._store.get(tenant_id, CustomizationStatusEnum.DRAFT)
        if draft is not None:
            return draft.data, draft.version
        published = self._store.get(tenant_id, CustomizationStatusEnum.PUBLISHED)
        if published is None:
            return {}, 1
        return published.data, published.version + 1

    def upsert_draft(self, tenant_id: str, partial: Mapping[str, Any]) -> CustomizationRead:
        self._require_tenant(tenant_id)
        try:
            patch = DealerConfigPatch.model_validate(partial)
        except ValidationError as exc:
            record_customization_action("upsert_draft", success=False)
            site_logger.info(
                "customization.draft_rejected",
                extra={"tenant_id": tenant_id, "reason": "validation", "error_count": exc.error_count()},
            )
            raise InvalidCustomizationError(tenant_id, exc.errors(include_url=False)) from exc

        base, version = self._draft_base(tenant_id)
        merged = deep_merge(base, patch.to_payload())
        try:
            record = self._store.upsert_draft(tenant_id, merged, version=version)
        except Exception:
            record_customization_action("upsert_draft", success=False)
            raise
        record_customization_action("upsert_draft", success=True)
        site_logger.info(
            "customization.draft_saved",
            extra={"tenant_id": tenant_id, "version": record.version},
        )
        self._invalidate(tenant_id)
        return record

    def select_template(self, tenant_id: str, template_key: str) -> CustomizationRead:
        """
        Replace the DRAFT with a starter template's config. Earlier draft
        edits are discarded; PUBLISHED is untouched until publish().
        """
        self._require_tenant(tenant_id)
        template = self._templates.get(template_key)
        if template is None:
            record_customization_action("select_template", success=False)
            raise UnknownTemplateError(template_key)

        _, version = self._draft_base(tenant_id)
        try:
            record = self._store.upsert_draft(tenant_id, template.draft_data(), version=version)
        except Exception:
            record_customization_action("select_template", success=False)
            raise
        record_customization_action("select_template", success=True)
        site_logger.info(
            "customization.template_selected",
            extra={"tenant_id": tenant_id, "template_key": template.key, "version": record.version},
        )
        self._invalidate(tenant_id)
        return record

    def get_draft(self, tenant_id: str) -> CustomizationRead | None:
        self._require_tenant(tenant_id)
        return self._store.get(tenant_id, CustomizationStatusEnum.DRAFT)

    def get_published(self, tenant_id: str) -> CustomizationRead | None:
        self._require_tenant(tenant_id)
        return self._store.get(tenant_id, CustomizationStatusEnum.PUBLISHED)

    def delete_draft(self, tenant_id: str) -> CustomizationRead:
        """
        Empty the DRAFT rather than deleting it. Later edits therefore merge
        onto `{}`, not onto the PUBLISHED data.
        """
        self._require_tenant(tenant_id)
        try:
            record = self._store.reset_draft(tenant_id)
        except Exception:
            record_customization_action("delete_draft", success=False)
            raise
        if record is None:
            record_customization_action("delete_draft", success=False)
            raise NoDraftError(tenant_id)
        record_customization_action("delete_draft", success=True)
        site_logger.info("customization.draft_reset", extra={"tenant_id": tenant_id})
        self._invalidate(tenant_id)
        return record

    def publish(self, tenant_id: str) -> CustomizationRead:
        self._require_tenant(tenant_id)
        try:
            record = self._store.publish(tenant_id)
        except Exception:
            record_customization_action("publish", success=False)
            site_logger.error(
                "customization.publish_failed",
                extra={"tenant_id": tenant_id, "reason": "write_failed"},
                exc_info=True,
            )
            raise
        if record is None:
            record_customization_action("publish", success=False)
            raise NoDraftError(tenant_id)
        record_customization_action("publish", success=True)
        site_logger.info(
            "customization.published",
            extra={"tenant_id": tenant_id, "version": record.version},
        )
        self._invalidate(tenant_id)
        return record

    def list_revisions(self, tenant_id: str, *, limit: int = 10) -> list[CustomizationRevisionRead]:
        self._require_tenant(tenant_id)
        return self._store.list_revisions(tenant_id, limit=limit)
