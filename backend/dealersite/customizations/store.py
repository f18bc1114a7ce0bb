from __future__ import annotations

from typing import Any, Callable, Protocol

from sqlalchemy.orm import Session

from dealersite.crud import customizations as crud
from dealersite.models.enums import CustomizationStatusEnum
from dealersite.schemas.dealer_config import CustomizationRead, CustomizationRevisionRead


class CustomizationStore(Protocol):
    def get(self, tenant_id: str, status: CustomizationStatusEnum) -> CustomizationRead | None:
        ...

    def upsert_draft(self, tenant_id: str, data: dict[str, Any], *, version: int) -> CustomizationRead:
        ...

    def reset_draft(self, tenant_id: str) -> CustomizationRead | None:
        ...

    def publish(self, tenant_id: str) -> CustomizationRead | None:
        ...

    def list_revisions(self, tenant_id: str, *, limit: int = 10) -> list[CustomizationRevisionRead]:
        ...


class SqlCustomizationStore:
    """
    Store adapter over the customization tables.

    Each call runs in its own session; rows are converted to read models
    before the session closes so callers never hold detached ORM objects.
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def get(self, tenant_id: str, status: CustomizationStatusEnum) -> CustomizationRead | None:
        with self._session_factory() as db:
            row = crud.get_customization(db, tenant_id, status)
            return CustomizationRead.model_validate(row) if row is not None else None

    def upsert_draft(self, tenant_id: str, data: dict[str, Any], *, version: int) -> CustomizationRead:
        with self._session_factory() as db:
            row = crud.save_draft(db, tenant_id, data, version=version)
            return CustomizationRead.model_validate(row)

    def reset_draft(self, tenant_id: str) -> CustomizationRead | None:
        with self._session_factory() as db:
            row = crud.reset_draft(db, tenant_id)
            return CustomizationRead.model_validate(row) if row is not None else None

    def publish(self, tenant_id: str) -> CustomizationRead | None:
        with self._session_factory() as db:
            row = crud.publish_draft(db, tenant_id)
            return CustomizationRead.model_validate(row) if row is not None else None

    def list_revisions(self, tenant_id: str, *, limit: int = 10) -> list[CustomizationRevisionRead]:
        with self._session_factory() as db:
            rows = crud.list_revisions(db, tenant_id, limit=limit)
            return [CustomizationRevisionRead.model_validate(row) for row in rows]
