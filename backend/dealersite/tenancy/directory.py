"""
Read-only view of the dealer directory used by the compositor and workflow.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Protocol

from sqlalchemy.orm import Session

from dealersite.crud.dealers import get_dealer, get_site_for_dealer


@dataclass(frozen=True)
class DealerRecord:
    tenant_id: str
    name: str
    theme_key: str
    locale: str = "en"
    site_overrides: dict[str, Any] = field(default_factory=dict)


class TenantDirectory(Protocol):
    def get(self, tenant_id: str) -> DealerRecord | None:
        ...


class SqlTenantDirectory:
    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def get(self, tenant_id: str) -> DealerRecord | None:
        with self._session_factory() as db:
            dealer = get_dealer(db, tenant_id)
            if dealer is None:
                return None
            site = get_site_for_dealer(db, dealer.id)
            return DealerRecord(
                tenant_id=dealer.id,
                name=dealer.name,
                theme_key=dealer.theme_key,
                locale=dealer.locale,
                site_overrides=dict(site.overrides or {}) if site is not None else {},
            )
