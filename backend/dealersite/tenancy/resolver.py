"""
Maps an incoming request (dealer header, host, path) to a TenantInfo.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from dealersite.core.cache import TENANT_LOOKUP_CACHE, cache_get, cache_set, tagged_cache_key
from dealersite.core.config import settings
from dealersite.crud.dealers import find_dealer_by_host, get_dealer, get_dealer_by_slug
from dealersite.models.dealers import Dealer
from dealersite.tenancy.context import TenantInfo
from dealersite.tenancy.errors import NoTenantResolvedError

logger = logging.getLogger(__name__)

_LOCALE_SEGMENT = re.compile(r"^/([A-Za-z]{2})(?:/|$)")


def normalize_host(host: str | None) -> str | None:
    """
    Lowercase a Host header or URL down to a bare hostname.

    Drops the scheme, path, port, trailing dot and a leading ``www.``.
    """
    if not host:
        return None
    value = host.strip().lower()
    if "://" in value:
        value = value.split("://", 1)[1]
    value = value.split("/", 1)[0]
    value = value.split(":", 1)[0].rstrip(".")
    if value.startswith("www."):
        value = value[4:]
    return value or None


def locale_from_path(pathname: str | None) -> str | None:
    if not pathname:
        return None
    match = _LOCALE_SEGMENT.match(pathname)
    if not match:
        return None
    candidate = match.group(1).lower()
    if candidate in settings.SUPPORTED_LOCALES:
        return candidate
    return None


def _dealer_payload(dealer: Dealer) -> dict[str, Any]:
    return {"tenant_id": dealer.id, "theme_key": dealer.theme_key, "locale": dealer.locale}


def _lookup_by_id(db: Session, dealer_id: str) -> dict[str, Any] | None:
    cache_key = tagged_cache_key(f"dealer:{dealer_id}", "tenant")
    cached = cache_get(cache_key, cache_name=TENANT_LOOKUP_CACHE)
    if cached:
        return cached
    try:
        dealer = get_dealer(db, dealer_id)
    except SQLAlchemyError:
        logger.warning("tenant.lookup_failed", extra={"tenant_id": dealer_id}, exc_info=True)
        return None
    if dealer is None:
        return None
    payload = _dealer_payload(dealer)
    cache_set(cache_key, payload, ttl=settings.TENANT_CACHE_TTL_SECONDS, cache_name=TENANT_LOOKUP_CACHE)
    return payload


def _lookup_by_host(db: Session, hostname: str) -> dict[str, Any] | None:
    cache_key = tagged_cache_key(f"host:{hostname}", "tenant")
    cached = cache_get(cache_key, cache_name=TENANT_LOOKUP_CACHE)
    if cached:
        return cached
    try:
        dealer = find_dealer_by_host(db, hostname)
        if dealer is None and f"www.{hostname}" != hostname:
            dealer = find_dealer_by_host(db, f"www.{hostname}")
        if dealer is None and "." in hostname:
            # dealer-slug.platform.tld
            dealer = get_dealer_by_slug(db, hostname.split(".", 1)[0])
    except SQLAlchemyError:
        logger.warning("tenant.lookup_failed", extra={"host": hostname}, exc_info=True)
        return None
    if dealer is None:
        return None
    payload = _dealer_payload(dealer)
    cache_set(cache_key, payload, ttl=settings.TENANT_CACHE_TTL_SECONDS, cache_name=TENANT_LOOKUP_CACHE)
    return payload


def resolve_tenant(
    db: Session,
    host: str | None = None,
    pathname: str | None = None,
    dealer_header: str | None = None,
) -> TenantInfo:
    """
    Identify the dealer for a request.

    Order: explicit dealer header, then hostname, then DEFAULT_DEALER_ID.
    An unknown header value falls through to the host. Locale comes from
    the first path segment when supported, else the dealer's own locale.
    """
    found = None
    header_value = (dealer_header or "").strip()
    if header_value:
        found = _lookup_by_id(db, header_value)
    if found is None:
        hostname = normalize_host(host)
        if hostname:
            found = _lookup_by_host(db, hostname)
    if found is None and settings.DEFAULT_DEALER_ID:
        found = _lookup_by_id(db, settings.DEFAULT_DEALER_ID)
    if found is None:
        raise NoTenantResolvedError(
            f"No dealer for header={header_value or None!r} host={host!r}"
        )

    locale = locale_from_path(pathname) or found.get("locale") or settings.DEFAULT_LOCALE
    return TenantInfo(
        tenant_id=found["tenant_id"],
        theme_key=found["theme_key"],
        locale=locale,
    )
