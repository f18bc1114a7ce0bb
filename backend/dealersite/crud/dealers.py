from __future__ import annotations

from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from dealersite.models.dealers import Dealer, DealerSite


def get_dealer(db: Session, dealer_id: str, *, include_inactive: bool = False) -> Dealer | None:
    query = db.query(Dealer).filter(Dealer.id == dealer_id)
    if not include_inactive:
        query = query.filter(Dealer.is_active.is_(True))
    return query.first()


def get_dealer_by_slug(db: Session, slug: str) -> Dealer | None:
    return (
        db.query(Dealer)
        .filter(Dealer.slug == slug, Dealer.is_active.is_(True))
        .first()
    )


def get_dealer_by_domain(db: Session, domain: str) -> Dealer | None:
    return (
        db.query(Dealer)
        .filter(Dealer.domain == domain, Dealer.is_active.is_(True))
        .first()
    )


def get_site_by_hostname(db: Session, hostname: str) -> DealerSite | None:
    return db.query(DealerSite).filter(DealerSite.hostname == hostname).first()


def get_site_for_dealer(db: Session, dealer_id: str) -> DealerSite | None:
    return (
        db.query(DealerSite)
        .filter(DealerSite.dealer_id == dealer_id)
        .order_by(DealerSite.created_at.asc(), DealerSite.hostname.asc())
        .first()
    )


def find_dealer_by_host(db: Session, hostname: str) -> Dealer | None:
    """Site mapping first, then the dealer's primary domain."""
    site = get_site_by_hostname(db, hostname)
    if site is not None:
        dealer = get_dealer(db, site.dealer_id)
        if dealer is not None:
            return dealer
    return get_dealer_by_domain(db, hostname)


def create_dealer(
    db: Session,
    *,
    dealer_id: str,
    name: str,
    slug: str | None = None,
    theme_key: str = "base",
    domain: str | None = None,
    locale: str = "en",
    is_active: bool = True,
) -> Dealer:
    dealer = Dealer(
        id=dealer_id,
        name=name,
        slug=slug or dealer_id,
        theme_key=theme_key,
        domain=domain.strip().lower() if domain else None,
        locale=locale,
        is_active=is_active,
    )
    db.add(dealer)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ValueError("Dealer id or slug already exists.") from exc
    db.refresh(dealer)
    return dealer


def create_site(
    db: Session,
    *,
    dealer_id: str,
    hostname: str,
    brand_name: str | None = None,
    logo_url: str | None = None,
    overrides: dict[str, Any] | None = None,
) -> DealerSite:
    site = DealerSite(
        hostname=hostname.strip().lower(),
        dealer_id=dealer_id,
        brand_name=brand_name or None,
        logo_url=logo_url or None,
        overrides=dict(overrides or {}),
    )
    db.add(site)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ValueError("Hostname already mapped to a dealer.") from exc
    db.refresh(site)
    return site
