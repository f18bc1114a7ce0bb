from uuid import uuid4

from dealersite.crud.dealers import create_dealer, create_site
from dealersite.models.customizations import Customization
from dealersite.models.enums import CustomizationStatusEnum


def make_dealer(
    db,
    *,
    dealer_id: str | None = None,
    name: str | None = None,
    theme_key: str = "base",
    domain: str | None = None,
    locale: str = "en",
    is_active: bool = True,
):
    dealer_id = dealer_id or uuid4().hex[:8]
    return create_dealer(
        db,
        dealer_id=dealer_id,
        name=name or f"Dealer {dealer_id}",
        slug=f"dealer-{dealer_id}",
        theme_key=theme_key,
        domain=domain,
        locale=locale,
        is_active=is_active,
    )


def make_site(db, *, dealer, hostname: str | None = None, overrides: dict | None = None):
    hostname = hostname or f"site-{uuid4().hex[:6]}.example.com"
    site = create_site(db, dealer_id=dealer.id, hostname=hostname, overrides=overrides)
    db.refresh(dealer)
    return site


def make_customization(db, *, dealer, status: CustomizationStatusEnum, data: dict, version: int = 1):
    """Insert a raw row, bypassing workflow validation."""
    row = Customization(dealer_id=dealer.id, status=status.value, version=version, data=data)
    db.add(row)
    db.commit()
    db.refresh(row)
    db.refresh(dealer)
    return row
