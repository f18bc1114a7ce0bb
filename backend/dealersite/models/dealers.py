from sqlalchemy import Boolean, Column, ForeignKey, Index, JSON, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from dealersite.core.db import Base
from dealersite.models.mixins import TimestampMixin

JSON_TYPE = JSONB().with_variant(JSON, "sqlite")


class Dealer(TimestampMixin, Base):
    __tablename__ = "dealers"

    id = Column(String, primary_key=True)
    slug = Column(String, unique=True, nullable=False, index=True)
    name = Column(String, nullable=False)
    theme_key = Column(String, nullable=False, default="base")
    domain = Column(String, nullable=True, index=True)
    locale = Column(String, nullable=False, default="en")
    is_active = Column(Boolean, nullable=False, default=True)

    sites = relationship("DealerSite", back_populates="dealer", lazy="selectin")
    customizations = relationship("Customization", back_populates="dealer", lazy="noload")


class DealerSite(TimestampMixin, Base):
    """Hostname-to-dealer mapping carrying site-level brand overrides."""

    __tablename__ = "dealer_sites"
    __table_args__ = (
        Index("ix_dealer_sites_dealer_id", "dealer_id"),
    )

    hostname = Column(String, primary_key=True)
    dealer_id = Column(
        String,
        ForeignKey("dealers.id", ondelete="CASCADE"),
        nullable=False,
    )
    brand_name = Column(String, nullable=True)
    logo_url = Column(String, nullable=True)
    # Deep-partial DealerConfig applied after customizations.
    overrides = Column(JSON_TYPE, nullable=False, default=dict)

    dealer = relationship("Dealer", back_populates="sites", lazy="selectin")
