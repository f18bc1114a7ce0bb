from uuid import uuid4

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, JSON, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from dealersite.core.db import Base
from dealersite.core.time import utcnow
from dealersite.models.mixins import TimestampMixin

JSON_TYPE = JSONB().with_variant(JSON, "sqlite")


def _new_id() -> str:
    return uuid4().hex


class Customization(TimestampMixin, Base):
    __tablename__ = "customizations"
    __table_args__ = (
        UniqueConstraint("dealer_id", "status", name="uq_customizations_dealer_status"),
    )

    id = Column(String, primary_key=True, default=_new_id)
    dealer_id = Column(
        String,
        ForeignKey("dealers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    version = Column(Integer, nullable=False, default=1)
    status = Column(String, nullable=False)
    # Deep-partial DealerConfig, camelCase keys as exchanged with the admin UI.
    data = Column(JSON_TYPE, nullable=False, default=dict)

    dealer = relationship("Dealer", back_populates="customizations", lazy="noload")


class CustomizationRevision(Base):
    """Append-only snapshot written by every publish."""

    __tablename__ = "customization_revisions"
    __table_args__ = (
        Index("ix_customization_revisions_dealer_version", "dealer_id", "version"),
    )

    id = Column(String, primary_key=True, default=_new_id)
    dealer_id = Column(
        String,
        ForeignKey("dealers.id", ondelete="CASCADE"),
        nullable=False,
    )
    version = Column(Integer, nullable=False)
    snapshot = Column(JSON_TYPE, nullable=False, default=dict)
    created_at = Column(DateTime, default=utcnow, nullable=False)
