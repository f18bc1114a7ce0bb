"""create dealer site tables

Revision ID: 7d3e1f0a9b2c
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "7d3e1f0a9b2c"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    json_type = postgresql.JSONB().with_variant(sa.JSON(), "sqlite")
    op.create_table(
        "dealers",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("slug", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("theme_key", sa.String(), nullable=False, server_default="base"),
        sa.Column("domain", sa.String(), nullable=True),
        sa.Column("locale", sa.String(), nullable=False, server_default="en"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index(op.f("ix_dealers_slug"), "dealers", ["slug"], unique=True)
    op.create_index(op.f("ix_dealers_domain"), "dealers", ["domain"], unique=False)

    op.create_table(
        "dealer_sites",
        sa.Column("hostname", sa.String(), primary_key=True),
        sa.Column(
            "dealer_id",
            sa.String(),
            sa.ForeignKey("dealers.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("brand_name", sa.String(), nullable=True),
        sa.Column("logo_url", sa.String(), nullable=True),
        sa.Column("overrides", json_type, nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_dealer_sites_dealer_id", "dealer_sites", ["dealer_id"], unique=False)

    op.create_table(
        "customizations",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column(
            "dealer_id",
            sa.String(),
            sa.ForeignKey("dealers.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("data", json_type, nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("dealer_id", "status", name="uq_customizations_dealer_status"),
    )
    op.create_index(op.f("ix_customizations_dealer_id"), "customizations", ["dealer_id"], unique=False)

    op.create_table(
        "customization_revisions",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column(
            "dealer_id",
            sa.String(),
            sa.ForeignKey("dealers.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("snapshot", json_type, nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index(
        "ix_customization_revisions_dealer_version",
        "customization_revisions",
        ["dealer_id", "version"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_customization_revisions_dealer_version", table_name="customization_revisions")
    op.drop_table("customization_revisions")
    op.drop_index(op.f("ix_customizations_dealer_id"), table_name="customizations")
    op.drop_table("customizations")
    op.drop_index("ix_dealer_sites_dealer_id", table_name="dealer_sites")
    op.drop_table("dealer_sites")
    op.drop_index(op.f("ix_dealers_domain"), table_name="dealers")
    op.drop_index(op.f("ix_dealers_slug"), table_name="dealers")
    op.drop_table("dealers")
