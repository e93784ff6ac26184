"""create reference tables

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 09:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "organizations",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column(
            "code",
            sa.String(length=64),
            nullable=True,
            comment="Short code used by source systems instead of the full name",
        ),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_organizations"),
    )
    op.create_index("ix_organizations_name", "organizations", ["name"], unique=False)
    op.create_index("ix_organizations_code", "organizations", ["code"], unique=False)

    op.create_table(
        "locations",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("organization_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("code", sa.String(length=64), nullable=True),
        sa.Column("city", sa.String(length=120), nullable=True),
        sa.Column("state", sa.String(length=64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(
            ["organization_id"],
            ["organizations.id"],
            name="fk_locations_organization_id_organizations",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_locations"),
    )
    op.create_index("ix_locations_organization_id", "locations", ["organization_id"], unique=False)
    op.create_index("ix_locations_organization_name", "locations", ["organization_id", "name"], unique=False)
    op.create_index("ix_locations_organization_code", "locations", ["organization_id", "code"], unique=False)

    op.create_table(
        "program_types",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("code", sa.String(length=64), nullable=True),
        sa.Column("description", sa.String(length=500), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_program_types"),
    )
    op.create_index("ix_program_types_name", "program_types", ["name"], unique=False)
    op.create_index("ix_program_types_code", "program_types", ["code"], unique=False)

    op.create_table(
        "material_mappings",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(
            "source_category",
            sa.String(length=120),
            nullable=False,
            comment="Material category as written by the source; matched case-insensitively",
        ),
        sa.Column(
            "new_category",
            sa.String(length=120),
            nullable=True,
            comment="Optional re-categorization of the source category",
        ),
        sa.Column(
            "canonical_label",
            sa.String(length=120),
            nullable=False,
            comment="Label shown on shipments and reports",
        ),
        sa.Column("is_recyclable", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_contamination", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("contamination_type", sa.String(length=120), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_material_mappings"),
        sa.UniqueConstraint("source_category", name="uq_material_mappings_source_category"),
    )
    op.create_index(
        "ix_material_mappings_canonical_label",
        "material_mappings",
        ["canonical_label"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_material_mappings_canonical_label", table_name="material_mappings")
    op.drop_table("material_mappings")
    op.drop_index("ix_program_types_code", table_name="program_types")
    op.drop_index("ix_program_types_name", table_name="program_types")
    op.drop_table("program_types")
    op.drop_index("ix_locations_organization_code", table_name="locations")
    op.drop_index("ix_locations_organization_name", table_name="locations")
    op.drop_index("ix_locations_organization_id", table_name="locations")
    op.drop_table("locations")
    op.drop_index("ix_organizations_code", table_name="organizations")
    op.drop_index("ix_organizations_name", table_name="organizations")
    op.drop_table("organizations")
