"""create uploads and shipments tables

Revision ID: 20261019_0002
Revises: 20261019_0001
Create Date: 2026-10-19 09:30:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261019_0002"
down_revision = "20261019_0001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "uploads",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("file_name", sa.String(length=255), nullable=False),
        sa.Column(
            "status",
            sa.String(length=32),
            nullable=False,
            server_default="queued",
            comment="queued, processing, completed, failed",
        ),
        sa.Column("records_total", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("records_processed", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("records_failed", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "records_skipped",
            sa.Integer(),
            nullable=False,
            server_default="0",
            comment="Rows intentionally excluded (zero weight)",
        ),
        sa.Column(
            "error_details",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=True,
            comment="Record failures list on completion, or {error, stats} on batch failure",
        ),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_uploads"),
    )
    op.create_index("ix_uploads_status", "uploads", ["status"], unique=False)
    op.create_index("ix_uploads_created_at", "uploads", ["created_at"], unique=False)

    op.create_table(
        "shipments",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(
            "unique_id",
            sa.String(length=255),
            nullable=False,
            comment="Natural source identifier, or a synthesized one when absent",
        ),
        sa.Column(
            "package_key",
            sa.String(length=320),
            nullable=False,
            comment="Package identifier + unique_id; groups line items of one physical package",
        ),
        sa.Column("external_id", sa.String(length=120), nullable=True),
        sa.Column("tracking_number", sa.String(length=120), nullable=True),
        sa.Column("inbound_tracking", sa.String(length=120), nullable=True),
        sa.Column("outbound_tracking", sa.String(length=120), nullable=True),
        sa.Column("carrier", sa.String(length=64), nullable=True),
        sa.Column("organization_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("location_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("program_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("shipping_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("processed_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "material_type",
            sa.String(length=120),
            nullable=True,
            comment="Raw material value from the source",
        ),
        sa.Column(
            "material_label",
            sa.String(length=120),
            nullable=False,
            server_default="Other",
            comment="Canonical label from the material mapping",
        ),
        sa.Column("weight_lbs", sa.Numeric(precision=12, scale=3), nullable=False),
        sa.Column("recycled_pieces", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("donated_pieces", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("city", sa.String(length=120), nullable=True),
        sa.Column("state", sa.String(length=64), nullable=True),
        sa.Column("postal_code", sa.String(length=32), nullable=True),
        sa.Column("full_address", sa.String(length=500), nullable=True),
        sa.Column("box_type", sa.String(length=64), nullable=True),
        sa.Column("is_contamination", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("contamination_type", sa.String(length=120), nullable=True),
        sa.Column("has_missing_shipping_date", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "needs_identity_synthesis",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
            comment="unique_id was synthesized and is not a reliable dedup key",
        ),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False, server_default="processed"),
        sa.Column("import_batch", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(
            "raw_payload",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            comment="Original source row, kept verbatim for audit and replay",
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(
            ["organization_id"],
            ["organizations.id"],
            name="fk_shipments_organization_id_organizations",
            ondelete="SET NULL",
        ),
        sa.ForeignKeyConstraint(
            ["location_id"],
            ["locations.id"],
            name="fk_shipments_location_id_locations",
            ondelete="SET NULL",
        ),
        sa.ForeignKeyConstraint(
            ["program_id"],
            ["program_types.id"],
            name="fk_shipments_program_id_program_types",
            ondelete="SET NULL",
        ),
        sa.ForeignKeyConstraint(
            ["import_batch"],
            ["uploads.id"],
            name="fk_shipments_import_batch_uploads",
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_shipments"),
        sa.UniqueConstraint("unique_id", name="uq_shipments_unique_id"),
    )
    op.create_index("ix_shipments_package_key", "shipments", ["package_key"], unique=False)
    op.create_index("ix_shipments_import_batch", "shipments", ["import_batch"], unique=False)
    op.create_index("ix_shipments_organization_id", "shipments", ["organization_id"], unique=False)
    op.create_index("ix_shipments_location_id", "shipments", ["location_id"], unique=False)
    op.create_index("ix_shipments_program_id", "shipments", ["program_id"], unique=False)
    op.create_index("ix_shipments_shipping_date", "shipments", ["shipping_date"], unique=False)
    op.create_index("ix_shipments_material_label", "shipments", ["material_label"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_shipments_material_label", table_name="shipments")
    op.drop_index("ix_shipments_shipping_date", table_name="shipments")
    op.drop_index("ix_shipments_program_id", table_name="shipments")
    op.drop_index("ix_shipments_location_id", table_name="shipments")
    op.drop_index("ix_shipments_organization_id", table_name="shipments")
    op.drop_index("ix_shipments_import_batch", table_name="shipments")
    op.drop_index("ix_shipments_package_key", table_name="shipments")
    op.drop_table("shipments")
    op.drop_index("ix_uploads_created_at", table_name="uploads")
    op.drop_index("ix_uploads_status", table_name="uploads")
    op.drop_table("uploads")
