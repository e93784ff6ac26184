"""
db/models/shipment.py

Canonical normalized shipment line item produced by upload ingestion.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, Numeric, String, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base


class ShipmentStatus:
    PROCESSED = "processed"


class Shipment(Base):
    __tablename__ = "shipments"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    unique_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Natural source identifier, or a synthesized one when absent",
    )
    package_key: Mapped[str] = mapped_column(
        String(320),
        nullable=False,
        comment="Package identifier + unique_id; groups line items of one physical package",
    )
    external_id: Mapped[str | None] = mapped_column(String(120), nullable=True)
    tracking_number: Mapped[str | None] = mapped_column(String(120), nullable=True)
    inbound_tracking: Mapped[str | None] = mapped_column(String(120), nullable=True)
    outbound_tracking: Mapped[str | None] = mapped_column(String(120), nullable=True)
    carrier: Mapped[str | None] = mapped_column(String(64), nullable=True)

    organization_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("organizations.id", ondelete="SET NULL"),
        nullable=True,
    )
    location_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("locations.id", ondelete="SET NULL"),
        nullable=True,
    )
    program_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("program_types.id", ondelete="SET NULL"),
        nullable=True,
    )

    shipping_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    processed_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    material_type: Mapped[str | None] = mapped_column(
        String(120),
        nullable=True,
        comment="Raw material value from the source",
    )
    material_label: Mapped[str] = mapped_column(
        String(120),
        nullable=False,
        default="Other",
        comment="Canonical label from the material mapping",
    )
    weight_lbs: Mapped[Decimal] = mapped_column(Numeric(12, 3), nullable=False)
    recycled_pieces: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    donated_pieces: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    city: Mapped[str | None] = mapped_column(String(120), nullable=True)
    state: Mapped[str | None] = mapped_column(String(64), nullable=True)
    postal_code: Mapped[str | None] = mapped_column(String(32), nullable=True)
    full_address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    box_type: Mapped[str | None] = mapped_column(String(64), nullable=True)

    is_contamination: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    contamination_type: Mapped[str | None] = mapped_column(String(120), nullable=True)
    has_missing_shipping_date: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    needs_identity_synthesis: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="unique_id was synthesized and is not a reliable dedup key",
    )
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default=ShipmentStatus.PROCESSED)

    import_batch: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("uploads.id", ondelete="RESTRICT"),
        nullable=False,
    )
    raw_payload: Mapped[dict[str, Any]] = mapped_column(
        JSONB,
        nullable=False,
        comment="Original source row, kept verbatim for audit and replay",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (
        UniqueConstraint("unique_id", name="uq_shipments_unique_id"),
        Index("ix_shipments_package_key", "package_key"),
        Index("ix_shipments_import_batch", "import_batch"),
        Index("ix_shipments_organization_id", "organization_id"),
        Index("ix_shipments_location_id", "location_id"),
        Index("ix_shipments_program_id", "program_id"),
        Index("ix_shipments_shipping_date", "shipping_date"),
        Index("ix_shipments_material_label", "material_label"),
    )
