"""
db/models/material_mapping.py

Source material category -> canonical classification used to label shipments.
"""

from __future__ import annotations

import uuid

from sqlalchemy import Boolean, Index, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin


class MaterialMapping(Base, TimestampMixin):
    __tablename__ = "material_mappings"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    source_category: Mapped[str] = mapped_column(
        String(120),
        nullable=False,
        comment="Material category as written by the source; matched case-insensitively",
    )
    new_category: Mapped[str | None] = mapped_column(
        String(120),
        nullable=True,
        comment="Optional re-categorization of the source category",
    )
    canonical_label: Mapped[str] = mapped_column(
        String(120),
        nullable=False,
        comment="Label shown on shipments and reports",
    )
    is_recyclable: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_contamination: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    contamination_type: Mapped[str | None] = mapped_column(String(120), nullable=True)

    __table_args__ = (
        UniqueConstraint("source_category", name="uq_material_mappings_source_category"),
        Index("ix_material_mappings_canonical_label", "canonical_label"),
    )
