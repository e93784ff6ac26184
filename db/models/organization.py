"""
db/models/organization.py

Organization model: the retailer or member that ships material.
Locations (stores) are scoped to an organization.
"""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Index, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, TimestampMixin

if TYPE_CHECKING:
    from db.models.location import Location


class Organization(Base, TimestampMixin):
    """
    Reference row resolved from free-text retailer/member names in uploads.

    Shipments match an organization by exact name or code.
    """

    __tablename__ = "organizations"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    code: Mapped[str | None] = mapped_column(
        String(64),
        nullable=True,
        comment="Short code used by source systems instead of the full name",
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
    )

    # ── Relationships ──────────────────────────────────────────────────────────

    locations: Mapped[list["Location"]] = relationship(
        "Location",
        back_populates="organization",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    # ── Indexes ────────────────────────────────────────────────────────────────

    __table_args__ = (
        Index("ix_organizations_name", "name"),
        Index("ix_organizations_code", "code"),
    )

    def __repr__(self) -> str:
        return f"<Organization id={self.id} name={self.name!r} code={self.code!r}>"
