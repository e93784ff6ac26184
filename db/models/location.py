"""
db/models/location.py

Location (store) model, always owned by one organization.
"""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, TimestampMixin

if TYPE_CHECKING:
    from db.models.organization import Organization


class Location(Base, TimestampMixin):
    __tablename__ = "locations"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    organization_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    code: Mapped[str | None] = mapped_column(String(64), nullable=True)
    city: Mapped[str | None] = mapped_column(String(120), nullable=True)
    state: Mapped[str | None] = mapped_column(String(64), nullable=True)

    organization: Mapped["Organization"] = relationship(
        "Organization",
        back_populates="locations",
    )

    __table_args__ = (
        Index("ix_locations_organization_id", "organization_id"),
        Index("ix_locations_organization_name", "organization_id", "name"),
        Index("ix_locations_organization_code", "organization_id", "code"),
    )

    def __repr__(self) -> str:
        return f"<Location id={self.id} organization_id={self.organization_id} name={self.name!r}>"
