"""
db/models/upload.py

Upload model: one batch ingestion job and its progress/status state.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, Index, Integer, String
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin


class UploadStatus:
    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    ALL = (QUEUED, PROCESSING, COMPLETED, FAILED)


class Upload(Base, TimestampMixin):
    __tablename__ = "uploads"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=UploadStatus.QUEUED,
        comment="queued, processing, completed, failed",
    )
    records_total: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    records_processed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    records_failed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    records_skipped: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Rows intentionally excluded (zero weight)",
    )
    error_details: Mapped[Any | None] = mapped_column(
        JSONB,
        nullable=True,
        comment="Record failures list on completion, or {error, stats} on batch failure",
    )
    started_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    __table_args__ = (
        Index("ix_uploads_status", "status"),
        Index("ix_uploads_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Upload id={self.id} status={self.status!r} processed={self.records_processed}/{self.records_total}>"
