"""
Repository for upload lifecycle persistence and status lookup.

Does not commit; callers own the transaction.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from db.models.upload import Upload, UploadStatus


class UploadRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def create_upload(self, *, file_name: str) -> Upload:
        upload = Upload(
            file_name=file_name,
            status=UploadStatus.QUEUED,
            records_total=0,
            records_processed=0,
            records_failed=0,
            records_skipped=0,
        )
        self._session.add(upload)
        self._session.flush()
        self._session.refresh(upload)
        return upload

    def get_upload(self, upload_id: uuid.UUID) -> Upload | None:
        return self._session.get(Upload, upload_id)

    def list_uploads(
        self,
        *,
        limit: int = 20,
        offset: int = 0,
        status: str | None = None,
    ) -> list[Upload]:
        stmt: Select[tuple[Upload]] = select(Upload)

        if status:
            stmt = stmt.where(Upload.status == status)

        stmt = stmt.order_by(Upload.created_at.desc()).offset(max(0, offset)).limit(max(1, limit))
        return list(self._session.scalars(stmt).all())

    def mark_processing(self, *, upload_id: uuid.UUID, records_total: int) -> Upload | None:
        upload = self.get_upload(upload_id)
        if upload is None:
            return None
        upload.status = UploadStatus.PROCESSING
        upload.records_total = records_total
        upload.records_processed = 0
        upload.records_failed = 0
        upload.records_skipped = 0
        upload.error_details = None
        upload.started_at = datetime.now(timezone.utc)
        upload.completed_at = None
        return upload

    def record_progress(
        self,
        *,
        upload_id: uuid.UUID,
        records_processed: int,
        records_failed: int,
        records_skipped: int,
    ) -> Upload | None:
        upload = self.get_upload(upload_id)
        if upload is None:
            return None
        upload.records_processed = records_processed
        upload.records_failed = records_failed
        upload.records_skipped = records_skipped
        return upload

    def mark_completed(
        self,
        *,
        upload_id: uuid.UUID,
        records_processed: int,
        records_failed: int,
        records_skipped: int,
        error_details: list[dict[str, Any]] | None = None,
    ) -> Upload | None:
        upload = self.record_progress(
            upload_id=upload_id,
            records_processed=records_processed,
            records_failed=records_failed,
            records_skipped=records_skipped,
        )
        if upload is None:
            return None
        upload.status = UploadStatus.COMPLETED
        upload.completed_at = datetime.now(timezone.utc)
        upload.error_details = error_details or None
        return upload

    def mark_failed(
        self,
        *,
        upload_id: uuid.UUID,
        error_details: dict[str, Any],
        records_processed: int | None = None,
        records_failed: int | None = None,
        records_skipped: int | None = None,
    ) -> Upload | None:
        upload = self.get_upload(upload_id)
        if upload is None:
            return None
        upload.status = UploadStatus.FAILED
        upload.completed_at = datetime.now(timezone.utc)
        upload.error_details = error_details
        if records_processed is not None:
            upload.records_processed = records_processed
        if records_failed is not None:
            upload.records_failed = records_failed
        if records_skipped is not None:
            upload.records_skipped = records_skipped
        return upload
