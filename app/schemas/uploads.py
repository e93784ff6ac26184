"""
Schemas for upload acceptance and status polling endpoints.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


class UploadAcceptedResponse(BaseModel):
    upload_id: UUID
    file_name: str
    records_total: int
    status: str


class UploadStatusResponse(BaseModel):
    upload_id: UUID
    file_name: str
    status: str
    records_total: int
    records_processed: int
    records_failed: int
    records_skipped: int
    error_details: list[dict[str, Any]] | dict[str, Any] | None = None
    created_at: datetime
    updated_at: datetime
    started_at: datetime | None = None
    completed_at: datetime | None = None


class UploadStatusListResponse(BaseModel):
    uploads: list[UploadStatusResponse] = Field(default_factory=list)
