"""
Upload acceptance and status polling endpoints.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, UploadFile, status
from sqlalchemy.orm import Session

from app.api.dependencies import get_delimited_upload, validate_upload_status_filter
from app.domain.errors import UploadDecodeError
from app.schemas.uploads import UploadAcceptedResponse, UploadStatusListResponse, UploadStatusResponse
from app.services.upload_service import FastAPIBackgroundTaskExecutor, UploadService, get_upload_service
from db.models.upload import Upload
from db.session import get_db

router = APIRouter(tags=["uploads"])


@router.post(
    "/uploads",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=UploadAcceptedResponse,
)
def accept_upload(
    background_tasks: BackgroundTasks,
    file: UploadFile = Depends(get_delimited_upload),
    db: Session = Depends(get_db),
    upload_service: UploadService = Depends(get_upload_service),
) -> UploadAcceptedResponse:
    """
    Accept one shipment file; rows are processed in the background.
    """

    try:
        content = file.file.read()
        upload = upload_service.accept_upload(
            db=db,
            executor=FastAPIBackgroundTaskExecutor(background_tasks),
            file_name=file.filename or "upload.csv",
            content=content,
        )
    except UploadDecodeError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    finally:
        file.file.close()

    return UploadAcceptedResponse(
        upload_id=upload.id,
        file_name=upload.file_name,
        records_total=upload.records_total,
        status=upload.status,
    )


@router.get("/uploads", response_model=UploadStatusListResponse)
def list_uploads(
    status_filter: str | None = Query(default=None, alias="status", description="Optional status filter"),
    limit: int = Query(default=20, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    upload_service: UploadService = Depends(get_upload_service),
) -> UploadStatusListResponse:
    uploads = upload_service.list_uploads(
        db=db,
        limit=limit,
        offset=offset,
        status=validate_upload_status_filter(status_filter),
    )
    return UploadStatusListResponse(uploads=[to_status_response(upload) for upload in uploads])


@router.get("/uploads/{upload_id}", response_model=UploadStatusResponse)
def get_upload(
    upload_id: UUID,
    db: Session = Depends(get_db),
    upload_service: UploadService = Depends(get_upload_service),
) -> UploadStatusResponse:
    upload = upload_service.get_upload(db=db, upload_id=upload_id)
    if upload is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Upload not found: {upload_id}",
        )
    return to_status_response(upload)


def to_status_response(upload: Upload) -> UploadStatusResponse:
    return UploadStatusResponse(
        upload_id=upload.id,
        file_name=upload.file_name,
        status=upload.status,
        records_total=upload.records_total,
        records_processed=upload.records_processed,
        records_failed=upload.records_failed,
        records_skipped=upload.records_skipped,
        error_details=upload.error_details,
        created_at=upload.created_at,
        updated_at=upload.updated_at,
        started_at=upload.started_at,
        completed_at=upload.completed_at,
    )
