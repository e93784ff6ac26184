"""
app/api/dependencies.py

Shared FastAPI dependencies for request validation.
"""

from __future__ import annotations

from fastapi import File, HTTPException, UploadFile, status

from db.models.upload import UploadStatus

DELIMITED_TEXT_EXTENSIONS = (".csv", ".tsv", ".txt")
DELIMITED_TEXT_CONTENT_TYPES = {
    "text/csv",
    "application/csv",
    "application/vnd.ms-excel",
    "text/tab-separated-values",
    "text/plain",
}


def get_delimited_upload(file: UploadFile = File(...)) -> UploadFile:
    """
    Accept a delimited text file by extension or MIME type.
    """

    filename = (file.filename or "").strip().lower()
    content_type = (file.content_type or "").strip().lower()

    if not filename.endswith(DELIMITED_TEXT_EXTENSIONS) and content_type not in DELIMITED_TEXT_CONTENT_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only CSV or delimited text files are allowed.",
        )

    return file


def validate_upload_status_filter(value: str | None) -> str | None:
    if value is None:
        return None
    normalized = value.strip().lower()
    if normalized not in UploadStatus.ALL:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown status '{value}'. Allowed: {', '.join(UploadStatus.ALL)}.",
        )
    return normalized
