"""
Material mapping administration endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.domain.reference import ReferenceMappingEntry
from app.schemas.reference import (
    MaterialMappingItem,
    MaterialMappingListResponse,
    MaterialMappingReplaceRequest,
    MaterialMappingReplaceResponse,
)
from app.services.upload_service import UploadService, get_upload_service
from db.session import get_db

router = APIRouter(tags=["material-mappings"])


@router.get("/material-mappings", response_model=MaterialMappingListResponse)
def list_material_mappings(
    db: Session = Depends(get_db),
    upload_service: UploadService = Depends(get_upload_service),
) -> MaterialMappingListResponse:
    entries = upload_service.list_material_mappings(db=db)
    return MaterialMappingListResponse(
        mappings=[
            MaterialMappingItem(
                source_category=entry.source_category,
                canonical_label=entry.canonical_label,
                new_category=entry.new_category,
                is_recyclable=entry.is_recyclable,
                is_contamination=entry.is_contamination,
                contamination_type=entry.contamination_type,
            )
            for entry in entries
        ]
    )


@router.put("/material-mappings", response_model=MaterialMappingReplaceResponse)
def replace_material_mappings(
    payload: MaterialMappingReplaceRequest,
    db: Session = Depends(get_db),
    upload_service: UploadService = Depends(get_upload_service),
) -> MaterialMappingReplaceResponse:
    """
    Replace the whole material mapping table. Applies to uploads started afterwards.
    """

    replaced = upload_service.replace_material_mappings(
        db=db,
        entries=[
            ReferenceMappingEntry(
                source_category=item.source_category,
                canonical_label=item.canonical_label,
                new_category=item.new_category,
                is_recyclable=item.is_recyclable,
                is_contamination=item.is_contamination,
                contamination_type=item.contamination_type,
            )
            for item in payload.mappings
        ],
    )
    return MaterialMappingReplaceResponse(replaced=replaced)
