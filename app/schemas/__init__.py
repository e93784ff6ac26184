"""
app/schemas package marker.
"""

from app.schemas.reference import (
    MaterialMappingItem,
    MaterialMappingListResponse,
    MaterialMappingReplaceRequest,
    MaterialMappingReplaceResponse,
)
from app.schemas.uploads import (
    UploadAcceptedResponse,
    UploadStatusListResponse,
    UploadStatusResponse,
)

__all__ = [
    "MaterialMappingItem",
    "MaterialMappingListResponse",
    "MaterialMappingReplaceRequest",
    "MaterialMappingReplaceResponse",
    "UploadAcceptedResponse",
    "UploadStatusListResponse",
    "UploadStatusResponse",
]
