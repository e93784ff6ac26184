"""
app/domain package marker.
"""

from app.domain.errors import IngestionError, RecordNormalizationError, UploadDecodeError
from app.domain.reference import (
    DEFAULT_MATERIAL_LABEL,
    DEFAULT_REFERENCE_ENTRY,
    LocationRef,
    OrganizationRef,
    ProgramRef,
    ReferenceKind,
    ReferenceMappingEntry,
    ReferenceSnapshot,
)
from app.domain.shipment import (
    BatchStats,
    FailedRow,
    NormalizationOutcome,
    NormalizedShipment,
    RawRow,
    SkippedRow,
)

__all__ = [
    "BatchStats",
    "DEFAULT_MATERIAL_LABEL",
    "DEFAULT_REFERENCE_ENTRY",
    "FailedRow",
    "IngestionError",
    "LocationRef",
    "NormalizationOutcome",
    "NormalizedShipment",
    "OrganizationRef",
    "ProgramRef",
    "RawRow",
    "RecordNormalizationError",
    "ReferenceKind",
    "ReferenceMappingEntry",
    "ReferenceSnapshot",
    "SkippedRow",
    "UploadDecodeError",
]
