"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.location import Location
from db.models.material_mapping import MaterialMapping
from db.models.organization import Organization
from db.models.program_type import ProgramType
from db.models.shipment import Shipment, ShipmentStatus
from db.models.upload import Upload, UploadStatus

__all__ = [
    "Location",
    "MaterialMapping",
    "Organization",
    "ProgramType",
    "Shipment",
    "ShipmentStatus",
    "Upload",
    "UploadStatus",
]
