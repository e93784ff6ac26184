"""
Repository layer exports.
"""

from db.repositories.errors import (
    ReferenceDataUnavailableError,
    RepositoryError,
    ShipmentPersistenceError,
    UploadNotFoundError,
)
from db.repositories.upload_repository import UploadRepository

__all__ = [
    "ReferenceDataUnavailableError",
    "RepositoryError",
    "ShipmentPersistenceError",
    "UploadNotFoundError",
    "UploadRepository",
]
