"""
Repository-layer exceptions for upload, shipment, and reference persistence.
"""

from __future__ import annotations


class RepositoryError(Exception):
    """Base exception for repository failures."""


class UploadNotFoundError(RepositoryError):
    """Raised when a referenced upload does not exist."""


class ShipmentPersistenceError(RepositoryError):
    """Raised when one shipment record cannot be written."""


class ReferenceDataUnavailableError(RepositoryError):
    """Raised when the reference snapshot cannot be loaded."""
