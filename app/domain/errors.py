"""
Domain-level exceptions for shipment ingestion.
"""

from __future__ import annotations


class IngestionError(Exception):
    """Base exception for ingestion pipeline failures."""


class RecordNormalizationError(IngestionError):
    """
    Raised when one row cannot be coerced into a canonical shipment.

    Always handled at the row boundary; never fails the batch.
    """

    def __init__(self, message: str, *, field: str | None = None, value: str | None = None) -> None:
        super().__init__(message)
        self.field = field
        self.value = value


class UploadDecodeError(IngestionError):
    """Raised when uploaded content cannot be decoded into rows."""
