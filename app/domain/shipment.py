"""
app/domain/shipment.py

Domain models used by the shipment ingestion flow.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Mapping, Union

RawRow = Mapping[str, str]


@dataclass(frozen=True)
class NormalizedShipment:
    """
    Canonical shipment line item prepared for persistence.
    """

    unique_id: str
    package_key: str
    weight_lbs: Decimal
    material_type: str | None
    material_label: str
    is_contamination: bool
    contamination_type: str | None
    shipping_date: datetime | None
    processed_date: datetime | None
    organization_id: uuid.UUID | None
    location_id: uuid.UUID | None
    program_id: uuid.UUID | None
    has_missing_shipping_date: bool
    needs_identity_synthesis: bool
    year: int
    import_batch: uuid.UUID
    raw_payload: dict[str, str]
    external_id: str | None = None
    tracking_number: str | None = None
    inbound_tracking: str | None = None
    outbound_tracking: str | None = None
    carrier: str | None = None
    recycled_pieces: int = 0
    donated_pieces: int = 0
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    full_address: str | None = None
    box_type: str | None = None


@dataclass(frozen=True)
class SkippedRow:
    """
    Row intentionally excluded from ingestion. Not an error.
    """

    row_number: int
    reason: str


@dataclass(frozen=True)
class FailedRow:
    """
    Row whose normalization or persistence failed.
    """

    row_number: int
    record_identifier: str
    error_message: str

    def to_error_detail(self) -> dict[str, Any]:
        return {
            "record_identifier": self.record_identifier,
            "row_number": self.row_number,
            "error_message": self.error_message,
        }


NormalizationOutcome = Union[NormalizedShipment, SkippedRow, FailedRow]


@dataclass
class BatchStats:
    """
    Running and final counters for one upload run.

    ``processed`` counts every consumed row, including skipped and failed ones.
    """

    total: int
    processed: int = 0
    succeeded: int = 0
    failed: int = 0
    skipped: int = 0
    status: str | None = None
    errors: list[FailedRow] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "processed": self.processed,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "skipped": self.skipped,
        }
