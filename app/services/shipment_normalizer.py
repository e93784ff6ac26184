"""
app/services/shipment_normalizer.py

Maps one decoded upload row into the canonical shipment shape.

``normalize`` never raises. It returns one of three outcomes:

    NormalizedShipment: row is ready to persist
    SkippedRow:         zero weight; intentionally excluded, not an error
    FailedRow:          the row could not be normalized; the batch goes on
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, Mapping

from app.domain.errors import RecordNormalizationError
from app.domain.reference import ReferenceKind
from app.domain.shipment import FailedRow, NormalizationOutcome, NormalizedShipment, SkippedRow
from app.mappers.field_mapper import FieldMapper, FieldResolution
from app.mappers.identity_deriver import IdentityDeriver
from app.mappers.reference_resolver import ReferenceResolver
from app.validators.value_parsers import parse_optional_int, parse_permissive_datetime, parse_weight

SKIP_REASON_ZERO_WEIGHT = "zero_weight"


def _current_utc_year() -> int:
    return datetime.now(timezone.utc).year


def describe_error(exc: Exception) -> str:
    if isinstance(exc, RecordNormalizationError):
        return str(exc)
    return f"{type(exc).__name__}: {exc}"


class ShipmentNormalizer:
    """
    Applies weight, identity, classification, date, and foreign-key rules to a row.
    """

    def __init__(
        self,
        *,
        field_mapper: FieldMapper | None = None,
        identity_deriver: IdentityDeriver | None = None,
        default_carrier: str | None = "UPS",
        current_year: Callable[[], int] = _current_utc_year,
    ) -> None:
        self._field_mapper = field_mapper or FieldMapper()
        self._identity_deriver = identity_deriver or IdentityDeriver(field_mapper=self._field_mapper)
        self._default_carrier = default_carrier
        self._current_year = current_year

    def normalize(
        self,
        row: Mapping[str, str],
        resolver: ReferenceResolver,
        *,
        upload_id: uuid.UUID,
        row_number: int,
    ) -> NormalizationOutcome:
        columns = self._field_mapper.resolve_columns(row.keys())
        try:
            return self._normalize(
                row,
                columns,
                resolver,
                upload_id=upload_id,
                row_number=row_number,
            )
        except Exception as exc:  # noqa: BLE001
            return FailedRow(
                row_number=row_number,
                record_identifier=self.record_identifier(row, row_number=row_number, columns=columns),
                error_message=describe_error(exc),
            )

    def record_identifier(
        self,
        row: Mapping[str, str],
        *,
        row_number: int,
        columns: FieldResolution | None = None,
    ) -> str:
        """
        Best-effort identifier used in error details.
        """

        resolution = columns or self._field_mapper.resolve_columns(row.keys())
        return (
            resolution.value(row, "unique_id")
            or resolution.value(row, "package_id")
            or f"row {row_number}"
        )

    def _normalize(
        self,
        row: Mapping[str, str],
        columns: FieldResolution,
        resolver: ReferenceResolver,
        *,
        upload_id: uuid.UUID,
        row_number: int,
    ) -> NormalizationOutcome:
        # 1. weight; exact zero is an exclusion
        weight = self._parse_weight(row, columns)
        if weight == 0:
            return SkippedRow(row_number=row_number, reason=SKIP_REASON_ZERO_WEIGHT)

        # 2. identity
        identity = self._identity_deriver.derive_key(row, columns)
        package_key = self._identity_deriver.derive_package_key(row, identity.unique_id, columns)

        # 3. material classification
        current_material = columns.value(row, "material")
        classification = resolver.resolve(current_material)

        # 4. dates
        shipping_date = parse_permissive_datetime(columns.value(row, "shipping_date"))
        processed_date = parse_permissive_datetime(columns.value(row, "processed_date"))

        # 5. foreign keys; location depends on organization
        organization_id = resolver.resolve_foreign_key(
            ReferenceKind.ORGANIZATION,
            columns.value(row, "organization"),
        )
        location_id = resolver.resolve_foreign_key(
            ReferenceKind.LOCATION,
            columns.value(row, "location"),
            organization_id=organization_id,
        )
        program_id = resolver.resolve_foreign_key(
            ReferenceKind.PROGRAM,
            columns.value(row, "program"),
        )

        default_year = shipping_date.year if shipping_date is not None else self._current_year()

        # 6. assemble
        return NormalizedShipment(
            unique_id=identity.unique_id,
            package_key=package_key,
            weight_lbs=weight,
            material_type=columns.value(row, "new_material") or current_material,
            material_label=classification.canonical_label,
            is_contamination=classification.is_contamination,
            contamination_type=classification.contamination_type,
            shipping_date=shipping_date,
            processed_date=processed_date,
            organization_id=organization_id,
            location_id=location_id,
            program_id=program_id,
            has_missing_shipping_date=shipping_date is None,
            needs_identity_synthesis=identity.synthesized,
            year=parse_optional_int(columns.value(row, "year"), field="year", default=default_year),
            import_batch=upload_id,
            raw_payload=dict(row),
            external_id=columns.value(row, "external_id"),
            tracking_number=columns.value(row, "tracking_number"),
            inbound_tracking=columns.value(row, "inbound_tracking"),
            outbound_tracking=columns.value(row, "outbound_tracking"),
            carrier=columns.value(row, "carrier") or self._default_carrier,
            recycled_pieces=parse_optional_int(
                columns.value(row, "recycled_pieces"),
                field="recycled_pieces",
                default=0,
            ),
            donated_pieces=parse_optional_int(
                columns.value(row, "donated_pieces"),
                field="donated_pieces",
                default=0,
            ),
            city=columns.value(row, "city"),
            state=columns.value(row, "state"),
            postal_code=columns.value(row, "postal_code"),
            full_address=columns.value(row, "full_address"),
            box_type=columns.value(row, "box_type"),
        )

    @staticmethod
    def _parse_weight(row: Mapping[str, str], columns: FieldResolution) -> Decimal:
        pounds_raw = columns.value(row, "weight_lbs")
        if pounds_raw is not None:
            return parse_weight(pounds_raw, field="weight_lbs", default_unit="lb")
        kilograms_raw = columns.value(row, "weight_kg")
        if kilograms_raw is not None:
            return parse_weight(kilograms_raw, field="weight_kg", default_unit="kg")
        # Missing weight counts as zero.
        return Decimal("0")
