"""
app/mappers/field_mapper.py

Explicit synonym table reconciling source column names to logical shipment fields.

Each logical field lists the source column names it accepts, in priority
order. Headers are compared after normalization (case and punctuation are
ignored), so ``Postal Code`` and ``postal_code`` both satisfy ``PostalCode``.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Sequence

LOGICAL_FIELDS: tuple[str, ...] = (
    "unique_id",
    "package_id",
    "external_id",
    "weight_lbs",
    "weight_kg",
    "year",
    "material",
    "new_material",
    "shipping_date",
    "processed_date",
    "organization",
    "location",
    "program",
    "tracking_number",
    "inbound_tracking",
    "outbound_tracking",
    "carrier",
    "recycled_pieces",
    "donated_pieces",
    "city",
    "state",
    "postal_code",
    "full_address",
    "box_type",
)

DEFAULT_FIELD_SYNONYMS: dict[str, tuple[str, ...]] = {
    "unique_id": ("unique_id", "UniqueID", "record_id"),
    "package_id": ("Barcode", "package_id", "PackageBarcode"),
    "external_id": ("pact_id", "PactID", "external_id"),
    "weight_lbs": ("weight_lb", "Weight", "weight_lbs", "WeightLbs"),
    "weight_kg": ("weight_kg", "WeightKg", "Weight (kg)"),
    "year": ("Year",),
    "material": ("CurrentMaterial", "Material"),
    "new_material": ("NewMaterial",),
    "shipping_date": ("shipping_date", "ShippingDate", "ship_date"),
    "processed_date": ("processed_date", "ProcessedDate"),
    "organization": ("Retailer", "Member", "RetailerName"),
    "location": ("Store", "StoreName", "StoreLocation"),
    "program": ("Program", "ProgramType", "ProgramName"),
    "tracking_number": ("Inbound", "TrackingNumber"),
    "inbound_tracking": ("Inbound",),
    "outbound_tracking": ("Outbound",),
    "carrier": ("Carrier",),
    "recycled_pieces": ("RecycledPieces",),
    "donated_pieces": ("DonatedPieces",),
    "city": ("City",),
    "state": ("State",),
    "postal_code": ("Postal Code", "PostalCode"),
    "full_address": ("FullAddress",),
    "box_type": ("BoxType",),
}


class FieldSynonymConfigError(ValueError):
    """
    Raised when a synonym table names an unknown logical field.
    """


def normalize_header(header: str) -> str:
    """
    Normalize a column name for flexible matching.
    """

    return "".join(ch for ch in header.strip().lower() if ch.isalnum())


def merge_field_synonyms(
    defaults: Mapping[str, Sequence[str]],
    overrides: Mapping[str, Sequence[str]],
) -> dict[str, tuple[str, ...]]:
    """
    Prepend override synonyms to the defaults, dropping duplicates.
    """

    unknown = sorted(set(overrides) - set(LOGICAL_FIELDS))
    if unknown:
        raise FieldSynonymConfigError(f"Unknown logical field(s) in synonym overrides: {', '.join(unknown)}.")

    merged: dict[str, tuple[str, ...]] = {}
    for field_name in LOGICAL_FIELDS:
        seen: set[str] = set()
        ordered: list[str] = []
        for synonym in (*overrides.get(field_name, ()), *defaults.get(field_name, ())):
            key = normalize_header(synonym)
            if key and key not in seen:
                seen.add(key)
                ordered.append(synonym)
        merged[field_name] = tuple(ordered)
    return merged


@dataclass(frozen=True)
class FieldResolution:
    """
    Logical field -> matching source columns, in synonym priority order.
    """

    field_to_columns: Mapping[str, tuple[str, ...]]

    def columns(self, field_name: str) -> tuple[str, ...]:
        return self.field_to_columns.get(field_name, ())

    def value(self, row: Mapping[str, str | None], field_name: str) -> str | None:
        """
        Return the first non-blank value among the field's columns.
        """

        for column in self.columns(field_name):
            raw = row.get(column)
            if raw is None:
                continue
            stripped = str(raw).strip()
            if stripped:
                return stripped
        return None


class FieldMapper:
    """
    Resolves source headers into logical field columns.
    """

    def __init__(self, *, synonyms: Mapping[str, Sequence[str]] | None = None) -> None:
        table = synonyms if synonyms is not None else DEFAULT_FIELD_SYNONYMS
        unknown = sorted(set(table) - set(LOGICAL_FIELDS))
        if unknown:
            raise FieldSynonymConfigError(f"Unknown logical field(s): {', '.join(unknown)}.")
        self._synonyms: dict[str, tuple[str, ...]] = {
            field_name: tuple(table.get(field_name, ())) for field_name in LOGICAL_FIELDS
        }

    @property
    def synonyms(self) -> Mapping[str, tuple[str, ...]]:
        return MappingProxyType(self._synonyms)

    def resolve_columns(self, headers: Iterable[str]) -> FieldResolution:
        headers_by_key: dict[str, list[str]] = {}
        for header in headers:
            key = normalize_header(header)
            if key:
                headers_by_key.setdefault(key, []).append(header)

        resolved: dict[str, tuple[str, ...]] = {}
        for field_name, synonyms in self._synonyms.items():
            columns: list[str] = []
            for synonym in synonyms:
                for header in headers_by_key.get(normalize_header(synonym), ()):
                    if header not in columns:
                        columns.append(header)
            if columns:
                resolved[field_name] = tuple(columns)
        return FieldResolution(field_to_columns=MappingProxyType(resolved))

    def value(self, row: Mapping[str, str | None], field_name: str) -> str | None:
        return self.resolve_columns(row.keys()).value(row, field_name)
