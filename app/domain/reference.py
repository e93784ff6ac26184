"""
app/domain/reference.py

Immutable reference data used while normalizing one upload.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Iterable, Mapping

DEFAULT_MATERIAL_LABEL = "Other"


class ReferenceKind:
    ORGANIZATION = "organization"
    LOCATION = "location"
    PROGRAM = "program"

    ALL = (ORGANIZATION, LOCATION, PROGRAM)


@dataclass(frozen=True)
class ReferenceMappingEntry:
    """
    Classification of one source material category.
    """

    source_category: str
    canonical_label: str
    is_recyclable: bool = False
    is_contamination: bool = False
    contamination_type: str | None = None
    new_category: str | None = None


DEFAULT_REFERENCE_ENTRY = ReferenceMappingEntry(
    source_category="",
    canonical_label=DEFAULT_MATERIAL_LABEL,
)


@dataclass(frozen=True)
class OrganizationRef:
    id: uuid.UUID
    name: str
    code: str | None = None


@dataclass(frozen=True)
class LocationRef:
    id: uuid.UUID
    organization_id: uuid.UUID
    name: str
    code: str | None = None


@dataclass(frozen=True)
class ProgramRef:
    id: uuid.UUID
    name: str
    code: str | None = None


def material_key(category: str | None) -> str:
    """
    Case-normalized lookup key for a material category.
    """

    return (category or "").strip().casefold()


@dataclass(frozen=True)
class ReferenceSnapshot:
    """
    Read-only view of the reference tables, built once at batch start.
    """

    material_mappings: Mapping[str, ReferenceMappingEntry]
    organizations: tuple[OrganizationRef, ...] = ()
    locations: tuple[LocationRef, ...] = ()
    programs: tuple[ProgramRef, ...] = ()
    loaded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def build(
        cls,
        *,
        material_mappings: Iterable[ReferenceMappingEntry] = (),
        organizations: Iterable[OrganizationRef] = (),
        locations: Iterable[LocationRef] = (),
        programs: Iterable[ProgramRef] = (),
    ) -> ReferenceSnapshot:
        keyed: dict[str, ReferenceMappingEntry] = {}
        for entry in material_mappings:
            key = material_key(entry.source_category)
            # First entry wins when two categories differ only by case.
            if key and key not in keyed:
                keyed[key] = entry
        return cls(
            material_mappings=MappingProxyType(keyed),
            organizations=tuple(organizations),
            locations=tuple(locations),
            programs=tuple(programs),
        )

    @classmethod
    def empty(cls) -> ReferenceSnapshot:
        return cls.build()
