"""
app/mappers/reference_resolver.py

Material classification and best-effort foreign-key lookup against a reference snapshot.

A miss is never an error: unknown material categories resolve to the default
"Other" entry and unknown organization/location/program names resolve to None.
"""

from __future__ import annotations

import uuid
from types import MappingProxyType
from typing import Iterable, Mapping, TypeVar

from app.domain.reference import (
    DEFAULT_REFERENCE_ENTRY,
    LocationRef,
    OrganizationRef,
    ProgramRef,
    ReferenceKind,
    ReferenceMappingEntry,
    ReferenceSnapshot,
    material_key,
)

_Ref = TypeVar("_Ref", OrganizationRef, LocationRef, ProgramRef)


def _index_by_name_or_code(refs: Iterable[_Ref]) -> Mapping[str, _Ref]:
    """
    Index references by name and by code. The first reference wins on clashes.
    """

    index: dict[str, _Ref] = {}
    for ref in refs:
        for key in (ref.name, ref.code):
            if key is None:
                continue
            stripped = key.strip()
            if stripped and stripped not in index:
                index[stripped] = ref
    return MappingProxyType(index)


class ReferenceResolver:
    """
    Read-only resolver built once per batch from a reference snapshot.
    """

    def __init__(
        self,
        snapshot: ReferenceSnapshot,
        *,
        default_entry: ReferenceMappingEntry = DEFAULT_REFERENCE_ENTRY,
    ) -> None:
        self._snapshot = snapshot
        self._default_entry = default_entry
        self._organizations = _index_by_name_or_code(snapshot.organizations)
        self._programs = _index_by_name_or_code(snapshot.programs)

        locations_by_org: dict[uuid.UUID, list[LocationRef]] = {}
        for location in snapshot.locations:
            locations_by_org.setdefault(location.organization_id, []).append(location)
        self._locations = MappingProxyType(
            {org_id: _index_by_name_or_code(refs) for org_id, refs in locations_by_org.items()}
        )

    @property
    def snapshot(self) -> ReferenceSnapshot:
        return self._snapshot

    def resolve(self, source_category: str | None) -> ReferenceMappingEntry:
        """
        Classify a source material category; unmapped or blank -> default entry.
        """

        key = material_key(source_category)
        if not key:
            return self._default_entry
        return self._snapshot.material_mappings.get(key, self._default_entry)

    def resolve_foreign_key(
        self,
        kind: str,
        name_or_code: str | None,
        *,
        organization_id: uuid.UUID | None = None,
    ) -> uuid.UUID | None:
        """
        Look up a reference id by exact name or code.

        Location lookups are scoped to ``organization_id`` and short-circuit to
        None when the organization is unresolved.
        """

        if kind not in ReferenceKind.ALL:
            raise ValueError(f"Unsupported reference kind '{kind}'. Allowed kinds: {', '.join(ReferenceKind.ALL)}.")

        key = (name_or_code or "").strip()
        if not key:
            return None

        if kind == ReferenceKind.ORGANIZATION:
            match = self._organizations.get(key)
        elif kind == ReferenceKind.PROGRAM:
            match = self._programs.get(key)
        else:
            if organization_id is None:
                return None
            match = self._locations.get(organization_id, {}).get(key)

        return match.id if match is not None else None
