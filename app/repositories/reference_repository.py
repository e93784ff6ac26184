"""
app/repositories/reference_repository.py

Reads reference tables into an immutable snapshot and maintains the
material mapping table.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.reference import (
    LocationRef,
    OrganizationRef,
    ProgramRef,
    ReferenceMappingEntry,
    ReferenceSnapshot,
)
from db.models.location import Location
from db.models.material_mapping import MaterialMapping
from db.models.organization import Organization
from db.models.program_type import ProgramType
from db.repositories.errors import ReferenceDataUnavailableError


class ReferenceRepository:
    """
    Repository for reference data used during normalization.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def load_snapshot(self) -> ReferenceSnapshot:
        """
        Load material mappings and foreign-key targets in one pass.
        """

        try:
            mappings = self.list_material_mappings()
            organizations = [
                OrganizationRef(id=row.id, name=row.name, code=row.code)
                for row in self._session.scalars(
                    select(Organization)
                    .where(Organization.is_active.is_(True))
                    .order_by(Organization.created_at.asc())
                ).all()
            ]
            locations = [
                LocationRef(
                    id=row.id,
                    organization_id=row.organization_id,
                    name=row.name,
                    code=row.code,
                )
                for row in self._session.scalars(
                    select(Location).order_by(Location.created_at.asc())
                ).all()
            ]
            programs = [
                ProgramRef(id=row.id, name=row.name, code=row.code)
                for row in self._session.scalars(
                    select(ProgramType).order_by(ProgramType.created_at.asc())
                ).all()
            ]
        except SQLAlchemyError as exc:
            raise ReferenceDataUnavailableError(
                f"Reference data could not be loaded: {exc.__class__.__name__}"
            ) from exc

        return ReferenceSnapshot.build(
            material_mappings=mappings,
            organizations=organizations,
            locations=locations,
            programs=programs,
        )

    def list_material_mappings(self) -> list[ReferenceMappingEntry]:
        rows = self._session.scalars(
            select(MaterialMapping).order_by(MaterialMapping.source_category.asc())
        ).all()
        return [
            ReferenceMappingEntry(
                source_category=row.source_category,
                canonical_label=row.canonical_label,
                is_recyclable=row.is_recyclable,
                is_contamination=row.is_contamination,
                contamination_type=row.contamination_type,
                new_category=row.new_category,
            )
            for row in rows
        ]

    def replace_material_mappings(self, entries: Sequence[ReferenceMappingEntry]) -> int:
        """
        Replace the whole material mapping table atomically.
        """

        with self._transaction_context():
            self._session.execute(delete(MaterialMapping))
            for entry in entries:
                self._session.add(
                    MaterialMapping(
                        source_category=entry.source_category.strip(),
                        new_category=entry.new_category,
                        canonical_label=entry.canonical_label.strip(),
                        is_recyclable=entry.is_recyclable,
                        is_contamination=entry.is_contamination,
                        contamination_type=entry.contamination_type,
                    )
                )
            self._session.flush()
        return len(entries)

    def _transaction_context(self) -> Any:
        if self._session.in_transaction():
            return self._session.begin_nested()
        return self._session.begin()
