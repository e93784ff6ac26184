"""
tests/test_reference_resolver.py

Pytest unit tests for material classification and foreign-key lookup.
All tests are pure Python; the snapshot is built in memory.
"""

from __future__ import annotations

import uuid

import pytest

from app.domain.reference import (
    DEFAULT_MATERIAL_LABEL,
    LocationRef,
    OrganizationRef,
    ProgramRef,
    ReferenceKind,
    ReferenceMappingEntry,
    ReferenceSnapshot,
)
from app.mappers.reference_resolver import ReferenceResolver

ACME_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")
BETA_ID = uuid.UUID("00000000-0000-0000-0000-000000000002")
ACME_DOWNTOWN_ID = uuid.UUID("00000000-0000-0000-0000-000000000011")
BETA_DOWNTOWN_ID = uuid.UUID("00000000-0000-0000-0000-000000000012")
RETAIL_PROGRAM_ID = uuid.UUID("00000000-0000-0000-0000-000000000021")


@pytest.fixture()
def resolver() -> ReferenceResolver:
    snapshot = ReferenceSnapshot.build(
        material_mappings=[
            ReferenceMappingEntry(source_category="Mixed Plastic", canonical_label="Plastic", is_recyclable=True),
            ReferenceMappingEntry(
                source_category="Broken Glass",
                canonical_label="Glass",
                is_contamination=True,
                contamination_type="breakage",
            ),
            ReferenceMappingEntry(source_category="mixed plastic", canonical_label="Duplicate"),
        ],
        organizations=[
            OrganizationRef(id=ACME_ID, name="AcmeCo", code="ACM"),
            OrganizationRef(id=BETA_ID, name="Beta Stores", code="BETA"),
        ],
        locations=[
            LocationRef(id=ACME_DOWNTOWN_ID, organization_id=ACME_ID, name="Downtown", code="D1"),
            LocationRef(id=BETA_DOWNTOWN_ID, organization_id=BETA_ID, name="Downtown"),
        ],
        programs=[ProgramRef(id=RETAIL_PROGRAM_ID, name="Retail", code="RTL")],
    )
    return ReferenceResolver(snapshot)


class TestMaterialClassification:
    def test_unmapped_category_defaults_to_other(self, resolver: ReferenceResolver) -> None:
        entry = resolver.resolve("unobtainium")
        assert entry.canonical_label == DEFAULT_MATERIAL_LABEL
        assert entry.is_contamination is False

    @pytest.mark.parametrize("category", [None, "", "   "])
    def test_blank_category_defaults_to_other(self, resolver: ReferenceResolver, category: str | None) -> None:
        assert resolver.resolve(category).canonical_label == "Other"

    def test_lookup_is_case_insensitive_and_trimmed(self, resolver: ReferenceResolver) -> None:
        entry = resolver.resolve("  MIXED plastic ")
        assert entry.canonical_label == "Plastic"
        assert entry.is_recyclable is True

    def test_first_entry_wins_on_case_duplicates(self, resolver: ReferenceResolver) -> None:
        assert resolver.resolve("mixed plastic").canonical_label == "Plastic"

    def test_contamination_attributes_are_returned(self, resolver: ReferenceResolver) -> None:
        entry = resolver.resolve("broken glass")
        assert entry.is_contamination is True
        assert entry.contamination_type == "breakage"

    def test_snapshot_mapping_is_read_only(self, resolver: ReferenceResolver) -> None:
        with pytest.raises(TypeError):
            resolver.snapshot.material_mappings["new"] = ReferenceMappingEntry(  # type: ignore[index]
                source_category="new",
                canonical_label="New",
            )

    def test_empty_snapshot_always_defaults(self) -> None:
        empty = ReferenceResolver(ReferenceSnapshot.empty())
        assert empty.resolve("Mixed Plastic").canonical_label == "Other"


class TestForeignKeyResolution:
    def test_organization_matches_name_or_code(self, resolver: ReferenceResolver) -> None:
        assert resolver.resolve_foreign_key(ReferenceKind.ORGANIZATION, "AcmeCo") == ACME_ID
        assert resolver.resolve_foreign_key(ReferenceKind.ORGANIZATION, " BETA ") == BETA_ID

    def test_unknown_or_blank_name_resolves_to_none(self, resolver: ReferenceResolver) -> None:
        assert resolver.resolve_foreign_key(ReferenceKind.ORGANIZATION, "Nobody") is None
        assert resolver.resolve_foreign_key(ReferenceKind.ORGANIZATION, "") is None
        assert resolver.resolve_foreign_key(ReferenceKind.PROGRAM, None) is None

    def test_location_is_scoped_to_organization(self, resolver: ReferenceResolver) -> None:
        assert (
            resolver.resolve_foreign_key(ReferenceKind.LOCATION, "Downtown", organization_id=ACME_ID)
            == ACME_DOWNTOWN_ID
        )
        assert (
            resolver.resolve_foreign_key(ReferenceKind.LOCATION, "Downtown", organization_id=BETA_ID)
            == BETA_DOWNTOWN_ID
        )
        assert resolver.resolve_foreign_key(ReferenceKind.LOCATION, "D1", organization_id=BETA_ID) is None

    def test_location_without_organization_resolves_to_none(self, resolver: ReferenceResolver) -> None:
        assert resolver.resolve_foreign_key(ReferenceKind.LOCATION, "Downtown") is None

    def test_program_matches_code(self, resolver: ReferenceResolver) -> None:
        assert resolver.resolve_foreign_key(ReferenceKind.PROGRAM, "RTL") == RETAIL_PROGRAM_ID

    def test_unsupported_kind_raises(self, resolver: ReferenceResolver) -> None:
        with pytest.raises(ValueError, match="Unsupported reference kind"):
            resolver.resolve_foreign_key("carrier", "UPS")
