"""
app/mappers package marker.
"""

from app.mappers.field_mapper import (
    DEFAULT_FIELD_SYNONYMS,
    LOGICAL_FIELDS,
    FieldMapper,
    FieldResolution,
    FieldSynonymConfigError,
)
from app.mappers.identity_deriver import DerivedIdentity, IdentityDeriver
from app.mappers.reference_resolver import ReferenceResolver

__all__ = [
    "DEFAULT_FIELD_SYNONYMS",
    "DerivedIdentity",
    "FieldMapper",
    "FieldResolution",
    "FieldSynonymConfigError",
    "IdentityDeriver",
    "LOGICAL_FIELDS",
    "ReferenceResolver",
]
