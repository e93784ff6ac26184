"""
Schemas for material mapping administration.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator, model_validator


class MaterialMappingItem(BaseModel):
    source_category: str = Field(min_length=1, max_length=120)
    canonical_label: str = Field(min_length=1, max_length=120)
    new_category: str | None = Field(default=None, max_length=120)
    is_recyclable: bool = False
    is_contamination: bool = False
    contamination_type: str | None = Field(default=None, max_length=120)

    @field_validator("source_category", "canonical_label")
    @classmethod
    def _strip_required(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("must not be blank")
        return stripped


class MaterialMappingListResponse(BaseModel):
    mappings: list[MaterialMappingItem] = Field(default_factory=list)


class MaterialMappingReplaceRequest(BaseModel):
    mappings: list[MaterialMappingItem] = Field(default_factory=list)

    @model_validator(mode="after")
    def _reject_duplicate_categories(self) -> MaterialMappingReplaceRequest:
        seen: set[str] = set()
        for item in self.mappings:
            key = item.source_category.casefold()
            if key in seen:
                raise ValueError(f"Duplicate source_category: {item.source_category!r}")
            seen.add(key)
        return self


class MaterialMappingReplaceResponse(BaseModel):
    replaced: int
