"""Category DTOs for the Service Layer (Pydantic v2, immutable)."""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator


class CategoryInputDTO(BaseModel):
    """Create/replace payload.  ``parent_id=None`` means a root category."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    parent_id: Optional[UUID] = None

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Category name cannot be empty.")
        return v.strip()

    @field_validator("description", mode="before")
    @classmethod
    def none_description_is_empty(cls, v: Optional[str]) -> str:
        return v or ""
