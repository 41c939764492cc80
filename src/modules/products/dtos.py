"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
DTOs are immutable (``frozen=True``).

- ``ProductInputDTO``: input for product creation and full replacement.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator


class ProductInputDTO(BaseModel):
    """Immutable DTO for product create / replace requests.

    Validates:
    - ``name`` is a non-blank string (stored stripped).
    - ``price`` is a non-negative Decimal.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    price: Decimal
    image_url: Optional[str] = None
    category_id: Optional[UUID] = None

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Product name cannot be empty.")
        return v.strip()

    @field_validator("price")
    @classmethod
    def price_must_not_be_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Price cannot be negative.")
        return v
