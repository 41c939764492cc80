"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

The draft DTOs are deliberately permissive: seat fields may be missing,
items may be empty and quantities non-positive.  Composition rules are
enforced by ``modules.orders.validators`` so every violation surfaces as
``InvalidOrder`` with a stable message.
"""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator


class OrderItemDTO(BaseModel):
    """One requested line: a product reference and a quantity.

    ``unit_price`` is resolved by the Service Layer from the product catalog.
    """

    model_config = ConfigDict(frozen=True)

    product_id: Optional[UUID] = None
    quantity: Optional[int] = None


class OrderDraftDTO(BaseModel):
    """Immutable DTO for order creation and full replacement."""

    model_config = ConfigDict(frozen=True)

    buyer_email: str
    seat_letter: Optional[str] = None
    seat_number: Optional[int] = None
    items: List[OrderItemDTO] = []

    @field_validator("buyer_email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip()

    @field_validator("items", mode="before")
    @classmethod
    def none_items_is_empty(cls, v):
        return v or []
