"""Product repository interface.

Extends ``IRepository[Product]`` with the look-ups required by the
catalog (unique name, category listing) and by order pricing
(batch fetch by id).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Dict, Iterable, Optional
from uuid import UUID

from modules.core.repositories.interfaces import IRepository, Queryable

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def get_by_name(self, name: str) -> Optional[Product]:
        """Retrieve a product by name (case-insensitive)."""

    @abstractmethod
    def list_by_category(self, category_id: str) -> Queryable[Product]:
        """List products assigned to a category."""

    @abstractmethod
    def get_many(self, ids: Iterable[UUID]) -> Dict[UUID, Product]:
        """Fetch products by id; missing ids are simply absent from the result."""
