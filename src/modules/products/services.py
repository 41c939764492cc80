"""Product service layer (Use Cases).

Orchestrates business logic for the Product aggregate, delegating
persistence to the injected repositories.

Business rules enforced here:
- Product names are unique (case-insensitive).
- A referenced category must exist.
- Price non-negative / name non-blank (validated by the DTO).
- Products referenced by order lines cannot be deleted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

import structlog
from django.db import transaction
from django.db.models import ProtectedError

from modules.categories.exceptions import CategoryNotFound
from modules.products.exceptions import (
    ProductAlreadyExists,
    ProductInUse,
    ProductNotFound,
)
from modules.products.models import Product

if TYPE_CHECKING:
    from modules.categories.repositories.interfaces import ICategoryRepository
    from modules.core.repositories.interfaces import Queryable
    from modules.products.dtos import ProductInputDTO
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductService:
    """Application service for Product use-cases.

    Receives its repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        repository: IProductRepository,
        category_repository: ICategoryRepository,
    ) -> None:
        self._repo = repository
        self._category_repo = category_repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_product(self, dto: ProductInputDTO) -> Product:
        """Create a new product after enforcing uniqueness rules.

        Raises:
            ProductAlreadyExists: if the name is already taken.
            CategoryNotFound: if ``category_id`` does not exist.
        """
        log = logger.bind(name=dto.name)
        self._ensure_name_available(dto.name)

        product = Product(name=dto.name, price=dto.price, image_url=dto.image_url)
        if dto.category_id is not None:
            product.category = self._get_category(dto.category_id)

        product = self._repo.save(product)
        log.info("product.created", product_id=str(product.id))
        return product

    @transaction.atomic
    def update_product(self, id: str, dto: ProductInputDTO) -> Product:
        """Replace name, price and image of a product.

        The category is only reassigned when ``category_id`` is supplied.

        Raises:
            ProductNotFound: if the product does not exist.
            ProductAlreadyExists: if another product already uses the name.
            CategoryNotFound: if ``category_id`` does not exist.
        """
        product = self.get_product(id)
        log = logger.bind(product_id=str(id))
        self._ensure_name_available(dto.name, exclude_id=product.id)

        product.name = dto.name
        product.price = dto.price
        product.image_url = dto.image_url
        if dto.category_id is not None:
            product.category = self._get_category(dto.category_id)
        product.touch()

        product = self._repo.save(product)
        log.info("product.updated")
        return product

    @transaction.atomic
    def delete_product(self, id: str) -> None:
        """Hard-delete a product.

        Raises:
            ProductNotFound: if the product does not exist.
            ProductInUse: if order lines still reference it.
        """
        try:
            deleted = self._repo.delete(id)
        except ProtectedError as exc:
            logger.warning("product.delete_blocked", product_id=str(id))
            raise ProductInUse(
                f"Product {id} is referenced by existing orders."
            ) from exc
        if not deleted:
            raise ProductNotFound(f"Product {id} not found.")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(self, filters: Optional[Dict[str, Any]] = None) -> Queryable:
        """Return products, optionally filtered."""
        return self._repo.list(filters)

    def list_products_by_category(self, category_id: str) -> Queryable:
        """Return the products of a category (empty for unknown categories)."""
        return self._repo.list_by_category(category_id)

    def get_product(self, id: str) -> Product:
        """Retrieve a single product by ID.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        return product

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_category(self, category_id):
        category = self._category_repo.get_by_id(str(category_id))
        if not category:
            raise CategoryNotFound(f"Category {category_id} not found.")
        return category

    def _ensure_name_available(self, name: str, exclude_id=None) -> None:
        existing = self._repo.get_by_name(name)
        if existing and existing.id != exclude_id:
            logger.warning("product.duplicate_name", name=name)
            raise ProductAlreadyExists(f"Product with name '{name}' already exists.")
