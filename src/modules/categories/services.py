"""Category service layer (Use Cases).

Business rules enforced here:
- Category names are unique (case-insensitive).
- A referenced parent must exist.
- A parent assignment may not create a cycle (self or descendant as parent).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

import structlog
from django.db import transaction

from modules.categories.exceptions import (
    CategoryAlreadyExists,
    CategoryNotFound,
    InvalidCategory,
)
from modules.categories.models import Category

if TYPE_CHECKING:
    from modules.categories.dtos import CategoryInputDTO
    from modules.categories.repositories.interfaces import ICategoryRepository
    from modules.core.repositories.interfaces import Queryable

logger = structlog.get_logger(__name__)


class CategoryService:
    """Application service for Category use-cases."""

    def __init__(self, repository: ICategoryRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_category(self, dto: CategoryInputDTO) -> Category:
        """Create a category, optionally under an existing parent.

        Raises:
            CategoryAlreadyExists: the name is taken.
            CategoryNotFound: ``parent_id`` does not exist.
        """
        log = logger.bind(name=dto.name)
        self._ensure_name_available(dto.name)

        category = Category(name=dto.name, description=dto.description)
        if dto.parent_id is not None:
            category.parent = self._get_parent(dto.parent_id)

        category = self._repo.save(category)
        log.info("category.created", category_id=str(category.id))
        return category

    @transaction.atomic
    def update_category(self, id: str, dto: CategoryInputDTO) -> Category:
        """Replace name, description and parent of a category.

        Raises:
            CategoryNotFound: the category or the new parent does not exist.
            CategoryAlreadyExists: the new name belongs to another category.
            InvalidCategory: the new parent would create a cycle.
        """
        category = self.get_category(id)
        self._ensure_name_available(dto.name, exclude_id=category.id)

        parent = None
        if dto.parent_id is not None:
            parent = self._get_parent(dto.parent_id)
            if parent.id == category.id or category.id in parent.ancestor_ids():
                raise InvalidCategory(
                    f"Category {category.id} cannot be nested under {parent.id}."
                )

        category.name = dto.name
        category.description = dto.description
        category.parent = parent
        category.touch()

        category = self._repo.save(category)
        logger.info("category.updated", category_id=str(category.id))
        return category

    @transaction.atomic
    def delete_category(self, id: str) -> None:
        """Delete a category.

        Raises:
            CategoryNotFound: if the category does not exist.
        """
        if not self._repo.delete(id):
            raise CategoryNotFound(f"Category {id} not found.")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_category(self, id: str) -> Category:
        """Raises ``CategoryNotFound`` if missing."""
        category = self._repo.get_by_id(id)
        if not category:
            raise CategoryNotFound(f"Category {id} not found.")
        return category

    def list_categories(self, filters: Optional[Dict[str, Any]] = None) -> Queryable:
        return self._repo.list(filters)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_parent(self, parent_id) -> Category:
        parent = self._repo.get_by_id(str(parent_id))
        if not parent:
            raise CategoryNotFound(f"Parent category {parent_id} not found.")
        return parent

    def _ensure_name_available(self, name: str, exclude_id=None) -> None:
        existing = self._repo.get_by_name(name)
        if existing and existing.id != exclude_id:
            logger.warning("category.duplicate_name", name=name)
            raise CategoryAlreadyExists(f"Category '{name}' already exists.")
