"""Unit tests for CategoryService."""

from __future__ import annotations

from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from modules.categories.dtos import CategoryInputDTO
from modules.categories.exceptions import (
    CategoryAlreadyExists,
    CategoryNotFound,
    InvalidCategory,
)
from modules.categories.models import Category
from modules.categories.services import CategoryService

pytestmark = pytest.mark.unit


@pytest.fixture()
def mock_repo():
    repo = MagicMock()
    repo.get_by_name.return_value = None
    repo.save.side_effect = lambda c: c
    return repo


@pytest.fixture()
def service(mock_repo):
    return CategoryService(repository=mock_repo)


class TestCreateCategory:
    def test_root_category(self, service, mock_repo):
        category = service.create_category(CategoryInputDTO(name="Snacks"))

        assert category.name == "Snacks"
        assert category.description == ""
        assert category.parent is None

    def test_with_parent(self, service, mock_repo):
        parent = Category(name="Drinks")
        mock_repo.get_by_id.return_value = parent

        category = service.create_category(
            CategoryInputDTO(name="Hot Drinks", parent_id=parent.id)
        )

        assert category.parent is parent

    def test_unknown_parent(self, service, mock_repo):
        mock_repo.get_by_id.return_value = None

        with pytest.raises(CategoryNotFound):
            service.create_category(CategoryInputDTO(name="Orphan", parent_id=uuid4()))

    def test_duplicate_name(self, service, mock_repo):
        mock_repo.get_by_name.return_value = Category(name="snacks")

        with pytest.raises(CategoryAlreadyExists):
            service.create_category(CategoryInputDTO(name="Snacks"))


class TestUpdateCategory:
    def test_clears_parent_when_omitted(self, service, mock_repo):
        child = Category(name="Hot Drinks", parent=Category(name="Drinks"))
        mock_repo.get_by_id.return_value = child

        category = service.update_category(
            str(child.id), CategoryInputDTO(name="Hot Drinks", description="Tea")
        )

        assert category.parent is None
        assert category.description == "Tea"

    def test_self_parent_rejected(self, service, mock_repo):
        category = Category(name="Drinks")
        mock_repo.get_by_id.return_value = category

        with pytest.raises(InvalidCategory):
            service.update_category(
                str(category.id),
                CategoryInputDTO(name="Drinks", parent_id=category.id),
            )

    def test_descendant_parent_rejected(self, service, mock_repo):
        root = Category(name="Drinks")
        child = Category(name="Hot Drinks", parent=root)
        grandchild = Category(name="Tea", parent=child)
        mock_repo.get_by_id.side_effect = lambda id: {
            str(root.id): root,
            str(grandchild.id): grandchild,
        }[str(id)]

        with pytest.raises(InvalidCategory):
            service.update_category(
                str(root.id),
                CategoryInputDTO(name="Drinks", parent_id=grandchild.id),
            )
        mock_repo.save.assert_not_called()


class TestDeleteCategory:
    def test_not_found(self, service, mock_repo):
        mock_repo.delete.return_value = False
        with pytest.raises(CategoryNotFound):
            service.delete_category("missing")
