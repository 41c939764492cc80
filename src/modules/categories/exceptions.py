"""Category domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import NotFound


class CategoryNotFound(NotFound):
    """The requested (or referenced parent) category does not exist."""


class CategoryAlreadyExists(Exception):
    """A category with the same name already exists."""


class InvalidCategory(Exception):
    """The category data breaks a tree rule (blank name, parent cycle)."""
