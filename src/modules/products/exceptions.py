"""Product domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations

from modules.core.exceptions import NotFound


class ProductAlreadyExists(Exception):
    """A product with the same name (case-insensitive) already exists."""


class ProductNotFound(NotFound):
    """The requested product does not exist."""


class ProductInUse(Exception):
    """The product is referenced by order lines and cannot be deleted."""
