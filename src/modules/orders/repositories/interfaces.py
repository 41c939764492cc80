"""Order repository interface.

Extends ``IRepository[Order]`` with methods required by the Order
aggregate: atomic creation with items, item replacement and row locking.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from modules.core.repositories.interfaces import IRepository, Queryable

if TYPE_CHECKING:
    from modules.orders.models import Order


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    The Order aggregate includes its OrderItem children.  Mutations must be
    atomic and must write the aggregate's pending domain events to the outbox.

    ``lines`` arguments are lists of dicts with ``product``, ``quantity`` and
    ``unit_price`` keys.
    """

    @abstractmethod
    def create(self, order: Order, lines: List[Dict[str, Any]]) -> Order:
        """Persist a new order together with its items."""

    @abstractmethod
    def replace_items(self, order: Order, lines: List[Dict[str, Any]]) -> Order:
        """Persist *order* and swap its items for *lines*."""

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with prefetched items."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order holding a row lock until the transaction ends."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> Queryable[Order]:
        """List orders with optional filters."""

    @abstractmethod
    def remove(self, order: Order) -> None:
        """Delete *order* (items cascade) and record its pending events."""
