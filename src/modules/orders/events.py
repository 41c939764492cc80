"""Domain events for the Orders bounded context."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderCreated(DomainEvent):
    """Raised when an order is created."""


@dataclass(frozen=True)
class OrderUpdated(DomainEvent):
    """Raised when buyer, seat or items of an order are replaced."""


@dataclass(frozen=True)
class OrderDeleted(DomainEvent):
    """Raised when an order is deleted."""


@dataclass(frozen=True)
class OrderPaid(DomainEvent):
    """Raised when an online charge succeeds."""

    amount: str = ""


@dataclass(frozen=True)
class OrderPaymentFailed(DomainEvent):
    """Raised when an online charge is declined or errors."""

    reason: str = ""


@dataclass(frozen=True)
class OrderSettledOffline(DomainEvent):
    """Raised when an order is settled outside the gateway."""


@dataclass(frozen=True)
class OrderStatusChanged(DomainEvent):
    """Raised when the status is overwritten administratively."""

    old_status: str = ""
    new_status: str = ""
