"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations

from modules.core.exceptions import NotFound


class OrderNotFound(NotFound):
    """The requested order does not exist."""


class InvalidOrder(Exception):
    """The order composition breaks a validation rule.

    Covers missing seat data, empty item list, unknown product,
    non-positive quantity and duplicate product lines.
    """


class PaymentRejected(Exception):
    """A payment was attempted on an order that is already paid."""


class PaymentProcessingFailed(Exception):
    """The gateway declined or failed the charge.

    The order has already been persisted as ``PAYMENT_FAILED`` when this
    is raised; ``reason`` carries the gateway's message.
    """

    def __init__(self, reason: str) -> None:
        super().__init__(f"Payment processing failed: {reason}")
        self.reason = reason
