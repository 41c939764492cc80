"""Payment gateway port and the reference mock implementation.

``PaymentGateway`` is the contract the order engine consumes.  Real
providers implement it; ``MockPaymentGateway`` is the deterministic stand-in
used in development and tests.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Protocol
from uuid import UUID, uuid4

import structlog

from modules.payments.exceptions import InvalidPaymentRequest, PaymentDeclined

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PaymentReceipt:
    """Proof of a successful charge."""

    amount: Decimal
    reference: UUID = field(default_factory=uuid4)
    charged_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class PaymentGateway(Protocol):
    """Port describing the charge operation used by the order engine."""

    def charge(self, amount: Decimal, card_token: str) -> PaymentReceipt:
        """Charge *amount* against *card_token*.

        Raises:
            PaymentGatewayError: on any failure (invalid request, decline,
                provider outage).
        """
        ...


class MockPaymentGateway:
    """Simulated gateway.

    Tokens starting with ``blocked_prefix`` are always declined; every other
    non-empty token succeeds after ``latency_seconds``.
    """

    def __init__(
        self, latency_seconds: float = 0.1, blocked_prefix: str = "9999"
    ) -> None:
        self.latency_seconds = latency_seconds
        self.blocked_prefix = blocked_prefix

    def charge(self, amount: Decimal, card_token: str) -> PaymentReceipt:
        if amount is None or amount <= 0:
            raise InvalidPaymentRequest("Invalid payment amount")
        if not card_token or not card_token.strip():
            raise InvalidPaymentRequest("Invalid card token")
        if self.blocked_prefix and card_token.startswith(self.blocked_prefix):
            logger.info("payment.mock_declined")
            raise PaymentDeclined("Card declined")

        if self.latency_seconds:
            time.sleep(self.latency_seconds)

        receipt = PaymentReceipt(amount=amount)
        logger.info(
            "payment.mock_charged", amount=str(amount), reference=str(receipt.reference)
        )
        return receipt
