"""Payment gateway exceptions.

Every failure a gateway can report is a ``PaymentGatewayError``; the
order engine treats any of them as a failed charge.
"""

from __future__ import annotations


class PaymentGatewayError(Exception):
    """The gateway could not complete the charge."""


class InvalidPaymentRequest(PaymentGatewayError):
    """Amount is not positive or the card token is empty."""


class PaymentDeclined(PaymentGatewayError):
    """The card was declined."""


class PaymentGatewayTimeout(PaymentGatewayError):
    """The gateway did not answer within the configured timeout."""
