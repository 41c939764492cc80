from __future__ import annotations

import time
from decimal import Decimal

import pytest

from modules.payments.client import PaymentGatewayClient, get_payment_gateway
from modules.payments.exceptions import (
    PaymentDeclined,
    PaymentGatewayError,
    PaymentGatewayTimeout,
)
from modules.payments.gateways import MockPaymentGateway, PaymentReceipt

pytestmark = pytest.mark.unit


class SlowGateway:
    def charge(self, amount, card_token):
        time.sleep(0.5)
        return PaymentReceipt(amount=amount)


class BrokenGateway:
    def charge(self, amount, card_token):
        raise RuntimeError("provider unreachable")


class TestPaymentGatewayClient:
    def test_returns_receipt(self):
        client = PaymentGatewayClient(MockPaymentGateway(latency_seconds=0))

        receipt = client.charge(Decimal("12.00"), "4111")

        assert receipt.amount == Decimal("12.00")

    def test_gateway_errors_pass_through(self):
        client = PaymentGatewayClient(MockPaymentGateway(latency_seconds=0))

        with pytest.raises(PaymentDeclined):
            client.charge(Decimal("12.00"), "9999")

    def test_timeout_raises_gateway_timeout(self):
        client = PaymentGatewayClient(SlowGateway(), timeout_seconds=0.05)

        with pytest.raises(PaymentGatewayTimeout):
            client.charge(Decimal("12.00"), "4111")

    def test_unexpected_errors_wrapped(self):
        client = PaymentGatewayClient(BrokenGateway())

        with pytest.raises(PaymentGatewayError, match="provider unreachable") as exc_info:
            client.charge(Decimal("12.00"), "4111")
        assert isinstance(exc_info.value.__cause__, RuntimeError)


class TestGetPaymentGateway:
    def test_builds_backend_from_options(self):
        client = get_payment_gateway(
            {
                "BACKEND": "modules.payments.gateways.MockPaymentGateway",
                "OPTIONS": {"latency_seconds": 0, "blocked_prefix": "1234"},
                "TIMEOUT": 2.0,
            }
        )

        assert isinstance(client.gateway, MockPaymentGateway)
        assert client.gateway.blocked_prefix == "1234"

    def test_reads_django_settings(self, settings):
        settings.PAYMENT_GATEWAY = {
            "BACKEND": "modules.payments.gateways.MockPaymentGateway",
            "OPTIONS": {"latency_seconds": 0},
        }

        client = get_payment_gateway()

        assert isinstance(client.gateway, MockPaymentGateway)
        assert client.gateway.latency_seconds == 0
