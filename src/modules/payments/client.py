"""Timeout-bounded access to the configured payment gateway."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from decimal import Decimal
from typing import Any, Dict, Optional

import structlog
from django.conf import settings
from django.utils.module_loading import import_string

from modules.payments.exceptions import PaymentGatewayError, PaymentGatewayTimeout
from modules.payments.gateways import PaymentGateway, PaymentReceipt

logger = structlog.get_logger(__name__)

# Gateway calls run on this pool so the caller can stop waiting after the
# timeout; a timed-out call keeps its worker until the provider returns.
_executor = ThreadPoolExecutor(max_workers=8, thread_name_prefix="payment-gateway")


class PaymentGatewayClient:
    """Wraps a ``PaymentGateway`` with a timeout and uniform error type.

    Any exception raised by the backend surfaces as ``PaymentGatewayError``
    so callers have a single failure path.
    """

    def __init__(self, gateway: PaymentGateway, timeout_seconds: float = 5.0) -> None:
        self._gateway = gateway
        self._timeout = timeout_seconds

    @property
    def gateway(self) -> PaymentGateway:
        return self._gateway

    def charge(self, amount: Decimal, card_token: str) -> PaymentReceipt:
        log = logger.bind(amount=str(amount), timeout_seconds=self._timeout)
        future = _executor.submit(self._gateway.charge, amount, card_token)
        try:
            receipt = future.result(timeout=self._timeout)
        except FutureTimeoutError as exc:
            future.cancel()
            log.warning("payment.gateway_timeout")
            raise PaymentGatewayTimeout(
                f"Payment gateway did not respond within {self._timeout}s"
            ) from exc
        except PaymentGatewayError:
            raise
        except Exception as exc:
            log.error("payment.gateway_error", error=str(exc))
            raise PaymentGatewayError(str(exc)) from exc
        log.info("payment.gateway_charged")
        return receipt


def get_payment_gateway(options: Optional[Dict[str, Any]] = None) -> PaymentGatewayClient:
    """Build a client from ``settings.PAYMENT_GATEWAY``.

    The setting follows Django's CACHES shape::

        PAYMENT_GATEWAY = {
            "BACKEND": "modules.payments.gateways.MockPaymentGateway",
            "OPTIONS": {"latency_seconds": 0.1, "blocked_prefix": "9999"},
            "TIMEOUT": 5.0,
        }
    """
    conf = options or settings.PAYMENT_GATEWAY
    backend_class = import_string(conf["BACKEND"])
    backend = backend_class(**conf.get("OPTIONS", {}))
    return PaymentGatewayClient(backend, timeout_seconds=conf.get("TIMEOUT", 5.0))
