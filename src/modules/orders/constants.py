"""Order domain constants.

Two independent axes describe an order: fulfilment ``status`` and
``payment_status``.  Payment transitions move both; the administrative
status override moves only ``status``.
"""

from decimal import Decimal

from django.db import models


class OrderStatus(models.TextChoices):
    OPEN = "OPEN", "Open"
    FINISHED = "FINISHED", "Finished"


class PaymentStatus(models.TextChoices):
    PAYMENT_FAILED = "PAYMENT_FAILED", "Payment failed"
    PAID = "PAID", "Paid"
    OFFLINE_PAYMENT = "OFFLINE_PAYMENT", "Offline payment"


# Payment gateway tags recorded on settled orders
ONLINE_PAYMENT_GATEWAY = "ONLINE_PAYMENT"
OFFLINE_PAYMENT_GATEWAY = "OFFLINE_PAYMENT"

INITIAL_STATUS = OrderStatus.OPEN
INITIAL_PAYMENT_STATUS = PaymentStatus.PAYMENT_FAILED

# Currency precision used for line subtotals and order totals
PRICE_QUANTUM = Decimal("0.01")

# Upper bounds imposed by the order columns
MAX_QUANTITY = 2147483647  # PositiveIntegerField
MAX_SEAT_NUMBER = 2147483647  # PositiveIntegerField
MAX_AMOUNT = Decimal("99999999.99")  # DecimalField(max_digits=10, decimal_places=2)
